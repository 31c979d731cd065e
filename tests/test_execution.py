"""Tests for the test executor."""

import asyncio

import pytest

from conftest import RejectingDriver, element
from ui_scout.drivers import Locator, SnapshotDriver
from ui_scout.execution import AssertionFailedError, TestExecutor
from ui_scout.models import (
    ActionType,
    Assertion,
    AssertionType,
    DiscoveredFeature,
    FeatureType,
    TestCase,
    TestStep,
)


class SlowLocator(Locator):
    async def count(self):
        await asyncio.sleep(1)
        return 1

    def nth(self, index):
        raise AssertionError("not reached")


class SlowDriver(SnapshotDriver):
    def locate(self, selector):
        return SlowLocator(selector)


class BrokenDriver(SnapshotDriver):
    def locate(self, selector):
        raise RuntimeError("page crashed")


def feature(selector, name="Target", feature_type=FeatureType.BUTTON):
    return DiscoveredFeature(name=name, type=feature_type, selector=selector)


def click_case(selector, name="Target"):
    return TestCase(
        feature=feature(selector, name),
        steps=[TestStep(ActionType.CLICK, selector)],
        assertions=[Assertion(AssertionType.VISIBLE, selector), Assertion(AssertionType.ENABLED, selector)],
    )


def assertion_case(selector, assertion_type, expected=None):
    return TestCase(feature=feature(selector), assertions=[Assertion(assertion_type, selector, expected)])


class TestExecute:
    """Single test case execution"""

    @pytest.mark.asyncio
    async def test_click_case_passes(self, submit_page):
        selector = '[data-testid="submit-btn"]'
        case = click_case(selector, "Submit")

        result = await TestExecutor().execute(case, submit_page)

        assert result.success is True
        assert result.error is None
        assert result.test_case is case
        assert result.duration >= 0
        assert ("click", selector, 0) in submit_page.history

    @pytest.mark.asyncio
    async def test_rejecting_driver_gives_failed_result(self):
        result = await TestExecutor().execute(click_case("#x"), RejectingDriver())

        assert result.success is False
        assert result.error.startswith("DriverError: ")

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_captured(self):
        result = await TestExecutor().execute(click_case("#x"), BrokenDriver())

        assert result.success is False
        assert result.error == "RuntimeError: page crashed"

    @pytest.mark.asyncio
    async def test_timeout(self):
        executor = TestExecutor(timeout=0.05)

        result = await executor.execute(click_case("#x"), SlowDriver())

        assert result.success is False
        assert result.error.startswith("DriverTimeoutError: ")
        assert "timed out after 0.05s" in result.error

    @pytest.mark.asyncio
    async def test_missing_feature_element(self, submit_page):
        result = await TestExecutor().execute(click_case("#nowhere"), submit_page)

        assert result.success is False
        assert result.error.startswith("ElementNotFoundError: ")

    @pytest.mark.asyncio
    async def test_clicking_disabled_button_fails(self, form_page):
        result = await TestExecutor().execute(click_case("#delete"), form_page)

        assert result.success is False
        assert "disabled" in result.error

    @pytest.mark.asyncio
    async def test_assertion_only_case_does_not_resolve_feature(self, submit_page):
        result = await TestExecutor().execute(assertion_case("#nowhere", AssertionType.HIDDEN), submit_page)
        assert result.success is True

    @pytest.mark.asyncio
    async def test_fill_then_value(self, form_page):
        case = TestCase(
            feature=feature("#email", "Email", FeatureType.INPUT),
            steps=[TestStep(ActionType.FILL, "#email", "test@example.com")],
            assertions=[Assertion(AssertionType.ATTRIBUTE, "#email", {"value": "test@example.com"})],
        )

        result = await TestExecutor().execute(case, form_page)

        assert result.success is True
        assert form_page.records("#email")[0].value == "test@example.com"

    @pytest.mark.asyncio
    async def test_check_step(self, form_page):
        case = TestCase(
            feature=feature("#terms", "Terms", FeatureType.INPUT),
            steps=[TestStep(ActionType.CHECK, "#terms")],
            assertions=[Assertion(AssertionType.ENABLED, "#terms")],
        )

        result = await TestExecutor().execute(case, form_page)

        assert result.success is True
        assert form_page.records("#terms")[0].checked is True

    @pytest.mark.asyncio
    async def test_steps_stop_at_first_failure(self, form_page):
        case = TestCase(
            feature=feature("#save", "Save"),
            steps=[TestStep(ActionType.CLICK, "#delete"), TestStep(ActionType.CLICK, "#save")],
        )

        result = await TestExecutor().execute(case, form_page)

        assert result.success is False
        assert ("click", "#save", 0) not in form_page.history

    @pytest.mark.asyncio
    async def test_screenshot_step(self, form_page, tmp_path):
        shots = tmp_path / "shots"
        case = TestCase(feature=feature("#save", "Save"), steps=[TestStep(ActionType.SCREENSHOT, "#save")])

        result = await TestExecutor(screenshot_dir=str(shots)).execute(case, form_page)

        assert result.success is True
        assert result.screenshot == str(shots / "Save-0.png")
        assert (shots / "Save-0.png").read_bytes() == b"snapshot:#save[0]"

    @pytest.mark.asyncio
    async def test_failed_case_gets_page_screenshot(self, tmp_path):
        shots = tmp_path / "shots"
        driver = SnapshotDriver([element("body", "body")])

        result = await TestExecutor(screenshot_dir=str(shots)).execute(click_case("#missing", "Pay"), driver)

        assert result.success is False
        assert result.error.startswith("ElementNotFoundError")
        assert result.screenshot == str(shots / "Pay-failure.png")
        assert (shots / "Pay-failure.png").read_bytes() == b"snapshot:body[0]"

    @pytest.mark.asyncio
    async def test_failed_case_without_body_has_no_screenshot(self, form_page, tmp_path):
        case = click_case("#delete", "Delete")

        result = await TestExecutor(screenshot_dir=str(tmp_path)).execute(case, form_page)

        assert result.success is False
        assert result.screenshot is None

    @pytest.mark.asyncio
    async def test_passed_case_takes_no_failure_screenshot(self, submit_page, tmp_path):
        case = click_case('[data-testid="submit-btn"]', "Submit")

        result = await TestExecutor(screenshot_dir=str(tmp_path)).execute(case, submit_page)

        assert result.success is True
        assert result.screenshot is None
        assert list(tmp_path.iterdir()) == []


class TestAssertions:
    """Assertion kinds"""

    @pytest.mark.asyncio
    async def test_text_mismatch(self, submit_page):
        case = assertion_case('[data-testid="submit-btn"]', AssertionType.TEXT, "Cancel")

        result = await TestExecutor().execute(case, submit_page)

        assert result.success is False
        assert result.error.startswith("AssertionFailedError: ")
        assert "'Submit'" in result.error

    @pytest.mark.asyncio
    async def test_text_match_ignores_whitespace(self, submit_page):
        case = assertion_case('[data-testid="submit-btn"]', AssertionType.TEXT, "  Submit ")
        assert (await TestExecutor().execute(case, submit_page)).success

    @pytest.mark.asyncio
    async def test_hidden_when_invisible(self, form_page):
        executor = TestExecutor()

        assert (await executor.execute(assertion_case("#ghost", AssertionType.HIDDEN), form_page)).success
        assert not (await executor.execute(assertion_case("#ghost", AssertionType.VISIBLE), form_page)).success
        assert not (await executor.execute(assertion_case("#save", AssertionType.HIDDEN), form_page)).success

    @pytest.mark.asyncio
    async def test_disabled(self, form_page):
        executor = TestExecutor()

        assert (await executor.execute(assertion_case("#delete", AssertionType.DISABLED), form_page)).success
        assert not (await executor.execute(assertion_case("#save", AssertionType.DISABLED), form_page)).success

    @pytest.mark.asyncio
    async def test_count(self, nav_page):
        executor = TestExecutor()

        assert (await executor.execute(assertion_case("#main-nav a[href]", AssertionType.COUNT, 2), nav_page)).success
        assert not (await executor.execute(assertion_case("#main-nav a[href]", AssertionType.COUNT, 3), nav_page)).success

    @pytest.mark.asyncio
    async def test_attribute_and_class(self):
        driver = SnapshotDriver([
            element("a", "#home", attributes={"id": "home", "href": "/", "class": "nav-link active"}),
        ])
        executor = TestExecutor()

        assert (await executor.execute(assertion_case("#home", AssertionType.ATTRIBUTE, {"href": "/"}), driver)).success
        assert (await executor.execute(assertion_case("#home", AssertionType.CLASS, "active"), driver)).success

        result = await executor.execute(assertion_case("#home", AssertionType.ATTRIBUTE, {"href": "/home"}), driver)
        assert result.error == "AssertionFailedError: attribute href of #home: expected '/home', got '/'"

    @pytest.mark.asyncio
    async def test_plain_attribute_value_compares_input_value(self, form_page):
        records = form_page.records("#email")
        records[0].value = "a@b.c"

        result = await TestExecutor().execute(assertion_case("#email", AssertionType.ATTRIBUTE, "a@b.c"), form_page)

        assert result.success is True

    def test_assertion_error_message(self):
        assertion = Assertion(AssertionType.COUNT, ".row", 3)
        error = AssertionFailedError(assertion, 2)
        assert str(error) == "count assertion failed on .row: expected 3, got 2"
        assert error.actual == 2


class TestExecuteBatch:
    """Batch execution"""

    @pytest.mark.asyncio
    async def test_empty_batch(self, submit_page):
        assert await TestExecutor().execute_batch([], submit_page) == []

    @pytest.mark.asyncio
    async def test_results_in_input_order(self, form_page):
        cases = [click_case("#save", "Save"), click_case("#delete", "Delete"), click_case("#missing", "Missing")]

        results = await TestExecutor().execute_batch(cases, form_page)

        assert [r.test_case for r in results] == cases
        assert [r.success for r in results] == [True, False, False]
