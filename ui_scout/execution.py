"""
Test case execution.

TestExecutor.execute() is the recovery boundary of the pipeline: whatever
goes wrong while running a case (missing element, backend error, timeout,
assertion mismatch) ends up in a failed TestResult. It never raises.
"""

import os
from typing import Any, Optional, Sequence

import structlog

from ui_scout.drivers.base import DriverTimeoutError, ElementHandle, ElementNotFoundError, PageDriver
from ui_scout.models import (
    ActionType,
    Assertion,
    AssertionType,
    TestCase,
    TestResult,
    TestStep,
)
from ui_scout.utils import TimingContext, normalize_text, run_with_timeout, sanitize_filename

logger = structlog.get_logger(__name__)


DEFAULT_TIMEOUT = 5.0
DEFAULT_PRESS_KEY = "Enter"


class AssertionFailedError(Exception):
    """An assertion did not hold."""

    def __init__(self, assertion: Assertion, actual: Any = None, message: Optional[str] = None):
        self.assertion = assertion
        self.actual = actual
        super().__init__(message or (
            f"{assertion.type.value} assertion failed on {assertion.selector}: "
            f"expected {assertion.expected!r}, got {actual!r}"
        ))


class TestExecutor:
    """
    Runs test cases against a driver, one driver call at a time.

    Args:
        timeout: Bound on every single driver call, in seconds
        step_delay: Pause after each step, in seconds
        screenshot_dir: Where screenshot steps write their files
    """
    __test__ = False

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        step_delay: float = 0.0,
        screenshot_dir: Optional[str] = None,
    ):
        self.timeout = timeout
        self.step_delay = step_delay
        self.screenshot_dir = screenshot_dir

    async def _call(self, coro, what: str):
        return await run_with_timeout(
            coro,
            self.timeout,
            timeout_message=f"{what} timed out after {self.timeout}s",
            error_class=DriverTimeoutError,
        )

    async def _count(self, driver: PageDriver, selector: str) -> int:
        return await self._call(driver.locate(selector).count(), f"count {selector}")

    async def _first(self, driver: PageDriver, selector: str) -> ElementHandle:
        if await self._count(driver, selector) == 0:
            raise ElementNotFoundError(f"No element matches {selector}", selector)
        return driver.locate(selector).first()

    async def execute(self, test_case: TestCase, driver: PageDriver) -> TestResult:
        """
        Run one test case.

        Steps run in order, then assertions; the first failure stops the
        case. A failed case gets a page screenshot when screenshot_dir is
        set. Always returns a TestResult.
        """
        screenshot = None
        error = None

        with TimingContext(test_case.name) as timing:
            try:
                screenshot = await self._run(test_case, driver)
            except Exception as e:
                error = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__

        if error is not None and self.screenshot_dir:
            screenshot = await self._failure_screenshot(test_case, driver) or screenshot

        result = TestResult(
            test_case=test_case,
            success=error is None,
            duration=timing.duration,
            error=error,
            screenshot=screenshot,
        )

        if result.success:
            logger.info("executor.case_passed", case=test_case.name, duration_ms=result.duration_ms)
        else:
            logger.warning("executor.case_failed", case=test_case.name, error=error)

        return result

    async def execute_batch(self, test_cases: Sequence[TestCase], driver: PageDriver) -> list[TestResult]:
        """Run cases sequentially; one result per case, in input order."""
        results = []
        for test_case in test_cases:
            results.append(await self.execute(test_case, driver))

        passed = sum(1 for r in results if r.success)
        logger.info("executor.batch", total=len(results), passed=passed, failed=len(results) - passed)
        return results

    async def _failure_screenshot(self, test_case: TestCase, driver: PageDriver) -> Optional[str]:
        """Page body screenshot of a failed case; None when it cannot be taken."""
        try:
            if await self._count(driver, "body") == 0:
                return None
            os.makedirs(self.screenshot_dir, exist_ok=True)
            path = os.path.join(self.screenshot_dir, sanitize_filename(f"{test_case.name}-failure") + ".png")
            await self._call(driver.locate("body").first().screenshot(path), "failure screenshot")
            return path
        except Exception as e:
            logger.warning("executor.failure_screenshot_failed", case=test_case.name, error=str(e))
            return None

    async def _run(self, test_case: TestCase, driver: PageDriver) -> Optional[str]:
        screenshot = None

        if test_case.steps:
            await self._first(driver, test_case.feature.selector)

        for index, step in enumerate(test_case.steps):
            path = await self._perform(step, index, test_case, driver)
            screenshot = path or screenshot
            if self.step_delay:
                await driver.wait_for_timeout(int(self.step_delay * 1000))

        for assertion in test_case.assertions:
            await self._check(assertion, driver)

        return screenshot

    async def _perform(self, step: TestStep, index: int, test_case: TestCase, driver: PageDriver) -> Optional[str]:
        """Perform one step; returns the screenshot path for screenshot steps."""
        element = await self._first(driver, step.selector)
        what = f"{step.action.value} {step.selector}"

        if step.action == ActionType.CLICK:
            await self._call(element.click(), what)
        elif step.action == ActionType.FILL:
            await self._call(element.fill(step.value or ""), what)
        elif step.action == ActionType.HOVER:
            await self._call(element.hover(), what)
        elif step.action == ActionType.FOCUS:
            await self._call(element.focus(), what)
        elif step.action == ActionType.SELECT:
            await self._call(element.select_option(step.value or ""), what)
        elif step.action == ActionType.CHECK:
            await self._call(element.check(), what)
        elif step.action == ActionType.UNCHECK:
            await self._call(element.uncheck(), what)
        elif step.action == ActionType.PRESS:
            await self._call(element.press(step.value or DEFAULT_PRESS_KEY), what)
        elif step.action == ActionType.SCREENSHOT:
            path = None
            if self.screenshot_dir:
                os.makedirs(self.screenshot_dir, exist_ok=True)
                filename = sanitize_filename(f"{test_case.name}-{index}") + ".png"
                path = os.path.join(self.screenshot_dir, filename)
            await self._call(element.screenshot(path), what)
            return path

        return None

    async def _check(self, assertion: Assertion, driver: PageDriver) -> None:
        selector = assertion.selector
        what = f"{assertion.type.value} {selector}"

        if assertion.type == AssertionType.COUNT:
            count = await self._count(driver, selector)
            if count != int(assertion.expected or 0):
                raise AssertionFailedError(assertion, count)
            return

        if assertion.type in (AssertionType.VISIBLE, AssertionType.HIDDEN):
            count = await self._count(driver, selector)
            visible = count > 0 and await self._call(driver.locate(selector).first().is_visible(), what)
            if visible != (assertion.type == AssertionType.VISIBLE):
                raise AssertionFailedError(
                    assertion,
                    message=f"expected {selector} to be {assertion.type.value}",
                )
            return

        element = await self._first(driver, selector)

        if assertion.type in (AssertionType.ENABLED, AssertionType.DISABLED):
            enabled = await self._call(element.is_enabled(), what)
            if enabled != (assertion.type == AssertionType.ENABLED):
                raise AssertionFailedError(
                    assertion,
                    message=f"expected {selector} to be {assertion.type.value}",
                )

        elif assertion.type == AssertionType.TEXT:
            text = normalize_text(await self._call(element.text_content(), what))
            if text != normalize_text(str(assertion.expected or "")):
                raise AssertionFailedError(assertion, text)

        elif assertion.type == AssertionType.ATTRIBUTE:
            expected = assertion.expected
            if not isinstance(expected, dict):
                expected = {"value": expected}
            for name, value in expected.items():
                if name == "value":
                    actual = await self._call(element.input_value(), what)
                else:
                    actual = await self._call(element.get_attribute(name), what)
                if actual != (None if value is None else str(value)):
                    raise AssertionFailedError(
                        assertion,
                        actual,
                        message=f"attribute {name} of {selector}: expected {value!r}, got {actual!r}",
                    )

        elif assertion.type == AssertionType.CLASS:
            classes = (await self._call(element.get_attribute("class"), what) or "").split()
            if str(assertion.expected) not in classes:
                raise AssertionFailedError(assertion, " ".join(classes))
