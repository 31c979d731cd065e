"""End-to-end runs through the orchestrator and the coordinator."""

import pytest

from conftest import PartiallyFailingDriver, RejectingDriver, element
from ui_scout import coordinator as coordinator_module
from ui_scout.config import ConfigurationError, ScoutConfig
from ui_scout.coordinator import FeatureDiscoveryCoordinator
from ui_scout.drivers import DriverError, DriverTimeoutError, SnapshotDriver
from ui_scout.models import ActionType, AssertionType, DiscoveryReport, FeatureType
from ui_scout.orchestrator import FeatureDiscoveryOrchestrator


class FlakyDriver(SnapshotDriver):
    """Navigation times out `failures` times before succeeding."""

    def __init__(self, failures, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.failures = failures
        self.attempts = 0

    async def navigate(self, url, timeout=None):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise DriverTimeoutError(f"navigation to {url} timed out")
        await super().navigate(url, timeout)


class UrlLessDriver(SnapshotDriver):
    """Navigates, but cannot report its current URL."""

    async def current_url(self):
        raise DriverError("current url unavailable")


class RecordingRenderer:
    def __init__(self):
        self.calls = []

    def render(self, features, test_cases, test_results, output_path):
        self.calls.append((len(features), len(test_cases), len(test_results), output_path))


@pytest.fixture
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(coordinator_module, "NAVIGATION_RETRY_DELAY", 0)


class TestOrchestratorRun:
    """Full pipeline on snapshot pages"""

    @pytest.mark.asyncio
    async def test_single_button_page(self, submit_page, tmp_path):
        output_dir = tmp_path / "out"
        orchestrator = FeatureDiscoveryOrchestrator("snapshot", submit_page, ScoutConfig(output_dir=str(output_dir)))

        report = await orchestrator.run("https://example.com")

        assert report.features_discovered == 1
        feature = report.features[0]
        assert feature.type == FeatureType.BUTTON
        assert feature.name == "Submit"

        assert len(report.test_cases) == 1
        case = report.test_cases[0]
        assert case.feature is feature
        assert [s.action for s in case.steps] == [ActionType.CLICK]
        assert [a.type for a in case.assertions] == [AssertionType.VISIBLE, AssertionType.ENABLED]

        assert [r.success for r in report.test_results] == [True]
        assert submit_page.visited == ["https://example.com"]

        saved = DiscoveryReport.load(str(output_dir / "feature-discovery-report.json"))
        assert saved.features_discovered == 1
        assert saved.features[0].selector == '[data-testid="submit-btn"]'
        assert len(saved.test_cases) == 1

    @pytest.mark.asyncio
    async def test_empty_page(self):
        orchestrator = FeatureDiscoveryOrchestrator("snapshot", SnapshotDriver())

        report = await orchestrator.run("https://example.com/empty")

        assert report.features == []
        assert report.test_cases == []
        assert report.test_results == []
        assert report.to_dict()["featuresDiscovered"] == 0

    @pytest.mark.asyncio
    async def test_form_page_tests_pass(self, form_page):
        orchestrator = FeatureDiscoveryOrchestrator("snapshot", form_page)

        report = await orchestrator.run("https://example.com/form")

        assert [f.selector for f in report.features] == ["#save", "#email", "#terms"]
        assert report.passed == 3
        assert report.failed == 0
        assert form_page.records("#email")[0].value == "test@example.com"
        assert form_page.records("#terms")[0].checked is True

    @pytest.mark.asyncio
    async def test_navigation_page_with_dynamic_features(self, nav_page):
        config = ScoutConfig(discover_dynamic=True, analyze_page=True)
        orchestrator = FeatureDiscoveryOrchestrator("snapshot", nav_page, config)

        report = await orchestrator.run("https://example.com/nav")

        assert [f.selector for f in report.features] == ["#main-nav", "#country", "#tabs", "#products-menu"]
        nav_case = report.test_cases[0]
        assert [s.selector for s in nav_case.steps] == ["#home-link"]
        tab_case = report.test_cases[2]
        assert [s.selector for s in tab_case.steps] == ["#tab-overview", "#tab-details"]
        assert report.failed == 0
        assert report.analysis is not None
        assert report.analysis.url == "https://example.com/nav"

    @pytest.mark.asyncio
    async def test_failing_analysis_count_keeps_the_run(self):
        driver = PartiallyFailingDriver(
            ["form"],
            [element("button", "button", "#go", attributes={"id": "go"}, text="Submit")],
        )
        coordinator = FeatureDiscoveryCoordinator(driver, ScoutConfig(analyze_page=True))

        report = await coordinator.execute("https://example.com")

        assert report.features_discovered == 1
        assert report.analysis.structure.forms == 0
        assert report.passed == 1

    @pytest.mark.asyncio
    async def test_failing_analysis_is_skipped(self):
        driver = UrlLessDriver([element("button", "button", "#go", attributes={"id": "go"}, text="Go")])
        coordinator = FeatureDiscoveryCoordinator(driver, ScoutConfig(analyze_page=True))

        report = await coordinator.execute("https://example.com")

        assert report.features_discovered == 1
        assert report.analysis is None

    @pytest.mark.asyncio
    async def test_generate_without_executing(self, submit_page):
        config = ScoutConfig(execute_tests=False)

        report = await FeatureDiscoveryOrchestrator("snapshot", submit_page, config).run("https://example.com")

        assert len(report.test_cases) == 1
        assert report.test_results == []
        assert submit_page.history == []

    @pytest.mark.asyncio
    async def test_renderers_receive_results(self, submit_page, tmp_path):
        renderer = RecordingRenderer()
        config = ScoutConfig(output_dir=str(tmp_path))
        orchestrator = FeatureDiscoveryOrchestrator("snapshot", submit_page, config, renderers=[renderer])

        await orchestrator.run("https://example.com")

        assert renderer.calls == [(1, 1, 1, str(tmp_path))]

    @pytest.mark.asyncio
    async def test_screenshot(self, submit_page, tmp_path):
        submit_page.add(element("body", "body")[1], "body")
        config = ScoutConfig(capture_screenshot=True, screenshot_dir=str(tmp_path))

        report = await FeatureDiscoveryOrchestrator("snapshot", submit_page, config).run("https://example.com")

        assert report.screenshot == b"snapshot:body[0]"
        assert (tmp_path / "page.png").read_bytes() == report.screenshot

    @pytest.mark.asyncio
    async def test_screenshot_without_body(self, submit_page):
        config = ScoutConfig(capture_screenshot=True)

        report = await FeatureDiscoveryOrchestrator("snapshot", submit_page, config).run("https://example.com")

        assert report.screenshot is None


class TestConfigurationErrors:
    """Failures before the page is touched"""

    def test_unknown_backend(self, submit_page):
        with pytest.raises(ConfigurationError, match="Unsupported backend: selenium"):
            FeatureDiscoveryOrchestrator("selenium", submit_page)
        assert submit_page.visited == []

    def test_invalid_timeout(self, submit_page):
        with pytest.raises(ConfigurationError):
            FeatureDiscoveryOrchestrator("snapshot", submit_page, ScoutConfig(timeout=0))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "   ", "http://"])
    async def test_invalid_url(self, submit_page, url):
        orchestrator = FeatureDiscoveryOrchestrator("snapshot", submit_page)

        with pytest.raises(ConfigurationError):
            await orchestrator.run(url)
        assert submit_page.visited == []

    @pytest.mark.asyncio
    async def test_url_without_scheme(self, submit_page):
        report = await FeatureDiscoveryOrchestrator("snapshot", submit_page).run("example.com")

        assert report.url == "http://example.com"
        assert submit_page.visited == ["http://example.com"]


class TestNavigation:
    """Navigation retries"""

    @pytest.mark.asyncio
    async def test_retries_timeouts(self, no_retry_delay):
        driver = FlakyDriver(2)

        await FeatureDiscoveryCoordinator(driver).navigate("https://example.com")

        assert driver.attempts == 3
        assert driver.visited == ["https://example.com"]

    @pytest.mark.asyncio
    async def test_gives_up_after_retries(self, no_retry_delay):
        driver = FlakyDriver(5)

        with pytest.raises(DriverTimeoutError):
            await FeatureDiscoveryCoordinator(driver).execute("https://example.com")

        assert driver.attempts == 3

    @pytest.mark.asyncio
    async def test_other_navigation_errors_are_not_retried(self):
        with pytest.raises(DriverError, match="rejected"):
            await FeatureDiscoveryCoordinator(RejectingDriver()).execute("https://example.com")
