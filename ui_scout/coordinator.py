"""
Feature discovery coordinator.

Sequences one run on one driver: navigation, discovery, optional page
analysis and screenshot, test synthesis, test execution, and assembly of
the DiscoveryReport. Each stage is also callable on its own.
"""

import os
from typing import Optional, Sequence

import structlog

from ui_scout.config import SCREENSHOT_FILENAME, ConfigurationError, ScoutConfig
from ui_scout.discovery import AnalysisService, BaseDiscovery, DiscoveryService, InputDiscovery
from ui_scout.drivers.base import DriverError, DriverTimeoutError, PageDriver
from ui_scout.execution import TestExecutor
from ui_scout.models import DiscoveredFeature, DiscoveryReport, PageAnalysis, TestCase, TestResult
from ui_scout.synthesis import TestCaseSynthesizer, in_page_links
from ui_scout.utils import ValidationError, retry_async, validate_url

logger = structlog.get_logger(__name__)


NAVIGATION_RETRIES = 2
NAVIGATION_RETRY_DELAY = 1.0


class FeatureDiscoveryCoordinator:
    """
    Drives one discovery-to-report run.

    Collaborators default to the standard services configured from
    `config`; any of them can be injected instead.
    """

    def __init__(
        self,
        driver: PageDriver,
        config: Optional[ScoutConfig] = None,
        discovery: Optional[BaseDiscovery] = None,
        synthesizer: Optional[TestCaseSynthesizer] = None,
        executor: Optional[TestExecutor] = None,
        analysis: Optional[AnalysisService] = None,
    ):
        self.driver = driver
        self.config = config or ScoutConfig()
        self.discovery = discovery or DiscoveryService(
            include_hidden=self.config.include_hidden,
            include_disabled=self.config.include_disabled,
        )
        self.synthesizer = synthesizer or TestCaseSynthesizer(
            value_source=InputDiscovery.get_test_value_for_input,
            navigation_handler=in_page_links,
        )
        self.executor = executor or TestExecutor(
            timeout=self.config.timeout,
            screenshot_dir=self.config.screenshot_dir,
        )
        self.analysis = analysis or AnalysisService()

    async def navigate(self, url: str) -> None:
        """Load `url`, retrying navigation timeouts."""

        def on_retry(error: Exception, attempt: int) -> None:
            logger.warning("coordinator.navigation_retry", url=url, attempt=attempt, error=str(error))

        @retry_async(
            max_retries=NAVIGATION_RETRIES,
            initial_delay=NAVIGATION_RETRY_DELAY,
            exceptions=(DriverTimeoutError,),
            on_retry=on_retry,
        )
        async def goto():
            await self.driver.navigate(url, timeout=self.config.navigation_timeout)

        await goto()

    async def discover_features(self) -> list[DiscoveredFeature]:
        """Discover features on the current page, plus hover-revealed ones when enabled."""
        features = await self.discovery.discover(self.driver)

        if self.config.discover_dynamic and isinstance(self.discovery, DiscoveryService):
            features = await self.discovery.enrich_tooltips(self.driver, features)
            features = features + await self.discovery.discover_dynamic_features(self.driver, features)

        return features

    async def analyze_page(self) -> PageAnalysis:
        return await self.analysis.analyze(self.driver)

    def generate_tests(self, features: Sequence[DiscoveredFeature]) -> list[TestCase]:
        return self.synthesizer.generate_test_cases(features)

    async def execute_tests(self, test_cases: Sequence[TestCase]) -> list[TestResult]:
        return await self.executor.execute_batch(test_cases, self.driver)

    async def capture_screenshot(self) -> Optional[bytes]:
        """Screenshot of the page body; None when it cannot be taken."""
        path = None
        if self.config.screenshot_dir:
            os.makedirs(self.config.screenshot_dir, exist_ok=True)
            path = os.path.join(self.config.screenshot_dir, SCREENSHOT_FILENAME)

        try:
            body = self.driver.locate("body")
            if await body.count() == 0:
                return None
            return await body.first().screenshot(path)
        except DriverError as e:
            logger.warning("coordinator.screenshot_failed", error=str(e))
            return None

    async def execute(self, url: str) -> DiscoveryReport:
        """
        Run the full pipeline against `url`.

        Raises:
            ConfigurationError: If the URL is invalid
            DriverError: If navigation fails
        """
        try:
            url = validate_url(url)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        logger.info("coordinator.start", url=url, backend=self.driver.name)
        await self.navigate(url)

        features = await self.discover_features()

        analysis = None
        if self.config.analyze_page:
            try:
                analysis = await self.analyze_page()
            except DriverError as e:
                logger.warning("coordinator.analysis_failed", url=url, error=str(e))

        screenshot = await self.capture_screenshot() if self.config.capture_screenshot else None

        test_cases = self.generate_tests(features) if self.config.generate_tests else []
        test_results = await self.execute_tests(test_cases) if self.config.execute_tests else []

        report = DiscoveryReport(
            url=url,
            features=features,
            test_cases=test_cases,
            test_results=test_results,
            analysis=analysis,
            screenshot=screenshot,
        )

        logger.info(
            "coordinator.done",
            url=url,
            features=report.features_discovered,
            test_cases=len(test_cases),
            passed=report.passed,
            failed=report.failed,
        )
        return report
