"""
Feature discovery orchestrator.

Selects the backend, builds the driver and the coordinator, and persists
the report of each run.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence

import structlog

from ui_scout.config import ScoutConfig
from ui_scout.coordinator import FeatureDiscoveryCoordinator
from ui_scout.drivers import create_driver
from ui_scout.models import DiscoveryReport, ReportRenderer

logger = structlog.get_logger(__name__)


class FeatureDiscoveryOrchestrator:
    """
    Entry point for one discovery run on a caller-owned page.

    Configuration is validated here, so an unknown backend or a bad
    timeout fails before the page is touched.

    Example:
        async with async_playwright() as p:
            browser = await p.chromium.launch()
            page = await browser.new_page()
            orchestrator = FeatureDiscoveryOrchestrator("playwright", page)
            report = await orchestrator.run("https://example.com")
    """

    def __init__(
        self,
        backend: str,
        page: Any,
        config: Optional[ScoutConfig] = None,
        renderers: Sequence[ReportRenderer] = (),
    ):
        """
        Args:
            backend: Backend name, see ui_scout.config.SUPPORTED_BACKENDS
            page: Backend page object passed to the driver
            config: Run configuration (defaults apply when None)
            renderers: Extra report renderers fed after each run

        Raises:
            ConfigurationError: If the backend or a config value is invalid
        """
        self.config = replace(config or ScoutConfig(), backend=backend).validate()
        self.driver = create_driver(backend, page)
        self.coordinator = FeatureDiscoveryCoordinator(self.driver, self.config)
        self.renderers = list(renderers)

    async def run(self, url: str) -> DiscoveryReport:
        """Run discovery on `url` and persist the report when an output directory is set."""
        report = await self.coordinator.execute(url)

        report_path = self.config.report_path
        if report_path is not None:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            report.save(str(report_path))
            logger.info("orchestrator.report_saved", path=str(report_path))

            for renderer in self.renderers:
                renderer.render(
                    report.features,
                    report.test_cases,
                    report.test_results,
                    str(Path(self.config.output_dir)),
                )

        return report
