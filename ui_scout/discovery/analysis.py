"""Page-level structure and accessibility metrics."""

import structlog

from ui_scout.drivers.base import DriverError, PageDriver
from ui_scout.models import AccessibilitySummary, PageAnalysis, PageStructure

logger = structlog.get_logger(__name__)


STRUCTURE_QUERIES = {
    "main_content": 'main, [role="main"], #main, .main',
    "headers": 'header, [role="banner"], .header',
    "footers": 'footer, [role="contentinfo"], .footer',
    "navs": 'nav, [role="navigation"], .nav',
    "asides": 'aside, [role="complementary"], .sidebar',
    "forms": "form",
    "buttons": 'button, [role="button"], input[type="button"]',
    "links": "a[href]",
    "inputs": "input, textarea, select",
}

ACCESSIBILITY_QUERIES = {
    "aria_labels": "[aria-label]",
    "aria_roles": "[role]",
    "alt_texts": "img[alt]",
    "tabindex_elements": "[tabindex]",
}


class AnalysisService:
    """Counts structural, interactive and accessibility markers on a page."""

    async def _counts(self, driver: PageDriver, queries: dict[str, str]) -> dict[str, int]:
        counts = {}
        for field, query in queries.items():
            try:
                counts[field] = await driver.locate(query).count()
            except DriverError as e:
                logger.warning("analysis.count_failed", field=field, query=query, error=str(e))
                counts[field] = 0
        return counts

    async def analyze_page_structure(self, driver: PageDriver) -> PageStructure:
        try:
            title = await driver.title()
        except DriverError:
            title = "Unknown"

        structure = PageStructure(title=title, **await self._counts(driver, STRUCTURE_QUERIES))
        logger.info(
            "analysis.structure",
            title=title,
            buttons=structure.buttons,
            links=structure.links,
            inputs=structure.inputs,
            forms=structure.forms,
        )
        return structure

    async def analyze_accessibility(self, driver: PageDriver) -> AccessibilitySummary:
        summary = AccessibilitySummary(**await self._counts(driver, ACCESSIBILITY_QUERIES))
        logger.info("analysis.accessibility", score=summary.score)
        return summary

    async def analyze(self, driver: PageDriver) -> PageAnalysis:
        """Structure and accessibility of the current page."""
        return PageAnalysis(
            url=await driver.current_url(),
            structure=await self.analyze_page_structure(driver),
            accessibility=await self.analyze_accessibility(driver),
        )
