"""
Aggregate discovery.

Runs every category scanner in sequence on one driver and merges their
features. A category that fails is recorded as a failed CategoryResult
and the scan moves on to the next one.
"""

from typing import Iterable, Optional, Sequence

import structlog

from ui_scout.discovery.base import BaseDiscovery
from ui_scout.discovery.buttons import ButtonDiscovery
from ui_scout.discovery.components import ComponentDiscovery
from ui_scout.discovery.inputs import InputDiscovery
from ui_scout.discovery.navigation import NavigationDiscovery
from ui_scout.drivers.base import DriverError, PageDriver
from ui_scout.models import CategoryResult, DiscoveredFeature, FeatureType
from ui_scout.selector_engine import unique_selector
from ui_scout.utils import AsyncTimingContext, normalize_text, truncate_string

logger = structlog.get_logger(__name__)


# Elements that typically appear when a menu is hovered
DYNAMIC_SELECTORS = (
    ".dropdown-menu",
    ".submenu",
    '[role="menu"]',
    '[class*="popup"]',
    '[class*="overlay"]',
)

MAX_DYNAMIC_PROBES = 5
HOVER_SETTLE_MS = 500


class DiscoveryService(BaseDiscovery):
    """
    Aggregate scanner over the button, input, navigation and component
    categories.

    Example:
        service = DiscoveryService()
        results = await service.discover_categories(driver)
        features = DiscoveryService.merge(results)
    """

    def __init__(
        self,
        categories: Optional[Sequence[BaseDiscovery]] = None,
        include_hidden: bool = False,
        include_disabled: bool = False,
    ):
        super().__init__(include_hidden=include_hidden)
        self.buttons = ButtonDiscovery(include_disabled=include_disabled, include_hidden=include_hidden)
        if categories is None:
            categories = [
                self.buttons,
                InputDiscovery(include_hidden=include_hidden),
                NavigationDiscovery(include_hidden=include_hidden),
                ComponentDiscovery(include_hidden=include_hidden),
            ]
        self.categories = list(categories)

    @property
    def category(self) -> str:
        return "all"

    async def discover_categories(self, driver: PageDriver) -> list[CategoryResult]:
        """Run each category in order; one CategoryResult per category."""
        results = []

        for scanner in self.categories:
            async with AsyncTimingContext(scanner.category, logger) as timing:
                try:
                    features = await scanner.discover(driver)
                except Exception as e:
                    logger.warning(
                        "discovery.category_failed",
                        category=scanner.category,
                        error=f"{type(e).__name__}: {e}",
                    )
                    results.append(CategoryResult.failed(scanner.category, f"{type(e).__name__}: {e}"))
                    continue

            logger.debug(
                "discovery.category_done",
                category=scanner.category,
                count=len(features),
                duration_ms=timing.duration_ms,
            )
            results.append(CategoryResult(category=scanner.category, features=features))

        return results

    @staticmethod
    def merge(results: Iterable[CategoryResult]) -> list[DiscoveredFeature]:
        """Concatenate in category order, keeping the first feature per selector."""
        merged = []
        seen: set[str] = set()

        for result in results:
            for feature in result.features:
                if not feature.name or not feature.selector or feature.selector in seen:
                    continue
                seen.add(feature.selector)
                merged.append(feature)

        return merged

    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        results = await self.discover_categories(driver)
        features = self.merge(results)

        failed = [r.category for r in results if not r.ok]
        logger.info("discovery.complete", count=len(features), failed_categories=failed)
        return features

    async def enrich_tooltips(
        self,
        driver: PageDriver,
        features: Sequence[DiscoveredFeature],
    ) -> list[DiscoveredFeature]:
        """Replace buttons that show a tooltip on hover with enriched copies."""
        buttons = [f for f in features if f.type == FeatureType.BUTTON]
        enriched = {
            id(original): updated
            for original, updated in zip(buttons, await self.buttons.discover_tooltips(driver, buttons))
        }
        return [enriched.get(id(f), f) for f in features]

    async def discover_dynamic_features(
        self,
        driver: PageDriver,
        features: Sequence[DiscoveredFeature],
    ) -> list[DiscoveredFeature]:
        """
        Hover navigation features and collect elements that appear.

        Returns only features whose selector is not already in `features`.
        """
        seen = {f.selector for f in features}
        navigation = [
            f for f in features
            if f.type in (FeatureType.NAVIGATION, FeatureType.MENU)
            or "nav" in f.selector
            or "nav" in (f.attribute("class") or "")
        ]
        dynamic = []

        for feature in navigation[:MAX_DYNAMIC_PROBES]:
            try:
                element = driver.locate(feature.selector).first()
                if not await element.is_visible():
                    continue
                await element.hover()
                await driver.wait_for_timeout(HOVER_SETTLE_MS)
                found = await self._collect_dynamic(driver, seen)
            except DriverError as e:
                logger.debug("discovery.dynamic_probe_failed", selector=feature.selector, error=str(e))
                continue

            dynamic.extend(found)

        logger.info("discovery.dynamic", count=len(dynamic))
        return dynamic

    async def _collect_dynamic(self, driver: PageDriver, seen: set[str]) -> list[DiscoveredFeature]:
        found = []

        for query in DYNAMIC_SELECTORS:
            async for index, handle in self.iter_matches(driver, query):
                try:
                    if not await handle.is_visible():
                        continue
                    selector = await unique_selector(handle, driver, fallback=query)
                    if selector in seen:
                        continue
                    text = normalize_text(await handle.text_content())
                except DriverError as e:
                    logger.debug("discovery.element_skipped", category="dynamic", query=query, index=index, error=str(e))
                    continue

                seen.add(selector)
                found.append(DiscoveredFeature(
                    name=truncate_string(text, 50) or "Dynamic Element",
                    type=FeatureType.OTHER,
                    selector=selector,
                    text=text or None,
                    actions=("click", "screenshot"),
                ))

        return found
