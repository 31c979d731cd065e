"""
Backend-neutral discovery using plain count/nth queries.

Unlike the specialized scanners, no selector engine is involved: every
feature carries the query selector that matched it.
"""

import structlog

from ui_scout.discovery.base import BaseDiscovery
from ui_scout.drivers.base import DriverError, PageDriver
from ui_scout.models import DiscoveredFeature, ElementState, FeatureType
from ui_scout.utils import normalize_text, truncate_string

logger = structlog.get_logger(__name__)


GENERIC_BUTTONS = (
    "button",
    '[role="button"]',
    "a.btn",
    "a.button",
    'input[type="button"]',
    'input[type="submit"]',
)

GENERIC_INPUTS = (
    'input[type="text"]',
    'input[type="email"]',
    'input[type="password"]',
    "textarea",
)

GENERIC_NAVIGATION = ("nav", '[role="navigation"]', ".menu", ".navbar")


class GenericDiscoveryService(BaseDiscovery):
    """Approximates button, input and navigation discovery for minimal backends."""

    @property
    def category(self) -> str:
        return "generic"

    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        features = []
        features.extend(await self._collect(driver, GENERIC_BUTTONS, FeatureType.BUTTON))
        features.extend(await self._collect(driver, GENERIC_INPUTS, FeatureType.INPUT))
        features.extend(await self._collect(driver, GENERIC_NAVIGATION, FeatureType.NAVIGATION))
        logger.info("discovery.generic", count=len(features))
        return features

    async def _collect(self, driver: PageDriver, queries, feature_type: FeatureType) -> list[DiscoveredFeature]:
        found = []

        for query in queries:
            async for index, handle in self.iter_matches(driver, query):
                try:
                    visible = await handle.is_visible()
                    if not visible and not self.include_hidden:
                        continue
                    text = normalize_text(await handle.text_content())
                    attributes = {}
                    for name in ("type", "placeholder", "title", "aria-label"):
                        value = await handle.get_attribute(name)
                        if value:
                            attributes[name] = value
                except DriverError as e:
                    logger.debug("discovery.element_skipped", category=self.category, query=query, index=index, error=str(e))
                    continue

                found.append(self._build(feature_type, query, text, attributes, visible))

        return found

    def _build(self, feature_type: FeatureType, query: str, text: str, attributes: dict, visible: bool) -> DiscoveredFeature:
        if feature_type == FeatureType.BUTTON:
            name = text or attributes.get("title") or attributes.get("aria-label") or "Button"
            actions = ("click", "hover")
        elif feature_type == FeatureType.INPUT:
            name = attributes.get("placeholder") or f"Input ({attributes.get('type', 'text')})"
            actions = ("fill", "clear")
        else:
            name = attributes.get("aria-label") or "Navigation"
            actions = ("click", "hover")

        return DiscoveredFeature(
            name=truncate_string(name, 50),
            type=feature_type,
            selector=query,
            text=truncate_string(text, 50) or None,
            attributes=attributes or None,
            actions=actions,
            state=ElementState(visible=visible, enabled=True),
        )
