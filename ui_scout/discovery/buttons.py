"""Button discovery and tooltip enrichment."""

from dataclasses import replace
from typing import Optional, Sequence

import structlog

from ui_scout.discovery.base import BaseDiscovery
from ui_scout.drivers.base import DriverError, ElementHandle, PageDriver
from ui_scout.models import DiscoveredFeature, ElementState, FeatureType
from ui_scout.utils import normalize_text, truncate_string

logger = structlog.get_logger(__name__)


BUTTON_SELECTORS = (
    "button",
    '[role="button"]',
    "a.btn",
    "a.button",
    '[class*="button"]',
    '[class*="btn"]',
    'input[type="button"]',
    'input[type="submit"]',
    "[onclick]",
)

TOOLTIP_SELECTORS = ('[role="tooltip"]', ".tooltip", '[class*="tooltip"]')

# Hovering is slow; only the first buttons are probed for tooltips
MAX_TOOLTIP_PROBES = 10


class ButtonDiscovery(BaseDiscovery):
    """Finds clickable button-like elements."""

    def __init__(self, include_disabled: bool = False, include_hidden: bool = False):
        super().__init__(include_hidden=include_hidden)
        self.include_disabled = include_disabled

    @property
    def category(self) -> str:
        return "buttons"

    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        buttons = await self.scan(driver, BUTTON_SELECTORS, self._analyze, seen=set())
        logger.info("discovery.buttons", count=len(buttons))
        return buttons

    async def _analyze(self, driver: PageDriver, handle: ElementHandle, selector: str) -> Optional[DiscoveredFeature]:
        enabled = await handle.is_enabled()
        if not enabled and not self.include_disabled:
            return None

        visible = await handle.is_visible()
        text = normalize_text(await handle.text_content())
        if not text and await handle.tag_name() == "input":
            text = normalize_text(await handle.get_attribute("value"))

        attributes = {}
        for name in ("title", "aria-label", "class", "type"):
            value = await handle.get_attribute(name)
            if value:
                attributes[name] = value

        name = text or attributes.get("title") or attributes.get("aria-label") or "Unnamed Button"

        return DiscoveredFeature(
            name=truncate_string(name, 50),
            type=FeatureType.BUTTON,
            selector=selector,
            text=text or None,
            attributes=attributes or None,
            actions=("click", "hover", "focus") if enabled else ("hover", "focus"),
            state=ElementState(visible=visible, enabled=enabled),
        )

    async def discover_tooltips(
        self,
        driver: PageDriver,
        buttons: Sequence[DiscoveredFeature],
    ) -> list[DiscoveredFeature]:
        """
        Hover buttons and record the tooltip each one shows.

        Returns a list parallel to `buttons`: a button whose hover revealed
        a tooltip is replaced by a copy with a `tooltip` attribute, the
        others are returned as given.
        """
        enriched = list(buttons)

        for position, button in enumerate(buttons[:MAX_TOOLTIP_PROBES]):
            try:
                tooltip = await self._hover_tooltip(driver, button)
            except DriverError as e:
                logger.debug("discovery.tooltip_failed", selector=button.selector, error=str(e))
                continue

            if tooltip:
                attributes = dict(button.attributes or {})
                attributes["tooltip"] = tooltip
                enriched[position] = replace(button, attributes=attributes)
                logger.debug("discovery.tooltip", button=button.name, tooltip=tooltip)

        return enriched

    async def _hover_tooltip(self, driver: PageDriver, button: DiscoveredFeature) -> Optional[str]:
        element = driver.locate(button.selector).first()
        if not await element.is_visible():
            return None

        await element.hover()

        for selector in TOOLTIP_SELECTORS:
            async for _, tooltip in self.iter_matches(driver, selector):
                if await tooltip.is_visible():
                    text = normalize_text(await tooltip.text_content())
                    if text:
                        return text

        return None
