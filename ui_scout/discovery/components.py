"""Composite component discovery: panels, charts, modals, tables and custom widgets."""

from dataclasses import dataclass
from typing import Optional

import structlog

from ui_scout.discovery.base import BaseDiscovery
from ui_scout.drivers.base import ElementHandle, PageDriver
from ui_scout.models import DiscoveredFeature, ElementState, FeatureType
from ui_scout.utils import normalize_text, truncate_string

logger = structlog.get_logger(__name__)


HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")


@dataclass(frozen=True)
class ComponentKind:
    """How one family of components is found and described."""
    type: FeatureType
    selectors: tuple[str, ...]
    default_name: str
    actions: tuple[str, ...]
    use_heading: bool = False


COMPONENT_KINDS = (
    ComponentKind(
        type=FeatureType.PANEL,
        selectors=('[role="region"]', ".panel", ".card", ".widget", "aside", "section"),
        default_name="Panel",
        actions=("screenshot", "hover"),
        use_heading=True,
    ),
    ComponentKind(
        type=FeatureType.CHART,
        selectors=("canvas", "svg.chart", "[data-chart]", ".highcharts-container"),
        default_name="Chart Component",
        actions=("screenshot", "hover"),
    ),
    ComponentKind(
        type=FeatureType.MODAL,
        selectors=('[role="dialog"]', '[aria-modal="true"]', ".modal"),
        default_name="Modal",
        actions=("screenshot",),
        use_heading=True,
    ),
    ComponentKind(
        type=FeatureType.TABLE,
        selectors=("table", '[role="table"]', '[role="grid"]'),
        default_name="Table",
        actions=("screenshot",),
    ),
    ComponentKind(
        type=FeatureType.OTHER,
        selectors=("[data-component]", "[data-widget]", "[data-testid]"),
        default_name="Custom Component",
        actions=("click", "hover", "screenshot"),
    ),
)


class ComponentDiscovery(BaseDiscovery):
    """
    Finds composite components.

    Each component is reported as a single feature; its subtree is not
    expanded, only measured with one `<selector> *` count stored in the
    `descendants` attribute.
    """

    @property
    def category(self) -> str:
        return "components"

    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        seen: set[str] = set()
        components = []

        for kind in COMPONENT_KINDS:
            found = await self.scan(driver, kind.selectors, self._analyzer(kind), seen)
            logger.debug("discovery.components", type=kind.type.value, count=len(found))
            components.extend(found)

        logger.info("discovery.components_total", count=len(components))
        return components

    def _analyzer(self, kind: ComponentKind):
        async def analyze(driver: PageDriver, handle: ElementHandle, selector: str) -> DiscoveredFeature:
            return await self._analyze(driver, handle, selector, kind)
        return analyze

    async def _analyze(
        self,
        driver: PageDriver,
        handle: ElementHandle,
        selector: str,
        kind: ComponentKind,
    ) -> DiscoveredFeature:
        attributes = {}
        for name in ("id", "class", "data-testid", "data-component", "data-widget"):
            value = await handle.get_attribute(name)
            if value:
                attributes[name] = value

        attributes["descendants"] = str(await driver.locate(f"{selector} *").count())

        name = None
        text = None

        if kind.use_heading:
            text = await self._heading(driver, selector)
            name = text
        elif kind.type == FeatureType.TABLE:
            headers = await self.texts(driver, f"{selector} th")
            rows = await driver.locate(f"{selector} tr").count()
            attributes["headers"] = ", ".join(headers)
            attributes["rows"] = str(rows)
            name = ", ".join(headers) or None
        elif kind.type == FeatureType.OTHER:
            name = (
                attributes.get("data-testid")
                or attributes.get("data-component")
                or attributes.get("data-widget")
            )

        return DiscoveredFeature(
            name=truncate_string(name or attributes.get("id") or kind.default_name, 50),
            type=kind.type,
            selector=selector,
            text=text,
            attributes=attributes,
            actions=kind.actions,
            state=ElementState(visible=await handle.is_visible(), enabled=True),
        )

    async def _heading(self, driver: PageDriver, selector: str) -> Optional[str]:
        """Text of the first heading inside the component."""
        for tag in HEADING_TAGS:
            locator = driver.locate(f"{selector} {tag}")
            if await locator.count() > 0:
                text = normalize_text(await locator.first().text_content())
                if text:
                    return text
        return None
