"""
Navigation discovery: menus, navigation bars, dropdowns and tab groups.

Containers are reported as one feature each, with their links (or tabs)
as child features. Child queries are built by appending a descendant
part to the container's selector, e.g. `#main-nav a[href]`.
"""

from typing import Optional

import structlog

from ui_scout.discovery.base import BaseDiscovery
from ui_scout.drivers.base import DriverError, ElementHandle, PageDriver
from ui_scout.models import DiscoveredFeature, ElementState, FeatureType
from ui_scout.selector_engine import unique_selector
from ui_scout.utils import normalize_text, truncate_string

logger = structlog.get_logger(__name__)


NAVIGATION_CONTAINERS = (
    ("nav", FeatureType.NAVIGATION),
    ('[role="navigation"]', FeatureType.NAVIGATION),
    ('[role="menubar"]', FeatureType.MENU),
    ('[role="menu"]', FeatureType.MENU),
    (".navbar", FeatureType.NAVIGATION),
    (".menu", FeatureType.NAVIGATION),
)

DROPDOWN_SELECTORS = ("select", '[role="combobox"]', '[role="listbox"]')

OPTION_QUERIES = ("option", '[role="option"]')

TABLIST_SELECTORS = ('[role="tablist"]',)

LINK_QUERY = "a[href]"
TAB_QUERY = '[role="tab"]'


class NavigationDiscovery(BaseDiscovery):
    """
    Finds navigation containers, dropdowns and tab groups.

    One discover() call returns containers first, then dropdowns, then
    tab groups, de-duplicated by selector.
    """

    @property
    def category(self) -> str:
        return "navigation"

    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        seen: set[str] = set()
        features = []

        for query, feature_type in NAVIGATION_CONTAINERS:
            features.extend(await self.scan(driver, (query,), self._container_analyzer(feature_type), seen))
        dropdowns = await self.scan(driver, DROPDOWN_SELECTORS, self._analyze_dropdown, seen)
        tabs = await self.scan(driver, TABLIST_SELECTORS, self._analyze_tabs, seen)

        logger.info(
            "discovery.navigation",
            containers=len(features),
            dropdowns=len(dropdowns),
            tab_groups=len(tabs),
        )
        return features + dropdowns + tabs

    def _container_analyzer(self, feature_type: FeatureType):
        async def analyze(driver: PageDriver, handle: ElementHandle, selector: str) -> DiscoveredFeature:
            return await self._analyze_container(driver, handle, selector, feature_type)
        return analyze

    async def _analyze_container(
        self,
        driver: PageDriver,
        handle: ElementHandle,
        selector: str,
        feature_type: FeatureType,
    ) -> DiscoveredFeature:
        text = normalize_text(await handle.text_content())
        aria_label = await handle.get_attribute("aria-label")
        links = await self._children(driver, f"{selector} {LINK_QUERY}", "Link")

        default_name = "Menu" if feature_type == FeatureType.MENU else "Navigation"
        attributes = {"links": str(len(links))}
        if aria_label:
            attributes["aria-label"] = aria_label

        return DiscoveredFeature(
            name=truncate_string(aria_label or text or default_name, 50),
            type=feature_type,
            selector=selector,
            text=text or None,
            attributes=attributes,
            children=tuple(links),
            actions=("click", "hover"),
            state=ElementState(visible=await handle.is_visible(), enabled=True),
        )

    async def _children(self, driver: PageDriver, query: str, default_name: str) -> list[DiscoveredFeature]:
        """One child feature per match of `query`, hidden ones included."""
        children = []
        seen: set[str] = set()

        async for index, handle in self.iter_matches(driver, query):
            try:
                selector = await unique_selector(handle, driver, fallback=query)
                if selector in seen:
                    continue
                text = normalize_text(await handle.text_content())
                href = await handle.get_attribute("href")
            except DriverError as e:
                logger.debug("discovery.child_skipped", query=query, index=index, error=str(e))
                continue

            seen.add(selector)
            children.append(DiscoveredFeature(
                name=truncate_string(text or href or default_name, 50),
                type=FeatureType.OTHER,
                selector=selector,
                text=text or None,
                attributes={"href": href} if href else None,
                actions=("click",),
            ))

        return children

    async def _analyze_dropdown(self, driver: PageDriver, handle: ElementHandle, selector: str) -> DiscoveredFeature:
        options = []
        for option_query in OPTION_QUERIES:
            options.extend(await self.texts(driver, f"{selector} {option_query}"))

        label = await self.label_for(driver, handle) or await handle.get_attribute("name")
        attributes = {}
        if options:
            attributes["options"] = ", ".join(options)

        return DiscoveredFeature(
            name=truncate_string(label or "Dropdown", 50),
            type=FeatureType.DROPDOWN,
            selector=selector,
            attributes=attributes or None,
            actions=("select", "click"),
            state=ElementState(
                visible=await handle.is_visible(),
                enabled=await handle.is_enabled(),
            ),
        )

    async def _analyze_tabs(self, driver: PageDriver, handle: ElementHandle, selector: str) -> DiscoveredFeature:
        tabs = await self._children(driver, f"{selector} {TAB_QUERY}", "Tab")
        aria_label = await handle.get_attribute("aria-label")

        attributes = {}
        if tabs:
            attributes["tabs"] = ", ".join(t.text or t.name for t in tabs)

        return DiscoveredFeature(
            name=truncate_string(aria_label or "Tab Navigation", 50),
            type=FeatureType.TAB,
            selector=selector,
            attributes=attributes or None,
            children=tuple(tabs),
            actions=("click",),
            state=ElementState(visible=await handle.is_visible(), enabled=True),
        )

    @staticmethod
    def dropdown_options(feature: DiscoveredFeature) -> list[str]:
        """Option texts recorded on a dropdown feature."""
        raw: Optional[str] = feature.attribute("options")
        return [o for o in raw.split(", ") if o] if raw else []
