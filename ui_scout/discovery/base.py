"""
Base class for discovery services.

Defines the contract every category scanner follows and the
count-then-index iteration they share.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Awaitable, Callable, Iterable, Optional

import structlog

from ui_scout.drivers.base import DriverError, ElementHandle, PageDriver
from ui_scout.models import DiscoveredFeature
from ui_scout.selector_engine import unique_selector
from ui_scout.utils import normalize_text

logger = structlog.get_logger(__name__)

Analyzer = Callable[[PageDriver, ElementHandle, str], Awaitable[Optional[DiscoveredFeature]]]


class BaseDiscovery(ABC):
    """
    Abstract scanner for one category of UI features.

    The driver is passed to every discover() call and never stored, so
    one instance can scan any number of pages. Selector de-duplication is
    scoped to a single call.
    """

    def __init__(self, include_hidden: bool = False):
        """
        Args:
            include_hidden: If True, invisible matches are reported too
        """
        self.include_hidden = include_hidden

    @property
    @abstractmethod
    def category(self) -> str:
        """Category identifier used in logs and CategoryResult."""
        pass

    @abstractmethod
    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        """
        Scan the current page.

        Args:
            driver: Driver of the page to scan

        Returns:
            Features in discovery order
        """
        pass

    async def iter_matches(self, driver: PageDriver, selector: str) -> AsyncIterator[tuple[int, ElementHandle]]:
        """
        Yield (index, handle) for each element matching `selector`.

        The count is read once; handles are built by index, so a handle
        may point past the end if the page changed meanwhile.
        """
        locator = driver.locate(selector)
        count = await locator.count()
        for index in range(count):
            yield index, locator.nth(index)

    async def texts(self, driver: PageDriver, selector: str) -> list[str]:
        """Normalized, non-empty text of every match."""
        texts = []
        async for _, handle in self.iter_matches(driver, selector):
            try:
                text = normalize_text(await handle.text_content())
            except DriverError:
                continue
            if text:
                texts.append(text)
        return texts

    async def scan(
        self,
        driver: PageDriver,
        selectors: Iterable[str],
        analyze: Analyzer,
        seen: set[str],
    ) -> list[DiscoveredFeature]:
        """
        Run `analyze` on every visible, not yet seen match of each selector.

        `analyze` receives the element's resolved selector. Elements that
        fail while being analyzed are skipped.
        """
        features = []

        for query in selectors:
            async for index, handle in self.iter_matches(driver, query):
                try:
                    selector = await unique_selector(handle, driver, fallback=query)
                    if selector in seen:
                        continue
                    if not self.include_hidden and not await handle.is_visible():
                        continue
                    feature = await analyze(driver, handle, selector)
                except DriverError as e:
                    logger.debug(
                        "discovery.element_skipped",
                        category=self.category,
                        query=query,
                        index=index,
                        error=str(e),
                    )
                    continue

                if feature is not None:
                    seen.add(feature.selector)
                    features.append(feature)

        return features

    async def label_for(self, driver: PageDriver, handle: ElementHandle) -> Optional[str]:
        """Label text of a form control: <label for=id>, then aria-label, then placeholder."""
        element_id = await handle.get_attribute("id")
        if element_id:
            locator = driver.locate(f'label[for="{element_id}"]')
            if await locator.count() > 0:
                text = normalize_text(await locator.first().text_content())
                if text:
                    return text

        for name in ("aria-label", "placeholder"):
            value = await handle.get_attribute(name)
            if value:
                return value

        return None
