"""
Playwright backend.

Adapts a playwright.async_api.Page to the PageDriver interface. Element
handles are built on Playwright locators (`locator.nth(i)`), so they are
re-resolved on every call.
"""

from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .base import (
    DriverError,
    DriverTimeoutError,
    ElementHandle,
    ElementNotFoundError,
    Locator,
    PageDriver,
)


class PlaywrightElement(ElementHandle):
    """Element handle backed by `page.locator(selector).nth(index)`."""

    def __init__(self, locator, selector: str, index: int):
        self._locator = locator
        self.selector = selector
        self.index = index

    async def _exists(self) -> bool:
        try:
            return await self._locator.count() > 0
        except PlaywrightError:
            return True

    async def _call(self, action: str, coro):
        try:
            return await coro
        except PlaywrightError as e:
            where = f"{self.selector} [{self.index}]"
            if not await self._exists():
                raise ElementNotFoundError(f"{action}: no element for {where}", self.selector) from e
            if isinstance(e, PlaywrightTimeoutError):
                raise DriverTimeoutError(f"{action} timed out on {where}: {e.message}", self.selector) from e
            raise DriverError(f"{action} failed on {where}: {e.message}", self.selector) from e

    async def text_content(self) -> Optional[str]:
        return await self._call("text_content", self._locator.text_content())

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self._call("get_attribute", self._locator.get_attribute(name))

    async def tag_name(self) -> str:
        tag = await self._call("tag_name", self._locator.evaluate("el => el.tagName"))
        return (tag or "").lower()

    async def input_value(self) -> str:
        return await self._call("input_value", self._locator.input_value())

    async def is_visible(self) -> bool:
        return await self._call("is_visible", self._locator.is_visible())

    async def is_enabled(self) -> bool:
        return await self._call("is_enabled", self._locator.is_enabled())

    async def click(self, force: bool = False) -> None:
        await self._call("click", self._locator.click(force=force))

    async def fill(self, value: str) -> None:
        await self._call("fill", self._locator.fill(value))

    async def check(self) -> None:
        await self._call("check", self._locator.check())

    async def uncheck(self) -> None:
        await self._call("uncheck", self._locator.uncheck())

    async def select_option(self, value: str) -> None:
        await self._call("select_option", self._locator.select_option(value))

    async def hover(self) -> None:
        await self._call("hover", self._locator.hover())

    async def focus(self) -> None:
        await self._call("focus", self._locator.focus())

    async def press(self, key: str) -> None:
        await self._call("press", self._locator.press(key))

    async def screenshot(self, path: Optional[str] = None) -> bytes:
        return await self._call("screenshot", self._locator.screenshot(path=path))


class PlaywrightLocator(Locator):

    def __init__(self, page, selector: str):
        super().__init__(selector)
        self._locator = page.locator(selector)

    async def count(self) -> int:
        try:
            return await self._locator.count()
        except PlaywrightError as e:
            raise DriverError(f"count failed for {self.selector}: {e.message}", self.selector) from e

    def nth(self, index: int) -> ElementHandle:
        return PlaywrightElement(self._locator.nth(index), self.selector, index)


class PlaywrightDriver(PageDriver):
    """
    Driver for a Playwright async Page.

    The page is owned by the caller: this driver never launches or closes
    the browser.
    """

    def __init__(self, page):
        self._page = page

    @property
    def name(self) -> str:
        return "playwright"

    async def navigate(self, url: str, timeout: Optional[float] = None) -> None:
        try:
            await self._page.goto(url, timeout=timeout * 1000 if timeout else None)
        except PlaywrightTimeoutError as e:
            raise DriverTimeoutError(f"navigation to {url} timed out: {e.message}") from e
        except PlaywrightError as e:
            raise DriverError(f"navigation to {url} failed: {e.message}") from e

    async def current_url(self) -> str:
        try:
            return self._page.url
        except PlaywrightError as e:
            raise DriverError(f"url failed: {e.message}") from e

    async def title(self) -> str:
        try:
            return await self._page.title()
        except PlaywrightError as e:
            raise DriverError(f"title failed: {e.message}") from e

    async def wait_for_timeout(self, ms: int) -> None:
        try:
            await self._page.wait_for_timeout(ms)
        except PlaywrightError as e:
            raise DriverError(f"wait failed: {e.message}") from e

    def locate(self, selector: str) -> Locator:
        return PlaywrightLocator(self._page, selector)
