"""
Puppeteer-style backend built on pyppeteer.

Puppeteer has no lazy locators: elements are fetched with
`querySelectorAll` and properties are read through `page.evaluate`. To
keep the PageDriver contract, every handle re-queries its selector and
picks its index on each call.

Requires the `puppeteer` extra (`pip install ui-scout[puppeteer]`).
"""

from typing import Optional

from pyppeteer.errors import PyppeteerError
from pyppeteer.errors import TimeoutError as PyppeteerTimeoutError

from .base import (
    DriverError,
    DriverTimeoutError,
    ElementHandle,
    ElementNotFoundError,
    Locator,
    PageDriver,
)


IS_VISIBLE_JS = """el => {
    const style = window.getComputedStyle(el);
    const rect = el.getBoundingClientRect();
    return style.visibility !== 'hidden' && style.display !== 'none'
        && rect.width > 0 && rect.height > 0;
}"""

SET_CHECKED_JS = "(el, checked) => el.checked !== checked"

SELECT_OPTION_JS = """(el, value) => {
    el.value = value;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
}"""


class PyppeteerElement(ElementHandle):

    def __init__(self, page, selector: str, index: int):
        self._page = page
        self.selector = selector
        self.index = index

    async def _resolve(self):
        try:
            handles = await self._page.querySelectorAll(self.selector)
        except PyppeteerError as e:
            raise DriverError(f"query failed for {self.selector}: {e}", self.selector) from e
        if self.index >= len(handles):
            raise ElementNotFoundError(
                f"no element for {self.selector} [{self.index}] ({len(handles)} matches)",
                self.selector,
            )
        return handles[self.index]

    async def _call(self, action: str, func):
        """Resolve the element and run `func(handle)`, mapping backend errors."""
        handle = await self._resolve()
        try:
            return await func(handle)
        except PyppeteerTimeoutError as e:
            raise DriverTimeoutError(f"{action} timed out on {self.selector}: {e}", self.selector) from e
        except PyppeteerError as e:
            raise DriverError(f"{action} failed on {self.selector}: {e}", self.selector) from e

    async def _evaluate(self, action: str, script: str, *args):
        return await self._call(action, lambda h: self._page.evaluate(script, h, *args))

    async def text_content(self) -> Optional[str]:
        return await self._evaluate("text_content", "el => el.textContent")

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self._evaluate("get_attribute", "(el, name) => el.getAttribute(name)", name)

    async def tag_name(self) -> str:
        tag = await self._evaluate("tag_name", "el => el.tagName")
        return (tag or "").lower()

    async def input_value(self) -> str:
        value = await self._evaluate("input_value", "el => el.value")
        return value or ""

    async def is_visible(self) -> bool:
        return bool(await self._evaluate("is_visible", IS_VISIBLE_JS))

    async def is_enabled(self) -> bool:
        return not await self._evaluate("is_enabled", "el => !!el.disabled")

    async def click(self, force: bool = False) -> None:
        if force:
            await self._evaluate("click", "el => el.click()")
        else:
            await self._call("click", lambda h: h.click())

    async def fill(self, value: str) -> None:
        await self._evaluate("fill", "el => { el.value = ''; }")
        await self._call("fill", lambda h: h.type(value))

    async def _set_checked(self, checked: bool) -> None:
        action = "check" if checked else "uncheck"
        if await self._evaluate(action, SET_CHECKED_JS, checked):
            await self._call(action, lambda h: h.click())

    async def check(self) -> None:
        await self._set_checked(True)

    async def uncheck(self) -> None:
        await self._set_checked(False)

    async def select_option(self, value: str) -> None:
        await self._evaluate("select_option", SELECT_OPTION_JS, value)

    async def hover(self) -> None:
        await self._call("hover", lambda h: h.hover())

    async def focus(self) -> None:
        await self._call("focus", lambda h: h.focus())

    async def press(self, key: str) -> None:
        await self._call("press", lambda h: h.press(key))

    async def screenshot(self, path: Optional[str] = None) -> bytes:
        options = {"path": path} if path else {}
        return await self._call("screenshot", lambda h: h.screenshot(options))


class PyppeteerLocator(Locator):

    def __init__(self, page, selector: str):
        super().__init__(selector)
        self._page = page

    async def count(self) -> int:
        try:
            return len(await self._page.querySelectorAll(self.selector))
        except PyppeteerError as e:
            raise DriverError(f"count failed for {self.selector}: {e}", self.selector) from e

    def nth(self, index: int) -> ElementHandle:
        return PyppeteerElement(self._page, self.selector, index)


class PyppeteerDriver(PageDriver):
    """Driver for a pyppeteer Page owned by the caller."""

    def __init__(self, page):
        self._page = page

    @property
    def name(self) -> str:
        return "puppeteer"

    async def navigate(self, url: str, timeout: Optional[float] = None) -> None:
        options = {"timeout": int(timeout * 1000)} if timeout else {}
        try:
            await self._page.goto(url, options)
        except PyppeteerTimeoutError as e:
            raise DriverTimeoutError(f"navigation to {url} timed out: {e}") from e
        except PyppeteerError as e:
            raise DriverError(f"navigation to {url} failed: {e}") from e

    async def current_url(self) -> str:
        return self._page.url

    async def title(self) -> str:
        try:
            return await self._page.title()
        except PyppeteerError as e:
            raise DriverError(f"title failed: {e}") from e

    async def wait_for_timeout(self, ms: int) -> None:
        await self._page.waitFor(ms)

    def locate(self, selector: str) -> Locator:
        return PyppeteerLocator(self._page, selector)
