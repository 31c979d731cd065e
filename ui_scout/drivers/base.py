"""
Backend-agnostic page driver interface.

Every upper layer (discovery, selector optimization, execution) talks to
a page only through PageDriver, Locator and ElementHandle. Each automation
engine gets one concrete implementation, chosen once by name through
ui_scout.drivers.factory.create_driver.
"""

from abc import ABC, abstractmethod
from typing import Optional


class DriverError(Exception):
    """A backend call failed."""

    def __init__(self, message: str, selector: Optional[str] = None):
        super().__init__(message)
        self.selector = selector


class ElementNotFoundError(DriverError):
    """The selector resolved to no element at the requested index."""
    pass


class DriverTimeoutError(DriverError):
    """A backend call did not complete within its timeout."""
    pass


class ElementHandle(ABC):
    """
    One concrete element on the page.

    Implementations resolve the element lazily, so a handle for an index
    that no longer exists fails with ElementNotFoundError on first use.
    """

    @abstractmethod
    async def text_content(self) -> Optional[str]:
        pass

    @abstractmethod
    async def get_attribute(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    async def tag_name(self) -> str:
        """Lower-case tag name."""
        pass

    @abstractmethod
    async def input_value(self) -> str:
        """Current value of an input, textarea or select."""
        pass

    @abstractmethod
    async def is_visible(self) -> bool:
        pass

    @abstractmethod
    async def is_enabled(self) -> bool:
        pass

    @abstractmethod
    async def click(self, force: bool = False) -> None:
        pass

    @abstractmethod
    async def fill(self, value: str) -> None:
        pass

    @abstractmethod
    async def check(self) -> None:
        pass

    @abstractmethod
    async def uncheck(self) -> None:
        pass

    @abstractmethod
    async def select_option(self, value: str) -> None:
        pass

    @abstractmethod
    async def hover(self) -> None:
        pass

    @abstractmethod
    async def focus(self) -> None:
        pass

    @abstractmethod
    async def press(self, key: str) -> None:
        pass

    @abstractmethod
    async def screenshot(self, path: Optional[str] = None) -> bytes:
        """Capture the element; also written to `path` when given."""
        pass


class Locator(ABC):
    """Zero or more elements matching a selector, indexable by position."""

    def __init__(self, selector: str):
        self.selector = selector

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    def nth(self, index: int) -> ElementHandle:
        pass

    def first(self) -> ElementHandle:
        return self.nth(0)

    async def all(self) -> list[ElementHandle]:
        """
        Handles for every current match.

        Built from count() and nth() only, so it works the same way on
        every backend.
        """
        return [self.nth(i) for i in range(await self.count())]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.selector!r})"


class PageDriver(ABC):
    """
    Uniform capability interface over one page of an automation backend.

    All I/O methods are coroutines and raise DriverError (or a subclass)
    on failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier."""
        pass

    @abstractmethod
    async def navigate(self, url: str, timeout: Optional[float] = None) -> None:
        """
        Load a URL.

        Args:
            url: Target URL
            timeout: Navigation timeout in seconds; backend default when None
        """
        pass

    @abstractmethod
    async def current_url(self) -> str:
        pass

    @abstractmethod
    async def title(self) -> str:
        pass

    @abstractmethod
    async def wait_for_timeout(self, ms: int) -> None:
        pass

    @abstractmethod
    def locate(self, selector: str) -> Locator:
        """Create a lazy locator; nothing is queried until it is used."""
        pass
