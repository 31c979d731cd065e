"""
In-memory snapshot backend.

A SnapshotDriver answers from a recorded table of elements instead of a
browser. Every element lists the exact selector strings it matches; a
selector that is not in the table matches nothing. There is no CSS
matching of any kind.

Interactions mutate the recorded state (fill sets the value, check sets
`checked`, hover reveals the selectors listed in `reveals`) and are
appended to `SnapshotDriver.history`.

File format (JSON):

    {
      "url": "https://example.com",
      "title": "Example",
      "elements": [
        {"selectors": ["button", "#save"], "tag": "button",
         "attributes": {"id": "save"}, "text": "Save"}
      ]
    }
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence
import json

from .base import (
    DriverError,
    ElementHandle,
    ElementNotFoundError,
    Locator,
    PageDriver,
)


@dataclass
class ElementRecord:
    """One recorded element and its mutable state."""
    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    text: Optional[str] = None
    visible: bool = True
    enabled: bool = True
    value: str = ""
    checked: bool = False
    options: list[str] = field(default_factory=list)
    reveals: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ElementRecord":
        attributes = {k: str(v) for k, v in (data.get("attributes") or {}).items()}
        return cls(
            tag=str(data.get("tag", "div")).lower(),
            attributes=attributes,
            text=data.get("text"),
            visible=data.get("visible", True),
            enabled=data.get("enabled", "disabled" not in attributes),
            value=data.get("value", attributes.get("value", "")),
            checked=data.get("checked", "checked" in attributes),
            options=list(data.get("options") or []),
            reveals=list(data.get("reveals") or []),
        )


class SnapshotElement(ElementHandle):

    def __init__(self, driver: "SnapshotDriver", selector: str, index: int):
        self._driver = driver
        self.selector = selector
        self.index = index

    def _record(self) -> ElementRecord:
        records = self._driver.records(self.selector)
        if self.index >= len(records):
            raise ElementNotFoundError(
                f"no element for {self.selector} [{self.index}] ({len(records)} matches)",
                self.selector,
            )
        return records[self.index]

    def _actionable(self, action: str, force: bool = False) -> ElementRecord:
        record = self._record()
        if not force and not record.visible:
            raise DriverError(f"{action}: element {self.selector} is not visible", self.selector)
        if not force and not record.enabled:
            raise DriverError(f"{action}: element {self.selector} is disabled", self.selector)
        self._driver.history.append((action, self.selector, self.index))
        return record

    async def text_content(self) -> Optional[str]:
        return self._record().text

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._record().attributes.get(name)

    async def tag_name(self) -> str:
        return self._record().tag

    async def input_value(self) -> str:
        return self._record().value

    async def is_visible(self) -> bool:
        return self._record().visible

    async def is_enabled(self) -> bool:
        return self._record().enabled

    async def click(self, force: bool = False) -> None:
        record = self._actionable("click", force)
        if record.tag == "input" and record.attributes.get("type") in ("checkbox", "radio"):
            record.checked = not record.checked or record.attributes.get("type") == "radio"

    async def fill(self, value: str) -> None:
        record = self._actionable("fill")
        record.value = value

    async def check(self) -> None:
        self._actionable("check").checked = True

    async def uncheck(self) -> None:
        self._actionable("uncheck").checked = False

    async def select_option(self, value: str) -> None:
        record = self._actionable("select")
        if record.options and value not in record.options:
            raise DriverError(f"select: option {value!r} not in {self.selector}", self.selector)
        record.value = value

    async def hover(self) -> None:
        record = self._actionable("hover", force=True)
        for selector in record.reveals:
            for revealed in self._driver.records(selector):
                revealed.visible = True

    async def focus(self) -> None:
        self._actionable("focus", force=True)

    async def press(self, key: str) -> None:
        self._actionable("press")

    async def screenshot(self, path: Optional[str] = None) -> bytes:
        self._record()
        data = f"snapshot:{self.selector}[{self.index}]".encode("utf-8")
        if path:
            with open(path, "wb") as f:
                f.write(data)
        return data


class SnapshotLocator(Locator):

    def __init__(self, driver: "SnapshotDriver", selector: str):
        super().__init__(selector)
        self._driver = driver

    async def count(self) -> int:
        return len(self._driver.records(self.selector))

    def nth(self, index: int) -> ElementHandle:
        return SnapshotElement(self._driver, self.selector, index)


class SnapshotDriver(PageDriver):
    """
    Driver answering from recorded element tables.

    Args:
        elements: Sequence of (selectors, ElementRecord) pairs in document order
        url: Initial URL
        title: Page title
    """

    def __init__(
        self,
        elements: Sequence[tuple[Sequence[str], ElementRecord]] = (),
        url: str = "about:blank",
        title: str = "",
    ):
        self._table: dict[str, list[ElementRecord]] = {}
        self.url = url
        self.page_title = title
        self.history: list[tuple] = []
        self.visited: list[str] = []
        for selectors, record in elements:
            self.add(record, *selectors)

    @property
    def name(self) -> str:
        return "snapshot"

    def add(self, record: ElementRecord, *selectors: str) -> ElementRecord:
        """Register a record under each given selector, after existing matches."""
        for selector in selectors:
            self._table.setdefault(selector, []).append(record)
        return record

    def records(self, selector: str) -> list[ElementRecord]:
        return self._table.get(selector, [])

    async def navigate(self, url: str, timeout: Optional[float] = None) -> None:
        self.url = url
        self.visited.append(url)

    async def current_url(self) -> str:
        return self.url

    async def title(self) -> str:
        return self.page_title

    async def wait_for_timeout(self, ms: int) -> None:
        pass

    def locate(self, selector: str) -> Locator:
        return SnapshotLocator(self, selector)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SnapshotDriver":
        elements = [
            (list(item.get("selectors") or []), ElementRecord.from_dict(item))
            for item in data.get("elements", [])
        ]
        return cls(elements, url=data.get("url", "about:blank"), title=data.get("title", ""))

    @classmethod
    def load(cls, filepath: str) -> "SnapshotDriver":
        """Load a snapshot written in the JSON file format above."""
        with open(filepath, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
