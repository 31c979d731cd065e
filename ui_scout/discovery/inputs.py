"""Form input discovery."""

from typing import Optional

import structlog

from ui_scout.discovery.base import BaseDiscovery
from ui_scout.drivers.base import ElementHandle, PageDriver
from ui_scout.models import DiscoveredFeature, ElementState, FeatureType
from ui_scout.utils import truncate_string

logger = structlog.get_logger(__name__)


# <select> elements are reported as dropdowns by NavigationDiscovery
INPUT_SELECTORS = (
    'input[type="text"]',
    'input[type="email"]',
    'input[type="password"]',
    'input[type="number"]',
    'input[type="search"]',
    'input[type="tel"]',
    'input[type="url"]',
    'input[type="date"]',
    'input[type="time"]',
    'input[type="datetime-local"]',
    'input[type="checkbox"]',
    'input[type="radio"]',
    'input[type="range"]',
    "input:not([type])",
    "textarea",
    '[contenteditable="true"]',
)

# type attribute values that are already a semantic type
DIRECT_TYPES = {
    "email", "password", "tel", "url", "number", "date", "time",
    "search", "checkbox", "radio", "range",
}

TYPE_ALIASES = {
    "datetime-local": "date",
    "month": "date",
    "week": "date",
}

AUTOCOMPLETE_TYPES = {
    "email": "email",
    "tel": "tel",
    "tel-national": "tel",
    "url": "url",
    "current-password": "password",
    "new-password": "password",
    "bday": "date",
}

# Substrings of name/id/placeholder, checked in order
NAME_HINTS = (
    (("email", "e-mail"), "email"),
    (("password", "passwd"), "password"),
    (("phone", "mobile", "tel"), "tel"),
    (("website", "homepage", "url"), "url"),
    (("search", "query"), "search"),
    (("birthday", "date"), "date"),
    (("time",), "time"),
    (("amount", "quantity", "qty"), "number"),
)

TEST_VALUES = {
    "email": "test@example.com",
    "password": "TestPassword123!",
    "number": "42",
    "tel": "+1234567890",
    "url": "https://example.com",
    "date": "2024-01-01",
    "time": "12:00",
    "search": "test search query",
    "range": "50",
}

DEFAULT_TEST_VALUE = "Test Value"


def infer_input_type(
    tag: str,
    input_type: Optional[str] = None,
    autocomplete: Optional[str] = None,
    name: Optional[str] = None,
    element_id: Optional[str] = None,
    placeholder: Optional[str] = None,
) -> str:
    """
    Infer the semantic type of a form control.

    An explicit type attribute wins, then the autocomplete token, then
    hints in name, id and placeholder. Defaults to "text".
    """
    if tag == "textarea":
        return "textarea"

    input_type = (input_type or "").lower()
    if input_type in DIRECT_TYPES:
        return input_type
    if input_type in TYPE_ALIASES:
        return TYPE_ALIASES[input_type]

    for token in (autocomplete or "").lower().split():
        if token in AUTOCOMPLETE_TYPES:
            return AUTOCOMPLETE_TYPES[token]

    haystack = " ".join(v.lower() for v in (name, element_id, placeholder) if v)
    for needles, semantic in NAME_HINTS:
        if any(needle in haystack for needle in needles):
            return semantic

    return "text"


def _actions_for(semantic_type: str) -> tuple[str, ...]:
    if semantic_type in ("checkbox", "radio"):
        return ("check", "uncheck", "click")
    if semantic_type == "range":
        return ("fill",)
    return ("fill", "clear", "focus", "blur")


class InputDiscovery(BaseDiscovery):
    """Finds text fields, text areas, checkboxes and other form inputs."""

    @property
    def category(self) -> str:
        return "inputs"

    async def discover(self, driver: PageDriver) -> list[DiscoveredFeature]:
        inputs = await self.scan(driver, INPUT_SELECTORS, self._analyze, seen=set())
        logger.info("discovery.inputs", count=len(inputs))
        return inputs

    async def _analyze(self, driver: PageDriver, handle: ElementHandle, selector: str) -> Optional[DiscoveredFeature]:
        tag = await handle.tag_name()
        raw = {}
        for name in ("type", "name", "id", "placeholder", "autocomplete"):
            value = await handle.get_attribute(name)
            if value:
                raw[name] = value

        semantic_type = infer_input_type(
            tag,
            input_type=raw.get("type"),
            autocomplete=raw.get("autocomplete"),
            name=raw.get("name"),
            element_id=raw.get("id"),
            placeholder=raw.get("placeholder"),
        )
        label = await self.label_for(driver, handle)

        attributes = {k: v for k, v in raw.items() if k != "autocomplete"}
        attributes.setdefault("type", "textarea" if tag == "textarea" else "text")
        attributes["semanticType"] = semantic_type
        if label:
            attributes["label"] = label

        name = label or raw.get("placeholder") or raw.get("name") or raw.get("id") or f"Input ({semantic_type})"

        return DiscoveredFeature(
            name=truncate_string(name, 50),
            type=FeatureType.INPUT,
            selector=selector,
            attributes=attributes,
            actions=_actions_for(semantic_type),
            state=ElementState(
                visible=await handle.is_visible(),
                enabled=await handle.is_enabled(),
            ),
        )

    @staticmethod
    def get_test_value_for_input(input_type: Optional[str]) -> str:
        """Sample value accepted by an input of the given semantic type."""
        return TEST_VALUES.get((input_type or "").lower(), DEFAULT_TEST_VALUE)
