"""
Data models for the discovery phase.

A discovery pass produces a tree of DiscoveredFeature objects. Features are
frozen once built: enrichment steps (tooltips, dynamic elements) create new
instances with dataclasses.replace instead of mutating the originals.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ui_scout.utils import validate_enum


class FeatureType(str, Enum):
    """Kinds of UI features detected on a page."""
    BUTTON = "button"
    MENU = "menu"
    PANEL = "panel"
    INPUT = "input"
    CHART = "chart"
    TABLE = "table"
    MODAL = "modal"
    DROPDOWN = "dropdown"
    TAB = "tab"
    NAVIGATION = "navigation"
    OTHER = "other"


@dataclass(frozen=True)
class ElementState:
    """Visibility and enabled state observed when the feature was discovered."""
    visible: bool = True
    enabled: bool = True

    def to_dict(self) -> dict:
        return {"isVisible": self.visible, "isEnabled": self.enabled}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ElementState":
        return cls(
            visible=bool(data.get("isVisible", True)),
            enabled=bool(data.get("isEnabled", True)),
        )


@dataclass(frozen=True)
class DiscoveredFeature:
    """
    A UI element found on the page, possibly with nested child features.

    The selector resolved to at least one element when the feature was
    discovered live. Children are owned by this feature only.
    """
    name: str
    type: FeatureType
    selector: str
    text: Optional[str] = None
    attributes: Optional[Mapping[str, str]] = None
    children: tuple["DiscoveredFeature", ...] = ()
    actions: tuple[str, ...] = ()
    screenshot: Optional[str] = None
    state: Optional[ElementState] = None

    def __post_init__(self):
        """Normalize field types after initialization."""
        object.__setattr__(self, "type", validate_enum(self.type, FeatureType, "DiscoveredFeature.type"))

        if self.attributes is not None:
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

        object.__setattr__(self, "children", tuple(self.children or ()))
        # Ordered set: keep first occurrence of each verb
        object.__setattr__(self, "actions", tuple(dict.fromkeys(self.actions or ())))

    @property
    def is_interactive(self) -> bool:
        """True when the feature supports at least one interaction."""
        return len(self.actions) > 0

    @property
    def is_visible(self) -> bool:
        return self.state is None or self.state.visible

    @property
    def is_enabled(self) -> bool:
        return self.state is None or self.state.enabled

    def attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Null-safe attribute lookup."""
        if not self.attributes:
            return default
        value = self.attributes.get(name)
        return default if value is None else value

    def iter_tree(self):
        """Yield this feature and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        data = {
            "name": self.name,
            "type": self.type.value,
            "selector": self.selector,
        }
        if self.text is not None:
            data["text"] = self.text
        if self.attributes is not None:
            data["attributes"] = dict(self.attributes)
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        if self.actions:
            data["actions"] = list(self.actions)
        if self.screenshot is not None:
            data["screenshot"] = self.screenshot
        if self.state is not None:
            data["visibility"] = self.state.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiscoveredFeature":
        """Build from the persisted JSON shape."""
        visibility = data.get("visibility")
        return cls(
            name=data["name"],
            type=FeatureType(data.get("type", "other")),
            selector=data["selector"],
            text=data.get("text"),
            attributes=data.get("attributes"),
            children=tuple(cls.from_dict(c) for c in data.get("children") or ()),
            actions=tuple(data.get("actions") or ()),
            screenshot=data.get("screenshot"),
            state=ElementState.from_dict(visibility) if visibility else None,
        )


@dataclass(frozen=True)
class ElementSnapshot:
    """
    Static description of one element, the input of the selector engine.

    Built from a live ElementHandle by selector_engine.snapshot_element or
    directly from recorded data.
    """
    tag: str = ""
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: Optional[str] = None

    @property
    def classes(self) -> list[str]:
        return (self.attributes.get("class") or "").split()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ElementSnapshot":
        attributes = dict(data.get("attributes") or {})
        # Top-level id/class keys are accepted as shorthand
        for key in ("id", "class"):
            if data.get(key) and key not in attributes:
                attributes[key] = data[key]
        if data.get("className") and "class" not in attributes:
            attributes["class"] = data["className"]
        return cls(
            tag=str(data.get("tag") or data.get("tagName") or "").lower(),
            attributes={str(k): str(v) for k, v in attributes.items() if v is not None},
            text=data.get("text"),
        )
