"""
Selector generation, validation and optimization.

generate_selector() and is_valid_selector() are pure and total: they never
raise, whatever they are given. optimize_selector() and unique_selector()
consult a live driver and only ever return a selector whose match count
was verified against it (or the caller's input/fallback unchanged).
"""

import re
from typing import Any, Iterator, Mapping, Optional

import structlog

from ui_scout.drivers.base import DriverError, ElementHandle, PageDriver
from ui_scout.models.feature import ElementSnapshot
from ui_scout.utils import normalize_text, truncate_string

logger = structlog.get_logger(__name__)


TEST_ID_ATTRIBUTES = ("data-testid", "data-test-id", "data-test", "data-cy", "data-qa")

# Tier 4, in priority order
DISTINGUISHING_ATTRIBUTES = ("name", "type", "href", "aria-label", "placeholder", "title", "role")

# Attributes read from a live element to build its snapshot
SNAPSHOT_ATTRIBUTES = ("id", "class") + TEST_ID_ATTRIBUTES + DISTINGUISHING_ATTRIBUTES

MAX_CLASSES = 3

_COMBINATORS = ">+~"
_CLOSERS = {"]": "[", ")": "("}

_IDENT_RE = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")
_ID_IN_COMPOUND_RE = re.compile(r"#(-?[A-Za-z_][A-Za-z0-9_-]*)")
_BRACKETED_RE = re.compile(r"\[[^\]]*\]|\([^)]*\)")
# CSS-in-JS and CSS-module output: css-1x2y3z, sc-AxjAm, jss42, Button_root__3xY1a
_GENERATED_CLASS_RE = re.compile(r"^(css|sc|jss|jsx|emotion|svelte)-|^jss\d+$|__[A-Za-z0-9]{5,}$|\d{4,}")


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _is_stable_class(cls: str) -> bool:
    return bool(_IDENT_RE.match(cls)) and not _GENERATED_CLASS_RE.search(cls)


def _as_snapshot(element: Any) -> Optional[ElementSnapshot]:
    if isinstance(element, ElementSnapshot):
        return element
    if isinstance(element, Mapping):
        try:
            return ElementSnapshot.from_dict(element)
        except (TypeError, ValueError, AttributeError):
            return None
    return None


def selector_candidates(element: Any) -> Iterator[str]:
    """
    Yield one candidate selector per applicable tier, most stable first.

    Tiers: test-id attribute, id, stable classes, tag with a
    distinguishing attribute, tag alone. Yields nothing for input that is
    not an element description or has no tag.
    """
    snapshot = _as_snapshot(element)
    if snapshot is None or not snapshot.tag:
        return

    tag = snapshot.tag
    attributes = snapshot.attributes

    for name in TEST_ID_ATTRIBUTES:
        value = attributes.get(name)
        if value:
            yield f"[{name}={_quote(value)}]"
            break

    element_id = (attributes.get("id") or "").strip()
    if element_id:
        yield f"#{element_id}" if _IDENT_RE.match(element_id) else f"[id={_quote(element_id)}]"

    classes = [c for c in snapshot.classes if _is_stable_class(c)][:MAX_CLASSES]
    if classes:
        yield tag + "".join(f".{c}" for c in classes)

    for name in DISTINGUISHING_ATTRIBUTES:
        value = attributes.get(name)
        if value:
            yield f"{tag}[{name}={_quote(value)}]"
            break

    yield tag


def generate_selector(element: Any) -> str:
    """
    Build the most stable selector for an element description.

    Args:
        element: ElementSnapshot or a mapping with tag/attributes/text keys

    Returns:
        The selector, or "" when no selector can be built
    """
    return next(selector_candidates(element), "")


def _is_name_char(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch in "_-\\" or ord(ch) > 127)


def _split_selector_list(selector: str) -> Optional[list[str]]:
    """
    Split on top-level commas.

    Returns None when quotes or brackets are unbalanced or when a `#` or
    `.` is not followed by a name.
    """
    entries = []
    current = []
    stack = []
    quote = None
    i = 0

    while i < len(selector):
        ch = selector[i]
        if ch == "\\":
            current.append(selector[i:i + 2])
            i += 2
            continue

        if quote:
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch in "[(":
            stack.append(ch)
        elif ch in _CLOSERS:
            if not stack or stack.pop() != _CLOSERS[ch]:
                return None
        elif ch in "#." and (not stack or stack[-1] == "("):
            if not _is_name_char(selector[i + 1:i + 2]):
                return None
        elif ch == "," and not stack:
            entries.append("".join(current))
            current = []
            i += 1
            continue

        current.append(ch)
        i += 1

    if quote or stack:
        return None
    entries.append("".join(current))
    return entries


def _tokenize(selector: str) -> Optional[list[str]]:
    """
    Split one complex selector into compounds and combinators.

    `"nav > ul li"` gives `["nav", ">", "ul", " ", "li"]`. Returns None for
    an empty selector, adjacent combinators, or a selector that starts or
    ends with a combinator.
    """
    tokens: list[str] = []
    current = ""
    combinator = None
    depth = 0
    quote = None
    i = 0

    while i < len(selector):
        ch = selector[i:i + 2] if selector[i] == "\\" else selector[i]
        i += len(ch)

        if quote or depth or not (ch.isspace() or ch in _COMBINATORS):
            if not current:
                if tokens:
                    tokens.append(combinator or " ")
                elif combinator:
                    return None
                combinator = None
            current += ch
            if quote:
                if ch == quote:
                    quote = None
            elif ch in "'\"":
                quote = ch
            elif ch in "[(":
                depth += 1
            elif ch in "])":
                depth -= 1
            continue

        if current:
            tokens.append(current)
            current = ""
        if ch in _COMBINATORS:
            if combinator:
                return None
            combinator = ch

    if current:
        tokens.append(current)
    if combinator or not tokens:
        return None
    return tokens


def _join(tokens: list[str]) -> str:
    return "".join(t if t == " " or i % 2 == 0 else f" {t} " for i, t in enumerate(tokens))


def is_valid_selector(selector: Any) -> bool:
    """
    Syntactic check of a CSS selector.

    This is not a parser: it checks balanced quotes and brackets, that
    `#` and `.` introduce a name, and that combinators and list commas
    separate something. Never raises.
    """
    if not isinstance(selector, str) or not selector.strip():
        return False

    entries = _split_selector_list(selector.strip())
    if entries is None:
        return False

    return all(_tokenize(entry.strip()) for entry in entries)


async def _safe_count(driver: PageDriver, selector: str) -> Optional[int]:
    try:
        return await driver.locate(selector).count()
    except DriverError as e:
        logger.debug("selector.count_failed", selector=selector, error=str(e))
        return None


def _shortening_candidates(tokens: list[str]) -> Iterator[str]:
    # Id of the target compound only; an ancestor id names another element
    match = _ID_IN_COMPOUND_RE.search(_BRACKETED_RE.sub("", tokens[-1]))
    if match:
        yield f"#{match.group(1)}"

    # Structural suffixes, dropping ancestors, shortest first
    for start in range(len(tokens) - 1, 0, -2):
        yield _join(tokens[start:])


async def optimize_selector(selector: str, driver: Optional[PageDriver] = None) -> str:
    """
    Shorten a selector without changing what it matches.

    Without a driver nothing can be verified, so the selector is returned
    unchanged. With one, a candidate is accepted only when it is shorter,
    valid, and matches exactly as many elements as the original.

    Args:
        selector: Selector to shorten
        driver: Live driver used to verify match counts

    Returns:
        The shortest verified candidate, or the original selector
    """
    if driver is None or not is_valid_selector(selector):
        return selector

    entries = _split_selector_list(selector.strip())
    if len(entries) > 1:
        return selector

    original_count = await _safe_count(driver, selector)
    if not original_count:
        return selector

    for candidate in _shortening_candidates(_tokenize(selector.strip())):
        if len(candidate) >= len(selector) or not is_valid_selector(candidate):
            continue
        if await _safe_count(driver, candidate) == original_count:
            logger.debug("selector.optimized", original=selector, optimized=candidate)
            return candidate

    return selector


async def snapshot_element(handle: ElementHandle) -> ElementSnapshot:
    """Read the tag, the selector-relevant attributes and the text of a live element."""
    tag = await handle.tag_name()
    attributes = {}
    for name in SNAPSHOT_ATTRIBUTES:
        value = await handle.get_attribute(name)
        if value is not None:
            attributes[name] = value
    text = normalize_text(await handle.text_content())
    return ElementSnapshot(tag=tag, attributes=attributes, text=truncate_string(text, 100) or None)


async def unique_selector(handle: ElementHandle, driver: PageDriver, fallback: str) -> str:
    """
    Pick a selector for a live element.

    Returns the first candidate matching exactly one element, else the
    first candidate matching any element, else `fallback`.
    """
    snapshot = await snapshot_element(handle)
    first_match = None

    for candidate in selector_candidates(snapshot):
        count = await _safe_count(driver, candidate)
        if count == 1:
            return candidate
        if count and first_match is None:
            first_match = candidate

    return first_match or fallback
