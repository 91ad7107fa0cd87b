"""
Selector-fallback primitives shared by the listing and article extractors.

Every field is located through an ordered list of rules, each a (CSS
selector, field extractor) pair. Rules are evaluated in priority order and
the first non-empty value wins. Nothing here raises on missing markup; callers apply
their own defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Callable, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


FieldExtractor = Callable[[Tag], "str | None"]

TAG_LINK_SELECTOR = 'a[href*="/tag/"]'

_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(element: Tag) -> str:
    """Return the element's text with whitespace runs collapsed and trimmed."""
    return _WHITESPACE_RE.sub(" ", element.get_text()).strip()


def attr_value(name: str) -> FieldExtractor:
    """Build an extractor that reads attribute `name` instead of text."""

    def _extract(element: Tag) -> str | None:
        value = element.get(name)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value else None

    return _extract


@dataclass(frozen=True)
class Rule:
    """One step of a field cascade.

    Attributes:
        selector: CSS selector evaluated against the search scope
        extract: Turns a matched element into a value; empty means "no result"
    """
    selector: str
    extract: FieldExtractor = clean_text


@dataclass(frozen=True)
class Match:
    value: str
    element: Tag


def parse_html(markup: str | None) -> BeautifulSoup:
    return BeautifulSoup(markup or "", "html.parser")


def first_matching(scope: Tag, selectors: Sequence[str]) -> list[Tag]:
    """Return the matches of the first selector that matches anything.

    Matches from different selectors are never merged.
    """
    for selector in selectors:
        found = scope.select(selector)
        if found:
            return found
    return []


def cascade(scope: Tag, rules: Sequence[Rule]) -> Match | None:
    """Evaluate `rules` in order and return the first non-empty value."""
    for rule in rules:
        for element in scope.select(rule.selector):
            value = rule.extract(element)
            if value:
                return Match(value=value, element=element)
    return None


def cascade_value(scope: Tag, rules: Sequence[Rule], default: str | None = None) -> str | None:
    match = cascade(scope, rules)
    return match.value if match else default


def resolve_url(href: str | None, base_url: str) -> str:
    """Make `href` absolute against the source origin; empty input stays empty."""
    if not href:
        return ""
    href = href.strip()
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base_url.rstrip("/") + "/", href)


def link_for(element: Tag) -> str | None:
    """Find the href that belongs to `element`.

    Looks at the element itself, then its nearest ancestor anchor, then its
    first descendant anchor.
    """
    if element.name == "a" and element.get("href"):
        return element["href"]
    parent = element.find_parent("a", href=True)
    if parent is not None:
        return parent["href"]
    child = element.find("a", href=True)
    if child is not None:
        return child["href"]
    return None


def collect_tags(scope: Tag) -> list[str]:
    """Return the text of every tag link in `scope`, in document order."""
    tags = []
    for anchor in scope.select(TAG_LINK_SELECTOR):
        text = clean_text(anchor)
        if text:
            tags.append(text)
    return tags


def extract_author(scope: Tag, rules: Sequence[Rule], base_url: str) -> tuple[str, str | None]:
    """Resolve the author name and profile URL; defaults to ("Unknown", None)."""
    match = cascade(scope, rules)
    if match is None:
        return "Unknown", None
    return match.value, resolve_url(link_for(match.element), base_url) or None
