"""
Single article page extraction.

Always returns an ArticleRecord; any field that cannot be found falls back
to its default. Body text is read from a copy of the main content container
with non-content subtrees removed, so the parsed page itself is untouched
and page-wide lookups (tags, claps) still see everything.
"""

from __future__ import annotations

import copy
import re

from bs4 import BeautifulSoup, Tag

from ..types import ArticleRecord
from .cascade import (
    Rule,
    cascade_value,
    clean_text,
    collect_tags,
    extract_author,
    first_matching,
    parse_html,
)
from .listing import DEFAULT_BASE_URL, PUBLISHED_DATE_RULES, READING_TIME_RULES


MIN_BLOCK_CHARS = 10

TITLE_RULES = (
    Rule('h1[data-testid="storyTitle"]'),
    Rule("h1"),
    Rule('[class*="title"]'),
)

AUTHOR_RULES = (
    Rule('[data-testid="authorName"]'),
    Rule('a[rel="author"]'),
    Rule('[class*="author"]'),
)

CONTENT_SELECTORS = (
    'article[data-testid="post-content"]',
    '[data-testid="post-content"]',
    "article",
    '[class*="postArticle"]',
    '[class*="articleBody"]',
)

NOISE_SELECTOR = ", ".join(
    [
        "script",
        "style",
        "noscript",
        "nav",
        "footer",
        "aside",
        '[class*="promo"]',
        '[class*="advert"]',
        '[class~="ad"]',
        '[class*="sponsor"]',
    ]
)

BLOCK_SELECTOR = "p, h2, h3, h4, li"

CLAP_SELECTOR = '[data-testid="clap-button"], button[aria-label*="clap"], [class*="clap"]'

_DIGITS_RE = re.compile(r"(\d+)")


def extract_article(
    markup: str | None,
    url: str,
    base_url: str = DEFAULT_BASE_URL,
) -> ArticleRecord:
    """Extract a full article record from an article page.

    Args:
        markup: Raw HTML of the article page
        url: The article URL, recorded as-is on the result
        base_url: Origin used to resolve the author profile link

    Returns:
        ArticleRecord with `content` populated (empty string if no body was found)
    """
    soup = parse_html(markup)
    author, author_url = extract_author(soup, AUTHOR_RULES, base_url)
    paragraphs = extract_paragraphs(soup)

    return ArticleRecord(
        title=cascade_value(soup, TITLE_RULES, "Untitled"),
        url=url,
        author=author,
        author_url=author_url,
        preview=paragraphs[0] if paragraphs else "",
        tags=collect_tags(soup),
        content="\n\n".join(paragraphs),
        reading_time=cascade_value(soup, READING_TIME_RULES),
        published_date=cascade_value(soup, PUBLISHED_DATE_RULES),
        claps=extract_claps(soup),
    )


def extract_paragraphs(soup: BeautifulSoup) -> list[str]:
    """Return the substantial text blocks of the main content container."""
    found = first_matching(soup, CONTENT_SELECTORS)
    if not found:
        return []
    container = copy.copy(found[0])
    for node in container.select(NOISE_SELECTOR):
        # nested noise is already gone with its ancestor
        if not node.decomposed:
            node.decompose()

    paragraphs = []
    for block in container.select(BLOCK_SELECTOR):
        text = clean_text(block)
        if len(text) > MIN_BLOCK_CHARS:
            paragraphs.append(text)
    return paragraphs


def extract_claps(soup: Tag) -> int | None:
    element = soup.select_one(CLAP_SELECTOR)
    if element is None:
        return None
    for source in (clean_text(element), element.get("aria-label") or ""):
        match = _DIGITS_RE.search(source)
        if match:
            return int(match.group(1))
    return None
