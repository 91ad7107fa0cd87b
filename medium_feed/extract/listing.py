"""
Listing page extraction.

Turns search and trending result pages into ordered ArticleRecord lists.
Containers are located with a selector cascade from most to least specific;
each container's fields are resolved with their own cascades. Containers
that end up without a title or a URL are dropped silently.
"""

from __future__ import annotations

from bs4 import Tag

from ..types import ArticleRecord
from .cascade import (
    Rule,
    attr_value,
    cascade,
    cascade_value,
    clean_text,
    collect_tags,
    extract_author,
    first_matching,
    link_for,
    parse_html,
    resolve_url,
)


DEFAULT_BASE_URL = "https://medium.com"

CONTAINER_SELECTORS = (
    '[data-testid="post-preview"]',
    "article[data-post-id]",
    "article",
    'div[class*="postArticle"]',
    'div[class*="streamItem"]',
    'a[data-action="open-post"]',
)

TITLE_RULES = (
    Rule("h2"),
    Rule("h3"),
    Rule('[class*="title"]'),
)

AUTHOR_RULES = (
    Rule('[data-action="show-user-card"]'),
    Rule('a[rel="author"]'),
    Rule('[class*="author"]'),
    Rule('[class*="byline"]'),
)

PREVIEW_RULES = (
    Rule("p"),
    Rule('[class*="preview"]'),
    Rule('[class*="snippet"]'),
    Rule('[class*="excerpt"]'),
)

READING_TIME_RULES = (
    Rule('[class*="readingTime"]'),
    Rule('[class*="readTime"]'),
    Rule('[data-testid="storyReadTime"]'),
)

PUBLISHED_DATE_RULES = (
    Rule("time[datetime]", attr_value("datetime")),
    Rule("time"),
    Rule('[data-testid="storyPublishDate"]'),
)


def extract_listing(
    markup: str | None,
    limit: int,
    base_url: str = DEFAULT_BASE_URL,
) -> list[ArticleRecord]:
    """Extract up to `limit` article records from a listing page.

    Args:
        markup: Raw HTML of the listing page
        limit: Maximum number of records to return
        base_url: Origin used to resolve relative links

    Returns:
        Valid records (non-empty title and URL) in document order
    """
    if limit <= 0:
        return []
    soup = parse_html(markup)
    records: list[ArticleRecord] = []
    for container in first_matching(soup, CONTAINER_SELECTORS):
        record = _extract_record(container, base_url)
        if record is None:
            continue
        records.append(record)
        if len(records) >= limit:
            break
    return records


def _extract_record(container: Tag, base_url: str) -> ArticleRecord | None:
    title, href = _extract_title_and_link(container)
    url = resolve_url(href, base_url)
    if not title or not url:
        return None

    author, author_url = extract_author(container, AUTHOR_RULES, base_url)
    return ArticleRecord(
        title=title,
        url=url,
        author=author,
        author_url=author_url,
        preview=cascade_value(container, PREVIEW_RULES, ""),
        tags=collect_tags(container),
        reading_time=cascade_value(container, READING_TIME_RULES),
        published_date=cascade_value(container, PUBLISHED_DATE_RULES),
    )


def _extract_title_and_link(container: Tag) -> tuple[str, str | None]:
    own_href = container.get("href") if container.name == "a" else None
    match = cascade(container, TITLE_RULES)
    if match is not None:
        return match.value, link_for(match.element) or own_href

    # No heading-like element: fall back to the container's own link, then
    # the first nested link that has text
    anchors = [container] if own_href else []
    anchors.extend(container.find_all("a", href=True))
    for anchor in anchors:
        text = clean_text(anchor)
        if text:
            return text, anchor["href"]
    return "", None
