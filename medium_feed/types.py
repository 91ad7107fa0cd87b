"""
Core data types for the Medium feed pipeline.

This module defines the fundamental data structures used throughout the pipeline:
- ArticleRecord: One article as extracted from a listing or article page
- CacheEntry: A cached value with its capture time and time-to-live
- SummaryResult: Output of the extractive summarizer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ArticleRecord:
    """Represents a single Medium article.

    Listing extraction fills the summary fields only; article extraction
    additionally populates `content`.

    Attributes:
        title: The article headline ("Untitled" when none was found)
        url: Absolute URL of the article
        author: Author display name ("Unknown" when none was found)
        tags: Tag labels in document order (duplicates allowed)
        preview: Short excerpt, empty string when none was found
        author_url: Optional absolute URL of the author's profile
        published_date: Optional publication date as found in the markup
        reading_time: Optional reading time label (e.g. "5 min read")
        claps: Optional clap count
        content: Full body text, paragraphs joined with a blank line
    """
    title: str
    url: str
    author: str = "Unknown"
    tags: list[str] = field(default_factory=list)
    preview: str = ""
    author_url: str | None = None
    published_date: str | None = None
    reading_time: str | None = None
    claps: int | None = None
    content: str | None = None

    def is_valid(self) -> bool:
        return bool(self.title) and bool(self.url)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape exposed to tool callers.

        Optional fields are omitted when unset.
        """
        payload: dict[str, Any] = {
            "title": self.title,
            "url": self.url,
            "author": self.author,
        }
        optional = {
            "authorUrl": self.author_url,
            "publishedDate": self.published_date,
            "readingTime": self.reading_time,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        payload["tags"] = list(self.tags)
        payload["preview"] = self.preview
        if self.claps is not None:
            payload["claps"] = self.claps
        if self.content is not None:
            payload["content"] = self.content
        return payload

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArticleRecord":
        claps = data.get("claps")
        return cls(
            title=data.get("title", ""),
            url=data.get("url", ""),
            author=data.get("author") or "Unknown",
            tags=list(data.get("tags") or []),
            preview=data.get("preview") or "",
            author_url=data.get("authorUrl"),
            published_date=data.get("publishedDate"),
            reading_time=data.get("readingTime"),
            claps=int(claps) if claps is not None else None,
            content=data.get("content"),
        )


@dataclass
class CacheEntry:
    """A cached value with expiry metadata.

    Attributes:
        data: The cached JSON-compatible value
        timestamp: Capture time in epoch milliseconds
        ttl: Milliseconds until the entry expires
    """
    data: Any
    timestamp: int
    ttl: int

    def is_live(self, now_ms: int) -> bool:
        return now_ms - self.timestamp <= self.ttl

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "timestamp": self.timestamp, "ttl": self.ttl}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "CacheEntry":
        return cls(data=raw["data"], timestamp=int(raw["timestamp"]), ttl=int(raw["ttl"]))


@dataclass
class SummaryResult:
    """Output of the summarize operation.

    Attributes:
        summary: The extractive summary text
        original_length: Character length of the summarized source text
        summary_length: Character length of `summary`
        article: The extracted article when the summary was built from a URL
    """
    summary: str
    original_length: int
    summary_length: int
    article: ArticleRecord | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "summary": self.summary,
            "originalLength": self.original_length,
            "summaryLength": self.summary_length,
        }
        if self.article is not None:
            payload["article"] = self.article.to_dict()
        return payload
