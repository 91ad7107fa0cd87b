"""
Pipeline orchestration for the Medium feed service.

This module coordinates the acquisition workflow for every call:
1. Look the result up in the TTL cache
2. On a miss, fetch the page with the configured fetcher
3. Extract records from the markup
4. Write the result back to the cache

Tag filtering and summarization run on already-extracted records and text.
One MediumPipeline owns the cache and the fetcher (and with it the browser
session) for the lifetime of the process.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from urllib.parse import quote_plus, urlparse

from .cache import TTLCache
from .config import AppConfig, get_cache_path
from .errors import InputError
from .extract import extract_article, extract_listing
from .fetch import FetchResult, PageFetcher, create_fetcher
from .filtering import filter_by_tags, normalize_tags
from .logging_utils import get_logger, log_event
from .summarizer import summarize_text
from .types import ArticleRecord, SummaryResult


LISTING_WAIT_SELECTOR = 'article, [data-testid="post-preview"]'
ARTICLE_WAIT_SELECTOR = 'article, [data-testid="post-content"]'


def search_cache_key(query: str, limit: int) -> str:
    return f"search:{query}:{limit}"


def article_cache_key(url: str) -> str:
    return f"article:{url}"


def trending_cache_key(limit: int) -> str:
    return f"trending:ai:{limit}"


def _categorize_error(error: str | None, status_code: int | None) -> str:
    """Categorize fetch errors for better logging.

    Args:
        error: Error message from fetch attempt
        status_code: HTTP status code if available

    Returns:
        Error category: "http_status", "timeout", "blocked", "network_failed", "unknown"
    """
    if status_code in (401, 403, 429):
        return "blocked"
    if status_code is not None:
        return "http_status"
    if not error:
        return "unknown"
    error_lower = error.lower()
    if "timeout" in error_lower or "timed out" in error_lower:
        return "timeout"
    if "connect" in error_lower or "connection" in error_lower:
        return "network_failed"
    return "unknown"


@dataclass
class PipelineStats:
    """Counters collected across pipeline calls.

    Attributes:
        cache_hits: Calls served from the cache
        cache_misses: Calls that had to fetch
        fetch_success: Successful page fetches
        fetch_failed: Failed page fetches
    """
    cache_hits: int = 0
    cache_misses: int = 0
    fetch_success: int = 0
    fetch_failed: int = 0


class MediumPipeline:
    """Entry point for search, trending, article extraction, filtering and summaries.

    Use as an async context manager so the fetcher (and any browser it
    started) is shut down when the caller is done:

        async with MediumPipeline.from_config(cfg) as pipeline:
            articles = await pipeline.search("rag agents", 5)
    """

    def __init__(
        self,
        cfg: AppConfig,
        fetcher: PageFetcher,
        cache: TTLCache | None = None,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg
        self.fetcher = fetcher
        self.cache = cache
        self.logger = logger or get_logger()
        self.stats = PipelineStats()

    @classmethod
    def from_config(cls, cfg: AppConfig, logger: logging.Logger | None = None) -> "MediumPipeline":
        logger = logger or get_logger()
        cache = None
        if cfg.cache.enabled:
            cache = TTLCache(get_cache_path(cfg.cache), default_ttl_ms=cfg.cache.ttl_ms, logger=logger)
        return cls(cfg, create_fetcher(cfg.fetch, logger), cache, logger)

    async def __aenter__(self) -> "MediumPipeline":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.fetcher.aclose()

    def search_url(self, query: str) -> str:
        return f"{self.cfg.source.base_url.rstrip('/')}/search?q={quote_plus(query)}"

    async def search(self, query: str, limit: int = 10) -> list[ArticleRecord]:
        """Search the source and return up to `limit` records in page order."""
        return await self._listing(search_cache_key(query, limit), self.search_url(query), limit)

    async def trending(self, limit: int = 10) -> list[ArticleRecord]:
        """Return up to `limit` records for the fixed trending topic."""
        url = self.search_url(self.cfg.source.trending_query)
        return await self._listing(trending_cache_key(limit), url, limit)

    async def extract_article(self, url: str) -> ArticleRecord:
        """Fetch and extract one full article.

        Raises:
            InputError: If the URL is not on an allowed domain
            NetworkError: If the page could not be reached
            FetchError: If the source answered with a non-success status
        """
        self.validate_article_url(url)
        key = article_cache_key(url)
        cached = await self._cache_get(key)
        if cached is not None:
            return ArticleRecord.from_dict(cached)

        markup = await self._fetch_markup(url, wait_selector=ARTICLE_WAIT_SELECTOR)
        article = extract_article(markup, url, base_url=self.cfg.source.base_url)
        await self._cache_set(key, article.to_dict())
        return article

    async def filter_by_tags(
        self,
        tags: list[str],
        query: str | None = None,
        limit: int = 10,
    ) -> list[ArticleRecord]:
        """Search with `query` (or the seed query) and keep records matching `tags`.

        Twice `limit` records are searched so filtering still has enough
        candidates; the result is cut back to `limit`.
        """
        normalize_tags(tags)
        seed = query or self.cfg.source.filter_seed_query
        candidates = await self.search(seed, limit * 2)
        return filter_by_tags(candidates, tags)[:limit]

    async def summarize(
        self,
        url: str | None = None,
        content: str | None = None,
        max_length: int | None = None,
    ) -> SummaryResult:
        """Summarize an article URL or raw content.

        When a URL is given the article is extracted first and its body (or
        preview when the body is empty) is summarized; `content` is ignored.

        Raises:
            InputError: If neither a URL nor content is supplied, or the URL
                is not on an allowed domain
        """
        if max_length is None:
            max_length = self.cfg.summary.default_max_length

        article = None
        if url:
            article = await self.extract_article(url)
            content = article.content or article.preview

        if not content or not content.strip():
            raise InputError("Either URL or content must be provided")

        summary = summarize_text(content, max_length)
        return SummaryResult(
            summary=summary,
            original_length=len(content),
            summary_length=len(summary),
            article=article,
        )

    def validate_article_url(self, url: str) -> None:
        parsed = urlparse(url or "")
        host = (parsed.hostname or "").lower()
        allowed = [domain.lower() for domain in self.cfg.source.allowed_domains]
        on_allowed_domain = any(host == domain or host.endswith("." + domain) for domain in allowed)
        if parsed.scheme not in ("http", "https") or not on_allowed_domain:
            raise InputError(f"URL must be from {', '.join(allowed)}")

    async def _listing(self, key: str, url: str, limit: int) -> list[ArticleRecord]:
        cached = await self._cache_get(key)
        if cached is not None:
            return [ArticleRecord.from_dict(item) for item in cached]

        markup = await self._fetch_markup(url, wait_selector=LISTING_WAIT_SELECTOR, scroll=True)
        records = extract_listing(markup, limit, base_url=self.cfg.source.base_url)
        log_event(self.logger, "Listing extracted", event="listing_extracted", url=url, count=len(records))
        await self._cache_set(key, [record.to_dict() for record in records])
        return records

    async def _fetch_markup(
        self,
        url: str,
        wait_selector: str | None = None,
        scroll: bool = False,
    ) -> str:
        log_event(
            self.logger,
            "Fetch start",
            logging.DEBUG,
            event="fetch_start",
            url=url,
            backend=self.fetcher.name,
        )
        result: FetchResult = await self.fetcher.fetch(url, wait_selector=wait_selector, scroll=scroll)
        if result.ok:
            self.stats.fetch_success += 1
        else:
            self.stats.fetch_failed += 1
            log_event(
                self.logger,
                "Fetch failed",
                logging.WARNING,
                event="fetch_failed",
                url=url,
                backend=self.fetcher.name,
                error=result.error,
                status_code=result.status_code,
                error_category=_categorize_error(result.error, result.status_code),
            )
        return result.raise_for_error()

    async def _cache_get(self, key: str):
        if self.cache is None:
            return None
        value = await self.cache.get(key)
        if value is None:
            self.stats.cache_misses += 1
            log_event(self.logger, "Cache miss", logging.DEBUG, event="cache_miss", key=key)
            return None
        self.stats.cache_hits += 1
        log_event(self.logger, "Cache hit", logging.DEBUG, event="cache_hit", key=key)
        return value

    async def _cache_set(self, key: str, value) -> None:
        if self.cache is None:
            return
        await self.cache.set(key, value)
