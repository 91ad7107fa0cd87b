"""
Page fetching through a headless Chromium session (Crawl4AI).

Used when listing pages only show their content after client-side
rendering. The crawler (and its browser) is started on first use and shared
by all fetches until `aclose()`; Crawl4AI opens and closes a page per run.
"""

from __future__ import annotations

import asyncio
import logging

from crawl4ai import AsyncWebCrawler, BrowserConfig, CacheMode, CrawlerRunConfig

from ..config import FetchConfig
from ..logging_utils import log_event
from .fetcher import FetchResult, PageFetcher


LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# Crawl4AI reports an unmet wait_for condition with this prefix
_WAIT_FAILED_MARKER = "wait condition failed"


class BrowserFetcher(PageFetcher):
    """Renders pages in a reusable headless browser before serializing the DOM."""

    name = "browser"

    def __init__(self, cfg: FetchConfig, logger: logging.Logger | None = None):
        self.cfg = cfg
        self._logger = logger
        self._crawler: AsyncWebCrawler | None = None
        self._lock = asyncio.Lock()

    async def _get_crawler(self) -> AsyncWebCrawler:
        async with self._lock:
            if self._crawler is None:
                crawler = AsyncWebCrawler(
                    config=BrowserConfig(
                        browser_type="chromium",
                        headless=self.cfg.headless,
                        user_agent=self.cfg.user_agent,
                        headers={"Accept-Language": self.cfg.accept_language},
                        extra_args=LAUNCH_ARGS,
                        verbose=False,
                    )
                )
                await crawler.start()
                self._crawler = crawler
                log_event(self._logger, "Browser started", event="browser_started")
            return self._crawler

    def _run_config(self, wait_selector: str | None, scroll: bool) -> CrawlerRunConfig:
        return CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            wait_until="networkidle",
            page_timeout=self.cfg.navigation_timeout_ms,
            wait_for=f"css:{wait_selector}" if wait_selector else None,
            wait_for_timeout=self.cfg.selector_timeout_ms,
            scan_full_page=scroll,
            scroll_delay=self.cfg.scroll_pause_ms / 1000,
            verbose=False,
        )

    async def fetch(
        self,
        url: str,
        wait_selector: str | None = None,
        scroll: bool = False,
    ) -> FetchResult:
        try:
            crawler = await self._get_crawler()
            result = await crawler.arun(url=url, config=self._run_config(wait_selector, scroll))
            if wait_selector and _wait_failed(result):
                log_event(
                    self._logger,
                    "Content selector did not appear; using current DOM",
                    logging.DEBUG,
                    event="selector_timeout",
                    url=url,
                    selector=wait_selector,
                )
                result = await crawler.arun(url=url, config=self._run_config(None, scroll))
        except Exception as exc:  # noqa: BLE001
            return FetchResult(url=url, status_code=None, text=None, error=f"BrowserError: {type(exc).__name__}: {exc}")

        status = getattr(result, "status_code", None)
        if status is not None and not 200 <= status < 300:
            return FetchResult(url=url, status_code=status, text=None, error=f"HTTP {status}")
        if not getattr(result, "success", False):
            error_message = getattr(result, "error_message", None) or "Crawl failed"
            return FetchResult(url=url, status_code=None, text=None, error=f"Crawl4AIError: {error_message}")
        return FetchResult(url=url, status_code=status, text=result.html or "", error=None)

    async def aclose(self) -> None:
        async with self._lock:
            if self._crawler is not None:
                await self._crawler.close()
                self._crawler = None
                log_event(self._logger, "Browser closed", event="browser_closed")


def _wait_failed(result) -> bool:
    if getattr(result, "success", False):
        return False
    message = (getattr(result, "error_message", None) or "").lower()
    return _WAIT_FAILED_MARKER in message
