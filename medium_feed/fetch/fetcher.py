"""
Page fetching over plain HTTP.

Fetchers never raise for remote failures. They return a FetchResult
outcome, which the pipeline turns into NetworkError or FetchError via
`FetchResult.raise_for_error`. Every strategy implements PageFetcher, so
the pipeline does not care which one is active.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

import httpx

from ..config import FetchConfig
from ..errors import FetchError, NetworkError
from ..logging_utils import log_event


ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"


@dataclass
class FetchResult:
    """Result of a page fetch.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The page markup, or None on error
        error: Error message if fetch failed, None on success
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> str:
        """Return the markup, or raise the matching pipeline error.

        Raises:
            FetchError: The server answered with a non-success status
            NetworkError: The request failed before a response arrived
        """
        if self.status_code is not None and not 200 <= self.status_code < 300:
            raise FetchError(self.status_code, self.url)
        if self.error is not None:
            raise NetworkError(f"Failed to fetch {self.url}: {self.error}", self.url)
        return self.text or ""


class PageFetcher(ABC):
    """Strategy interface for retrieving page markup."""

    name: str = "base"

    @abstractmethod
    async def fetch(
        self,
        url: str,
        wait_selector: str | None = None,
        scroll: bool = False,
    ) -> FetchResult:
        """Retrieve the markup for `url`.

        Args:
            url: Absolute URL to fetch
            wait_selector: Selector whose appearance signals rendered content;
                strategies that do not render may ignore it
            scroll: Scroll to the bottom to trigger lazy-loaded content;
                strategies that do not render may ignore it
        """
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any resources held by the strategy."""
        return None


class HttpxFetcher(PageFetcher):
    """Single request/response fetch with browser-like headers.

    Returns whatever markup the server emits; embedded scripts are not run.
    """

    name = "httpx"

    def __init__(
        self,
        cfg: FetchConfig,
        logger: logging.Logger | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.cfg = cfg
        self._logger = logger
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.cfg.timeout_seconds,
                headers={
                    "User-Agent": self.cfg.user_agent,
                    "Accept": ACCEPT_HEADER,
                    "Accept-Language": self.cfg.accept_language,
                },
                follow_redirects=True,
                trust_env=self.cfg.trust_env,
                transport=self._transport,
            )
        return self._client

    async def fetch(
        self,
        url: str,
        wait_selector: str | None = None,
        scroll: bool = False,
    ) -> FetchResult:
        try:
            resp = await self._get_client().get(url)
        except httpx.HTTPError as exc:
            log_event(
                self._logger,
                "HTTP request failed",
                logging.DEBUG,
                event="http_error",
                url=url,
                error=f"{type(exc).__name__}: {exc}",
            )
            return FetchResult(url=url, status_code=None, text=None, error=f"{type(exc).__name__}: {exc}")

        if not resp.is_success:
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=None,
                error=f"HTTP {resp.status_code}",
            )
        return FetchResult(url=url, status_code=resp.status_code, text=resp.text, error=None)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
