"""Fetcher factory and registry for swappable acquisition strategies."""

from __future__ import annotations

import logging

from ..config import FetchConfig, get_fetch_backend
from .browser import BrowserFetcher
from .fetcher import HttpxFetcher, PageFetcher


FetcherBuilder = type[PageFetcher]

_FETCHER_REGISTRY: dict[str, FetcherBuilder] = {
    "httpx": HttpxFetcher,
    "http": HttpxFetcher,
    "browser": BrowserFetcher,
    "playwright": BrowserFetcher,
}


def available_fetchers() -> list[str]:
    """Return the set of registered backend names."""
    return sorted(_FETCHER_REGISTRY.keys())


def create_fetcher(cfg: FetchConfig, logger: logging.Logger | None = None) -> PageFetcher:
    """Build a fetcher instance from runtime config."""
    name = get_fetch_backend(cfg).lower().strip()
    builder = _FETCHER_REGISTRY.get(name)
    if builder is None:
        supported = ", ".join(available_fetchers())
        raise ValueError(f"Unsupported fetch backend: {name}. Supported: {supported}")
    return builder(cfg, logger)
