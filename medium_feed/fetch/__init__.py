"""
Page acquisition.

This package provides the interchangeable fetch strategies (plain HTTP and
headless browser) behind the PageFetcher interface.
"""

from .factory import available_fetchers, create_fetcher
from .fetcher import FetchResult, HttpxFetcher, PageFetcher

__all__ = [
    "available_fetchers",
    "create_fetcher",
    "FetchResult",
    "HttpxFetcher",
    "PageFetcher",
]
