"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SourceConfig: Source site origin, allowed domains and seed queries
- FetchConfig: Page fetching settings for both backends
- CacheConfig: Snapshot location and default TTL
- SummaryConfig: Summarizer defaults
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Any

import yaml


@dataclass
class SourceConfig:
    """Configuration for the article source.

    Attributes:
        base_url: Origin used to build search URLs and resolve relative links
        allowed_domains: Host suffixes accepted by article extraction
        trending_query: Fixed topic searched by the trending call
        filter_seed_query: Query used by tag filtering when none is given
    """

    base_url: str = "https://medium.com"
    allowed_domains: list[str] = field(default_factory=lambda: ["medium.com"])
    trending_query: str = "artificial intelligence"
    filter_seed_query: str = "AI artificial intelligence"


@dataclass
class FetchConfig:
    """Configuration for page fetching.

    Attributes:
        backend: "httpx" for plain HTTP, "browser" for headless rendering
        timeout_seconds: HTTP request timeout for the httpx backend
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        accept_language: Accept-Language header value
        navigation_timeout_ms: Browser navigation timeout
        selector_timeout_ms: How long the browser waits for content to appear
        scroll_pause_ms: Pause after scrolling listing pages for lazy content
        headless: Run the browser without a window
    """

    backend: str = "httpx"
    timeout_seconds: float = 20.0
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-US,en;q=0.5"
    navigation_timeout_ms: int = 30000
    selector_timeout_ms: int = 10000
    scroll_pause_ms: int = 1000
    headless: bool = True


@dataclass
class CacheConfig:
    """Configuration for the persistent result cache.

    Attributes:
        enabled: Whether pipeline calls read and write the cache
        dir: Directory holding the snapshot file
        filename: Snapshot file name
        ttl_ms: Default time-to-live for new entries in milliseconds
    """

    enabled: bool = True
    dir: str = ".cache"
    filename: str = "cache.json"
    ttl_ms: int = 3_600_000


@dataclass
class SummaryConfig:
    """Configuration for the extractive summarizer.

    Attributes:
        default_max_length: Summary length cap used when the caller gives none
    """

    default_max_length: int = 500


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        dir: Directory for the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "medium_feed.jsonl"
    dir: str = "logs"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Unknown sections and unknown keys inside a section are ignored.
    """
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "source": {
            "base_url": cfg.source.base_url,
            "allowed_domains": list(cfg.source.allowed_domains),
            "trending_query": cfg.source.trending_query,
            "filter_seed_query": cfg.source.filter_seed_query,
        },
        "fetch": {
            "backend": cfg.fetch.backend,
            "timeout_seconds": cfg.fetch.timeout_seconds,
            "trust_env": cfg.fetch.trust_env,
            "user_agent": cfg.fetch.user_agent,
            "accept_language": cfg.fetch.accept_language,
            "navigation_timeout_ms": cfg.fetch.navigation_timeout_ms,
            "selector_timeout_ms": cfg.fetch.selector_timeout_ms,
            "scroll_pause_ms": cfg.fetch.scroll_pause_ms,
            "headless": cfg.fetch.headless,
        },
        "cache": {
            "enabled": cfg.cache.enabled,
            "dir": cfg.cache.dir,
            "filename": cfg.cache.filename,
            "ttl_ms": cfg.cache.ttl_ms,
        },
        "summary": {
            "default_max_length": cfg.summary.default_max_length,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "dir": cfg.logging.dir,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        source=SourceConfig(**data["source"]),
        fetch=FetchConfig(**data["fetch"]),
        cache=CacheConfig(**data["cache"]),
        summary=SummaryConfig(**data["summary"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_cache_path(cfg: CacheConfig) -> Path:
    """Get the snapshot path, honouring MEDIUM_FEED_CACHE_DIR."""
    cache_dir = os.getenv("MEDIUM_FEED_CACHE_DIR") or cfg.dir
    return Path(cache_dir) / cfg.filename


def get_fetch_backend(cfg: FetchConfig) -> str:
    """Get the fetch backend from the environment or inline config."""
    return os.getenv("MEDIUM_FEED_FETCH_BACKEND") or cfg.backend
