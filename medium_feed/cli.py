"""
Command-line interface for the Medium feed pipeline.

Uses Typer to expose each pipeline call as a command. Results are printed
as the same JSON envelope tool callers receive. Supports loading .env files
for configuration overrides.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console

from .cache import TTLCache
from .config import AppConfig, get_cache_path, load_config
from .logging_utils import setup_logging
from .runner import MediumPipeline
from .tools import (
    EXTRACT_TOOL,
    FILTER_TOOL,
    SEARCH_TOOL,
    SUMMARIZE_TOOL,
    TRENDING_TOOL,
    call_tool,
)

app = typer.Typer(add_completion=False, help="Search, extract and summarize Medium articles.")
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    backend: str | None = typer.Option(
        None, "--backend", help="Fetch backend: httpx or browser."
    ),
    cache: bool = typer.Option(True, "--cache/--no-cache", help="Enable or disable the result cache."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Load configuration shared by all commands.

    Args:
        config: Optional path to YAML config file
        backend: Override the fetch backend
        cache: Enable/disable the persistent cache
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    # Load environment variables from .env if available
    load_dotenv()

    cfg = load_config(str(config) if config else None)

    # Override with CLI options
    if backend:
        cfg.fetch.backend = backend
    if not cache:
        cfg.cache.enabled = False
    if log_level:
        cfg.logging.level = log_level

    ctx.obj = cfg


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help='Search query (e.g. "MCP agents").'),
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=50),
):
    """Search Medium articles by keywords."""
    _run(ctx.obj, SEARCH_TOOL, {"query": query, "limit": limit})


@app.command()
def trending(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=50),
):
    """List trending AI articles."""
    _run(ctx.obj, TRENDING_TOOL, {"limit": limit})


@app.command()
def extract(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="URL of the Medium article."),
):
    """Extract the full content of one article."""
    _run(ctx.obj, EXTRACT_TOOL, {"url": url})


@app.command("filter")
def filter_tags(
    ctx: typer.Context,
    tags: list[str] = typer.Option(..., "--tag", "-t", help="Tag to filter by; repeatable."),
    query: str | None = typer.Option(None, "--query", "-q", help="Query used to seed the search."),
    limit: int = typer.Option(10, "--limit", "-n", min=1, max=50),
):
    """Search articles and keep those matching any of the tags."""
    _run(ctx.obj, FILTER_TOOL, {"tags": tags, "query": query, "limit": limit})


@app.command()
def summarize(
    ctx: typer.Context,
    url: str | None = typer.Option(None, "--url", help="Article URL to summarize."),
    content: str | None = typer.Option(None, "--content", help="Raw text to summarize."),
    max_length: int = typer.Option(500, "--max-length", min=50, max=5000),
):
    """Summarize an article URL or raw text."""
    _run(ctx.obj, SUMMARIZE_TOOL, {"url": url, "content": content, "maxLength": max_length})


@app.command("cache-clear")
def cache_clear(ctx: typer.Context):
    """Remove every entry from the persistent cache."""
    cfg: AppConfig = ctx.obj
    logger = setup_logging(cfg.logging)
    path = get_cache_path(cfg.cache)
    cache = TTLCache(path, default_ttl_ms=cfg.cache.ttl_ms, logger=logger)
    asyncio.run(cache.clear())
    console.print(f"Cache cleared: {path}")


def _run(cfg: AppConfig, tool: str, arguments: dict[str, Any]) -> None:
    envelope = asyncio.run(_call(cfg, tool, arguments))
    console.print_json(json.dumps(envelope, ensure_ascii=False))
    if not envelope["ok"]:
        raise typer.Exit(code=1)


async def _call(cfg: AppConfig, tool: str, arguments: dict[str, Any]) -> dict[str, Any]:
    logger = setup_logging(cfg.logging)
    async with MediumPipeline.from_config(cfg, logger) as pipeline:
        return await call_tool(pipeline, tool, arguments)


if __name__ == "__main__":
    app()
