"""
Tool-call adapter for protocol-facing callers.

Maps tool names and JSON arguments onto MediumPipeline calls and wraps
every outcome in an envelope, so a caller always gets a well-formed reply:

    {"ok": true, "result": {...}}
    {"ok": false, "error": {"type": "FetchError", "message": "...", "status": 404}}
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from .errors import InputError, MediumFeedError
from .logging_utils import log_event
from .runner import MediumPipeline


SEARCH_TOOL = "search_medium_articles"
TRENDING_TOOL = "get_trending_ai_articles"
EXTRACT_TOOL = "extract_medium_article"
FILTER_TOOL = "filter_medium_articles_by_tags"
SUMMARIZE_TOOL = "summarize_medium_article"

DEFAULT_LIMIT = 10

ToolHandler = Callable[[MediumPipeline, dict[str, Any]], Awaitable[dict[str, Any]]]


def _int_arg(args: dict[str, Any], name: str, default: int | None) -> int | None:
    """Read a positive integer argument, accepting numeric strings."""
    value = args.get(name)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InputError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InputError(f"{name} must be an integer, got {value!r}") from None
    if number < 1:
        raise InputError(f"{name} must be positive, got {number}")
    return number


async def _search(pipeline: MediumPipeline, args: dict[str, Any]) -> dict[str, Any]:
    query = args.get("query")
    if not query:
        raise InputError("query is required")
    articles = await pipeline.search(query, _int_arg(args, "limit", DEFAULT_LIMIT))
    return {"query": query, "total": len(articles), "articles": [a.to_dict() for a in articles]}


async def _trending(pipeline: MediumPipeline, args: dict[str, Any]) -> dict[str, Any]:
    articles = await pipeline.trending(_int_arg(args, "limit", DEFAULT_LIMIT))
    return {"total": len(articles), "articles": [a.to_dict() for a in articles]}


async def _extract(pipeline: MediumPipeline, args: dict[str, Any]) -> dict[str, Any]:
    url = args.get("url")
    if not url:
        raise InputError("url is required")
    article = await pipeline.extract_article(url)
    return article.to_dict()


async def _filter(pipeline: MediumPipeline, args: dict[str, Any]) -> dict[str, Any]:
    tags = args.get("tags") or []
    if isinstance(tags, str):
        tags = [tags]
    articles = await pipeline.filter_by_tags(
        tags,
        query=args.get("query"),
        limit=_int_arg(args, "limit", DEFAULT_LIMIT),
    )
    return {"tags": tags, "total": len(articles), "articles": [a.to_dict() for a in articles]}


async def _summarize(pipeline: MediumPipeline, args: dict[str, Any]) -> dict[str, Any]:
    result = await pipeline.summarize(
        url=args.get("url"),
        content=args.get("content"),
        max_length=_int_arg(args, "maxLength", None),
    )
    return result.to_dict()


_TOOL_REGISTRY: dict[str, ToolHandler] = {
    SEARCH_TOOL: _search,
    TRENDING_TOOL: _trending,
    EXTRACT_TOOL: _extract,
    FILTER_TOOL: _filter,
    SUMMARIZE_TOOL: _summarize,
}

TOOL_NAMES = tuple(_TOOL_REGISTRY)


async def call_tool(
    pipeline: MediumPipeline,
    name: str,
    arguments: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Run tool `name` and return its response envelope.

    Pipeline errors become an error payload instead of propagating; any
    other exception is logged and reported as an InternalError payload.
    """
    handler = _TOOL_REGISTRY.get(name)
    try:
        if handler is None:
            raise InputError(f"Unknown tool: {name}. Available: {', '.join(TOOL_NAMES)}")
        result = await handler(pipeline, dict(arguments or {}))
    except MediumFeedError as exc:
        log_event(
            pipeline.logger,
            "Tool call failed",
            logging.WARNING,
            event="tool_failed",
            tool=name,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return {"ok": False, "error": exc.to_payload()}
    except Exception as exc:  # noqa: BLE001
        log_event(
            pipeline.logger,
            "Tool call crashed",
            logging.ERROR,
            event="tool_crashed",
            tool=name,
            error=f"{type(exc).__name__}: {exc}",
            error_type=type(exc).__name__,
        )
        return {"ok": False, "error": {"type": "InternalError", "message": f"{type(exc).__name__}: {exc}"}}
    return {"ok": True, "result": result}
