"""
Medium Feed - article search, extraction and summarization for tool callers.

This package fetches Medium listing and article pages, extracts structured
article records with selector-fallback heuristics, filters them by tags,
caches results in a persistent TTL cache, and builds extractive summaries.

Main entry points are the MediumPipeline service object and the CLI via the
`medium-feed` command.

Example:
    $ medium-feed search "rag agents" --limit 5
"""

__all__ = [
    "__version__",
    "ArticleRecord",
    "MediumPipeline",
    "SummaryResult",
    "TTLCache",
    "call_tool",
    "filter_by_tags",
    "summarize_text",
]
__version__ = "0.1.0"

from .cache import TTLCache
from .filtering import filter_by_tags
from .runner import MediumPipeline
from .summarizer import summarize_text
from .tools import call_tool
from .types import ArticleRecord, SummaryResult
