"""
Markup extraction.

This package turns listing and article pages into ArticleRecord values
using selector-fallback cascades.
"""

from .article import extract_article
from .listing import extract_listing

__all__ = [
    "extract_article",
    "extract_listing",
]
