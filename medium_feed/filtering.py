from __future__ import annotations

from typing import Iterable

from .errors import InputError
from .types import ArticleRecord


def filter_by_tags(records: Iterable[ArticleRecord], tags: list[str]) -> list[ArticleRecord]:
    """Keep the records that match any of `tags`, preserving their order.

    Matching is case-insensitive substring matching: a requested tag matches
    when it contains or is contained in one of the record's tags, or occurs
    in its title or preview.

    Raises:
        InputError: If no non-blank tag is supplied
    """
    wanted = normalize_tags(tags)
    return [record for record in records if _matches(record, wanted)]


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Lower-case and trim requested tags, dropping blanks.

    Raises:
        InputError: If nothing is left
    """
    wanted = [tag.strip().lower() for tag in tags or [] if tag and tag.strip()]
    if not wanted:
        raise InputError("At least one tag is required")
    return wanted


def _matches(record: ArticleRecord, wanted: list[str]) -> bool:
    record_tags = [tag.lower() for tag in record.tags]
    title = record.title.lower()
    preview = record.preview.lower()
    for tag in wanted:
        if any(tag in rt or rt in tag for rt in record_tags if rt):
            return True
        if tag in title or tag in preview:
            return True
    return False
