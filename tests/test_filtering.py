"""Tests for tag filtering."""

import pytest

from medium_feed.errors import InputError
from medium_feed.filtering import filter_by_tags
from medium_feed.types import ArticleRecord


def _records():
    return [
        ArticleRecord(
            title="Building RAG pipelines",
            url="https://medium.com/p/1",
            tags=["Machine Learning"],
        ),
        ArticleRecord(
            title="Sourdough at home",
            url="https://medium.com/p/2",
            tags=["Food"],
            preview="A weekend recipe.",
        ),
        ArticleRecord(
            title="Intro to tool servers",
            url="https://medium.com/p/3",
            tags=["MCP"],
        ),
        ArticleRecord(
            title="Notes",
            url="https://medium.com/p/4",
            preview="How autonomous Agents plan their work.",
        ),
    ]


def test_matches_record_tag_case_insensitively():
    result = filter_by_tags(_records(), ["mcp"])
    assert [r.url for r in result] == ["https://medium.com/p/3"]


def test_requested_tag_contained_in_record_tag():
    result = filter_by_tags(_records(), ["learning"])
    assert [r.url for r in result] == ["https://medium.com/p/1"]


def test_record_tag_contained_in_requested_tag():
    result = filter_by_tags(_records(), ["Machine Learning Ops"])
    assert [r.url for r in result] == ["https://medium.com/p/1"]


def test_matches_title_and_preview():
    assert [r.url for r in filter_by_tags(_records(), ["RAG"])] == ["https://medium.com/p/1"]
    assert [r.url for r in filter_by_tags(_records(), ["agents"])] == ["https://medium.com/p/4"]


def test_result_preserves_original_order():
    records = _records()
    result = filter_by_tags(records, ["agents", "mcp", "rag"])

    assert [r.url for r in result] == [
        "https://medium.com/p/1",
        "https://medium.com/p/3",
        "https://medium.com/p/4",
    ]
    positions = [records.index(r) for r in result]
    assert positions == sorted(positions)


def test_no_match_returns_empty_list():
    assert filter_by_tags(_records(), ["quantum"]) == []


def test_empty_tags_raise_input_error():
    with pytest.raises(InputError):
        filter_by_tags(_records(), [])
    with pytest.raises(InputError):
        filter_by_tags(_records(), ["  ", ""])
