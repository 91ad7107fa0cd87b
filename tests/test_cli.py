"""Tests for the Typer command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from medium_feed.cli import app
from medium_feed.errors import PersistenceWarning
from medium_feed.logging_utils import get_logger


runner = CliRunner()


def test_summarize_content_prints_success_envelope(monkeypatch):
    monkeypatch.delenv("MEDIUM_FEED_FETCH_BACKEND", raising=False)

    result = runner.invoke(
        app,
        ["--no-cache", "summarize", "--content", "Tiny intro.\n\nMore text.", "--max-length", "100"],
    )

    assert result.exit_code == 0
    envelope = json.loads(result.stdout)
    assert envelope["ok"] is True
    assert envelope["result"]["summary"] == "Tiny intro."


def test_summarize_without_input_exits_with_error(monkeypatch):
    monkeypatch.delenv("MEDIUM_FEED_FETCH_BACKEND", raising=False)

    result = runner.invoke(app, ["--no-cache", "summarize"])

    assert result.exit_code == 1
    assert "InputError" in result.stdout


def test_max_length_bounds_are_enforced():
    result = runner.invoke(app, ["--no-cache", "summarize", "--content", "x", "--max-length", "10"])
    assert result.exit_code == 2


def test_cache_clear_empties_snapshot(monkeypatch, tmp_path):
    monkeypatch.setenv("MEDIUM_FEED_CACHE_DIR", str(tmp_path))
    (tmp_path / "cache.json").write_text(
        json.dumps({"k": {"data": 1, "timestamp": 0, "ttl": 10}}), encoding="utf-8"
    )

    result = runner.invoke(app, ["cache-clear"])

    assert result.exit_code == 0
    assert json.loads((tmp_path / "cache.json").read_text(encoding="utf-8")) == {}


def test_cache_clear_write_failure_is_logged(monkeypatch, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    log_dir = tmp_path / "logs"
    config = tmp_path / "config.yaml"
    config.write_text(
        f"logging:\n  console: false\n  file: true\n  dir: {log_dir}\n  filename: cli.jsonl\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("MEDIUM_FEED_CACHE_DIR", str(blocker))

    with pytest.warns(PersistenceWarning):
        result = runner.invoke(app, ["--config", str(config), "cache-clear"])

    for handler in get_logger().handlers:
        handler.close()
    get_logger().handlers = []

    assert result.exit_code == 0
    events = [json.loads(line) for line in (log_dir / "cli.jsonl").read_text(encoding="utf-8").splitlines()]
    assert any(event.get("event") == "cache_write_failed" for event in events)
