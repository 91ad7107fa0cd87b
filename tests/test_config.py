from pathlib import Path

from medium_feed.config import (
    AppConfig,
    CacheConfig,
    FetchConfig,
    get_cache_path,
    get_fetch_backend,
    load_config,
)


def test_defaults_without_file():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.source.allowed_domains == ["medium.com"]
    assert cfg.cache.ttl_ms == 3_600_000
    assert cfg.summary.default_max_length == 500
    assert cfg.fetch.backend == "httpx"


def test_yaml_overrides_merge_into_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "fetch:\n"
        "  backend: browser\n"
        "  selector_timeout_ms: 2500\n"
        "cache:\n"
        "  ttl_ms: 60000\n"
        "summary:\n"
        "  default_max_length: 300\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.fetch.backend == "browser"
    assert cfg.fetch.selector_timeout_ms == 2500
    assert cfg.fetch.navigation_timeout_ms == 30000
    assert cfg.cache.ttl_ms == 60000
    assert cfg.cache.enabled is True
    assert cfg.summary.default_max_length == 300


def test_unknown_sections_and_keys_are_ignored(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("mystery: {a: 1}\ncache:\n  colour: blue\n  dir: /tmp/mf\n", encoding="utf-8")

    cfg = load_config(str(path))

    assert cfg.cache.dir == "/tmp/mf"
    assert not hasattr(cfg.cache, "colour")


def test_empty_yaml_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_cache_path_env_override(monkeypatch, tmp_path):
    monkeypatch.delenv("MEDIUM_FEED_CACHE_DIR", raising=False)
    assert get_cache_path(CacheConfig()) == Path(".cache") / "cache.json"

    monkeypatch.setenv("MEDIUM_FEED_CACHE_DIR", str(tmp_path))
    assert get_cache_path(CacheConfig(filename="store.json")) == tmp_path / "store.json"


def test_fetch_backend_env_override(monkeypatch):
    monkeypatch.delenv("MEDIUM_FEED_FETCH_BACKEND", raising=False)
    assert get_fetch_backend(FetchConfig(backend="browser")) == "browser"

    monkeypatch.setenv("MEDIUM_FEED_FETCH_BACKEND", "httpx")
    assert get_fetch_backend(FetchConfig(backend="browser")) == "httpx"
