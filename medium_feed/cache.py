"""
Persistent TTL cache for extracted results.

The whole store is one JSON snapshot file mapping keys to
{"data", "timestamp", "ttl"} entries (epoch milliseconds). The snapshot is
loaded lazily on first access and rewritten after every mutation. Expired
entries are evicted only when read.

Persistence is best-effort: a missing, unreadable or corrupt snapshot yields
an empty store, and a failed write leaves the in-memory store intact. Both
are reported as PersistenceWarning and logged, never raised.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
import tempfile
import time
from typing import Any, Callable
import warnings

from .errors import PersistenceWarning
from .logging_utils import log_event
from .types import CacheEntry


DEFAULT_TTL_MS = 3_600_000


def _now_ms() -> int:
    return int(time.time() * 1000)


class TTLCache:
    """Keyed store of JSON-compatible values with per-entry expiry.

    One instance is meant to live for the whole process and be shared by all
    pipeline calls. Concurrent callers on the same event loop wait for the
    single lazy load before touching the store, so a mutation is never lost
    to a load that finishes after it; mutations then apply in call order
    (last write wins).

    Attributes:
        path: Location of the JSON snapshot
        default_ttl_ms: TTL used when `set` is called without one
    """

    def __init__(
        self,
        path: Path,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] | None = None,
        logger: logging.Logger | None = None,
    ):
        self.path = Path(path)
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock or _now_ms
        self._logger = logger
        self._entries: dict[str, CacheEntry] = {}
        self._loaded = False
        self._load_lock = asyncio.Lock()
        self._save_lock = asyncio.Lock()

    async def get(self, key: str) -> Any | None:
        """Return the live value for `key`, or None.

        Reading an expired entry evicts it and persists the removal.
        """
        await self._ensure_loaded()
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_live(self._clock()):
            del self._entries[key]
            log_event(self._logger, "Cache entry expired", logging.DEBUG, event="cache_expired", key=key)
            await self._save()
            return None
        return entry.data

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        await self._ensure_loaded()
        self._entries[key] = CacheEntry(
            data=value,
            timestamp=self._clock(),
            ttl=self.default_ttl_ms if ttl is None else ttl,
        )
        await self._save()

    async def has(self, key: str) -> bool:
        """Return whether `key` is present in the store.

        Presence does not imply liveness: an expired entry counts until a
        `get` evicts it.
        """
        await self._ensure_loaded()
        return key in self._entries

    async def delete(self, key: str) -> bool:
        await self._ensure_loaded()
        if key not in self._entries:
            return False
        del self._entries[key]
        await self._save()
        return True

    async def clear(self) -> None:
        async with self._load_lock:
            self._entries = {}
            self._loaded = True
        await self._save()

    async def size(self) -> int:
        await self._ensure_loaded()
        return len(self._entries)

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        async with self._load_lock:
            if self._loaded:
                return
            self._entries = await asyncio.to_thread(self._read_snapshot)
            self._loaded = True

    def _read_snapshot(self) -> dict[str, CacheEntry]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
            entries = {}
            for key, value in raw.items():
                try:
                    entries[key] = CacheEntry.from_dict(value)
                except (KeyError, TypeError, ValueError):
                    log_event(
                        self._logger,
                        "Skipping malformed cache entry",
                        logging.WARNING,
                        event="cache_entry_malformed",
                        key=key,
                    )
            return entries
        except (OSError, ValueError) as exc:
            self._warn("Cache snapshot unreadable; starting empty", "cache_load_failed", exc)
            return {}

    async def _save(self) -> None:
        # One write at a time; the snapshot is taken inside the lock
        async with self._save_lock:
            snapshot = {key: entry.to_dict() for key, entry in self._entries.items()}
            try:
                await asyncio.to_thread(self._write_snapshot, snapshot)
            except (OSError, TypeError, ValueError) as exc:
                self._warn("Cache snapshot write failed", "cache_write_failed", exc)

    def _write_snapshot(self, snapshot: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling temp file and swap it in so readers never see a partial snapshot
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(snapshot, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _warn(self, message: str, event: str, exc: Exception) -> None:
        error = f"{type(exc).__name__}: {exc}"
        log_event(self._logger, message, logging.WARNING, event=event, path=str(self.path), error=error)
        warnings.warn(f"{message} ({self.path}): {error}", PersistenceWarning, stacklevel=3)
