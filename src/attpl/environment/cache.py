"""Source caches for template text.

A source cache maps a resolved template path to its text together with the
time it was stored. Entries older than the configured maximum age read as a
miss; nothing is evicted in the background.

Caching is a performance optimization, never a correctness dependency: a
backing store that cannot be read or written degrades to always-miss and
logs a warning instead of raising.

Built-in caches:
- `FileSourceCache`: one ``<sha256>.cache`` file per entry (default: the
  system temp directory), age taken from the file modification time
- `MemorySourceCache`: process-local dictionary

Thread-Safety:
Both caches tolerate concurrent ``put()`` on the same key. Entries are
whole-value overwrites, so the last write wins.

"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
DEFAULT_MAX_AGE_HOURS = 24.0


def cache_key(path: str) -> str:
    """Stable hash of a resolved template path."""
    return hashlib.sha256(path.encode("utf-8")).hexdigest()


class SourceCache(Protocol):
    """Interface every source cache implements."""

    def get(self, path: str, max_age_hours: float = DEFAULT_MAX_AGE_HOURS) -> str | None: ...

    def put(self, path: str, content: str) -> None: ...


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A stored template source.

    Attributes:
        key: Hash of the resolved path
        content: Template text
        stored_at: Epoch seconds at which the entry was written
    """

    key: str
    content: str
    stored_at: float

    def is_fresh(self, now: float, max_age_hours: float) -> bool:
        """True while ``now - stored_at`` is within the max age."""
        return now - self.stored_at <= max_age_hours * SECONDS_PER_HOUR


class MemorySourceCache:
    """In-process source cache.

    Example:
        >>> cache = MemorySourceCache()
        >>> cache.put("/srv/tmpl/home.tpl", "<h1>{{title}}</h1>")
        >>> cache.get("/srv/tmpl/home.tpl")
        '<h1>{{title}}</h1>'
    """

    __slots__ = ("_clock", "_entries", "_lock")

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, path: str, max_age_hours: float = DEFAULT_MAX_AGE_HOURS) -> str | None:
        entry = self._entries.get(cache_key(path))
        if entry is None or not entry.is_fresh(self._clock(), max_age_hours):
            return None
        return entry.content

    def put(self, path: str, content: str) -> None:
        key = cache_key(path)
        entry = CacheEntry(key=key, content=content, stored_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def __len__(self) -> int:
        return len(self._entries)


class FileSourceCache:
    """On-disk source cache, one file per entry.

    Files are named ``<sha256 of path>.cache``. Freshness is judged from the
    file's modification time, so entries survive process restarts.

    Args:
        directory: Where cache files live (default: ``tempfile.gettempdir()``)
        clock: Time source in epoch seconds (tests inject a fake)
        encoding: Text encoding of cache files
    """

    __slots__ = ("_clock", "_directory", "_encoding")

    def __init__(
        self,
        directory: str | Path | None = None,
        clock: Callable[[], float] = time.time,
        encoding: str = "utf-8",
    ):
        self._directory = Path(directory) if directory is not None else Path(tempfile.gettempdir())
        self._clock = clock
        self._encoding = encoding

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, path: str) -> Path:
        """Cache file location for a resolved template path."""
        return self._directory / f"{cache_key(path)}.cache"

    def get(self, path: str, max_age_hours: float = DEFAULT_MAX_AGE_HOURS) -> str | None:
        cache_file = self.path_for(path)
        try:
            stored_at = cache_file.stat().st_mtime
            if self._clock() - stored_at > max_age_hours * SECONDS_PER_HOUR:
                return None
            return cache_file.read_text(self._encoding)
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Source cache read failed for {path!r}, treating as miss: {e}")
            return None

    def put(self, path: str, content: str) -> None:
        cache_file = self.path_for(path)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            # Write then rename so readers never see a partial file.
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding=self._encoding) as fh:
                    fh.write(content)
                os.replace(tmp_name, cache_file)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            now = self._clock()
            os.utime(cache_file, (now, now))
        except OSError as e:
            logger.warning(f"Source cache write failed for {path!r}, continuing uncached: {e}")
