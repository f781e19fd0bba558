"""Persistent cache store with absolute time-to-live expiration.

Stores translations and recipe provider responses as JSON blobs in SQLite,
keyed by an opaque string built from a namespace tag and the request's defining
parameters. Entries expire a fixed time after they are written; an expired
entry reads exactly like an absent one.

Store errors propagate from here. Callers wrap cache access with
`safe_execute_async` so that an unavailable store degrades to a cache miss.
"""

import asyncio
import json
import sqlite3
import threading
import time
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Sequence

from pantry.models.models import CacheEntry, SearchFilters
from pantry.utils.config import config
from pantry.utils.logger import logger


SEARCH_SORT = "min-missing-ingredients"

CREATE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS cache_entries (
    cache_key TEXT PRIMARY KEY,
    data TEXT NOT NULL,
    created_at REAL NOT NULL
)
"""

CREATE_CREATED_AT_INDEX = "CREATE INDEX IF NOT EXISTS idx_cache_entries_created_at ON cache_entries (created_at)"

UPSERT_ENTRY = """
INSERT INTO cache_entries (cache_key, data, created_at) VALUES (?, ?, ?)
ON CONFLICT(cache_key) DO UPDATE SET data = excluded.data, created_at = excluded.created_at
"""

GET_ENTRY = "SELECT cache_key, data, created_at FROM cache_entries WHERE cache_key = ?"

DELETE_ENTRY_IF_EXPIRED = "DELETE FROM cache_entries WHERE cache_key = ? AND created_at <= ?"

PURGE_EXPIRED = "DELETE FROM cache_entries WHERE created_at <= ?"


class CacheStore(Protocol):
    """Key-value cache contract consumed by the translator and the recipe gateway."""

    async def get(self, key: str) -> Optional[Any]:
        """Return the live value for `key`, or None when absent or expired."""
        ...

    async def put(self, key: str, value: Any) -> None:
        """Write `value` under `key`, replacing any previous entry."""
        ...


def translation_cache_key(source_lang: str, target_lang: str, text: str) -> str:
    """Key for a translation. The exact text is used, without normalisation."""
    return f"translation:{source_lang}:{target_lang}:{text}"


def search_cache_key(ingredients: Sequence[str], filters: Optional[SearchFilters] = None) -> str:
    """Key for a recipe search.

    Args:
        ingredients: Provider-language ingredient names, already deduplicated and sorted.
        filters: Active dietary/nutritional filters (part of the key).
    """
    filter_string = filters.to_query_string() if filters else ""
    return f"search:{','.join(ingredients)}:sort={SEARCH_SORT}:{filter_string}"


def details_cache_key(recipe_id: int | str) -> str:
    """Key for a recipe's details."""
    return f"details:{recipe_id}"


class SQLiteCacheStore:
    """SQLite-backed cache store with per-entry TTL.

    Blocking sqlite3 calls run in a worker thread so awaiting callers suspend
    instead of blocking the event loop. A single connection is shared and
    serialised with a lock.

    Example:
        >>> cache = SQLiteCacheStore("pantry_cache.db")
        >>> await cache.put("details:716429", {"id": 716429, "title": "Pasta"})
        >>> await cache.get("details:716429")
        {'id': 716429, 'title': 'Pasta'}
        >>> cache.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Open (or create) the cache database and purge expired entries.

        Args:
            db_path: SQLite database file, or ":memory:".
            ttl_seconds: Time-to-live per entry. Defaults to CACHE_TTL_HOURS.
            clock: Returns the current POSIX time. Injected for tests.

        Raises:
            sqlite3.Error: If the database cannot be opened or the schema created.
        """
        self.db_path = str(db_path)
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.cache_ttl_seconds
        self.clock = clock
        self._lock = threading.Lock()

        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self.conn: Optional[sqlite3.Connection] = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            isolation_level=None,  # Auto-commit mode
        )
        if self.db_path != ":memory:":
            self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute(CREATE_CACHE_TABLE)
        self.conn.execute(CREATE_CREATED_AT_INDEX)

        purged = self._purge_expired()
        if purged:
            logger.info(f"Purged {purged} expired cache entries on startup")

    def _connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise sqlite3.ProgrammingError("Cache store is closed")
        return self.conn

    def _expiry_cutoff(self) -> float:
        return self.clock() - self.ttl_seconds

    def _get_entry(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            conn = self._connection()
            row = conn.execute(GET_ENTRY, (key,)).fetchone()
            if row is None:
                return None
            entry = CacheEntry(key=row[0], value=json.loads(row[1]), created_at=row[2])
            if entry.is_expired(self.clock(), self.ttl_seconds):
                conn.execute(DELETE_ENTRY_IF_EXPIRED, (key, self._expiry_cutoff()))
                return None
            return entry

    def _put_entry(self, entry: CacheEntry) -> None:
        data = json.dumps(entry.value, ensure_ascii=False)
        with self._lock:
            self._connection().execute(UPSERT_ENTRY, (entry.key, data, entry.created_at))

    def _purge_expired(self) -> int:
        with self._lock:
            cursor = self._connection().execute(PURGE_EXPIRED, (self._expiry_cutoff(),))
            return cursor.rowcount

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the live CacheEntry for `key`, or None when absent or expired."""
        return await asyncio.to_thread(self._get_entry, key)

    async def get(self, key: str) -> Optional[Any]:
        """Return the live value for `key`, or None when absent or expired.

        Raises:
            sqlite3.Error: If the store is unavailable.
        """
        entry = await self.get_entry(key)
        return entry.value if entry is not None else None

    async def put(self, key: str, value: Any) -> None:
        """Write `value` under `key` with a fresh creation time.

        Raises:
            sqlite3.Error: If the store is unavailable.
            TypeError: If `value` is not JSON-serialisable.
        """
        entry = CacheEntry(key=key, value=value, created_at=self.clock())
        await asyncio.to_thread(self._put_entry, entry)

    async def purge_expired(self) -> int:
        """Delete every expired entry.

        Returns:
            Number of entries removed.
        """
        return await asyncio.to_thread(self._purge_expired)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
