# weighbench/adapters/sqlite_adapter.py
from __future__ import annotations
import json, logging, sqlite3
from typing import Any, Dict, Iterator, Mapping, Optional
from weighbench.adapters.base import BaseStore

logger = logging.getLogger(__name__)


DDL = """
CREATE TABLE IF NOT EXISTS storage (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL      -- JSON encoded
);

CREATE TABLE IF NOT EXISTS baseline (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL      -- genesis snapshot restored by wipe_to_baseline
);
"""

_DELETED = object()


def _json(obj) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True)


class SQLiteStore(BaseStore):
    """SQLite backed key/value state with a write overlay and a read cache.

    Writes stay in the overlay until ``commit``; reads are served from the overlay,
    then the cache, then the database. ``commit`` flushes the overlay and empties the
    cache so the next read of every key goes back to the database.
    """

    def __init__(self, path: str = ":memory:", genesis: Optional[Mapping[str, Any]] = None, timeout: int = 30):
        self.path = path
        self.conn = sqlite3.connect(path, timeout=timeout)
        self.conn.row_factory = sqlite3.Row
        self.conn.executescript(DDL)
        self._overlay: Dict[str, Any] = {}
        self._cache: Dict[str, str] = {}
        self.stats = {"commits": 0, "wipes": 0, "db_reads": 0, "flushed_writes": 0}

        if genesis is not None:
            # Genesis replaces whatever an earlier (possibly interrupted) process left behind.
            with self.conn:
                self.conn.execute("DELETE FROM storage")
                self.conn.execute("DELETE FROM baseline")
            for key, value in genesis.items():
                self.put(key, value)
            self.set_baseline()
        elif not self._has_baseline():
            self.set_baseline()

    def _has_baseline(self) -> bool:
        row = self.conn.execute("SELECT COUNT(*) AS n FROM baseline").fetchone()
        return row["n"] > 0

    # ---------- key/value access ----------
    def _raw(self, key: str) -> Any:
        if key in self._overlay:
            return self._overlay[key]
        if key in self._cache:
            return self._cache[key]
        row = self.conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
        self.stats["db_reads"] += 1
        encoded = row["value"] if row is not None else _DELETED
        self._cache[key] = encoded
        return encoded

    def get(self, key: str, default: Any = None) -> Any:
        encoded = self._raw(key)
        if encoded is _DELETED:
            return default
        return json.loads(encoded)

    def put(self, key: str, value: Any) -> None:
        self._overlay[key] = _json(value)

    def delete(self, key: str) -> None:
        self._overlay[key] = _DELETED

    def keys(self, prefix: str = "") -> Iterator[str]:
        cur = self.conn.execute(
            "SELECT key FROM storage WHERE substr(key, 1, ?) = ?",
            (len(prefix), prefix),
        )
        live = {row["key"] for row in cur.fetchall()}
        for key, encoded in self._overlay.items():
            if not key.startswith(prefix):
                continue
            if encoded is _DELETED:
                live.discard(key)
            else:
                live.add(key)
        return iter(sorted(live))

    # ---------- isolation ----------
    def commit(self) -> None:
        """Flush pending writes to the database and drop the read cache."""
        writes = [(k, v) for k, v in self._overlay.items() if v is not _DELETED]
        deletes = [(k,) for k, v in self._overlay.items() if v is _DELETED]
        with self.conn:
            if writes:
                self.conn.executemany("INSERT OR REPLACE INTO storage (key, value) VALUES (?, ?)", writes)
            if deletes:
                self.conn.executemany("DELETE FROM storage WHERE key = ?", deletes)
        self.stats["commits"] += 1
        self.stats["flushed_writes"] += len(self._overlay)
        self._overlay.clear()
        self._cache.clear()

    def wipe_to_baseline(self) -> None:
        """Drop pending writes and caches, then restore the baseline rows."""
        self._overlay.clear()
        self._cache.clear()
        with self.conn:
            self.conn.execute("DELETE FROM storage")
            self.conn.execute("INSERT INTO storage (key, value) SELECT key, value FROM baseline")
        self.stats["wipes"] += 1

    def set_baseline(self) -> None:
        """Commit, then make the current state the one ``wipe_to_baseline`` restores."""
        self.commit()
        with self.conn:
            self.conn.execute("DELETE FROM baseline")
            self.conn.execute("INSERT INTO baseline (key, value) SELECT key, value FROM storage")
        logger.debug(f"Baseline set with {self.row_count('baseline')} keys")

    # ---------- introspection ----------
    def row_count(self, table: str = "storage") -> int:
        if table not in ("storage", "baseline"):
            raise ValueError(f"Unknown table: {table}")
        return self.conn.execute(f"SELECT COUNT(*) AS n FROM {table}").fetchone()["n"]

    @property
    def pending_writes(self) -> int:
        return len(self._overlay)

    def get_table_stats(self) -> dict:
        """Row counts and isolation counters"""
        return {
            "storage_rows": self.row_count("storage"),
            "baseline_rows": self.row_count("baseline"),
            "pending_writes": self.pending_writes,
            "cached_reads": len(self._cache),
            **self.stats,
        }

    def close(self) -> None:
        """Close the database connection"""
        if hasattr(self, 'conn') and self.conn:
            self.conn.close()
