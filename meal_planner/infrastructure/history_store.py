# meal_planner/infrastructure/history_store.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Protocol, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.collection import Collection
from pymongo.errors import BulkWriteError, PyMongoError

from meal_planner.core.config import HISTORY_LIMIT

log = logging.getLogger("infra.history_store")


@dataclass(frozen=True)
class HistoryEntry:
    name: str
    category: str


class HistoryStore(Protocol):
    def recent_names(self, scope: str, limit: int = HISTORY_LIMIT) -> List[str]: ...

    def save(self, entries: Iterable[HistoryEntry], scope: str) -> None: ...


class MongoHistoryStore:
    """
    Recipe names already proposed to a session, newest first.
    Best effort: any database failure is logged and swallowed.
    """

    def __init__(self, col: Collection) -> None:
        self._col = col
        try:
            self._col.create_index([("name", ASCENDING), ("session_id", ASCENDING)], unique=True)
            self._col.create_index([("session_id", ASCENDING), ("created_at", DESCENDING)])
        except PyMongoError as e:
            log.warning("MongoHistoryStore: could not ensure indexes: %s", e)

    def recent_names(self, scope: str, limit: int = HISTORY_LIMIT) -> List[str]:
        if not scope:
            return []
        try:
            cursor = (
                self._col.find({"session_id": scope}, {"name": 1, "_id": 0})
                .sort("created_at", DESCENDING)
                .limit(limit)
            )
            return [str(doc["name"]) for doc in cursor if doc.get("name")]
        except PyMongoError as e:
            log.warning("recent_names failed for session %s: %s", scope, e)
            return []

    def save(self, entries: Iterable[HistoryEntry], scope: str) -> None:
        entries = list(entries)
        if not scope or not entries:
            return
        now = datetime.now(timezone.utc)
        docs = [
            {"name": e.name, "category": e.category, "session_id": scope, "created_at": now}
            for e in entries
        ]
        try:
            # unordered: duplicates on (name, session_id) are skipped, the rest inserted
            self._col.insert_many(docs, ordered=False)
        except BulkWriteError as e:
            dupes = sum(1 for err in e.details.get("writeErrors", []) if err.get("code") == 11000)
            others = len(e.details.get("writeErrors", [])) - dupes
            if others:
                log.warning("save: %d history writes failed for session %s", others, scope)
            else:
                log.debug("save: skipped %d duplicate names for session %s", dupes, scope)
        except PyMongoError as e:
            log.warning("save failed for session %s: %s", scope, e)


@dataclass
class _ScopeHistory:
    updated_at: float = field(default_factory=time.time)
    names: Dict[str, Tuple[str, int]] = field(default_factory=dict)  # name -> (category, seq)


class InMemoryHistoryStore:
    """Process-local fallback used when MONGO_URI is not configured."""

    def __init__(self, ttl_seconds: int = 7 * 24 * 3600) -> None:
        self.ttl_seconds = ttl_seconds
        self._data: Dict[str, _ScopeHistory] = {}
        self._seq = 0

    def recent_names(self, scope: str, limit: int = HISTORY_LIMIT) -> List[str]:
        self._gc()
        h = self._data.get(scope)
        if h is None:
            return []
        newest_first = sorted(h.names.items(), key=lambda kv: kv[1][1], reverse=True)
        return [name for name, _ in newest_first[:limit]]

    def save(self, entries: Iterable[HistoryEntry], scope: str) -> None:
        if not scope:
            return
        h = self._data.setdefault(scope, _ScopeHistory())
        for e in entries:
            if e.name in h.names:
                continue
            self._seq += 1
            h.names[e.name] = (e.category, self._seq)
        h.updated_at = time.time()

    def _gc(self) -> None:
        now = time.time()
        expired = [k for k, v in self._data.items() if now - v.updated_at > self.ttl_seconds]
        for k in expired:
            self._data.pop(k, None)
