"""
Fixed-window rate limiting keyed by client address.

The counter lives in a pluggable store:
- MemoryCounterStore: process-local, for a single instance and tests
- MongoCounterStore:  shared across instances through MongoDB
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Dict, Tuple

from pymongo import ReturnDocument

from campus_recruit.db.mongodb import get_collection, init_mongo_indexes

logger = logging.getLogger(__name__)


class MemoryCounterStore:
    """Process-local counters; lost on restart and not shared between processes."""

    def __init__(self):
        self._counts: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def increment(self, key: str, window_start: float, window_seconds: int) -> int:
        with self._lock:
            count, started = self._counts.get(key, (0, window_start))
            if started != window_start:
                count = 0
            count += 1
            self._counts[key] = (count, window_start)
            return count


class MongoCounterStore:
    """
    One document per (client, window). $inc with upsert is atomic, and the
    TTL index on expires_at (see db.mongodb.init_mongo_indexes) drops
    finished windows.
    """

    def __init__(self, collection):
        self.collection = collection

    def increment(self, key: str, window_start: float, window_seconds: int) -> int:
        expires_at = datetime.fromtimestamp(window_start + window_seconds, tz=timezone.utc)
        doc = self.collection.find_one_and_update(
            {"_id": f"{key}:{int(window_start)}"},
            {"$inc": {"count": 1}, "$setOnInsert": {"client": key, "expires_at": expires_at}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["count"])


class RateLimiter:
    def __init__(self, store, max_requests: int = 100, window_seconds: int = 15 * 60,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock

    def window_start(self) -> float:
        now = self.clock()
        return now - (now % self.window_seconds)

    def hit(self, client_id: str) -> bool:
        """Count one request; False once the client is over the limit for this window."""
        count = self.store.increment(client_id, self.window_start(), self.window_seconds)
        if count > self.max_requests:
            logger.warning("Rate limit exceeded for %s (%s requests)", client_id, count)
            return False
        return True

    def retry_after(self) -> int:
        return int(self.window_start() + self.window_seconds - self.clock()) + 1


def build_rate_limiter(settings) -> RateLimiter:
    if settings.rate_limit_backend == "mongo":
        init_mongo_indexes()
        store = MongoCounterStore(get_collection("rate_limits"))
    else:
        store = MemoryCounterStore()
    return RateLimiter(
        store,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
