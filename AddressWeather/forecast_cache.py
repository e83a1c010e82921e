"""In-memory forecast cache with per-entry expiry and a background sweep."""
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from forecast_data import ForecastSnapshot

DEFAULT_TTL_SECONDS = 30 * 60


class ReadWriteLock:
    """
    Lock allowing many concurrent readers or a single writer.

    Writers are preferred: once a writer is waiting, new readers block until
    it has finished, so a steady stream of lookups cannot starve a purge.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass
class CacheEntry:
    """Stored snapshot plus the clock reading taken when it was inserted."""
    snapshot: ForecastSnapshot
    created_at: float


class AutoPurge:
    """Handle for the background sweep thread started by ExpiringCache."""

    def __init__(self, cache: "ExpiringCache", interval_seconds: float):
        self.interval_seconds = interval_seconds
        self._cache = cache
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, name="forecast-cache-purge", daemon=True
        )

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        # Event.wait returns True once stop() is called
        while not self._stop_event.wait(self.interval_seconds):
            removed = self._cache.purge_expired()
            logging.debug(f"Auto purge removed {removed} expired entries")

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the sweep thread to exit and wait for it."""
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join(timeout)


class ExpiringCache:
    """
    Thread-safe store mapping a string key to a ForecastSnapshot.

    Every entry shares one TTL, read at check time, so changing the TTL
    immediately changes the validity of entries already stored. Expired
    entries are removed lazily by get() and in bulk by purge_expired().
    Absence and expiry are both reported as None; the cache never raises.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Maximum age of a valid entry
            clock: Monotonic time source in seconds (override in tests)
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = ReadWriteLock()

    @property
    def ttl(self) -> float:
        return self._ttl_seconds

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Raw presence check; does not evaluate expiry."""
        with self._lock.read():
            return key in self._entries

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.created_at > self._ttl_seconds

    def get(self, key: str) -> Optional[ForecastSnapshot]:
        """
        Look up a snapshot.

        Returns:
            An independent copy of the cached snapshot, or None if the key
            is absent or its entry has outlived the TTL (the stale entry is
            deleted as a side effect)
        """
        with self._lock.read():
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_expired(entry, self._clock()):
                return entry.snapshot.copy()

        with self._lock.write():
            # A concurrent put may have replaced the stale entry meanwhile
            if self._entries.get(key) is entry:
                del self._entries[key]
                logging.debug(f"Evicted expired cache entry for key '{key}'")
        return None

    def put(self, key: str, snapshot: ForecastSnapshot) -> None:
        """Insert or overwrite the entry for key, stamped with the current time."""
        entry = CacheEntry(snapshot=snapshot.copy(), created_at=self._clock())
        with self._lock.write():
            self._entries[key] = entry

    def delete(self, key: str) -> None:
        """Remove the entry for key if present."""
        with self._lock.write():
            self._entries.pop(key, None)

    def set_ttl(self, ttl_seconds: float) -> None:
        """Replace the TTL used for all existing and future entries."""
        with self._lock.write():
            self._ttl_seconds = ttl_seconds
        logging.info(f"Cache TTL set to {ttl_seconds}s")

    def purge_expired(self) -> int:
        """
        Delete every expired entry.

        All entries are compared against a single timestamp taken when the
        scan starts.

        Returns:
            Number of entries removed
        """
        with self._lock.write():
            now = self._clock()
            expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logging.debug(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def start_auto_purge(self, interval_seconds: float) -> AutoPurge:
        """
        Start a daemon thread that calls purge_expired() every interval.

        Call this at most once per cache; each call starts another thread.

        Returns:
            AutoPurge: Handle whose stop() ends the sweep
        """
        task = AutoPurge(self, interval_seconds)
        task.start()
        logging.info(f"Cache auto purge started (interval={interval_seconds}s)")
        return task
