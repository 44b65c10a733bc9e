"""Short-lived secret storage for file challenges."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import structlog

from credbridge.types import EvictionReason

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EvictionRecord:
    """An entry that has left the cache and still needs its cleanup."""

    key: str
    file_path: Path
    reason: EvictionReason


@dataclass
class _Entry:
    file_path: Path
    expires_at: float


class SecretCache:
    """Maps one-time secrets to the files they were written to, with TTL expiry.

    Secrets are one-time-use: ``take`` retrieves and removes atomically.
    Every entry leaves the cache exactly once (taken, expired, replaced or
    cleared) and yields one :class:`EvictionRecord`. Records are queued and
    handed to ``on_evict`` by :meth:`sweep`, outside the lock, so slow
    filesystem cleanup never stalls ``put`` or ``take``.

    Queued records only drain on ``sweep``. The app runs it from a background
    sweeper and the challenge issuer runs it before every issuance, so the
    queue stays bounded even when the sweeper is not running.
    """

    def __init__(
        self,
        on_evict: Callable[[EvictionRecord], None],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._on_evict = on_evict
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, _Entry] = {}
        self._pending: list[EvictionRecord] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def pending_evictions(self) -> int:
        """Records queued for cleanup but not yet swept."""
        with self._lock:
            return len(self._pending)

    def put(self, key: str, file_path: Path, ttl_seconds: float) -> None:
        """Store a secret for ``ttl_seconds``."""
        expires_at = self._clock() + ttl_seconds
        with self._lock:
            previous = self._entries.get(key)
            if previous is not None:
                self._pending.append(
                    EvictionRecord(key, previous.file_path, EvictionReason.REPLACED)
                )
            self._entries[key] = _Entry(file_path=file_path, expires_at=expires_at)

    def take(self, key: str) -> Path | None:
        """Remove a secret and return its file path. Returns None if missing or expired."""
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                self._pending.append(EvictionRecord(key, entry.file_path, EvictionReason.EXPIRED))
                return None
            self._pending.append(EvictionRecord(key, entry.file_path, EvictionReason.TAKEN))
            return entry.file_path

    def sweep(self) -> int:
        """Evict expired entries and run cleanup for every queued record.

        Returns the number of records processed.
        """
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if now >= e.expires_at]
            for k in expired:
                entry = self._entries.pop(k)
                self._pending.append(EvictionRecord(k, entry.file_path, EvictionReason.EXPIRED))
            records, self._pending = self._pending, []
        return self._run_evictions(records)

    def clear(self) -> int:
        """Evict every live entry and run cleanup for all of them."""
        with self._lock:
            for k, entry in self._entries.items():
                self._pending.append(EvictionRecord(k, entry.file_path, EvictionReason.CLEARED))
            self._entries.clear()
        return self.sweep()

    def _run_evictions(self, records: list[EvictionRecord]) -> int:
        for record in records:
            try:
                self._on_evict(record)
            except Exception as exc:
                logger.warning(
                    "eviction_callback_failed",
                    file_path=str(record.file_path),
                    reason=str(record.reason),
                    error=str(exc),
                )
        return len(records)
