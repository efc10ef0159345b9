"""In-process replay cache for idempotent cart mutations.

Entries are keyed by the client-supplied ``X-Request-Id`` and live for
``ttl_ms`` milliseconds after insertion. Expired entries are dropped on every
access. ``execute`` is the atomic entry point: for a given key only one
caller (the leader) runs the producer. Duplicates arriving while it runs wait
and receive the leader's result, whether it succeeded or failed. Only
successes are kept for later requests.
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from apps.common import get_logger
from .dtos import MutationOutcome

logger = get_logger(__name__).bind(component="carts", layer="replay")

DEFAULT_TTL_MS = 5000

Producer = Callable[[], Tuple[MutationOutcome, int]]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class ReplayCacheEntry:
    key: str
    outcome: MutationOutcome
    status: int
    inserted_at: float


class ReplayResult(NamedTuple):
    outcome: MutationOutcome
    status: int
    replayed: bool


@dataclass
class _InFlight:
    done: threading.Event = field(default_factory=threading.Event)
    # Unset when the leader raised instead of returning.
    result: Optional[Tuple[MutationOutcome, int]] = None


class RequestReplayCache:
    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS, clock: Optional[Callable[[], float]] = None):
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")
        self.ttl_ms = ttl_ms
        self._clock = clock or monotonic_ms
        self._lock = threading.Lock()
        self._entries: Dict[str, ReplayCacheEntry] = {}
        self._in_flight: Dict[str, _InFlight] = {}

    def __len__(self) -> int:
        with self._lock:
            self._prune(self._clock())
            return len(self._entries)

    def lookup(self, key: str) -> Optional[ReplayCacheEntry]:
        with self._lock:
            self._prune(self._clock())
            return self._entries.get(key)

    def store(self, key: str, outcome: MutationOutcome, status: int) -> ReplayCacheEntry:
        """Insert unless a live entry exists; the first completion wins."""
        with self._lock:
            now = self._clock()
            self._prune(now)
            existing = self._entries.get(key)
            if existing is not None:
                return existing
            entry = ReplayCacheEntry(key=key, outcome=outcome, status=status, inserted_at=now)
            self._entries[key] = entry
            return entry

    def execute(self, key: str, producer: Producer) -> ReplayResult:
        while True:
            with self._lock:
                self._prune(self._clock())
                entry = self._entries.get(key)
                if entry is not None:
                    logger.info("Replaying cached response", key=key, status=entry.status)
                    return ReplayResult(entry.outcome, entry.status, True)
                flight = self._in_flight.get(key)
                leader = flight is None
                if leader:
                    flight = _InFlight()
                    self._in_flight[key] = flight
            if leader:
                break
            logger.debug("Waiting for in-flight request", key=key)
            flight.done.wait()
            if flight.result is not None:
                outcome, status = flight.result
                logger.info(
                    "Sharing in-flight result", key=key, status=status, ok=outcome.ok
                )
                return ReplayResult(outcome, status, True)
            # The leader raised; nothing reached a result, so try again.

        try:
            outcome, status = producer()
            flight.result = (outcome, status)
            if outcome.ok:
                self.store(key, outcome, status)
            return ReplayResult(outcome, status, False)
        finally:
            with self._lock:
                self._in_flight.pop(key, None)
            flight.done.set()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _prune(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if now - e.inserted_at >= self.ttl_ms]
        for key in expired:
            del self._entries[key]
