"""Recent-reply suppression (core domain).

Public destinations get a short window during which an identical reply is
withheld. Private conversations never touch the store.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from core.config import DedupConfig
from core.models import DedupDecision

LOGGER = logging.getLogger(__name__)


class RecentReplyStore:
    """Per-destination map of reply text to expiry time.

    Each destination has its own lock, so checks for different channels do
    not contend and a check-and-record on one channel is atomic. Sweeping
    forgets destinations with nothing left in them.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, float]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _slot_for(self, destination: str) -> Tuple[threading.Lock, Dict[str, float]]:
        with self._registry_lock:
            lock = self._locks.get(destination)
            if lock is None:
                lock = self._locks[destination] = threading.Lock()
                self._entries[destination] = {}
            return lock, self._entries[destination]

    def check_and_record(self, destination: str, text: str, now: float, ttl: float) -> bool:
        """Return True if ``text`` is still live for ``destination``.

        Otherwise record it (or refresh an expired entry) and return False.
        """

        while True:
            lock, entries = self._slot_for(destination)
            with lock:
                # A sweep may have dropped this destination in between.
                if self._entries.get(destination) is not entries:
                    continue
                expires_at = entries.get(text)
                if expires_at is not None and expires_at > now:
                    return True
                entries[text] = now + ttl
                return False

    def sweep(self, now: float) -> int:
        """Drop expired entries everywhere and return how many were removed."""

        with self._registry_lock:
            slots = list(self._locks.items())
        removed = 0
        for destination, lock in slots:
            with lock:
                entries = self._entries.get(destination)
                if entries is None:
                    continue
                expired = [text for text, expires_at in entries.items() if expires_at <= now]
                for text in expired:
                    del entries[text]
                removed += len(expired)
                if not entries:
                    with self._registry_lock:
                        del self._entries[destination]
                        del self._locks[destination]
        return removed

    def destinations(self) -> List[str]:
        with self._registry_lock:
            return sorted(self._entries)

    def count(self, destination: Optional[str] = None) -> int:
        with self._registry_lock:
            if destination is not None:
                return len(self._entries.get(destination, {}))
            return sum(len(entries) for entries in self._entries.values())


def build_exemption_predicate(phrases: Iterable[str]) -> Callable[[str], bool]:
    """Return a predicate flagging failure replies that must never be withheld."""

    lowered = [phrase.lower() for phrase in phrases if phrase]

    def is_exempt(reply: str) -> bool:
        text = reply.lower()
        return any(phrase in text for phrase in lowered)

    return is_exempt


class Deduplicator:
    """Decides whether a reply may go out in full to a destination."""

    def __init__(
        self,
        store: RecentReplyStore,
        config: DedupConfig,
        is_exempt: Optional[Callable[[str], bool]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store = store
        self._config = config
        self._is_exempt = is_exempt or build_exemption_predicate(config.exempt_phrases)
        self._clock = clock

    def check(self, destination: str, reply: str, is_private: bool) -> DedupDecision:
        if is_private:
            return DedupDecision(allowed=True)
        # Identical failure text for different queries should stay visible.
        if self._is_exempt(reply):
            return DedupDecision(allowed=True)

        recently_sent = self._store.check_and_record(
            destination,
            reply,
            now=self._clock(),
            ttl=self._config.window_seconds,
        )
        if not recently_sent:
            return DedupDecision(allowed=True)

        LOGGER.info("Dedup skip for %s (same reply)", destination)
        return DedupDecision(allowed=False, preview=reply[: self._config.preview_chars])

    def sweep(self) -> int:
        removed = self._store.sweep(self._clock())
        if removed:
            LOGGER.debug(
                "Dedup sweep removed %s replies, %s destinations still tracked",
                removed,
                len(self._store.destinations()),
            )
        return removed
