# orangeslice/services/gateway/live_query.py
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Mapping, Optional

from orangeslice.common.logging import get_logger
from orangeslice.domain.enums.entity_kind import EntityKind
from orangeslice.domain.ports.gateway import LiveSnapshot

logger = get_logger(__name__)


class LiveSubscription:
    """
    One standing live query. Delivers full snapshots to `on_next` until it is
    unsubscribed or its stream fails; a failure is reported once through
    `on_error` and is terminal.
    """

    def __init__(
        self,
        hub: "LiveQueryHub",
        kind: EntityKind,
        on_next: Callable[[LiveSnapshot], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._hub = hub
        self.kind = kind
        self.filters: Dict[str, Any] = dict(filters or {})
        self._on_next = on_next
        self._on_error = on_error
        self._closed = False
        self.delivered = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def unsubscribe(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._hub.remove(self)

    def push(self, snapshot: LiveSnapshot) -> None:
        if self._closed:
            return
        try:
            self._on_next(snapshot)
            self.delivered += 1
        except Exception:
            # a broken subscriber must not fail the writer or its peers
            logger.exception("Live query subscriber for %s failed on snapshot", self.kind.value)

    def fail(self, exc: Exception) -> None:
        if self._closed:
            return
        self.unsubscribe()
        if self._on_error is None:
            logger.error("Live query for %s failed: %s", self.kind.value, exc)
            return
        try:
            self._on_error(exc)
        except Exception:
            logger.exception("Live query error handler for %s failed", self.kind.value)


class LiveQueryHub:
    """In-process registry of live queries, keyed by entity kind."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subs: Dict[EntityKind, List[LiveSubscription]] = {}
        # serializes snapshot builds per kind so a stale snapshot never lands after a fresh one
        self._publish_locks: Dict[EntityKind, threading.RLock] = {k: threading.RLock() for k in EntityKind}

    def subscribe(
        self,
        kind: EntityKind,
        on_next: Callable[[LiveSnapshot], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> LiveSubscription:
        sub = LiveSubscription(self, kind, on_next, on_error, filters)
        with self._lock:
            self._subs.setdefault(kind, []).append(sub)
        return sub

    def remove(self, sub: LiveSubscription) -> None:
        with self._lock:
            subs = self._subs.get(sub.kind, [])
            if sub in subs:
                subs.remove(sub)

    def subscribers(self, kind: EntityKind) -> List[LiveSubscription]:
        with self._lock:
            return list(self._subs.get(kind, []))

    def publish_lock(self, kind: EntityKind) -> threading.RLock:
        return self._publish_locks[kind]

    def close(self) -> None:
        """Drop every subscription (process teardown)."""
        with self._lock:
            subs = [s for group in self._subs.values() for s in group]
        for s in subs:
            s.unsubscribe()
