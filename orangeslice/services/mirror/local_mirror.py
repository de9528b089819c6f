# orangeslice/services/mirror/local_mirror.py
from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from orangeslice.common.logging import get_logger
from orangeslice.common.status_log import StatusLog
from orangeslice.domain.entities.entry import Entry
from orangeslice.domain.entities.tag import Tag
from orangeslice.domain.entities.links.entry_tag_link import EntryTag, EnrichedEntryTag
from orangeslice.domain.enums.entity_kind import EntityKind
from orangeslice.domain.errors import GatewayError
from orangeslice.domain.policies.enricher import RelationshipEnricher
from orangeslice.domain.ports.gateway import DataGatewayPort, LiveSnapshot, Subscription

logger = get_logger(__name__)


@dataclass(frozen=True)
class MirrorSnapshot:
    """Consistent copy of everything the catalog view derives from."""
    loaded: bool
    entries: List[Entry] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    associations: List[EnrichedEntryTag] = field(default_factory=list)
    last_error: Optional[str] = None


@dataclass
class _Channel:
    kind: EntityKind
    subscription: Optional[Subscription] = None
    dead: bool = True
    last_attempt: float = 0.0
    error: Optional[str] = None


class LocalMirror:
    """
    Keeps the latest snapshot of entries, tags and entry/tag links, fed by
    the gateway's live queries. Each push replaces its collection wholesale,
    in whatever order the feed delivered.

    A failed stream marks its channel dead; `ensure_subscribed()` brings dead
    channels back, at most once per `resubscribe_interval` seconds each.
    """

    def __init__(
        self,
        gateway: DataGatewayPort,
        enricher: RelationshipEnricher,
        status_log: StatusLog,
        *,
        resubscribe_interval: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._gateway = gateway
        self._enricher = enricher
        self._status = status_log
        self._interval = resubscribe_interval
        self._clock = clock

        self._lock = threading.RLock()
        self._entries: List[Entry] = []
        self._tags: List[Tag] = []
        self._raw_links: List[EntryTag] = []
        self._links: List[EnrichedEntryTag] = []
        self._loaded = False
        self._channels: Dict[EntityKind, _Channel] = {k: _Channel(kind=k) for k in EntityKind}
        self._started = False

    # ---------- lifecycle ----------

    def start(self) -> None:
        with self._lock:
            self._started = True
        # tags first so the first link push can already be enriched
        for kind in (EntityKind.tag, EntityKind.entry_tag, EntityKind.entry):
            self._subscribe(kind)

    def stop(self) -> None:
        with self._lock:
            self._started = False
            subs = [c.subscription for c in self._channels.values() if c.subscription is not None]
            for c in self._channels.values():
                c.subscription = None
                c.dead = True
        for s in subs:
            s.unsubscribe()

    def ensure_subscribed(self) -> int:
        """Re-subscribe dead channels whose retry interval has elapsed. Returns how many were retried."""
        with self._lock:
            if not self._started:
                return 0
            now = self._clock()
            due = [
                c.kind for c in self._channels.values()
                if c.dead and now - c.last_attempt >= self._interval
            ]
        for kind in due:
            logger.info("Re-subscribing %s live query", kind.value)
            self._subscribe(kind)
        return len(due)

    def _subscribe(self, kind: EntityKind) -> None:
        model = self._model_gateway(kind)
        with self._lock:
            ch = self._channels[kind]
            ch.last_attempt = self._clock()
            ch.dead = False
        try:
            sub = model.observe_query(
                on_next=self._on_next(kind),
                on_error=self._on_error(kind),
            )
        except GatewayError as e:
            self._on_error(kind)(e)
            return
        with self._lock:
            if sub.closed:
                return
            ch.subscription = sub

    def _model_gateway(self, kind: EntityKind):
        return {
            EntityKind.entry: self._gateway.entries,
            EntityKind.tag: self._gateway.tags,
            EntityKind.entry_tag: self._gateway.entry_tags,
        }[kind]

    # ---------- push handlers ----------

    def _on_next(self, kind: EntityKind) -> Callable[[LiveSnapshot], None]:
        def handler(snapshot: LiveSnapshot) -> None:
            items = list(snapshot.items)
            with self._lock:
                self._channels[kind].error = None
                if kind == EntityKind.entry:
                    self._entries = items
                    self._loaded = True
                elif kind == EntityKind.tag:
                    self._tags = items
                    self._enricher.refresh_tags(items)
                    self._links = self._enricher.enrich(self._raw_links)
                else:
                    self._raw_links = items
                    self._links = self._enricher.enrich(items)
            logger.debug("Mirror %s <- %d item(s)", kind.value, len(items))
        return handler

    def _on_error(self, kind: EntityKind) -> Callable[[Exception], None]:
        def handler(exc: Exception) -> None:
            msg = f"Error in {kind.value} subscription: {exc}"
            with self._lock:
                ch = self._channels[kind]
                ch.subscription = None
                ch.dead = True
                ch.error = msg
                if kind == EntityKind.entry:
                    # stop the loading indicator even though nothing arrived
                    self._loaded = True
            self._status.error(msg)
        return handler

    # ---------- reads ----------

    @property
    def loaded(self) -> bool:
        with self._lock:
            return self._loaded

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._current_error()

    def _current_error(self) -> Optional[str]:
        for c in self._channels.values():
            if c.error:
                return c.error
        return None

    def dead_channels(self) -> List[EntityKind]:
        with self._lock:
            return [c.kind for c in self._channels.values() if c.dead]

    def snapshot(self) -> MirrorSnapshot:
        with self._lock:
            return MirrorSnapshot(
                loaded=self._loaded,
                entries=list(self._entries),
                tags=list(self._tags),
                associations=list(self._links),
                last_error=self._current_error(),
            )
