# orangeslice/services/gateway/sqlalchemy_gateway.py
from __future__ import annotations

from typing import Any, Callable, Generic, List, Mapping, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from orangeslice.common.logging import get_logger
from orangeslice.database.core.main import Base
from orangeslice.database.core.transaction import transactional
from orangeslice.database.models import Entry as DBEntry, Tag as DBTag, EntryTag as DBEntryTag
from orangeslice.database.repos._mapping import to_domain_entry, to_domain_tag, to_domain_entry_tag
from orangeslice.database.repos.record_repo import RecordRepo
from orangeslice.domain.entities.entry import Entry
from orangeslice.domain.entities.tag import Tag
from orangeslice.domain.entities.links.entry_tag_link import EntryTag
from orangeslice.domain.enums.entity_kind import EntityKind
from orangeslice.domain.errors import GatewayError, RecordNotFound, SubscriptionError
from orangeslice.domain.ports.gateway import Filters, LiveSnapshot
from orangeslice.services.gateway.live_query import LiveQueryHub, LiveSubscription

logger = get_logger(__name__)

D = TypeVar("D")


class SqlAlchemyModelGateway(Generic[D]):
    """
    CRUD + live query for one entity type.

    Every call runs in its own short session. Writes commit before any
    subscriber is notified, and each subscriber then receives the full,
    freshly queried result set for its filters.
    """

    def __init__(
        self,
        kind: EntityKind,
        model: Type[Base],
        to_domain: Callable[[Any], D],
        sessions: sessionmaker[Session],
        hub: LiveQueryHub,
        *,
        immutable: bool = False,
    ) -> None:
        self.kind = kind
        self._model = model
        self._to_domain = to_domain
        self._sessions = sessions
        self._hub = hub
        self._immutable = immutable

    # ---------- reads ----------

    def list(self, filters: Optional[Filters] = None) -> List[D]:
        try:
            with self._sessions() as s:
                rows = RecordRepo(s, self._model).list(filters)
                return [self._to_domain(r) for r in rows]
        except ValueError as e:
            raise GatewayError(str(e)) from e
        except SQLAlchemyError as e:
            raise GatewayError(f"list {self.kind.value} failed: {e}") from e

    def get(self, record_id: UUID) -> Optional[D]:
        try:
            with self._sessions() as s:
                row = RecordRepo(s, self._model).get(record_id)
                return self._to_domain(row) if row is not None else None
        except SQLAlchemyError as e:
            raise GatewayError(f"get {self.kind.value} {record_id} failed: {e}") from e

    # ---------- writes ----------

    def create(self, **fields: Any) -> D:
        out = self._write(lambda repo: [repo.create(**fields)], "create")
        return out[0]

    def update(self, record_id: UUID, **fields: Any) -> D:
        if self._immutable:
            raise GatewayError(f"{self.kind.value} records are never updated in place")

        def _op(repo: RecordRepo):
            obj = repo.update(record_id, **fields)
            if obj is None:
                raise RecordNotFound(self.kind.value, record_id)
            return [obj]

        return self._write(_op, "update")[0]

    def delete(self, record_id: UUID) -> None:
        """Deleting a missing record is a no-op."""

        def _op(repo: RecordRepo):
            repo.delete(record_id)
            return []

        self._write(_op, "delete")

    def create_many(self, specs: Sequence[Mapping[str, Any]]) -> List[D]:
        """All rows or none: the batch shares one transaction."""
        if not specs:
            return []
        return self._write(lambda repo: repo.create_many(specs), "create_many")

    def delete_many(self, record_ids: Sequence[UUID]) -> None:
        if not record_ids:
            return

        def _op(repo: RecordRepo):
            repo.delete_many(record_ids)
            return []

        self._write(_op, "delete_many")

    def _write(self, op: Callable[[RecordRepo], List[Any]], what: str) -> List[D]:
        try:
            with transactional(self._sessions) as s:
                objs = op(RecordRepo(s, self._model))
                s.flush()
                out = [self._to_domain(o) for o in objs]
        except GatewayError:
            raise
        except ValueError as e:
            raise GatewayError(str(e)) from e
        except SQLAlchemyError as e:
            raise GatewayError(f"{what} {self.kind.value} failed: {getattr(e, 'orig', None) or e}") from e
        logger.debug("%s %s: %d row(s)", what, self.kind.value, len(out))
        self.publish()
        return out

    # ---------- live queries ----------

    def observe_query(
        self,
        on_next: Callable[[LiveSnapshot[D]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        filters: Optional[Filters] = None,
    ) -> LiveSubscription:
        """Subscribe and deliver the current snapshot right away."""
        sub = self._hub.subscribe(self.kind, on_next, on_error, filters)
        with self._hub.publish_lock(self.kind):
            self._deliver(sub)
        return sub

    def publish(self) -> None:
        with self._hub.publish_lock(self.kind):
            for sub in self._hub.subscribers(self.kind):
                self._deliver(sub)

    def _deliver(self, sub: LiveSubscription) -> None:
        if sub.closed:
            return
        try:
            items = self.list(sub.filters)
        except GatewayError as e:
            sub.fail(SubscriptionError(f"{self.kind.value} live query failed: {e}"))
            return
        sub.push(LiveSnapshot(items=items, is_synced=True))


class SqlAlchemyDataGateway:
    """DataGatewayPort over SQLAlchemy: one model gateway per entity type, sharing a hub."""

    def __init__(self, sessions: sessionmaker[Session], hub: Optional[LiveQueryHub] = None) -> None:
        self.hub = hub or LiveQueryHub()
        self.entries: SqlAlchemyModelGateway[Entry] = SqlAlchemyModelGateway(
            EntityKind.entry, DBEntry, to_domain_entry, sessions, self.hub,
        )
        self.tags: SqlAlchemyModelGateway[Tag] = SqlAlchemyModelGateway(
            EntityKind.tag, DBTag, to_domain_tag, sessions, self.hub,
        )
        self.entry_tags: SqlAlchemyModelGateway[EntryTag] = SqlAlchemyModelGateway(
            EntityKind.entry_tag, DBEntryTag, to_domain_entry_tag, sessions, self.hub, immutable=True,
        )

    def close(self) -> None:
        self.hub.close()
