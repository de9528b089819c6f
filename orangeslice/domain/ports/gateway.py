from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Mapping, Optional, Protocol, Sequence, TypeVar
from uuid import UUID

from orangeslice.domain.entities.entry import Entry
from orangeslice.domain.entities.tag import Tag
from orangeslice.domain.entities.links.entry_tag_link import EntryTag

T = TypeVar("T")

Filters = Mapping[str, Any]


@dataclass(frozen=True)
class LiveSnapshot(Generic[T]):
    """Full current result set of a live query."""
    items: List[T] = field(default_factory=list)
    is_synced: bool = True


class Subscription(Protocol):
    @property
    def closed(self) -> bool: ...
    def unsubscribe(self) -> None: ...


class ModelGatewayPort(Protocol[T]):
    def list(self, filters: Optional[Filters] = None) -> List[T]: ...
    def get(self, record_id: UUID) -> Optional[T]: ...
    def create(self, **fields: Any) -> T: ...
    def update(self, record_id: UUID, **fields: Any) -> T: ...
    def delete(self, record_id: UUID) -> None: ...
    def create_many(self, specs: Sequence[Mapping[str, Any]]) -> List[T]: ...
    def delete_many(self, record_ids: Sequence[UUID]) -> None: ...
    def observe_query(
        self,
        on_next: Callable[[LiveSnapshot[T]], None],
        on_error: Optional[Callable[[Exception], None]] = None,
        filters: Optional[Filters] = None,
    ) -> Subscription: ...


class DataGatewayPort(Protocol):
    """One model gateway per entity type."""
    entries: ModelGatewayPort[Entry]
    tags: ModelGatewayPort[Tag]
    entry_tags: ModelGatewayPort[EntryTag]
