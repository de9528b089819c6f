from __future__ import annotations
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar
from uuid import UUID

from sqlalchemy import Uuid, delete, select
from sqlalchemy.orm import Session

from orangeslice.database.core.main import Base

M = TypeVar("M", bound=Base)

# bookkeeping columns callers may not write directly
_READONLY = {"id", "date_created", "last_updated"}


class RecordRepo(Generic[M]):
    """
    Table-agnostic CRUD over one model, with equality filters on any column.
    Callers own the transaction; nothing here commits.
    """

    def __init__(self, db: Session, model: Type[M]) -> None:
        self.db = db
        self.model = model

    @property
    def columns(self) -> Dict[str, Any]:
        return dict(self.model.__table__.columns.items())

    def coerce(self, fields: Mapping[str, Any], *, writable: bool = False) -> Dict[str, Any]:
        """
        Validate field names against the table and turn str ids into UUIDs.
        Raises ValueError on unknown (or, with `writable`, read-only) fields.
        """
        cols = self.columns
        out: Dict[str, Any] = {}
        for k, v in fields.items():
            if k not in cols or (writable and k in _READONLY):
                raise ValueError(f"{self.model.__tablename__} has no writable field {k!r}")
            if isinstance(cols[k].type, Uuid) and isinstance(v, str):
                v = UUID(v)
            out[k] = v
        return out

    def _ordered(self):
        return select(self.model).order_by(self.model.date_created.asc(), self.model.id.asc())

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> List[M]:
        stmt = self._ordered()
        for k, v in self.coerce(filters or {}).items():
            stmt = stmt.where(getattr(self.model, k) == v)
        return self.db.execute(stmt).scalars().all()

    def get(self, record_id: UUID) -> Optional[M]:
        return self.db.get(self.model, record_id)

    def create(self, **fields: Any) -> M:
        obj = self.model(**self.coerce(fields, writable=True))
        self.db.add(obj)
        return obj

    def update(self, record_id: UUID, **fields: Any) -> Optional[M]:
        obj = self.get(record_id)
        if not obj:
            return None
        for k, v in self.coerce(fields, writable=True).items():
            setattr(obj, k, v)
        return obj

    def delete(self, record_id: UUID) -> bool:
        obj = self.get(record_id)
        if not obj:
            return False
        self.db.delete(obj)
        return True

    def create_many(self, specs: Iterable[Mapping[str, Any]]) -> List[M]:
        objs = [self.model(**self.coerce(s, writable=True)) for s in specs]
        self.db.add_all(objs)
        return objs

    def delete_many(self, record_ids: Sequence[UUID]) -> int:
        ids = list(record_ids)
        if not ids:
            return 0
        res = self.db.execute(delete(self.model).where(self.model.id.in_(ids)))
        return res.rowcount or 0
