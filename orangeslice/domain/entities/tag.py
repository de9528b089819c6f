# orangeslice/domain/entities/tag.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from uuid import UUID


@dataclass(frozen=True)
class Tag:
    id: UUID
    name: str
    color: str

    def as_dict(self):
        return asdict(self)
