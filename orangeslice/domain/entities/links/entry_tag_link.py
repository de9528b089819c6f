# orangeslice/domain/entities/links/entry_tag_link.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class EntryTag:
    """
    Join record connecting an Entry and a Tag, exactly as stored.
    The DB enforces that (entry_id, tag_id) is unique.
    """
    id: UUID
    entry_id: UUID
    tag_id: UUID

    def spec(self) -> dict:
        """Fields needed to re-create this link."""
        return {"entry_id": self.entry_id, "tag_id": self.tag_id}


@dataclass(frozen=True)
class EnrichedEntryTag:
    """A join record with its tag resolved, ready for display and filtering."""
    id: UUID
    entry_id: UUID
    tag_id: UUID
    tag_name: str
    tag_color: str
