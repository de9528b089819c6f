# orangeslice/database/models/taxonomy.py
from __future__ import annotations

from typing import List, TYPE_CHECKING
from uuid import UUID as UUID_t

from sqlalchemy import ForeignKey, String, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orangeslice.database.core.main import Base
from orangeslice.database.core.service_object import ServiceObject

if TYPE_CHECKING:
    from .catalog import Entry


# =======================
# Tags
# =======================
class Tag(ServiceObject, Base):
    __tablename__ = "tag"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False)

    entry_links: Mapped[List["EntryTag"]] = relationship(
        back_populates="tag",
        passive_deletes=True,
    )


# =======================
# Entry <-> Tag join rows
# =======================
class EntryTag(ServiceObject, Base):
    """
    One edge of the Entry/Tag many-to-many. Rows are created and deleted,
    never updated in place.
    """
    __tablename__ = "entry_tag"
    __table_args__ = (
        UniqueConstraint("entry_id", "tag_id", name="uq_entry_tag_entry_tag"),
        Index("ix_entry_tag_entry_id", "entry_id"),
        Index("ix_entry_tag_tag_id", "tag_id"),
    )

    entry_id: Mapped[UUID_t] = mapped_column(
        ForeignKey("entry.id", ondelete="CASCADE"),
        nullable=False,
    )
    tag_id: Mapped[UUID_t] = mapped_column(
        ForeignKey("tag.id", ondelete="CASCADE"),
        nullable=False,
    )

    entry: Mapped["Entry"] = relationship(back_populates="tag_links")
    tag: Mapped["Tag"] = relationship(back_populates="entry_links")
