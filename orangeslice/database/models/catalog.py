# orangeslice/database/models/catalog.py
from __future__ import annotations

from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import String, Text, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orangeslice.database.core.main import Base
from orangeslice.database.core.service_object import ServiceObject

if TYPE_CHECKING:
    from .taxonomy import EntryTag


class Entry(ServiceObject, Base):
    """A showcased demo project."""
    __tablename__ = "entry"

    name: Mapped[Optional[str]] = mapped_column(String(255))
    github_link: Mapped[Optional[str]] = mapped_column(Text)
    project_link: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)

    tag_links: Mapped[List["EntryTag"]] = relationship(
        back_populates="entry",
        passive_deletes=True,
    )
Index("ix_entry_name_lower", func.lower(Entry.name))
