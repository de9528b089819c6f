# orangeslice/database/models/__init__.py

from orangeslice.database.core.main import Base
from orangeslice.database.models.catalog import Entry
from orangeslice.database.models.taxonomy import (
    Tag,
    EntryTag,
)

__all__ = [
    "Base",
    "Entry",
    "Tag",
    "EntryTag",
]
