from orangeslice.services.schemas.entries import (
    EntryWrite,
    EntryRead,
    EntryWithTagsRead,
)
from orangeslice.services.schemas.tags import (
    TagRead,
    TagCreate,
    TagUpdate,
    TagOption,
)
from orangeslice.services.schemas.catalog import (
    CatalogPage,
    EntryCard,
    EmptyState,
    ActiveFilters,
)
from orangeslice.services.schemas.admin import (
    AdminPage,
    CurrentUserRead,
    EditorRead,
    SaveResultRead,
    StatusLineRead,
)
__all__ = [
    "EntryWrite",
    "EntryRead",
    "EntryWithTagsRead",
    "TagRead",
    "TagCreate",
    "TagUpdate",
    "TagOption",
    "CatalogPage",
    "EntryCard",
    "EmptyState",
    "ActiveFilters",
    "AdminPage",
    "CurrentUserRead",
    "EditorRead",
    "SaveResultRead",
    "StatusLineRead",
]
