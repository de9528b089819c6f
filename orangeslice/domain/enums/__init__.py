from orangeslice.domain.enums.entity_kind import EntityKind
from orangeslice.domain.enums.editor_state import EditorState
from orangeslice.domain.enums.catalog_status import CatalogStatus, EmptyStateKind
__all__ = [
    "EntityKind",
    "EditorState",
    "CatalogStatus",
    "EmptyStateKind",
]
