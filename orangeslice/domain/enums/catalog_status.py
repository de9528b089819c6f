from __future__ import annotations
from enum import StrEnum

class CatalogStatus(StrEnum):
    loading = "loading"
    ready = "ready"


class EmptyStateKind(StrEnum):
    no_entries = "no_entries"
    no_matches = "no_matches"
