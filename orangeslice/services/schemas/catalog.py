from __future__ import annotations
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from orangeslice.domain.enums import CatalogStatus, EmptyStateKind
from orangeslice.services.schemas.tags import TagOption


class EntryCard(BaseModel):
    id: UUID
    name: str
    github_link: Optional[str] = None
    project_link: Optional[str] = None
    image_url: str
    tag_names: List[str] = Field(default_factory=list)


class ActiveFilters(BaseModel):
    search: Optional[str] = None
    tag_count: int = 0


class EmptyState(BaseModel):
    kind: EmptyStateKind
    message: str
    detail: Optional[str] = None


class CatalogPage(BaseModel):
    status: CatalogStatus
    last_error: Optional[str] = None
    total_count: int = 0
    visible_count: int = 0
    count_label: str = "0 Projects"
    search: str = ""
    selected_tag_ids: List[UUID] = Field(default_factory=list)
    available_tags: List[TagOption] = Field(default_factory=list)
    active_filters: Optional[ActiveFilters] = None
    entries: List[EntryCard] = Field(default_factory=list)
    empty_state: Optional[EmptyState] = None
