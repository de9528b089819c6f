from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from orangeslice.domain.enums import EditorState
from orangeslice.services.schemas.entries import EntryRead, EntryWithTagsRead
from orangeslice.services.schemas.tags import TagRead


class CurrentUserRead(BaseModel):
    username: str
    email: Optional[str] = None
    display_name: str


class StatusLineRead(BaseModel):
    at: datetime
    level: str
    message: str


class EditorRead(BaseModel):
    key: str
    entry_id: Optional[UUID] = None
    state: EditorState


class SaveResultRead(BaseModel):
    operation: str
    ok: bool
    entry: Optional[EntryRead] = None
    tag_ids: List[UUID] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    links_created: int = 0
    links_deleted: int = 0
    compensated: bool = False
    errors: Dict[str, str] = Field(default_factory=dict)


class AdminPage(BaseModel):
    user: CurrentUserRead
    entries: List[EntryWithTagsRead] = Field(default_factory=list)
    available_tags: List[TagRead] = Field(default_factory=list)
    editors: List[EditorRead] = Field(default_factory=list)
    status_log: List[StatusLineRead] = Field(default_factory=list)
