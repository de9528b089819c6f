from __future__ import annotations
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EntryWrite(BaseModel):
    """
    Admin form payload. Required-field checks happen in the workflow so the
    caller gets per-field messages; here everything is optional text.
    """
    name: Optional[str] = Field(default=None, max_length=255)
    github_link: Optional[str] = None
    project_link: Optional[str] = None
    image_url: Optional[str] = None
    tag_ids: List[UUID] = Field(default_factory=list)


class EntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: Optional[str] = None
    github_link: Optional[str] = None
    project_link: Optional[str] = None
    image_url: Optional[str] = None
    date_created: Optional[datetime] = None
    last_updated: Optional[datetime] = None


class EntryWithTagsRead(EntryRead):
    tag_ids: List[UUID] = Field(default_factory=list)
    tag_names: List[str] = Field(default_factory=list)
