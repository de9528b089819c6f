from __future__ import annotations
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Tag
class TagBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    color: str = Field(..., min_length=1, max_length=32)

class TagCreate(TagBase):
    pass

class TagUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    color: Optional[str] = Field(default=None, min_length=1, max_length=32)

class TagRead(TagBase):
    id: UUID
    model_config = ConfigDict(from_attributes=True)

class TagOption(TagRead):
    """A tag as offered in the catalog filter bar."""
    selected: bool = False
