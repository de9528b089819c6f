from __future__ import annotations
from enum import StrEnum

class EntityKind(StrEnum):
    entry = "entry"
    tag = "tag"
    entry_tag = "entry_tag"
