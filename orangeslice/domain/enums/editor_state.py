from __future__ import annotations
from enum import StrEnum

class EditorState(StrEnum):
    idle = "idle"
    form_open_create = "form_open_create"
    form_open_edit = "form_open_edit"
    submitting = "submitting"
