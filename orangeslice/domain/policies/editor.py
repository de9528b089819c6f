# orangeslice/domain/policies/editor.py
from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from uuid import UUID

from orangeslice.domain.enums.editor_state import EditorState
from orangeslice.domain.errors import EditorBusy, EditorStateError

_OPEN = (EditorState.form_open_create, EditorState.form_open_edit)


@dataclass
class EntryEditor:
    """
    Form state for a single entry:

        idle -> form_open_create | form_open_edit -> submitting -> idle
        (any open form can also be cancelled back to idle)
    """
    key: str = field(default_factory=lambda: f"new-{uuid.uuid4().hex[:8]}")
    entry_id: Optional[UUID] = None
    state: EditorState = EditorState.idle

    def open_create(self) -> None:
        self._require(EditorState.idle)
        self.entry_id = None
        self.state = EditorState.form_open_create

    def open_edit(self, entry_id: UUID) -> None:
        self._require(EditorState.idle)
        self.entry_id = entry_id
        self.state = EditorState.form_open_edit

    def begin_submit(self) -> None:
        self._require(*_OPEN)
        self.state = EditorState.submitting

    def bind(self, entry_id: UUID) -> None:
        """Attach the id of an entry created by this editor."""
        self._require(EditorState.submitting)
        self.entry_id = entry_id

    def finish(self) -> None:
        self._require(EditorState.submitting)
        self.state = EditorState.idle

    def cancel(self) -> None:
        self._require(*_OPEN)
        self.state = EditorState.idle

    @property
    def busy(self) -> bool:
        return self.state == EditorState.submitting

    def _require(self, *allowed: EditorState) -> None:
        if self.state not in allowed:
            names = "|".join(s.value for s in allowed)
            raise EditorStateError(f"editor {self.key} is {self.state.value}, expected {names}")


class EditorRegistry:
    """
    Tracks open editors so two writes never interleave on the same entry.
    Creates get a fresh key each; edits and deletes are keyed by entry id.
    An entry counts as busy from the moment its editor opens until it is
    released, including a create that has already bound its new id.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._editors: Dict[str, EntryEditor] = {}

    def open_create(self) -> EntryEditor:
        editor = EntryEditor()
        editor.open_create()
        with self._lock:
            self._editors[editor.key] = editor
        return editor

    def open_edit(self, entry_id: UUID) -> EntryEditor:
        key = str(entry_id)
        with self._lock:
            if any(e.key == key or e.entry_id == entry_id for e in self._editors.values()):
                raise EditorBusy(f"entry {entry_id} is already being edited")
            editor = EntryEditor(key=key)
            editor.open_edit(entry_id)
            self._editors[key] = editor
        return editor

    def release(self, editor: EntryEditor) -> None:
        """Return the editor to idle (finishing or cancelling as needed) and forget it."""
        if editor.state == EditorState.submitting:
            editor.finish()
        elif editor.state in _OPEN:
            editor.cancel()
        with self._lock:
            if self._editors.get(editor.key) is editor:
                del self._editors[editor.key]

    def active(self) -> List[EntryEditor]:
        with self._lock:
            return list(self._editors.values())
