# orangeslice/domain/entities/entry.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

REQUIRED_FIELDS = {
    "name": "Project name",
    "github_link": "GitHub link",
    "project_link": "Project link",
}


@dataclass(frozen=True)
class Entry:
    """
    A showcased project as seen by readers. Every display field may be
    missing on stored records; the catalog view supplies fallbacks.
    """
    id: UUID
    name: Optional[str] = None
    github_link: Optional[str] = None
    project_link: Optional[str] = None
    image_url: Optional[str] = None
    date_created: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    def name_matches(self, search: str) -> bool:
        """Case-insensitive substring match; an empty search matches everything."""
        needle = (search or "").lower()
        if not needle:
            return True
        return bool(self.name) and needle in self.name.lower()

    def as_dict(self):
        return asdict(self)


@dataclass
class EntryFields:
    """Editable fields as submitted by the administrator form."""
    name: Optional[str] = None
    github_link: Optional[str] = None
    project_link: Optional[str] = None
    image_url: Optional[str] = None

    def normalized(self) -> "EntryFields":
        def _clean(v: Optional[str]) -> Optional[str]:
            if v is None:
                return None
            v = v.strip()
            return v or None

        return EntryFields(
            name=_clean(self.name),
            github_link=_clean(self.github_link),
            project_link=_clean(self.project_link),
            image_url=_clean(self.image_url),
        )

    def validate(self) -> Dict[str, str]:
        """Field -> message for every required field that is empty."""
        clean = self.normalized()
        errors: Dict[str, str] = {}
        for field, label in REQUIRED_FIELDS.items():
            if not getattr(clean, field):
                errors[field] = f"{label} is required"
        return errors

    def as_dict(self):
        return asdict(self)
