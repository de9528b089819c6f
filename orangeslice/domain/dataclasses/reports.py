# orangeslice/domain/dataclasses/reports.py
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID


# ---------------------------------------------------------------------------
# Base report (shared fields + utilities)
# ---------------------------------------------------------------------------
@dataclass
class BaseReport:
    """Common report base:
    - timing: started_at / finished_at
    - error capture: error_details
    - helpers: start(), stop(), add_error(), as_dict()
    """
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    # Each tuple is (subject/field/step, message)
    error_details: List[Tuple[str, str]] = field(default_factory=list)

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = datetime.now(timezone.utc)

    def stop(self) -> None:
        self.finished_at = datetime.now(timezone.utc)

    def add_error(self, subject: str, message: str) -> None:
        self.error_details.append((subject, message))

    @property
    def ok(self) -> bool:
        return not self.error_details

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Save / delete workflow report
# ---------------------------------------------------------------------------
@dataclass
class SaveReport(BaseReport):
    operation: str = ""               # create|edit|delete
    entry_id: Optional[UUID] = None
    tag_ids: List[UUID] = field(default_factory=list)
    steps: List[str] = field(default_factory=list)   # completed steps, in order
    links_created: int = 0
    links_deleted: int = 0
    compensated: bool = False         # a compensating action restored prior state
    not_found: bool = False
    # field -> message for form validation failures
    validation_errors: Dict[str, str] = field(default_factory=dict)

    def step(self, name: str) -> None:
        self.steps.append(name)

    def invalid(self, errors: Dict[str, str]) -> None:
        self.validation_errors.update(errors)
        for k, v in errors.items():
            self.add_error(k, v)

    @property
    def is_validation_failure(self) -> bool:
        return bool(self.validation_errors)

    def summary(self) -> str:
        if self.ok:
            return (
                f"{self.operation} {self.entry_id}: ok "
                f"(+{self.links_created}/-{self.links_deleted} tag links)"
            )
        first = "; ".join(f"{s}: {m}" for s, m in self.error_details)
        tail = " (compensated)" if self.compensated else ""
        return f"{self.operation} {self.entry_id or ''}: failed: {first}{tail}"
