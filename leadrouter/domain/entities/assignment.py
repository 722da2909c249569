"""Assignment entity — the audit record and release handle of one claim."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from leadrouter.domain.value_objects.enums import AssignmentStatus, AssignmentStrategy


@dataclass
class Assignment:
    id: int | None
    agent_id: int
    score: float | None
    strategy: AssignmentStrategy
    status: AssignmentStatus = AssignmentStatus.OPEN
    lead_amount: float | None = None
    lead_purpose: str | None = None
    lead_region: str | None = None
    lead_language: str | None = None
    assigned_at: datetime | None = None
    completed_at: datetime | None = None

    def is_open(self) -> bool:
        return self.status == AssignmentStatus.OPEN
