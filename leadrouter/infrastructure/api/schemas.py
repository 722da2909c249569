"""Request / response models for the HTTP layer."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from leadrouter.application.use_cases.assign_lead import AgentAssigned, AssignmentOutcome


class LeadIn(BaseModel):
    amount: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    purpose: str | None = Field(default=None, min_length=1, max_length=40)
    region: str | None = Field(default=None, max_length=60)
    language: str | None = Field(default=None, max_length=20)


class CompleteIn(BaseModel):
    success: bool


class AssignmentOut(BaseModel):
    assigned: bool
    agent_id: int | None = None
    agent_name: str | None = None
    score: float | None = None
    assignment_id: int | None = None
    assigned_at: datetime | None = None
    strategy: str
    reason: str | None = None

    @classmethod
    def from_outcome(cls, outcome: AssignmentOutcome) -> AssignmentOut:
        if isinstance(outcome, AgentAssigned):
            return cls(
                assigned=True,
                agent_id=outcome.agent_id,
                agent_name=outcome.agent_name,
                score=round(outcome.score, 2) if outcome.score is not None else None,
                assignment_id=outcome.assignment_id,
                assigned_at=outcome.assigned_at,
                strategy=outcome.strategy.value,
            )
        return cls(assigned=False, strategy=outcome.strategy.value, reason=outcome.reason.value)
