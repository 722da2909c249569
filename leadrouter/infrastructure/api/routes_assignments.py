"""Assignment endpoints — completion handle and audit listing."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from leadrouter.adapters.persistence.database import get_session
from leadrouter.application.use_cases.complete_lead import CompleteLeadUseCase
from leadrouter.domain.exceptions import AgentNotFoundError, AssignmentNotFoundError
from leadrouter.infrastructure.api.dependencies import (
    Ports,
    get_complete_lead_uc,
    get_ports,
)
from leadrouter.infrastructure.api.schemas import CompleteIn

router = APIRouter(prefix="/assignments", tags=["assignments"])


@router.get("")
async def list_assignments(limit: int = 50, ports: Ports = Depends(get_ports)):
    """Most recent assignments first."""
    assignments = await ports.assignments.get_recent(limit=min(max(limit, 1), 500))
    return {
        "total": len(assignments),
        "assignments": [
            {
                "id": a.id,
                "agent_id": a.agent_id,
                "score": a.score,
                "strategy": a.strategy.value,
                "status": a.status.value,
                "lead_amount": a.lead_amount,
                "lead_purpose": a.lead_purpose,
                "lead_region": a.lead_region,
                "lead_language": a.lead_language,
                "assigned_at": a.assigned_at.isoformat() if a.assigned_at else None,
                "completed_at": a.completed_at.isoformat() if a.completed_at else None,
            }
            for a in assignments
        ],
    }


@router.post("/{assignment_id}/complete")
async def complete_assignment(
    assignment_id: int,
    body: CompleteIn,
    uc: CompleteLeadUseCase = Depends(get_complete_lead_uc),
    session: AsyncSession = Depends(get_session),
):
    """Report the outcome of an assigned lead and release the agent's slot."""
    try:
        result = await uc.execute(assignment_id, body.success)
    except (AssignmentNotFoundError, AgentNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    await session.commit()
    return {
        "assignment_id": result.assignment_id,
        "agent_id": result.agent_id,
        "status": result.status.value,
        "released": result.released,
    }
