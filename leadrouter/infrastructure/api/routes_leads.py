"""Lead endpoints — weighted and round-robin assignment."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from leadrouter.adapters.persistence.database import get_session
from leadrouter.application.use_cases.assign_lead import AssignLeadUseCase
from leadrouter.domain.entities.lead import Lead
from leadrouter.domain.exceptions import InvalidLeadError
from leadrouter.infrastructure.api.dependencies import get_assign_lead_uc, local_now
from leadrouter.infrastructure.api.schemas import AssignmentOut, LeadIn

router = APIRouter(prefix="/leads", tags=["leads"])


def _to_lead(body: LeadIn | None) -> Lead:
    if body is None:
        return Lead(requested_at=local_now())
    return Lead(
        amount=body.amount,
        purpose=body.purpose,
        region=body.region,
        language=body.language,
        requested_at=local_now(),
    )


@router.post("/assign", response_model=AssignmentOut)
async def assign_lead(
    body: LeadIn,
    uc: AssignLeadUseCase = Depends(get_assign_lead_uc),
    session: AsyncSession = Depends(get_session),
):
    """Assign a lead to the best-matching agent with free capacity.

    A lead with neither amount nor purpose has nothing to weigh and goes
    through round-robin instead.
    """
    try:
        outcome = await uc.execute(_to_lead(body))
    except InvalidLeadError as e:
        raise HTTPException(status_code=422, detail=str(e))
    await session.commit()
    return AssignmentOut.from_outcome(outcome)


@router.post("/assign/round-robin", response_model=AssignmentOut)
async def assign_round_robin(
    body: LeadIn | None = None,
    uc: AssignLeadUseCase = Depends(get_assign_lead_uc),
    session: AsyncSession = Depends(get_session),
):
    """Assign to the least-assigned-today agent, ignoring lead attributes."""
    try:
        outcome = await uc.assign_round_robin(_to_lead(body))
    except InvalidLeadError as e:
        raise HTTPException(status_code=422, detail=str(e))
    await session.commit()
    return AssignmentOut.from_outcome(outcome)
