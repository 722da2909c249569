"""Agent endpoints — roster, distribution report and counter jobs."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leadrouter.adapters.persistence.database import get_session
from leadrouter.application.use_cases.complete_lead import ExpireStaleAssignmentsUseCase
from leadrouter.application.use_cases.distribution_report import DistributionReportUseCase
from leadrouter.application.use_cases.reset_counters import ResetCountersUseCase
from leadrouter.infrastructure.api.dependencies import (
    get_expire_stale_uc,
    get_report_uc,
    get_reset_counters_uc,
)

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("/report")
async def distribution_report(uc: DistributionReportUseCase = Depends(get_report_uc)):
    """Per-agent workload, conversion and availability."""
    return asdict(await uc.execute())


@router.post("/reset-daily")
async def reset_daily(
    uc: ResetCountersUseCase = Depends(get_reset_counters_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.reset_daily()
    await session.commit()
    return {"status": "ok", **asdict(result)}


@router.post("/reset-monthly")
async def reset_monthly(
    uc: ResetCountersUseCase = Depends(get_reset_counters_uc),
    session: AsyncSession = Depends(get_session),
):
    result = await uc.reset_monthly()
    await session.commit()
    return {"status": "ok", **asdict(result)}


@router.post("/expire-stale")
async def expire_stale(
    uc: ExpireStaleAssignmentsUseCase = Depends(get_expire_stale_uc),
    session: AsyncSession = Depends(get_session),
):
    """Release capacity held by assignments nobody completed in time."""
    expired = await uc.execute()
    await session.commit()
    return {"status": "ok", "expired": expired}
