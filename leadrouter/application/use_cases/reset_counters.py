"""ResetCountersUseCase — the daily and monthly counter resets."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from leadrouter.application.ports.assignment_repo import AssignmentRepository
from leadrouter.application.ports.workload_ledger import WorkloadLedger
from leadrouter.application.use_cases.complete_lead import expire_open_assignments

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResetResult:
    agents_reset: int
    assignments_expired: int = 0


class ResetCountersUseCase:
    """Invoked by the external scheduler.

    ``clear_current_leads`` selects the business rule for the daily reset.
    When True every lead is assumed closed by the end of the day: each
    assignment open at reset time is closed as ``expired`` and its slot
    released through the ledger, one handle at a time. ``current_leads`` is
    never overwritten, so a claim that lands while the reset runs keeps
    both its slot and its open handle. When False only ``assigned_today``
    is zeroed.

    Repeating either reset on the same day is harmless: the counters are
    set to zero and already-expired handles are skipped.
    """

    def __init__(
        self,
        ledger: WorkloadLedger,
        assignment_repo: AssignmentRepository,
        clear_current_leads: bool,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._ledger = ledger
        self._assignments = assignment_repo
        self._clear_current = clear_current_leads
        self._clock = clock

    async def reset_daily(self) -> ResetResult:
        expired = 0
        if self._clear_current:
            now = self._clock()
            expired = await expire_open_assignments(
                self._assignments, self._ledger, cutoff=now, now=now
            )

        touched = await self._ledger.reset_daily()
        logger.info(
            "Daily reset: %d agent(s), current_leads %s, %d open assignment(s) expired",
            touched, "released" if self._clear_current else "kept", expired,
        )
        return ResetResult(agents_reset=touched, assignments_expired=expired)

    async def reset_monthly(self) -> ResetResult:
        touched = await self._ledger.reset_monthly()
        logger.info("Monthly reset: %d agent(s)", touched)
        return ResetResult(agents_reset=touched)
