"""CompleteLeadUseCase — release the capacity held by one assignment."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from leadrouter.application.ports.assignment_repo import AssignmentRepository
from leadrouter.application.ports.workload_ledger import WorkloadLedger
from leadrouter.domain.exceptions import AssignmentNotFoundError
from leadrouter.domain.value_objects.enums import AssignmentStatus

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CompletionResult:
    assignment_id: int
    agent_id: int
    status: AssignmentStatus
    released: bool


class CompleteLeadUseCase:
    """Close an open assignment exactly once and release its slot.

    The ``open → converted|lost`` transition is conditional, so a retried
    or duplicated completion finds the assignment already closed and
    leaves the ledger untouched.
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        ledger: WorkloadLedger,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._assignments = assignment_repo
        self._ledger = ledger
        self._clock = clock

    async def execute(self, assignment_id: int, success: bool) -> CompletionResult:
        assignment = await self._assignments.get_by_id(assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)

        status = AssignmentStatus.CONVERTED if success else AssignmentStatus.LOST
        if not await self._assignments.close(assignment_id, status, self._clock()):
            current = await self._assignments.get_by_id(assignment_id)
            logger.warning(
                "Ledger inconsistency: assignment %d completed again (already %s), ignoring",
                assignment_id, current.status.value if current else "missing",
            )
            return CompletionResult(
                assignment_id=assignment_id,
                agent_id=assignment.agent_id,
                status=current.status if current else assignment.status,
                released=False,
            )

        await self._ledger.complete_lead(
            assignment.agent_id,
            success,
            loan_amount=assignment.lead_amount if success else None,
        )
        logger.info(
            "Assignment %d closed as %s, agent %d released a slot",
            assignment_id, status.value, assignment.agent_id,
        )
        return CompletionResult(
            assignment_id=assignment_id,
            agent_id=assignment.agent_id,
            status=status,
            released=True,
        )


async def expire_open_assignments(
    assignment_repo: AssignmentRepository,
    ledger: WorkloadLedger,
    cutoff: datetime,
    now: datetime,
) -> int:
    """Close every assignment still open before *cutoff* and release its slot.

    Each release goes through the same conditional ``open → expired``
    transition as a completion, so it happens at most once per handle and
    never touches slots claimed after the snapshot was read.
    """
    expired = 0
    for assignment in await assignment_repo.get_open_before(cutoff):
        if not await assignment_repo.close(assignment.id, AssignmentStatus.EXPIRED, now):
            continue  # completed concurrently
        await ledger.complete_lead(assignment.agent_id, False)
        expired += 1
    return expired


class ExpireStaleAssignmentsUseCase:
    """Sweep: close assignments nobody completed within the TTL.

    Guards against callers that crash between assignment and completion,
    which would otherwise hold the agent's slot forever.
    """

    def __init__(
        self,
        assignment_repo: AssignmentRepository,
        ledger: WorkloadLedger,
        ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._assignments = assignment_repo
        self._ledger = ledger
        self._ttl = ttl
        self._clock = clock

    async def execute(self) -> int:
        now = self._clock()
        expired = await expire_open_assignments(
            self._assignments, self._ledger, cutoff=now - self._ttl, now=now
        )
        if expired:
            logger.warning("Expired %d stale assignment(s) older than %s", expired, self._ttl)
        else:
            logger.info("No stale assignments older than %s", self._ttl)
        return expired
