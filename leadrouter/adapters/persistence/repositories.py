"""SQLAlchemy repository implementations."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import Update, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from leadrouter.adapters.persistence.models import AgentModel, AssignmentModel
from leadrouter.application.ports.agent_repo import AgentRepository
from leadrouter.application.ports.assignment_repo import AssignmentRepository
from leadrouter.application.ports.workload_ledger import WorkloadLedger
from leadrouter.domain.entities.agent import (
    Agent,
    LoanAmountRange,
    Performance,
    Specialties,
    Workload,
)
from leadrouter.domain.entities.assignment import Assignment
from leadrouter.domain.exceptions import AgentNotFoundError
from leadrouter.domain.value_objects.enums import (
    AgentStatus,
    AssignmentStatus,
    AssignmentStrategy,
)
from leadrouter.domain.value_objects.working_hours import WorkingHours

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _agent_to_domain(m: AgentModel) -> Agent:
    return Agent(
        id=m.id,
        name=m.name,
        contact=m.contact,
        email=m.email,
        status=AgentStatus(m.status),
        specialties=Specialties(
            amount_range=LoanAmountRange(minimum=m.min_amount, maximum=m.max_amount),
            purposes=set(m.purposes or []),
            regions=set(m.regions or []),
            languages=set(m.languages or []),
        ),
        priority=m.priority,
        workload=Workload(
            current_leads=m.current_leads,
            max_leads=m.max_leads,
            assigned_today=m.assigned_today,
            assigned_this_month=m.assigned_this_month,
            assigned_total=m.assigned_total,
        ),
        performance=Performance(
            conversion_rate=m.conversion_rate,
            closed_deals=m.closed_deals,
            total_loan_amount=m.total_loan_amount,
            avg_response_time=m.avg_response_time,
        ),
        working_hours=WorkingHours.from_dict(m.working_hours),
        notes=m.notes,
        last_active_at=m.last_active_at,
    )


def _apply_agent(m: AgentModel, agent: Agent) -> None:
    s, w, p = agent.specialties, agent.workload, agent.performance
    m.name = agent.name
    m.contact = agent.contact
    m.email = agent.email
    m.status = agent.status.value
    m.min_amount = s.amount_range.minimum
    m.max_amount = s.amount_range.maximum
    m.purposes = sorted(s.purposes)
    m.regions = sorted(s.regions)
    m.languages = sorted(s.languages)
    m.priority = agent.priority
    m.current_leads = w.current_leads
    m.max_leads = w.max_leads
    m.assigned_today = w.assigned_today
    m.assigned_this_month = w.assigned_this_month
    m.assigned_total = w.assigned_total
    m.conversion_rate = p.conversion_rate
    m.closed_deals = p.closed_deals
    m.total_loan_amount = p.total_loan_amount
    m.avg_response_time = p.avg_response_time
    m.working_hours = agent.working_hours.to_dict()
    m.notes = agent.notes


def _assignment_to_domain(m: AssignmentModel) -> Assignment:
    return Assignment(
        id=m.id,
        agent_id=m.agent_id,
        score=m.score,
        strategy=AssignmentStrategy(m.strategy),
        status=AssignmentStatus(m.status),
        lead_amount=m.lead_amount,
        lead_purpose=m.lead_purpose,
        lead_region=m.lead_region,
        lead_language=m.lead_language,
        assigned_at=m.assigned_at,
        completed_at=m.completed_at,
    )


def claim_statement(agent_id: int) -> Update:
    """Conditional increment: matches zero rows once the agent is full.

    PostgreSQL re-evaluates the WHERE clause after waiting on a concurrent
    writer's row lock, so the capacity check and the increment cannot be
    split by another transaction.
    """
    return (
        update(AgentModel)
        .where(
            AgentModel.id == agent_id,
            AgentModel.status == AgentStatus.ACTIVE.value,
            AgentModel.current_leads < AgentModel.max_leads,
        )
        .values(
            current_leads=AgentModel.current_leads + 1,
            assigned_today=AgentModel.assigned_today + 1,
            assigned_this_month=AgentModel.assigned_this_month + 1,
            assigned_total=AgentModel.assigned_total + 1,
            last_active_at=func.now(),
        )
        .execution_options(synchronize_session=False)
    )


def daily_reset_statement() -> Update:
    return (
        update(AgentModel)
        .values(assigned_today=0)
        .execution_options(synchronize_session=False)
    )


# ─── Repositories ────────────────────────────────────────────────────


class SqlAgentRepository(AgentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, agent: Agent) -> Agent:
        m = await self._s.get(AgentModel, agent.id) if agent.id is not None else None
        if m is None:
            m = AgentModel()
            self._s.add(m)
        _apply_agent(m, agent)
        await self._s.flush()
        agent.id = m.id
        return agent

    async def get_by_id(self, agent_id: int) -> Agent | None:
        m = await self._s.get(AgentModel, agent_id, populate_existing=True)
        return _agent_to_domain(m) if m else None

    async def get_by_contact(self, contact: str) -> Agent | None:
        result = await self._s.execute(
            select(AgentModel)
            .where(AgentModel.contact == contact)
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        return _agent_to_domain(m) if m else None

    async def get_active(self) -> list[Agent]:
        # Counters are written with bulk UPDATEs, so always refresh the identity map
        result = await self._s.execute(
            select(AgentModel)
            .where(AgentModel.status == AgentStatus.ACTIVE.value)
            .order_by(AgentModel.id)
            .execution_options(populate_existing=True)
        )
        return [_agent_to_domain(m) for m in result.scalars()]

    async def get_all(self) -> list[Agent]:
        result = await self._s.execute(
            select(AgentModel)
            .order_by(AgentModel.id)
            .execution_options(populate_existing=True)
        )
        return [_agent_to_domain(m) for m in result.scalars()]


class SqlWorkloadLedger(WorkloadLedger):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def try_claim(self, agent_id: int) -> bool:
        result = await self._s.execute(claim_statement(agent_id))
        return result.rowcount == 1

    async def complete_lead(
        self, agent_id: int, success: bool, loan_amount: float | None = None
    ) -> Agent:
        result = await self._s.execute(
            select(AgentModel)
            .where(AgentModel.id == agent_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        m = result.scalar_one_or_none()
        if m is None:
            raise AgentNotFoundError(agent_id)

        if m.current_leads <= 0:
            logger.warning(
                "Ledger inconsistency: agent %d completed a lead with current_leads=0",
                agent_id,
            )
            m.current_leads = 0
        else:
            m.current_leads -= 1

        if success:
            m.closed_deals += 1
            if loan_amount:
                m.total_loan_amount += loan_amount
            if m.assigned_total > 0:
                m.conversion_rate = min(100.0, m.closed_deals / m.assigned_total * 100)

        await self._s.flush()
        return _agent_to_domain(m)

    async def reset_daily(self) -> int:
        result = await self._s.execute(daily_reset_statement())
        return result.rowcount

    async def reset_monthly(self) -> int:
        result = await self._s.execute(
            update(AgentModel)
            .values(assigned_this_month=0)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount


class SqlAssignmentRepository(AssignmentRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    async def save(self, assignment: Assignment) -> Assignment:
        m = AssignmentModel(
            agent_id=assignment.agent_id,
            score=assignment.score,
            strategy=assignment.strategy.value,
            status=assignment.status.value,
            lead_amount=assignment.lead_amount,
            lead_purpose=assignment.lead_purpose,
            lead_region=assignment.lead_region,
            lead_language=assignment.lead_language,
        )
        if assignment.assigned_at is not None:
            m.assigned_at = assignment.assigned_at
        self._s.add(m)
        await self._s.flush()
        if assignment.assigned_at is None:
            await self._s.refresh(m, ["assigned_at"])
            assignment.assigned_at = m.assigned_at
        assignment.id = m.id
        return assignment

    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        m = await self._s.get(AssignmentModel, assignment_id, populate_existing=True)
        return _assignment_to_domain(m) if m else None

    async def close(
        self, assignment_id: int, status: AssignmentStatus, closed_at: datetime
    ) -> bool:
        result = await self._s.execute(
            update(AssignmentModel)
            .where(
                AssignmentModel.id == assignment_id,
                AssignmentModel.status == AssignmentStatus.OPEN.value,
            )
            .values(status=status.value, completed_at=closed_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def get_open_before(self, cutoff: datetime) -> list[Assignment]:
        result = await self._s.execute(
            select(AssignmentModel)
            .where(
                AssignmentModel.status == AssignmentStatus.OPEN.value,
                AssignmentModel.assigned_at < cutoff,
            )
            .order_by(AssignmentModel.id)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]

    async def get_recent(self, limit: int = 50) -> list[Assignment]:
        result = await self._s.execute(
            select(AssignmentModel).order_by(AssignmentModel.id.desc()).limit(limit)
        )
        return [_assignment_to_domain(m) for m in result.scalars()]
