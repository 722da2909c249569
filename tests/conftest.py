"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone

import pytest

from leadrouter.adapters.memory.store import (
    InMemoryAgentRepository,
    InMemoryAgentStore,
    InMemoryAssignmentRepository,
    InMemoryWorkloadLedger,
)
from leadrouter.application.use_cases.assign_lead import AssignLeadUseCase
from leadrouter.domain.entities.agent import (
    Agent,
    LoanAmountRange,
    Performance,
    Specialties,
    Workload,
)
from leadrouter.domain.value_objects.enums import AgentStatus
from leadrouter.domain.value_objects.working_hours import WorkingHours

# Monday
FIXED_NOW = datetime(2026, 10, 19, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_agent():
    """Factory for agents with sensible defaults; every field overridable."""

    def _make(
        agent_id: int = 1,
        *,
        current: int = 0,
        max_leads: int = 10,
        today: int = 0,
        total: int | None = None,
        priority: int = 10,
        min_amount: float = 0,
        max_amount: float = 100_000,
        purposes: set[str] | None = None,
        conversion: float = 0.0,
        closed: int = 0,
        status: AgentStatus = AgentStatus.ACTIVE,
        working_hours: WorkingHours | None = None,
    ) -> Agent:
        return Agent(
            id=agent_id,
            name=f"Agent {agent_id}",
            contact=f"+6012000000{agent_id}",
            status=status,
            specialties=Specialties(
                amount_range=LoanAmountRange(minimum=min_amount, maximum=max_amount),
                purposes=set(purposes or ()),
            ),
            priority=priority,
            workload=Workload(
                current_leads=current,
                max_leads=max_leads,
                assigned_today=today,
                assigned_this_month=today,
                assigned_total=total if total is not None else today,
            ),
            performance=Performance(conversion_rate=conversion, closed_deals=closed),
            working_hours=working_hours or WorkingHours(),
        )

    return _make


class Engine:
    """In-memory wiring of the assignment engine for tests."""

    def __init__(self, agents, **uc_kwargs):
        self.store = InMemoryAgentStore(agents)
        self.agents = InMemoryAgentRepository(self.store)
        self.ledger = InMemoryWorkloadLedger(self.store)
        self.assignments = InMemoryAssignmentRepository()
        uc_kwargs.setdefault("clock", lambda: FIXED_NOW)
        self.uc = AssignLeadUseCase(
            agent_repo=self.agents,
            ledger=self.ledger,
            assignment_repo=self.assignments,
            **uc_kwargs,
        )

    async def agent(self, agent_id: int) -> Agent:
        return await self.store.read(agent_id)


@pytest.fixture
def build_engine():
    return Engine
