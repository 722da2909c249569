"""Embedded in-process agent store with per-agent locking.

Documents are copied on every read and write, so callers only ever hold
snapshots, the same way they would with a remote document store. Each
read/write yields to the event loop once, like a driver round-trip would.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from datetime import datetime, timezone

from leadrouter.application.ports.agent_repo import AgentRepository
from leadrouter.application.ports.assignment_repo import AssignmentRepository
from leadrouter.application.ports.workload_ledger import WorkloadLedger
from leadrouter.domain.entities.agent import Agent
from leadrouter.domain.entities.assignment import Assignment
from leadrouter.domain.exceptions import AgentNotFoundError
from leadrouter.domain.value_objects.enums import AssignmentStatus

logger = logging.getLogger(__name__)


class InMemoryAgentStore:
    def __init__(self, agents: list[Agent] | None = None):
        self._docs: dict[int, Agent] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._next_id = 1
        for agent in agents or []:
            self.insert(agent)

    def insert(self, agent: Agent) -> Agent:
        if agent.id is None:
            agent.id = self._next_id
        self._next_id = max(self._next_id, agent.id + 1)
        self._docs[agent.id] = copy.deepcopy(agent)
        return agent

    def lock_for(self, agent_id: int) -> asyncio.Lock:
        return self._locks.setdefault(agent_id, asyncio.Lock())

    def ids(self) -> list[int]:
        return sorted(self._docs)

    async def read(self, agent_id: int) -> Agent | None:
        await asyncio.sleep(0)
        doc = self._docs.get(agent_id)
        return copy.deepcopy(doc) if doc else None

    async def read_all(self) -> list[Agent]:
        await asyncio.sleep(0)
        return [copy.deepcopy(self._docs[i]) for i in self.ids()]

    async def write(self, agent: Agent) -> None:
        await asyncio.sleep(0)
        self._docs[agent.id] = copy.deepcopy(agent)


class InMemoryAgentRepository(AgentRepository):
    def __init__(self, store: InMemoryAgentStore):
        self._store = store

    async def save(self, agent: Agent) -> Agent:
        if agent.id is None or await self._store.read(agent.id) is None:
            return self._store.insert(agent)
        async with self._store.lock_for(agent.id):
            await self._store.write(agent)
        return agent

    async def get_by_id(self, agent_id: int) -> Agent | None:
        return await self._store.read(agent_id)

    async def get_by_contact(self, contact: str) -> Agent | None:
        return next((a for a in await self._store.read_all() if a.contact == contact), None)

    async def get_active(self) -> list[Agent]:
        return [a for a in await self._store.read_all() if a.is_active()]

    async def get_all(self) -> list[Agent]:
        return await self._store.read_all()


class InMemoryWorkloadLedger(WorkloadLedger):
    """Read-modify-write under a per-agent ``asyncio.Lock``.

    The store has no conditional update, so the lock is what keeps the
    capacity check and the increment indivisible.
    """

    def __init__(self, store: InMemoryAgentStore):
        self._store = store

    async def try_claim(self, agent_id: int) -> bool:
        async with self._store.lock_for(agent_id):
            agent = await self._store.read(agent_id)
            if agent is None or not agent.is_active() or not agent.has_capacity():
                return False
            w = agent.workload
            w.current_leads += 1
            w.assigned_today += 1
            w.assigned_this_month += 1
            w.assigned_total += 1
            agent.last_active_at = datetime.now(timezone.utc)
            await self._store.write(agent)
            return True

    async def complete_lead(
        self, agent_id: int, success: bool, loan_amount: float | None = None
    ) -> Agent:
        async with self._store.lock_for(agent_id):
            agent = await self._store.read(agent_id)
            if agent is None:
                raise AgentNotFoundError(agent_id)

            w, p = agent.workload, agent.performance
            if w.current_leads <= 0:
                logger.warning(
                    "Ledger inconsistency: agent %d completed a lead with current_leads=0",
                    agent_id,
                )
                w.current_leads = 0
            else:
                w.current_leads -= 1

            if success:
                p.closed_deals += 1
                if loan_amount:
                    p.total_loan_amount += loan_amount
                if w.assigned_total > 0:
                    p.conversion_rate = min(100.0, p.closed_deals / w.assigned_total * 100)

            await self._store.write(agent)
            return agent

    async def reset_daily(self) -> int:
        touched = 0
        for agent_id in self._store.ids():
            async with self._store.lock_for(agent_id):
                agent = await self._store.read(agent_id)
                agent.workload.assigned_today = 0
                await self._store.write(agent)
                touched += 1
        return touched

    async def reset_monthly(self) -> int:
        touched = 0
        for agent_id in self._store.ids():
            async with self._store.lock_for(agent_id):
                agent = await self._store.read(agent_id)
                agent.workload.assigned_this_month = 0
                await self._store.write(agent)
                touched += 1
        return touched


class InMemoryAssignmentRepository(AssignmentRepository):
    def __init__(self):
        self.assignments: dict[int, Assignment] = {}

    async def save(self, assignment: Assignment) -> Assignment:
        assignment.id = len(self.assignments) + 1
        if assignment.assigned_at is None:
            assignment.assigned_at = datetime.now(timezone.utc)
        self.assignments[assignment.id] = copy.deepcopy(assignment)
        return assignment

    async def get_by_id(self, assignment_id: int) -> Assignment | None:
        found = self.assignments.get(assignment_id)
        return copy.deepcopy(found) if found else None

    async def close(
        self, assignment_id: int, status: AssignmentStatus, closed_at: datetime
    ) -> bool:
        found = self.assignments.get(assignment_id)
        if found is None or not found.is_open():
            return False
        found.status = status
        found.completed_at = closed_at
        return True

    async def get_open_before(self, cutoff: datetime) -> list[Assignment]:
        return [
            copy.deepcopy(a)
            for a in self.assignments.values()
            if a.is_open() and a.assigned_at < cutoff
        ]

    async def get_recent(self, limit: int = 50) -> list[Assignment]:
        recent = sorted(self.assignments.values(), key=lambda a: a.id, reverse=True)
        return [copy.deepcopy(a) for a in recent[:limit]]
