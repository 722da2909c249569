"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from leadrouter.adapters.csv_loader.loader import load_agents
from leadrouter.adapters.memory.store import (
    InMemoryAgentRepository,
    InMemoryAgentStore,
    InMemoryAssignmentRepository,
    InMemoryWorkloadLedger,
)
from leadrouter.adapters.persistence.database import get_session
from leadrouter.adapters.persistence.repositories import (
    SqlAgentRepository,
    SqlAssignmentRepository,
    SqlWorkloadLedger,
)
from leadrouter.application.ports.agent_repo import AgentRepository
from leadrouter.application.ports.assignment_repo import AssignmentRepository
from leadrouter.application.ports.workload_ledger import WorkloadLedger
from leadrouter.application.use_cases.assign_lead import AssignLeadUseCase
from leadrouter.application.use_cases.complete_lead import (
    CompleteLeadUseCase,
    ExpireStaleAssignmentsUseCase,
)
from leadrouter.application.use_cases.distribution_report import DistributionReportUseCase
from leadrouter.application.use_cases.reset_counters import ResetCountersUseCase
from leadrouter.config import settings
from leadrouter.tools.seed_agents import upsert_agents

logger = logging.getLogger(__name__)

_tz = ZoneInfo(settings.timezone)

# Process-wide singletons for the embedded backend
if settings.storage_backend == "memory":
    logger.info("Using in-memory agent store (single process only)")
    _memory_store = InMemoryAgentStore()
    _memory_assignments = InMemoryAssignmentRepository()
else:
    _memory_store = None
    _memory_assignments = None


def local_now() -> datetime:
    return datetime.now(_tz)


async def seed_memory_store(csv_path: Path) -> dict[str, int]:
    """Load a roster CSV into the embedded store (memory backend only)."""
    counts = await upsert_agents(InMemoryAgentRepository(_memory_store), load_agents(csv_path))
    logger.info(
        "Seeded in-memory store from %s: %d created, %d updated",
        csv_path.name, counts["created"], counts["updated"],
    )
    return counts


@dataclass
class Ports:
    agents: AgentRepository
    ledger: WorkloadLedger
    assignments: AssignmentRepository


def build_ports(session: AsyncSession) -> Ports:
    if _memory_store is not None:
        return Ports(
            agents=InMemoryAgentRepository(_memory_store),
            ledger=InMemoryWorkloadLedger(_memory_store),
            assignments=_memory_assignments,
        )
    return Ports(
        agents=SqlAgentRepository(session),
        ledger=SqlWorkloadLedger(session),
        assignments=SqlAssignmentRepository(session),
    )


def get_ports(session: AsyncSession = Depends(get_session)) -> Ports:
    return build_ports(session)


def get_assign_lead_uc(ports: Ports = Depends(get_ports)) -> AssignLeadUseCase:
    return AssignLeadUseCase(
        agent_repo=ports.agents,
        ledger=ports.ledger,
        assignment_repo=ports.assignments,
        enforce_working_hours=settings.enforce_working_hours,
        clock=local_now,
    )


def get_complete_lead_uc(ports: Ports = Depends(get_ports)) -> CompleteLeadUseCase:
    return CompleteLeadUseCase(
        assignment_repo=ports.assignments, ledger=ports.ledger, clock=local_now
    )


def get_expire_stale_uc(ports: Ports = Depends(get_ports)) -> ExpireStaleAssignmentsUseCase:
    return ExpireStaleAssignmentsUseCase(
        assignment_repo=ports.assignments,
        ledger=ports.ledger,
        ttl=timedelta(hours=settings.claim_ttl_hours),
        clock=local_now,
    )


def get_reset_counters_uc(ports: Ports = Depends(get_ports)) -> ResetCountersUseCase:
    return ResetCountersUseCase(
        ledger=ports.ledger,
        assignment_repo=ports.assignments,
        clear_current_leads=settings.reset_clears_current_leads,
        clock=local_now,
    )


def get_report_uc(ports: Ports = Depends(get_ports)) -> DistributionReportUseCase:
    return DistributionReportUseCase(agent_repo=ports.agents)
