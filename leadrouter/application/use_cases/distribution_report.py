"""DistributionReportUseCase — per-agent workload and performance snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field

from leadrouter.application.ports.agent_repo import AgentRepository
from leadrouter.domain.entities.agent import Agent


@dataclass
class AgentLoadRow:
    agent_id: int
    name: str
    contact: str
    status: str
    priority: int
    current_leads: int
    max_leads: int
    load_percentage: float
    assigned_today: int
    assigned_this_month: int
    assigned_total: int
    conversion_rate: float
    closed_deals: int
    capacity_state: str


@dataclass
class DistributionReport:
    total_agents: int = 0
    active_agents: int = 0
    current_leads: int = 0
    capacity: int = 0
    utilisation: float = 0.0
    assigned_today: int = 0
    assigned_this_month: int = 0
    agents: list[AgentLoadRow] = field(default_factory=list)


def _row(agent: Agent) -> AgentLoadRow:
    w, p = agent.workload, agent.performance
    return AgentLoadRow(
        agent_id=agent.id,
        name=agent.name,
        contact=agent.contact,
        status=agent.status.value,
        priority=agent.priority,
        current_leads=w.current_leads,
        max_leads=w.max_leads,
        load_percentage=round(agent.load_percentage(), 1),
        assigned_today=w.assigned_today,
        assigned_this_month=w.assigned_this_month,
        assigned_total=w.assigned_total,
        conversion_rate=round(p.conversion_rate, 1),
        closed_deals=p.closed_deals,
        capacity_state=agent.capacity_state().value,
    )


class DistributionReportUseCase:
    def __init__(self, agent_repo: AgentRepository):
        self._agents = agent_repo

    async def execute(self) -> DistributionReport:
        """Fleet totals cover active agents only; rows list everyone."""
        agents = await self._agents.get_all()
        agents.sort(key=lambda a: (-a.priority, a.id))
        active = [a for a in agents if a.is_active()]

        current = sum(a.workload.current_leads for a in active)
        capacity = sum(a.workload.max_leads for a in active)
        return DistributionReport(
            total_agents=len(agents),
            active_agents=len(active),
            current_leads=current,
            capacity=capacity,
            utilisation=round(current / max(capacity, 1) * 100, 1),
            assigned_today=sum(a.workload.assigned_today for a in active),
            assigned_this_month=sum(a.workload.assigned_this_month for a in active),
            agents=[_row(a) for a in agents],
        )
