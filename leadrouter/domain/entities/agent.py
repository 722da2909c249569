"""Agent entity — a sales agent who receives loan leads."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from leadrouter.domain.value_objects.enums import AgentStatus, CapacityState
from leadrouter.domain.value_objects.working_hours import WorkingHours

DEFAULT_MAX_LEADS = 20


@dataclass(frozen=True)
class LoanAmountRange:
    minimum: float = 0
    maximum: float = 100_000

    def contains(self, amount: float) -> bool:
        return self.minimum <= amount <= self.maximum


@dataclass
class Specialties:
    amount_range: LoanAmountRange = field(default_factory=LoanAmountRange)
    purposes: set[str] = field(default_factory=set)
    regions: set[str] = field(default_factory=set)
    languages: set[str] = field(default_factory=set)


@dataclass
class Workload:
    current_leads: int = 0
    max_leads: int = DEFAULT_MAX_LEADS
    assigned_today: int = 0
    assigned_this_month: int = 0
    assigned_total: int = 0


@dataclass
class Performance:
    conversion_rate: float = 0.0
    closed_deals: int = 0
    total_loan_amount: float = 0.0
    avg_response_time: float = 0.0


@dataclass
class Agent:
    id: int | None
    name: str
    contact: str
    status: AgentStatus = AgentStatus.ACTIVE
    specialties: Specialties = field(default_factory=Specialties)
    priority: int = 1
    workload: Workload = field(default_factory=Workload)
    performance: Performance = field(default_factory=Performance)
    working_hours: WorkingHours = field(default_factory=WorkingHours)
    email: str | None = None
    notes: str = ""
    last_active_at: datetime | None = None

    def is_active(self) -> bool:
        return self.status == AgentStatus.ACTIVE

    def has_capacity(self) -> bool:
        return self.workload.current_leads < self.workload.max_leads

    def capacity_state(self) -> CapacityState:
        return CapacityState.ACCEPTING if self.has_capacity() else CapacityState.FULL

    def load_percentage(self) -> float:
        return self.workload.current_leads / max(self.workload.max_leads, 1) * 100

    def is_eligible(self, now: datetime | None = None) -> bool:
        """Active, and within working hours when a clock reading is given."""
        if not self.is_active():
            return False
        if now is not None and not self.working_hours.is_within(now):
            return False
        return True
