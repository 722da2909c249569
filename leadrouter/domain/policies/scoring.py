"""ScoringPolicy — how well an agent matches a lead, on a 0..100 scale."""

from __future__ import annotations

from dataclasses import dataclass

from leadrouter.domain.entities.agent import Agent
from leadrouter.domain.entities.lead import Lead
from leadrouter.domain.exceptions import MalformedAgentError

WEIGHTS: dict[str, int] = {
    "workload": 30,
    "amount": 25,
    "performance": 20,
    "specialty": 15,
    "priority": 10,
}

NEUTRAL_WORKLOAD_SCORE = 50.0
OFF_SPECIALTY_SCORE = 30.0
DEALS_CAP = 100
MAX_PRIORITY = 10


@dataclass(frozen=True)
class ScoreBreakdown:
    """Sub-scores of one agent/lead pair. ``None`` marks a skipped component."""

    workload: float
    amount: float | None
    performance: float
    specialty: float | None
    priority: float
    total: float


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def workload_score(current_leads: int, max_leads: int) -> float:
    if max_leads == 0:
        return NEUTRAL_WORKLOAD_SCORE
    return _clamp(100 * (1 - current_leads / max_leads))


def amount_match_score(amount: float, minimum: float, maximum: float) -> float:
    """Full marks inside the range; falling short decays faster than overshooting."""
    if minimum <= amount <= maximum:
        return 100.0
    if amount < minimum:
        return max(0.0, 100 * (1 - (minimum - amount) / minimum))
    if maximum <= 0:
        return 0.0
    return max(0.0, 100 * (1 - (amount - maximum) / (2 * maximum)))


def performance_score(conversion_rate: float, closed_deals: int) -> float:
    return 0.7 * conversion_rate + 0.3 * min(closed_deals, DEALS_CAP)


def specialty_score(purpose: str, purposes: set[str]) -> float:
    # No declared purposes means a generalist: full marks, not half credit.
    if not purposes or purpose in purposes:
        return 100.0
    return OFF_SPECIALTY_SCORE


def priority_score(priority: int) -> float:
    return 100 * priority / MAX_PRIORITY


def check_agent(agent: Agent) -> None:
    """Raise MalformedAgentError for values no formula can interpret."""
    w, p, r = agent.workload, agent.performance, agent.specialties.amount_range
    if w.max_leads < 0 or w.current_leads < 0:
        raise MalformedAgentError(agent.id, f"negative workload {w.current_leads}/{w.max_leads}")
    if r.minimum < 0 or r.minimum > r.maximum:
        raise MalformedAgentError(agent.id, f"bad amount range [{r.minimum}, {r.maximum}]")
    if not 0 <= agent.priority <= MAX_PRIORITY:
        raise MalformedAgentError(agent.id, f"priority {agent.priority} outside [0, {MAX_PRIORITY}]")
    if not 0 <= p.conversion_rate <= 100:
        raise MalformedAgentError(agent.id, f"conversion rate {p.conversion_rate} outside [0, 100]")
    if p.closed_deals < 0:
        raise MalformedAgentError(agent.id, f"negative closed deals {p.closed_deals}")


def score_breakdown(agent: Agent, lead: Lead) -> ScoreBreakdown:
    """Pure function: weighted sum of five sub-scores.

    Components and weights:
      1. workload (30)     — spare capacity relative to max_leads.
      2. amount (25)       — requested amount against the agent's range.
      3. performance (20)  — conversion rate dominates, deal count capped at 100.
      4. specialty (15)    — loan purpose in the agent's purpose set.
      5. priority (10)     — static 0..10 preference.

    A lead without amount (or purpose) skips that component and the
    remaining weights are rescaled so the total still spans 0..100.

    Raises:
        MalformedAgentError: if the agent record cannot be scored.
    """
    check_agent(agent)

    parts: dict[str, float] = {
        "workload": workload_score(agent.workload.current_leads, agent.workload.max_leads),
        "performance": performance_score(
            agent.performance.conversion_rate, agent.performance.closed_deals
        ),
        "priority": priority_score(agent.priority),
    }
    if lead.amount is not None:
        r = agent.specialties.amount_range
        parts["amount"] = amount_match_score(lead.amount, r.minimum, r.maximum)
    if lead.purpose is not None:
        parts["specialty"] = specialty_score(lead.purpose, agent.specialties.purposes)

    weight_sum = sum(WEIGHTS[name] for name in parts)
    total = sum(value * WEIGHTS[name] for name, value in parts.items()) / weight_sum

    return ScoreBreakdown(
        workload=parts["workload"],
        amount=parts.get("amount"),
        performance=parts["performance"],
        specialty=parts.get("specialty"),
        priority=parts["priority"],
        total=_clamp(total),
    )


def score_agent(agent: Agent, lead: Lead) -> float:
    return score_breakdown(agent, lead).total
