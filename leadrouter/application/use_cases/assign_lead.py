"""AssignLeadUseCase — weighted best-agent matching with round-robin fallback."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from leadrouter.application.ports.agent_repo import AgentRepository
from leadrouter.application.ports.assignment_repo import AssignmentRepository
from leadrouter.application.ports.workload_ledger import WorkloadLedger
from leadrouter.domain.entities.agent import Agent
from leadrouter.domain.entities.assignment import Assignment
from leadrouter.domain.entities.lead import Lead
from leadrouter.domain.exceptions import MalformedAgentError
from leadrouter.domain.policies.round_robin import rotation_order
from leadrouter.domain.policies.scoring import score_agent
from leadrouter.domain.value_objects.enums import AssignmentStrategy, NoAgentReason

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AgentAssigned:
    """A claim was committed; ``assignment_id`` is the handle to complete it."""

    agent_id: int
    agent_name: str
    score: float | None
    assignment_id: int
    strategy: AssignmentStrategy
    assigned_at: datetime


@dataclass(frozen=True)
class NoAgentAvailable:
    """Normal outcome when nobody could take the lead."""

    reason: NoAgentReason
    strategy: AssignmentStrategy
    candidates: int = 0


AssignmentOutcome = AgentAssigned | NoAgentAvailable


@dataclass(frozen=True)
class _Candidate:
    agent: Agent
    score: float | None


class AssignLeadUseCase:
    """Picks an agent for a lead and claims one unit of its capacity.

    Reads and scoring are snapshot-based and may race freely with other
    requests. Only ``WorkloadLedger.try_claim`` mutates state; a lost claim
    moves on to the next candidate, so each call makes at most one claim
    attempt per candidate and always terminates.
    """

    def __init__(
        self,
        agent_repo: AgentRepository,
        ledger: WorkloadLedger,
        assignment_repo: AssignmentRepository,
        enforce_working_hours: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._agents = agent_repo
        self._ledger = ledger
        self._assignments = assignment_repo
        self._enforce_hours = enforce_working_hours
        self._clock = clock

    async def execute(
        self, lead: Lead, strategy: AssignmentStrategy | None = None
    ) -> AssignmentOutcome:
        """Dispatch on *strategy*; without one, bare leads go round-robin."""
        lead.validate()
        if strategy is None:
            strategy = (
                AssignmentStrategy.WEIGHTED
                if lead.has_attributes()
                else AssignmentStrategy.ROUND_ROBIN
            )
        if strategy == AssignmentStrategy.ROUND_ROBIN:
            return await self.assign_round_robin(lead)
        return await self.assign_best_agent(lead)

    async def assign_best_agent(self, lead: Lead) -> AssignmentOutcome:
        """Score every eligible agent and claim the best one that still has room.

        Pipeline:
        1. Validate the lead (InvalidLeadError propagates to the caller)
        2. Read active agents, drop those off-hours or already full
        3. Score; malformed agent records are logged and skipped
        4. Sort by (score DESC, id ASC)
        5. Claim down the ranking until one succeeds
        """
        lead.validate()
        candidates = await self._eligible_agents()
        if not candidates:
            logger.info("No eligible agents for weighted assignment")
            return NoAgentAvailable(NoAgentReason.NO_CANDIDATES, AssignmentStrategy.WEIGHTED)

        ranked: list[_Candidate] = []
        for agent in candidates:
            try:
                ranked.append(_Candidate(agent, score_agent(agent, lead)))
            except MalformedAgentError as e:
                logger.warning("Excluding agent from ranking: %s", e)

        if not ranked:
            logger.warning(
                "Scoring rejected all %d candidates, falling back to round-robin",
                len(candidates),
            )
            return await self.assign_round_robin(lead)

        ranked.sort(key=lambda c: (-c.score, c.agent.id))
        return await self._claim_first(ranked, lead, AssignmentStrategy.WEIGHTED)

    async def assign_round_robin(self, lead: Lead | None = None) -> AssignmentOutcome:
        """Claim the least-assigned-today agent with spare capacity."""
        if lead is not None:
            lead.validate()
        ordered = rotation_order(await self._eligible_agents())
        if not ordered:
            logger.info("No eligible agents for round-robin assignment")
            return NoAgentAvailable(NoAgentReason.NO_CANDIDATES, AssignmentStrategy.ROUND_ROBIN)

        return await self._claim_first(
            [_Candidate(a, None) for a in ordered], lead, AssignmentStrategy.ROUND_ROBIN
        )

    async def _eligible_agents(self) -> list[Agent]:
        now = self._clock() if self._enforce_hours else None
        agents = await self._agents.get_active()
        return [a for a in agents if a.is_eligible(now) and a.has_capacity()]

    async def _claim_first(
        self,
        ranked: list[_Candidate],
        lead: Lead | None,
        strategy: AssignmentStrategy,
    ) -> AssignmentOutcome:
        for candidate in ranked:
            agent = candidate.agent
            if not await self._ledger.try_claim(agent.id):
                logger.debug("Lost claim on agent %s (%s), trying next", agent.id, agent.name)
                continue

            assignment = await self._assignments.save(
                Assignment(
                    id=None,
                    agent_id=agent.id,
                    score=candidate.score,
                    strategy=strategy,
                    lead_amount=lead.amount if lead else None,
                    lead_purpose=lead.purpose if lead else None,
                    lead_region=lead.region if lead else None,
                    lead_language=lead.language if lead else None,
                    assigned_at=self._clock(),
                )
            )
            logger.info(
                "Lead → agent %s (%s), strategy=%s, score=%s",
                agent.id, agent.name, strategy.value,
                f"{candidate.score:.2f}" if candidate.score is not None else "n/a",
            )
            return AgentAssigned(
                agent_id=agent.id,
                agent_name=agent.name,
                score=candidate.score,
                assignment_id=assignment.id,
                strategy=strategy,
                assigned_at=assignment.assigned_at,
            )

        logger.warning(
            "Claim race exhausted: all %d %s candidates filled up concurrently",
            len(ranked), strategy.value,
        )
        return NoAgentAvailable(
            NoAgentReason.CLAIM_RACE_EXHAUSTED, strategy, candidates=len(ranked)
        )
