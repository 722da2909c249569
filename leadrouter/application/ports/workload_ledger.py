"""Port interface for the workload ledger — the only writer of agent counters."""

from abc import ABC, abstractmethod

from leadrouter.domain.entities.agent import Agent


class WorkloadLedger(ABC):
    @abstractmethod
    async def try_claim(self, agent_id: int) -> bool:
        """Reserve one capacity slot for *agent_id*.

        Increments current/today/month/total counters by one only if
        ``current_leads < max_leads`` at the moment of the update. The check
        and the increment must be a single atomic step: two concurrent calls
        against the last free slot must never both return True.

        Returns False (no mutation) when the agent is full, inactive or
        unknown. A False result is not an error.
        """
        ...

    @abstractmethod
    async def complete_lead(
        self, agent_id: int, success: bool, loan_amount: float | None = None
    ) -> Agent:
        """Release one slot; on success count the deal and recompute conversion.

        ``current_leads`` is floored at 0; completing at zero is logged, not raised.

        Raises:
            AgentNotFoundError: if the agent does not exist.
        """
        ...

    @abstractmethod
    async def reset_daily(self) -> int:
        """Zero ``assigned_today`` for every agent.

        Open load is released through assignment handles, never by
        overwriting ``current_leads``, so a claim racing the reset keeps
        its slot. Returns the number of agents touched.
        """
        ...

    @abstractmethod
    async def reset_monthly(self) -> int:
        """Zero ``assigned_this_month`` for every agent."""
        ...
