"""RoundRobinPolicy — least-assigned-today rotation, no weighting."""

from __future__ import annotations

from leadrouter.domain.entities.agent import Agent


def rotation_order(candidates: list[Agent]) -> list[Agent]:
    """Order agents for round-robin claiming.

    1. Keep only active agents with spare capacity.
    2. Sort by (assigned_today ASC, id ASC) for stable ordering.

    The caller claims the first agent and walks down the list when a claim
    is lost to a concurrent request.

    Args:
        candidates: agents read from the directory (any status).

    Returns:
        Claim order; empty when nobody can take a lead.
    """
    available = [a for a in candidates if a.is_active() and a.has_capacity()]
    return sorted(available, key=lambda a: (a.workload.assigned_today, a.id))
