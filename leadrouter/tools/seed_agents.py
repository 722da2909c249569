"""Seed the agent roster from a CSV file.

Usage:
    python -m leadrouter.tools.seed_agents data/agents.csv
    python -m leadrouter.tools.seed_agents data/agents.csv --default-max-leads 10
    python -m leadrouter.tools.seed_agents --verify-only

Existing agents are matched by contact handle and have their profile
(specialties, priority, capacity, status) updated; workload and
performance counters are never touched by seeding.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from leadrouter.adapters.csv_loader.loader import load_agents
from leadrouter.adapters.persistence.database import async_session_factory
from leadrouter.adapters.persistence.repositories import SqlAgentRepository
from leadrouter.application.ports.agent_repo import AgentRepository
from leadrouter.domain.entities.agent import (
    DEFAULT_MAX_LEADS,
    Agent,
    LoanAmountRange,
    Specialties,
)
from leadrouter.domain.value_objects.enums import AgentStatus

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def _parse_status(raw: str) -> AgentStatus:
    try:
        return AgentStatus(raw.replace(" ", "_"))
    except ValueError:
        logger.warning("Unknown status '%s', defaulting to inactive", raw)
        return AgentStatus.INACTIVE


def _apply_profile(agent: Agent, row: dict, default_max_leads: int) -> None:
    agent.name = row["name"]
    agent.email = row["email"]
    agent.status = _parse_status(row["status"])
    agent.specialties = Specialties(
        amount_range=LoanAmountRange(
            minimum=row["min_amount"],
            maximum=row["max_amount"] if row["max_amount"] is not None else LoanAmountRange().maximum,
        ),
        purposes=row["purposes"],
        regions=row["regions"],
        languages=row["languages"],
    )
    if row["priority"] is not None:
        agent.priority = max(0, min(10, row["priority"]))
    agent.workload.max_leads = row["max_leads"] if row["max_leads"] is not None else default_max_leads


async def upsert_agents(
    repo: AgentRepository, rows: list[dict], default_max_leads: int = DEFAULT_MAX_LEADS
) -> dict[str, int]:
    """Create or update agents by contact. Returns created/updated counts."""
    counts = {"created": 0, "updated": 0}
    for row in rows:
        agent = await repo.get_by_contact(row["contact"])
        if agent is None:
            agent = Agent(id=None, name=row["name"], contact=row["contact"])
            counts["created"] += 1
        else:
            counts["updated"] += 1
        _apply_profile(agent, row, default_max_leads)
        if agent.workload.current_leads > agent.workload.max_leads:
            logger.warning(
                "Agent '%s': max_leads %d is below current load %d, keeping %d",
                agent.name, agent.workload.max_leads,
                agent.workload.current_leads, agent.workload.current_leads,
            )
            agent.workload.max_leads = agent.workload.current_leads
        await repo.save(agent)
    return counts


async def seed(csv_path: Path, default_max_leads: int) -> dict[str, int]:
    rows = load_agents(csv_path)
    async with async_session_factory() as session:
        counts = await upsert_agents(SqlAgentRepository(session), rows, default_max_leads)
        await session.commit()
    logger.info("Seed complete: %d created, %d updated", counts["created"], counts["updated"])
    return counts


async def _verify_data() -> None:
    """Print sanity checks after seeding."""
    async with async_session_factory() as session:
        agents = await SqlAgentRepository(session).get_all()

    active = [a for a in agents if a.is_active()]
    print(f"\n{'='*50}")
    print("ROSTER VERIFICATION")
    print(f"{'='*50}")
    print(f"Agents:          {len(agents)}")
    print(f"Active:          {len(active)}")
    print(f"Total capacity:  {sum(a.workload.max_leads for a in active)}")
    print(f"With purposes:   {sum(1 for a in agents if a.specialties.purposes)}/{len(agents)}")
    priorities = {a.priority for a in active}
    if len(priorities) == 1:
        print(f"All active agents share priority {priorities.pop()}")
    print(f"{'='*50}\n")


def main():
    parser = argparse.ArgumentParser(description="Seed the agent roster from CSV")
    parser.add_argument("csv", nargs="?", help="Roster CSV file")
    parser.add_argument(
        "--default-max-leads", type=int, default=DEFAULT_MAX_LEADS,
        help=f"Capacity for rows without max_leads (default: {DEFAULT_MAX_LEADS})",
    )
    parser.add_argument(
        "--verify-only", action="store_true",
        help="Only run verification, don't seed",
    )
    args = parser.parse_args()

    if args.verify_only:
        asyncio.run(_verify_data())
        return

    if not args.csv or not Path(args.csv).exists():
        logger.error("Roster CSV not found: %s", args.csv)
        sys.exit(1)

    async def run_all():
        await seed(Path(args.csv), args.default_max_leads)
        await _verify_data()

    asyncio.run(run_all())


if __name__ == "__main__":
    main()
