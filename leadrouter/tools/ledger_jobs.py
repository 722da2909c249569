"""Scheduled ledger jobs: counter resets, stale-claim sweep and the load report.

Usage (cron, server timezone):
    0 0 * * *   python -m leadrouter.tools.ledger_jobs reset-daily
    5 0 1 * *   python -m leadrouter.tools.ledger_jobs reset-monthly
    */30 * * * * python -m leadrouter.tools.ledger_jobs expire-stale
    python -m leadrouter.tools.ledger_jobs report
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import timedelta

from leadrouter.adapters.persistence.database import async_session_factory, engine
from leadrouter.adapters.persistence.repositories import (
    SqlAgentRepository,
    SqlAssignmentRepository,
    SqlWorkloadLedger,
)
from leadrouter.application.use_cases.complete_lead import ExpireStaleAssignmentsUseCase
from leadrouter.application.use_cases.distribution_report import (
    DistributionReport,
    DistributionReportUseCase,
)
from leadrouter.application.use_cases.reset_counters import ResetCountersUseCase
from leadrouter.config import settings
from leadrouter.infrastructure.api.dependencies import local_now

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


def format_report(report: DistributionReport) -> str:
    lines = [
        "=" * 100,
        "AGENT DISTRIBUTION REPORT",
        "=" * 100,
        f"Agents:          {report.total_agents} ({report.active_agents} active)",
        f"Current leads:   {report.current_leads}",
        f"Capacity:        {report.capacity}",
        f"Utilisation:     {report.utilisation:.1f}%",
        f"Assigned today:  {report.assigned_today}",
        f"Assigned month:  {report.assigned_this_month}",
        "-" * 100,
        f"{'#':>3}  {'Name':<24}{'Status':<10}{'Load':>10}{'%':>8}{'Today':>7}"
        f"{'Month':>7}{'Total':>7}{'Conv%':>8}{'Deals':>7}  State",
    ]
    for i, row in enumerate(report.agents, start=1):
        lines.append(
            f"{i:>3}  {row.name[:23]:<24}{row.status:<10}"
            f"{f'{row.current_leads}/{row.max_leads}':>10}{row.load_percentage:>8.1f}"
            f"{row.assigned_today:>7}{row.assigned_this_month:>7}{row.assigned_total:>7}"
            f"{row.conversion_rate:>8.1f}{row.closed_deals:>7}  {row.capacity_state}"
        )
    lines.append("=" * 100)
    return "\n".join(lines)


async def run(command: str) -> None:
    async with async_session_factory() as session:
        ledger = SqlWorkloadLedger(session)
        assignments = SqlAssignmentRepository(session)

        if command == "report":
            report = await DistributionReportUseCase(SqlAgentRepository(session)).execute()
            print(format_report(report))
            return

        if command in ("reset-daily", "reset-monthly"):
            uc = ResetCountersUseCase(
                ledger=ledger,
                assignment_repo=assignments,
                clear_current_leads=settings.reset_clears_current_leads,
                clock=local_now,
            )
            result = await (uc.reset_daily() if command == "reset-daily" else uc.reset_monthly())
            logger.info("%s: %d agent(s) reset", command, result.agents_reset)
        elif command == "expire-stale":
            uc = ExpireStaleAssignmentsUseCase(
                assignment_repo=assignments,
                ledger=ledger,
                ttl=timedelta(hours=settings.claim_ttl_hours),
                clock=local_now,
            )
            await uc.execute()

        await session.commit()


def main():
    parser = argparse.ArgumentParser(description="leadrouter scheduled ledger jobs")
    parser.add_argument(
        "command",
        choices=["reset-daily", "reset-monthly", "expire-stale", "report"],
    )
    args = parser.parse_args()

    async def run_and_dispose():
        try:
            await run(args.command)
        finally:
            await engine.dispose()

    asyncio.run(run_and_dispose())


if __name__ == "__main__":
    main()
