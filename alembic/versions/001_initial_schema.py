"""Initial schema — agents and assignments.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Agents
    op.create_table(
        "agents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("contact", sa.String(50), unique=True, nullable=False),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("min_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("max_amount", sa.Float, nullable=False, server_default="100000"),
        sa.Column("purposes", ARRAY(sa.String(40)), nullable=False, server_default="{}"),
        sa.Column("regions", ARRAY(sa.String(60)), nullable=False, server_default="{}"),
        sa.Column("languages", ARRAY(sa.String(20)), nullable=False, server_default="{}"),
        sa.Column("priority", sa.Integer, nullable=False, server_default="1"),
        sa.Column("current_leads", sa.Integer, nullable=False, server_default="0"),
        sa.Column("max_leads", sa.Integer, nullable=False, server_default="20"),
        sa.Column("assigned_today", sa.Integer, nullable=False, server_default="0"),
        sa.Column("assigned_this_month", sa.Integer, nullable=False, server_default="0"),
        sa.Column("assigned_total", sa.Integer, nullable=False, server_default="0"),
        sa.Column("conversion_rate", sa.Float, nullable=False, server_default="0"),
        sa.Column("closed_deals", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_loan_amount", sa.Float, nullable=False, server_default="0"),
        sa.Column("avg_response_time", sa.Float, nullable=False, server_default="0"),
        sa.Column("working_hours", JSONB, nullable=True),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("last_active_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "current_leads >= 0 AND current_leads <= max_leads", name="ck_agents_capacity"
        ),
        sa.CheckConstraint("priority >= 0 AND priority <= 10", name="ck_agents_priority"),
    )
    op.create_index("idx_agents_status", "agents", ["status"])
    op.create_index("idx_agents_current_leads", "agents", ["current_leads"])
    op.create_index("idx_agents_priority", "agents", ["priority"])

    # Assignments
    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("agent_id", sa.Integer, sa.ForeignKey("agents.id"), nullable=False),
        sa.Column("score", sa.Float, nullable=True),
        sa.Column("strategy", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        sa.Column("lead_amount", sa.Float, nullable=True),
        sa.Column("lead_purpose", sa.String(40), nullable=True),
        sa.Column("lead_region", sa.String(60), nullable=True),
        sa.Column("lead_language", sa.String(20), nullable=True),
        sa.Column(
            "assigned_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_assignments_agent", "assignments", ["agent_id"])
    op.create_index("idx_assignments_status_assigned", "assignments", ["status", "assigned_at"])


def downgrade() -> None:
    op.drop_table("assignments")
    op.drop_table("agents")
