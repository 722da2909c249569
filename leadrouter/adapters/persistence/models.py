"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leadrouter.adapters.persistence.database import Base


class AgentModel(Base):
    __tablename__ = "agents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    contact: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    # Specialties
    min_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    max_amount: Mapped[float] = mapped_column(Float, nullable=False, default=100_000)
    purposes: Mapped[list[str]] = mapped_column(ARRAY(String(40)), nullable=False, default=list)
    regions: Mapped[list[str]] = mapped_column(ARRAY(String(60)), nullable=False, default=list)
    languages: Mapped[list[str]] = mapped_column(ARRAY(String(20)), nullable=False, default=list)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Workload
    current_leads: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_leads: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    assigned_today: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assigned_this_month: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    assigned_total: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Performance
    conversion_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    closed_deals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_loan_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    avg_response_time: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    working_hours: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    last_active_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    assignments: Mapped[list["AssignmentModel"]] = relationship(back_populates="agent")

    __table_args__ = (
        CheckConstraint(
            "current_leads >= 0 AND current_leads <= max_leads",
            name="ck_agents_capacity",
        ),
        CheckConstraint("priority >= 0 AND priority <= 10", name="ck_agents_priority"),
        Index("idx_agents_status", "status"),
        Index("idx_agents_current_leads", "current_leads"),
        Index("idx_agents_priority", "priority"),
    )


class AssignmentModel(Base):
    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    agent_id: Mapped[int] = mapped_column(Integer, ForeignKey("agents.id"), nullable=False)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    strategy: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    lead_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    lead_purpose: Mapped[str | None] = mapped_column(String(40), nullable=True)
    lead_region: Mapped[str | None] = mapped_column(String(60), nullable=True)
    lead_language: Mapped[str | None] = mapped_column(String(20), nullable=True)
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    agent: Mapped["AgentModel"] = relationship(back_populates="assignments")

    __table_args__ = (
        Index("idx_assignments_agent", "agent_id"),
        Index("idx_assignments_status_assigned", "status", "assigned_at"),
    )
