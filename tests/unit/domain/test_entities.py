"""Tests for domain entities and value objects."""

import math
from datetime import datetime

import pytest

from leadrouter.domain.entities.lead import Lead
from leadrouter.domain.exceptions import InvalidLeadError
from leadrouter.domain.value_objects.enums import AgentStatus, CapacityState
from leadrouter.domain.value_objects.working_hours import WorkingHours, parse_clock

WEEKDAY_HOURS = WorkingHours.from_dict(
    {
        "enabled": True,
        "schedule": {
            "monday": {"active": True, "start": "09:00", "end": "18:00"},
            "tuesday": {"active": False, "start": "09:00", "end": "18:00"},
        },
    }
)


# ─── Lead ───────────────────────────────────────────────────────────


def test_lead_validate_returns_self():
    lead = Lead(amount=15_000, purpose="personal")
    assert lead.validate() is lead


def test_lead_negative_amount_rejected():
    with pytest.raises(InvalidLeadError, match="negative"):
        Lead(amount=-1).validate()


def test_lead_non_finite_amount_rejected():
    with pytest.raises(InvalidLeadError):
        Lead(amount=math.nan).validate()
    with pytest.raises(InvalidLeadError):
        Lead(amount=math.inf).validate()


def test_lead_blank_purpose_rejected():
    with pytest.raises(InvalidLeadError):
        Lead(purpose="  ").validate()


def test_lead_non_numeric_amount_rejected():
    with pytest.raises(InvalidLeadError):
        Lead(amount="5000").validate()
    with pytest.raises(InvalidLeadError):
        Lead(amount=True).validate()


def test_lead_zero_amount_is_valid():
    assert Lead(amount=0).validate().amount == 0


def test_lead_has_attributes():
    assert Lead(amount=1).has_attributes() is True
    assert Lead(purpose="auto").has_attributes() is True
    assert Lead(region="Selangor", language="Malay").has_attributes() is False


# ─── Agent ──────────────────────────────────────────────────────────


def test_agent_capacity_state(make_agent):
    assert make_agent(current=2, max_leads=3).capacity_state() == CapacityState.ACCEPTING
    assert make_agent(current=3, max_leads=3).capacity_state() == CapacityState.FULL


def test_agent_load_percentage(make_agent):
    assert make_agent(current=3, max_leads=4).load_percentage() == 75
    assert make_agent(current=0, max_leads=0).load_percentage() == 0


def test_only_active_agents_are_eligible(make_agent):
    assert make_agent().is_eligible() is True
    for status in (AgentStatus.INACTIVE, AgentStatus.ON_LEAVE, AgentStatus.BUSY):
        assert make_agent(status=status).is_eligible() is False


def test_agent_eligibility_respects_working_hours(make_agent):
    agent = make_agent(working_hours=WEEKDAY_HOURS)
    assert agent.is_eligible(datetime(2026, 10, 19, 12, 0)) is True  # Monday
    assert agent.is_eligible(datetime(2026, 10, 20, 12, 0)) is False  # Tuesday, inactive
    # No clock reading → schedule not enforced
    assert agent.is_eligible() is True


# ─── WorkingHours ───────────────────────────────────────────────────


def test_disabled_schedule_always_within():
    assert WorkingHours().is_within(datetime(2026, 10, 18, 3, 0)) is True


def test_schedule_bounds_inclusive():
    assert WEEKDAY_HOURS.is_within(datetime(2026, 10, 19, 9, 0)) is True
    assert WEEKDAY_HOURS.is_within(datetime(2026, 10, 19, 18, 0, 59)) is True
    assert WEEKDAY_HOURS.is_within(datetime(2026, 10, 19, 18, 1)) is False
    assert WEEKDAY_HOURS.is_within(datetime(2026, 10, 19, 8, 59)) is False


def test_missing_day_is_outside_hours():
    assert WEEKDAY_HOURS.is_within(datetime(2026, 10, 18, 12, 0)) is False  # Sunday


def test_schedule_dict_roundtrip():
    assert WorkingHours.from_dict(WEEKDAY_HOURS.to_dict()) == WEEKDAY_HOURS


def test_parse_clock():
    assert parse_clock("09:05").hour == 9
    assert parse_clock(" 7 ").minute == 0
