"""Tests for domain enums."""

from leadrouter.domain.value_objects.enums import (
    AgentStatus,
    AssignmentStatus,
    LoanPurpose,
    NoAgentReason,
)


def test_agent_status_values():
    assert {s.value for s in AgentStatus} == {"active", "inactive", "on_leave", "busy"}


def test_loan_purpose_values_match_roster_codes():
    assert LoanPurpose("debt-consolidation") == LoanPurpose.DEBT_CONSOLIDATION
    assert LoanPurpose.HOME_IMPROVEMENT.value == "home-improvement"


def test_assignment_status_closed_states():
    closed = {s for s in AssignmentStatus if s != AssignmentStatus.OPEN}
    assert closed == {AssignmentStatus.CONVERTED, AssignmentStatus.LOST, AssignmentStatus.EXPIRED}


def test_enums_are_str_compatible():
    assert AgentStatus.ACTIVE == "active"
    assert NoAgentReason.CLAIM_RACE_EXHAUSTED == "claim_race_exhausted"
