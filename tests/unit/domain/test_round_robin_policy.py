"""Tests for RoundRobinPolicy."""

from leadrouter.domain.policies.round_robin import rotation_order
from leadrouter.domain.value_objects.enums import AgentStatus


def test_single_candidate(make_agent):
    assert [a.id for a in rotation_order([make_agent(1)])] == [1]


def test_least_assigned_today_first(make_agent):
    agents = [make_agent(1, today=5), make_agent(2, today=0), make_agent(3, today=2)]
    assert [a.id for a in rotation_order(agents)] == [2, 3, 1]


def test_equal_counts_sorted_by_id(make_agent):
    agents = [make_agent(3), make_agent(1), make_agent(2)]
    assert [a.id for a in rotation_order(agents)] == [1, 2, 3]


def test_full_agents_are_skipped(make_agent):
    agents = [make_agent(1, current=3, max_leads=3), make_agent(2, today=9)]
    assert [a.id for a in rotation_order(agents)] == [2]


def test_inactive_agents_are_skipped(make_agent):
    agents = [
        make_agent(1, status=AgentStatus.ON_LEAVE),
        make_agent(2, status=AgentStatus.BUSY),
        make_agent(3, today=4),
    ]
    assert [a.id for a in rotation_order(agents)] == [3]


def test_empty_when_nobody_has_room(make_agent):
    assert rotation_order([make_agent(1, current=1, max_leads=1)]) == []
    assert rotation_order([]) == []


def test_priority_does_not_affect_rotation(make_agent):
    agents = [make_agent(1, priority=0), make_agent(2, priority=10)]
    assert [a.id for a in rotation_order(agents)] == [1, 2]
