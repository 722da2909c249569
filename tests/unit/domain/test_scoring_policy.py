"""Tests for ScoringPolicy."""

import pytest

from leadrouter.domain.entities.lead import Lead
from leadrouter.domain.exceptions import MalformedAgentError
from leadrouter.domain.policies.scoring import (
    amount_match_score,
    performance_score,
    priority_score,
    score_agent,
    score_breakdown,
    specialty_score,
    workload_score,
)

# ─── Sub-scores ─────────────────────────────────────────────────────


def test_workload_idle_full_and_half():
    assert workload_score(0, 10) == 100
    assert workload_score(5, 10) == 50
    assert workload_score(10, 10) == 0


def test_workload_over_capacity_clamped_to_zero():
    assert workload_score(12, 10) == 0


def test_workload_zero_capacity_is_neutral():
    assert workload_score(0, 0) == 50


def test_amount_inside_range_is_exactly_100_near_bounds():
    for amount in (10_000, 10_000.01, 30_000, 49_999.99, 50_000):
        assert amount_match_score(amount, 10_000, 50_000) == 100


def test_amount_below_min_decays_linearly():
    # shortfall of half the minimum → half marks
    assert amount_match_score(5_000, 10_000, 50_000) == pytest.approx(50)
    assert amount_match_score(0, 10_000, 50_000) == 0


def test_amount_above_max_decays_gently():
    # 25k over a 50k ceiling → 1 - 25k/100k
    assert amount_match_score(75_000, 10_000, 50_000) == pytest.approx(75)
    assert amount_match_score(200_000, 10_000, 50_000) == 0


def test_overshoot_penalized_less_than_shortfall():
    below = amount_match_score(8_000, 10_000, 20_000)  # 2k short
    above = amount_match_score(22_000, 10_000, 20_000)  # 2k over
    assert above > below


def test_performance_conversion_dominates_and_deals_capped():
    assert performance_score(50, 10) == pytest.approx(38)
    assert performance_score(100, 100) == pytest.approx(100)
    assert performance_score(100, 500) == pytest.approx(100)


def test_specialty_match_unrestricted_and_mismatch():
    assert specialty_score("auto", {"auto", "personal"}) == 100
    assert specialty_score("auto", set()) == 100
    assert specialty_score("medical", {"auto"}) == 30


def test_priority_scales_to_100():
    assert priority_score(10) == 100
    assert priority_score(5) == 50
    assert priority_score(0) == 0


# ─── Weighted total ─────────────────────────────────────────────────


def test_total_is_weighted_sum(make_agent):
    agent = make_agent(current=0, max_leads=10, priority=10, purposes={"auto"})
    lead = Lead(amount=20_000, purpose="auto")
    # 100*.30 + 100*.25 + 0*.20 + 100*.15 + 100*.10
    assert score_agent(agent, lead) == pytest.approx(80)


def test_generalist_ties_with_specialist(make_agent):
    lead = Lead(amount=20_000, purpose="auto")
    generalist = make_agent(1, purposes=set())
    specialist = make_agent(2, purposes={"auto"})
    assert score_breakdown(generalist, lead).specialty == 100
    assert score_agent(generalist, lead) == pytest.approx(score_agent(specialist, lead))


def test_missing_amount_redistributes_weight(make_agent):
    agent = make_agent(purposes={"auto"})
    breakdown = score_breakdown(agent, Lead(purpose="auto"))
    assert breakdown.amount is None
    # (100*30 + 0*20 + 100*15 + 100*10) / 75
    assert breakdown.total == pytest.approx(5500 / 75)


def test_missing_amount_and_purpose(make_agent):
    breakdown = score_breakdown(make_agent(), Lead())
    assert breakdown.amount is None
    assert breakdown.specialty is None
    assert breakdown.total == pytest.approx(4000 / 60)


def test_bare_lead_ignores_amount_range(make_agent):
    narrow = make_agent(1, min_amount=50_000, max_amount=60_000)
    wide = make_agent(2)
    assert score_agent(narrow, Lead()) == pytest.approx(score_agent(wide, Lead()))


def test_total_stays_within_bounds(make_agent):
    agents = [
        make_agent(current=10, max_leads=10, priority=0, min_amount=50_000, max_amount=60_000,
                   purposes={"auto"}),
        make_agent(conversion=100, closed=1000, priority=10),
        make_agent(max_leads=0, priority=3, conversion=12.5),
    ]
    for agent in agents:
        for lead in (Lead(), Lead(amount=1, purpose="medical"), Lead(amount=10**9)):
            assert 0 <= score_agent(agent, lead) <= 100


# ─── Monotonicity ───────────────────────────────────────────────────


def test_lower_load_never_lowers_workload_score(make_agent):
    previous = -1.0
    for current in range(10, -1, -1):
        score = score_breakdown(make_agent(current=current, max_leads=10), Lead()).workload
        assert score >= previous
        previous = score


def test_higher_conversion_never_lowers_performance_score(make_agent):
    previous = -1.0
    for conversion in range(0, 101, 5):
        score = score_breakdown(make_agent(conversion=conversion, closed=7), Lead()).performance
        assert score >= previous
        previous = score


# ─── Malformed agents ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "overrides",
    [
        {"priority": 11},
        {"priority": -1},
        {"min_amount": 60_000, "max_amount": 50_000},
        {"max_leads": -1},
        {"conversion": 140},
    ],
)
def test_malformed_agent_raises(make_agent, overrides):
    with pytest.raises(MalformedAgentError):
        score_agent(make_agent(**overrides), Lead(amount=1_000))


# ─── Amount specialists ─────────────────────────────────────────────


def test_small_loan_prefers_small_loan_specialist(make_agent):
    big = make_agent(1, min_amount=10_000, max_amount=50_000)
    small = make_agent(2, min_amount=0, max_amount=9_999)
    lead = Lead(amount=5_000)

    assert score_breakdown(small, lead).amount == 100
    assert score_breakdown(big, lead).amount < 100
    assert score_agent(small, lead) > score_agent(big, lead)
