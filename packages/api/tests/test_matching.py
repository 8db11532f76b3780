# This project was developed with assistance from AI tools.
"""Tests for lender matching."""

import pytest
from db.enums import RiskLevel
from factories import make_lender, make_loan_request

from lending.services.matching import (
    amount_compatibility,
    find_matches,
    is_basic_compatible,
    rating_compatibility,
    risk_compatibility,
    score_match,
    term_compatibility,
)

# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "request_risk,preference,expected",
    [
        (RiskLevel.MEDIUM, RiskLevel.MEDIUM, 1.0),
        (RiskLevel.LOW, RiskLevel.MEDIUM, 0.7),
        (RiskLevel.LOW, RiskLevel.HIGH, 0.3),
    ],
)
def test_risk_compatibility(request_risk, preference, expected):
    request = make_loan_request(risk=request_risk)
    lender = make_lender(risk_preference=preference)
    assert risk_compatibility(request, lender) == expected


@pytest.mark.parametrize(
    "period,terms,expected",
    [
        (6, [6, 12], 1.0),
        (9, [6, 12], 0.8),
        (14, [6, 12], 0.6),
        (16, [6, 12], 0.4),
        (24, [6, 12], 0.2),
        (1, [3], 0.6),
    ],
)
def test_term_compatibility(period, terms, expected):
    request = make_loan_request(repayment_period=period)
    lender = make_lender(preferred_terms=terms)
    assert term_compatibility(request, lender) == expected


def test_amount_compatibility():
    lender = make_lender(min_amount=500, max_amount=5000)
    assert amount_compatibility(make_loan_request(amount=2000), lender) == 1.0
    assert amount_compatibility(make_loan_request(amount=100), lender) == 0.3
    assert amount_compatibility(make_loan_request(amount=9000), lender) == 0.1


@pytest.mark.parametrize(
    "lender_rating,expected",
    [(4.5, 1.0), (3.0, 0.8), (2.6, 0.6), (2.0, 0.4), (1.0, 0.2)],
)
def test_rating_compatibility(lender_rating, expected):
    request = make_loan_request(borrower_rating=4.0)
    assert rating_compatibility(request, make_lender(rating=lender_rating)) == expected


def test_weighted_score_and_capped_amount():
    request = make_loan_request(amount=2000, repayment_period=9, borrower_rating=4.0)
    lender = make_lender(available_amount=1500, min_amount=500, preferred_terms=[6, 12])
    match = score_match(request, lender)
    assert match.match_score == pytest.approx(0.4 + 0.25 * 0.8 + 0.2 + 0.15)
    assert match.amount == 1500
    assert match.lender_id == "lender-1"
    assert match.loan_request_id == "req-1"


# ---------------------------------------------------------------------------
# Filtering and ranking
# ---------------------------------------------------------------------------


def test_basic_gate_rejects_out_of_range_and_short_lenders():
    request = make_loan_request(amount=2000)
    assert is_basic_compatible(request, make_lender())
    assert not is_basic_compatible(request, make_lender(max_amount=1000))
    assert not is_basic_compatible(request, make_lender(min_amount=2500))
    assert not is_basic_compatible(request, make_lender(available_amount=100, min_amount=500))


def test_find_matches_excludes_incompatible_lenders():
    request = make_loan_request(amount=2000)
    lenders = [
        make_lender(id="small", max_amount=1000),
        make_lender(id="ok"),
    ]
    matches = find_matches(request, lenders)
    assert [m.lender_id for m in matches] == ["ok"]
    for match in matches:
        lender = next(l for l in lenders if l.id == match.lender_id)
        assert lender.min_amount <= request.amount <= lender.max_amount


def test_find_matches_sorted_descending():
    request = make_loan_request(risk=RiskLevel.MEDIUM)
    lenders = [
        make_lender(id="far", risk_preference=RiskLevel.LOW, rating=1.0),
        make_lender(id="best"),
        make_lender(id="mid", risk_preference=RiskLevel.HIGH),
    ]
    matches = find_matches(request, lenders)
    assert [m.lender_id for m in matches] == ["best", "mid", "far"]
    scores = [m.match_score for m in matches]
    assert scores == sorted(scores, reverse=True)


def test_ties_keep_input_order():
    request = make_loan_request()
    lenders = [make_lender(id=f"lender-{i}") for i in range(4)]
    assert [m.lender_id for m in find_matches(request, lenders)] == [
        "lender-0",
        "lender-1",
        "lender-2",
        "lender-3",
    ]


def test_empty_lender_pool():
    assert find_matches(make_loan_request(), []) == []
