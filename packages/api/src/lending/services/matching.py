# This project was developed with assistance from AI tools.
"""Lender matching for loan requests.

Pure scoring, no I/O. Uses the request's declared risk tier as-is; the
risk score is never recomputed here. Executing a match (moving funds) is
the ledger's job.
"""

from ..schemas.loan_request import Lender, LoanRequest, Match

MATCH_THRESHOLD = 0.3

RISK_WEIGHT = 0.4
TERM_WEIGHT = 0.25
AMOUNT_WEIGHT = 0.2
RATING_WEIGHT = 0.15


def is_basic_compatible(loan_request: LoanRequest, lender: Lender) -> bool:
    """Hard gate: amount inside the lender's range and lender can lend its minimum."""
    if loan_request.amount < lender.min_amount or loan_request.amount > lender.max_amount:
        return False
    if lender.available_amount < lender.min_amount:
        return False
    return True


def risk_compatibility(loan_request: LoanRequest, lender: Lender) -> float:
    distance = abs(loan_request.risk.rank() - lender.risk_preference.rank())
    if distance == 0:
        return 1.0
    if distance == 1:
        return 0.7
    return 0.3


def term_compatibility(loan_request: LoanRequest, lender: Lender) -> float:
    term = loan_request.repayment_period
    preferred = lender.preferred_terms
    if term in preferred:
        return 1.0
    if min(preferred) <= term <= max(preferred):
        return 0.8

    # First of equally close terms wins
    closest = preferred[0]
    for candidate in preferred[1:]:
        if abs(candidate - term) < abs(closest - term):
            closest = candidate

    difference = abs(term - closest)
    if difference <= 2:
        return 0.6
    if difference <= 4:
        return 0.4
    return 0.2


def amount_compatibility(loan_request: LoanRequest, lender: Lender) -> float:
    amount = loan_request.amount
    if lender.min_amount <= amount <= lender.max_amount:
        return 1.0
    if amount < lender.min_amount:
        return 0.3
    return 0.1


def rating_compatibility(loan_request: LoanRequest, lender: Lender) -> float:
    diff = abs(loan_request.borrower_rating - lender.rating)
    if diff <= 0.5:
        return 1.0
    if diff <= 1.0:
        return 0.8
    if diff <= 1.5:
        return 0.6
    if diff <= 2.0:
        return 0.4
    return 0.2


def score_match(loan_request: LoanRequest, lender: Lender) -> Match:
    """Compute all sub-scores and the weighted overall score for one lender."""
    risk = risk_compatibility(loan_request, lender)
    term = term_compatibility(loan_request, lender)
    amount = amount_compatibility(loan_request, lender)
    rating = rating_compatibility(loan_request, lender)
    overall = (
        risk * RISK_WEIGHT
        + term * TERM_WEIGHT
        + amount * AMOUNT_WEIGHT
        + rating * RATING_WEIGHT
    )
    return Match(
        loan_request_id=loan_request.id,
        lender_id=lender.id,
        amount=min(loan_request.amount, lender.available_amount),
        match_score=overall,
        risk_compatibility=risk,
        term_compatibility=term,
        amount_compatibility=amount,
        rating_compatibility=rating,
    )


def find_matches(loan_request: LoanRequest, lenders: list[Lender]) -> list[Match]:
    """Return matches above the threshold, best first.

    Ties keep the order of ``lenders`` (sorted() is stable).
    """
    matches = [
        score_match(loan_request, lender)
        for lender in lenders
        if is_basic_compatible(loan_request, lender)
    ]
    matches = [m for m in matches if m.match_score > MATCH_THRESHOLD]
    return sorted(matches, key=lambda m: m.match_score, reverse=True)
