# This project was developed with assistance from AI tools.
"""Heuristic risk scoring for loan requests.

Pure math, no I/O. Additive points from a base score, clamped to 0-100.
Shared by the review workflow and the ad-hoc assessment endpoint.
"""

from db.enums import RiskLevel

from ..schemas.loan_request import BorrowerHistory, LoanRequest, RiskAssessment

BASE_SCORE = 50
HIGH_RISK_PURPOSES = frozenset({"business", "investment", "debt_consolidation"})

# Upper bounds (exclusive) of each level
LOW_RISK_CEILING = 40
MEDIUM_RISK_CEILING = 70


def risk_level_for(score: float) -> RiskLevel:
    """Map a score to its coarse level."""
    if score < LOW_RISK_CEILING:
        return RiskLevel.LOW
    if score < MEDIUM_RISK_CEILING:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def assess_risk(
    loan_request: LoanRequest,
    history: BorrowerHistory | None = None,
) -> RiskAssessment:
    """Score a loan request and list the factors behind the score."""
    score = BASE_SCORE
    factors: list[str] = []
    recommendations: list[str] = []

    if loan_request.amount > 3000:
        score += 20
        factors.append("High loan amount")
    elif loan_request.amount > 1500:
        score += 10
        factors.append("Medium loan amount")

    if loan_request.repayment_period > 6:
        score += 15
        factors.append("Long repayment period")

    if loan_request.purpose.lower() in HIGH_RISK_PURPOSES:
        score += 15
        factors.append("High-risk purpose")

    if loan_request.borrower_rating < 3.0:
        score += 20
        factors.append("Low borrower rating")
        recommendations.append("Consider requiring additional collateral")
    elif loan_request.borrower_rating > 4.5:
        score -= 15
        factors.append("High borrower rating")

    if history is not None:
        if history.defaulted_loans > 0:
            score += 25
            factors.append("Previous loan defaults")
            recommendations.append("Require higher interest rate or collateral")
        if history.late_payments > 2:
            score += 15
            factors.append("Multiple late payments")

    score = min(100, max(0, score))
    level = risk_level_for(score)

    if level == RiskLevel.HIGH:
        recommendations.append("Consider requiring co-signer")
        recommendations.append("Implement stricter payment monitoring")
    elif level == RiskLevel.MEDIUM:
        recommendations.append("Regular payment reminders")

    return RiskAssessment(
        score=score,
        level=level,
        factors=factors,
        recommendations=recommendations,
    )
