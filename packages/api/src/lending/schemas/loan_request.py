# This project was developed with assistance from AI tools.
"""Schemas for loan requests, risk assessment and lender matching."""

from datetime import datetime

from db.enums import LoanRequestStatus, RiskLevel
from pydantic import BaseModel, Field


class LoanRequest(BaseModel):
    """Borrower's request for funding, as submitted for review."""

    id: str
    borrower_id: str = ""
    borrower_name: str = ""
    borrower_contact: str = Field(default="", description="Email or phone used for reminders.")
    amount: float = Field(gt=0)
    repayment_period: int = Field(ge=1, description="Repayment period in months.")
    purpose: str
    category: str | None = None
    risk: RiskLevel = Field(
        default=RiskLevel.MEDIUM,
        description="Declared risk tier used for lender matching.",
    )
    submitted_at: datetime | None = None
    borrower_rating: float = Field(ge=0, le=5)
    status: LoanRequestStatus = LoanRequestStatus.PENDING


class BorrowerHistory(BaseModel):
    """Prior repayment behaviour feeding the risk score."""

    defaulted_loans: int = Field(default=0, ge=0)
    late_payments: int = Field(default=0, ge=0)


class RiskAssessment(BaseModel):
    """Heuristic risk score with the factors that produced it."""

    score: float = Field(ge=0, le=100)
    level: RiskLevel
    factors: list[str] = []
    recommendations: list[str] = []


class Lender(BaseModel):
    """Funding source considered by the match engine."""

    id: str
    user_id: str = ""
    available_amount: float = Field(ge=0)
    risk_preference: RiskLevel
    preferred_terms: list[int] = Field(min_length=1, description="Accepted terms in months.")
    min_amount: float = Field(ge=0)
    max_amount: float = Field(ge=0)
    rating: float = Field(ge=0, le=5)


class Match(BaseModel):
    """Scored pairing between a loan request and a lender."""

    loan_request_id: str
    lender_id: str
    amount: float
    match_score: float
    risk_compatibility: float
    term_compatibility: float
    amount_compatibility: float
    rating_compatibility: float


class RiskAssessmentRequest(BaseModel):
    """Request body for an ad-hoc risk assessment."""

    loan_request: LoanRequest
    borrower_history: BorrowerHistory | None = None


class MatchRequest(BaseModel):
    """Request body for matching a loan request against lenders."""

    loan_request: LoanRequest
    lenders: list[Lender]


class MatchListResponse(BaseModel):
    """Ranked matches, best first."""

    data: list[Match]
