# This project was developed with assistance from AI tools.
"""Stateless risk scoring and lender matching endpoints."""

from fastapi import APIRouter

from ..schemas.loan_request import (
    MatchListResponse,
    MatchRequest,
    RiskAssessment,
    RiskAssessmentRequest,
)
from ..services.matching import find_matches
from ..services.risk import assess_risk

router = APIRouter()


@router.post("/risk/assess", response_model=RiskAssessment)
async def assess(body: RiskAssessmentRequest) -> RiskAssessment:
    """Score a loan request without opening a review."""
    return assess_risk(body.loan_request, body.borrower_history)


@router.post("/matches", response_model=MatchListResponse)
async def match_lenders(body: MatchRequest) -> MatchListResponse:
    """Rank the given lenders for a loan request, best first."""
    return MatchListResponse(data=find_matches(body.loan_request, body.lenders))
