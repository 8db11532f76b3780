# This project was developed with assistance from AI tools.
"""Schemas for admin review endpoints."""

from datetime import datetime
from typing import Any

from db.enums import ReviewActionType, ReviewStatus
from pydantic import BaseModel, Field

from . import Pagination
from .loan_request import BorrowerHistory, LoanRequest, RiskAssessment


class AdminAction(BaseModel):
    """Single admin operation recorded on a review."""

    type: ReviewActionType
    admin_id: str
    data: dict[str, Any] = {}
    notes: str = ""
    created_at: datetime


class AdminReview(BaseModel):
    """Admin decision record attached to a loan request."""

    id: str
    loan_request_id: str
    admin_id: str
    status: ReviewStatus = ReviewStatus.PENDING
    risk_assessment: RiskAssessment
    admin_notes: str = ""
    reviewed_at: datetime
    additional_data_requested: list[str] | None = None
    data_deadline: datetime | None = None
    rejection_reason: str | None = None
    approved_amount: float | None = None
    approved_term_months: int | None = None
    interest_rate: float | None = None
    actions: list[AdminAction] = []


class ReviewSubmission(BaseModel):
    """Request body for placing a loan request under review."""

    loan_request: LoanRequest
    borrower_history: BorrowerHistory | None = None
    admin_id: str


class ApproveRequest(BaseModel):
    approved_amount: float = Field(gt=0)
    approved_term_months: int = Field(ge=1)
    interest_rate: float = Field(ge=0)
    notes: str = ""


class RejectRequest(BaseModel):
    reason: str = Field(min_length=1)
    notes: str = ""


class AdditionalDataRequest(BaseModel):
    data_types: list[str] = Field(min_length=1)
    notes: str = ""


class AdjustTermsRequest(BaseModel):
    approved_amount: float = Field(gt=0)
    approved_term_months: int = Field(ge=1)
    interest_rate: float = Field(ge=0)
    notes: str = ""


class ReviewResponse(BaseModel):
    """Response for a single review."""

    data: AdminReview


class ReviewListResponse(BaseModel):
    """Response for listing reviews."""

    data: list[AdminReview]
    pagination: Pagination


class RiskDistribution(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0


class ReviewDashboardStats(BaseModel):
    """Aggregate counts for the admin review dashboard."""

    total_reviews: int
    pending_reviews: int
    approved_count: int
    rejected_count: int
    data_requested_count: int
    average_risk_score: float
    risk_distribution: RiskDistribution
