# This project was developed with assistance from AI tools.
"""Admin review endpoints: intake, decisions and dashboard."""

from collections.abc import Awaitable

from db.enums import ReviewStatus
from fastapi import APIRouter, HTTPException, status

from ..schemas import Pagination
from ..schemas.review import (
    AdditionalDataRequest,
    AdjustTermsRequest,
    AdminReview,
    ApproveRequest,
    RejectRequest,
    ReviewDashboardStats,
    ReviewListResponse,
    ReviewResponse,
    ReviewSubmission,
)
from ..services.review import (
    DuplicateReviewError,
    InvalidTransitionError,
    ReviewInputError,
)
from .deps import Coordinator, PageParams

router = APIRouter()


async def _decide(review_id: str, action: Awaitable[AdminReview | None]) -> ReviewResponse:
    """Run a review decision and map workflow errors onto HTTP statuses."""
    try:
        review = await action
    except ReviewInputError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review {review_id} not found",
        )
    return ReviewResponse(data=review)


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def submit_review(body: ReviewSubmission, coordinator: Coordinator) -> ReviewResponse:
    """Assess a loan request and open its review."""
    try:
        review = await coordinator.submit_for_review(
            body.loan_request, body.borrower_history, body.admin_id
        )
    except DuplicateReviewError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    return ReviewResponse(data=review)


@router.get("", response_model=ReviewListResponse)
async def list_reviews(
    coordinator: Coordinator,
    page: PageParams,
    filter_status: ReviewStatus | None = None,
) -> ReviewListResponse:
    reviews = await coordinator.workflow.list_reviews(filter_status)
    return ReviewListResponse(
        data=page.slice(reviews),
        pagination=Pagination.for_page(len(reviews), page.offset, page.limit),
    )


@router.get("/queue", response_model=ReviewListResponse)
async def priority_queue(coordinator: Coordinator, page: PageParams) -> ReviewListResponse:
    """Pending reviews, riskiest first."""
    reviews = await coordinator.workflow.get_priority_queue()
    return ReviewListResponse(
        data=page.slice(reviews),
        pagination=Pagination.for_page(len(reviews), page.offset, page.limit),
    )


@router.get("/stats", response_model=ReviewDashboardStats)
async def dashboard_stats(coordinator: Coordinator) -> ReviewDashboardStats:
    return await coordinator.workflow.get_dashboard_stats()


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: str, coordinator: Coordinator) -> ReviewResponse:
    review = await coordinator.workflow.get_review(review_id)
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Review {review_id} not found",
        )
    return ReviewResponse(data=review)


@router.post("/{review_id}/approve", response_model=ReviewResponse)
async def approve_review(
    review_id: str, body: ApproveRequest, coordinator: Coordinator
) -> ReviewResponse:
    """Approve with final terms; the active loan and its reminders are created."""
    return await _decide(
        review_id,
        coordinator.approve_review(
            review_id,
            body.approved_amount,
            body.approved_term_months,
            body.interest_rate,
            body.notes,
        ),
    )


@router.post("/{review_id}/reject", response_model=ReviewResponse)
async def reject_review(
    review_id: str, body: RejectRequest, coordinator: Coordinator
) -> ReviewResponse:
    return await _decide(
        review_id,
        coordinator.reject_review(review_id, body.reason, body.notes),
    )


@router.post("/{review_id}/request-data", response_model=ReviewResponse)
async def request_additional_data(
    review_id: str, body: AdditionalDataRequest, coordinator: Coordinator
) -> ReviewResponse:
    return await _decide(
        review_id,
        coordinator.request_additional_data(review_id, body.data_types, body.notes),
    )


@router.post("/{review_id}/adjust-terms", response_model=ReviewResponse)
async def adjust_terms(
    review_id: str, body: AdjustTermsRequest, coordinator: Coordinator
) -> ReviewResponse:
    """Change approved terms; opens the loan if none exists yet."""
    return await _decide(
        review_id,
        coordinator.adjust_review_terms(
            review_id,
            body.approved_amount,
            body.approved_term_months,
            body.interest_rate,
            body.notes,
        ),
    )
