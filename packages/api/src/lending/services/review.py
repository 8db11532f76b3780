# This project was developed with assistance from AI tools.
"""Admin review workflow for loan requests.

Handles intake (risk assessment + initial routing), the admin decisions
(approve / reject / request additional data / adjust terms), and the
dashboard views over all reviews.

Transitions are checked against ``ReviewStatus.valid_transitions()``.
Amounts, terms and rates are accepted as given: platform limits and funds
checks are the caller's responsibility.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any

from db.enums import LoanRequestStatus, ReviewActionType, ReviewStatus, RiskLevel

from ..core.clock import Clock
from ..schemas.loan_request import BorrowerHistory, LoanRequest, RiskAssessment
from ..schemas.review import (
    AdminAction,
    AdminReview,
    ReviewDashboardStats,
    RiskDistribution,
)
from .risk import assess_risk
from .store import LoanRequestStore, ReviewStore

logger = logging.getLogger(__name__)

DEFAULT_DATA_DEADLINE_DAYS = 7

# Intake routing thresholds
REQUIRES_DATA_SCORE = 80
FAST_TRACK_SCORE = 30

HIGH_RISK_DOCUMENTS = (
    "Proof of income",
    "Bank statements (last 3 months)",
    "Employment verification",
    "Additional identification documents",
)


class ReviewError(ValueError):
    """Base class for review operations the workflow refuses."""


class InvalidTransitionError(ReviewError):
    """Raised when a review status transition is not allowed."""


class DuplicateReviewError(ReviewError):
    """Raised when a loan request already has a review."""


class ReviewInputError(ReviewError):
    """Raised when a decision is missing required data."""


def generate_initial_notes(assessment: RiskAssessment) -> str:
    """Render the assessment as the review's opening admin notes."""
    lines = [f"Risk Assessment: {assessment.level.value.upper()} (Score: {assessment.score:g}/100)", ""]
    if assessment.factors:
        lines.append("Risk Factors:")
        lines.extend(f"- {factor}" for factor in assessment.factors)
        lines.append("")
    if assessment.recommendations:
        lines.append("Recommendations:")
        lines.extend(f"- {rec}" for rec in assessment.recommendations)
        lines.append("")

    if assessment.level == RiskLevel.HIGH:
        lines.append(
            "HIGH RISK: Requires thorough review and may need additional documentation or collateral."
        )
    elif assessment.level == RiskLevel.MEDIUM:
        lines.append(
            "MEDIUM RISK: Standard review process with potential for approval with conditions."
        )
    else:
        lines.append("LOW RISK: Likely suitable for approval with standard terms.")
    return "\n".join(lines)


def initial_status(assessment: RiskAssessment) -> ReviewStatus:
    """Route a fresh review from its risk assessment."""
    if assessment.level == RiskLevel.HIGH and assessment.score > REQUIRES_DATA_SCORE:
        return ReviewStatus.REQUIRES_ADDITIONAL_DATA
    if assessment.level == RiskLevel.LOW and assessment.score < FAST_TRACK_SCORE:
        return ReviewStatus.APPROVED
    return ReviewStatus.PENDING


def _check_transition(review: AdminReview, new_status: ReviewStatus) -> None:
    allowed = ReviewStatus.valid_transitions().get(review.status, frozenset())
    if new_status not in allowed:
        raise InvalidTransitionError(
            f"Cannot move review {review.id} from '{review.status.value}' to "
            f"'{new_status.value}'. Allowed: "
            f"{sorted(s.value for s in allowed) if allowed else 'none (terminal status)'}."
        )


class ReviewWorkflow:
    """State machine driving a loan request through admin review."""

    def __init__(
        self,
        reviews: ReviewStore,
        loan_requests: LoanRequestStore,
        clock: Clock,
        *,
        data_deadline_days: int = DEFAULT_DATA_DEADLINE_DAYS,
    ):
        self._reviews = reviews
        self._loan_requests = loan_requests
        self._clock = clock
        self._data_deadline_days = data_deadline_days

    # ------------------------------------------------------------------
    # Intake
    # ------------------------------------------------------------------

    async def submit(
        self,
        loan_request: LoanRequest,
        history: BorrowerHistory | None,
        admin_id: str,
    ) -> AdminReview:
        """Assess a loan request and open its review.

        Raises DuplicateReviewError if the request already has a review.
        """
        existing = await self.get_review_for_request(loan_request.id)
        if existing is not None:
            raise DuplicateReviewError(
                f"Loan request {loan_request.id} already has review {existing.id} "
                f"({existing.status.value})."
            )

        now = self._clock.now()
        if loan_request.submitted_at is None:
            loan_request = loan_request.model_copy(update={"submitted_at": now})

        assessment = assess_risk(loan_request, history)
        status = initial_status(assessment)

        review = AdminReview(
            id=f"review-{uuid.uuid4().hex[:12]}",
            loan_request_id=loan_request.id,
            admin_id=admin_id,
            status=status,
            risk_assessment=assessment,
            admin_notes=generate_initial_notes(assessment),
            reviewed_at=now,
            additional_data_requested=(
                list(HIGH_RISK_DOCUMENTS) if assessment.level == RiskLevel.HIGH else None
            ),
        )
        if status == ReviewStatus.REQUIRES_ADDITIONAL_DATA:
            review.data_deadline = now + timedelta(days=self._data_deadline_days)

        if status == ReviewStatus.APPROVED:
            loan_request.status = LoanRequestStatus.APPROVED
        await self._loan_requests.put(loan_request)
        await self._reviews.put(review)

        logger.info(
            "Review %s opened for loan request %s: score=%s level=%s status=%s",
            review.id,
            loan_request.id,
            assessment.score,
            assessment.level.value,
            status.value,
        )
        return review

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    async def approve(
        self,
        review_id: str,
        approved_amount: float | None,
        approved_term_months: int | None,
        interest_rate: float | None,
        notes: str = "",
    ) -> AdminReview | None:
        """Approve a review with final terms.

        Returns None if the review does not exist.
        """
        review = await self._reviews.get(review_id)
        if review is None:
            return None
        if approved_amount is None or approved_term_months is None or interest_rate is None:
            raise ReviewInputError(
                "Approval requires approved_amount, approved_term_months and interest_rate."
            )
        _check_transition(review, ReviewStatus.APPROVED)

        review.status = ReviewStatus.APPROVED
        review.approved_amount = approved_amount
        review.approved_term_months = approved_term_months
        review.interest_rate = interest_rate
        review.admin_notes = notes
        self._record(
            review,
            ReviewActionType.APPROVE,
            notes,
            {
                "approved_amount": approved_amount,
                "approved_term_months": approved_term_months,
                "interest_rate": interest_rate,
                "risk_level": review.risk_assessment.level.value,
            },
        )
        await self._reviews.put(review)
        await self._set_request_status(review.loan_request_id, LoanRequestStatus.APPROVED)

        logger.info(
            "Review %s approved: amount=%s term=%s rate=%s",
            review_id,
            approved_amount,
            approved_term_months,
            interest_rate,
        )
        return review

    async def reject(self, review_id: str, reason: str, notes: str = "") -> AdminReview | None:
        """Reject a review. Returns None if the review does not exist."""
        review = await self._reviews.get(review_id)
        if review is None:
            return None
        if not reason:
            raise ReviewInputError("Rejection requires a reason.")
        _check_transition(review, ReviewStatus.REJECTED)

        review.status = ReviewStatus.REJECTED
        review.rejection_reason = reason
        review.admin_notes = notes
        self._record(
            review,
            ReviewActionType.REJECT,
            notes,
            {"reason": reason, "risk_level": review.risk_assessment.level.value},
        )
        await self._reviews.put(review)
        await self._set_request_status(review.loan_request_id, LoanRequestStatus.REJECTED)

        logger.info("Review %s rejected: %s", review_id, reason)
        return review

    async def request_additional_data(
        self,
        review_id: str,
        data_types: list[str],
        notes: str = "",
    ) -> AdminReview | None:
        """Ask the borrower for more documents before deciding.

        Returns None if the review does not exist.
        """
        review = await self._reviews.get(review_id)
        if review is None:
            return None
        if not data_types:
            raise ReviewInputError("At least one requested document type is required.")
        _check_transition(review, ReviewStatus.REQUIRES_ADDITIONAL_DATA)

        deadline = self._clock.now() + timedelta(days=self._data_deadline_days)
        review.status = ReviewStatus.REQUIRES_ADDITIONAL_DATA
        review.additional_data_requested = list(data_types)
        review.data_deadline = deadline
        review.admin_notes = notes
        self._record(
            review,
            ReviewActionType.REQUEST_DATA,
            notes,
            {"requested_data": list(data_types), "deadline": deadline.isoformat()},
        )
        await self._reviews.put(review)

        logger.info(
            "Review %s requires additional data (%d item(s), deadline %s)",
            review_id,
            len(data_types),
            deadline.date().isoformat(),
        )
        return review

    async def adjust_terms(
        self,
        review_id: str,
        approved_amount: float,
        approved_term_months: int,
        interest_rate: float,
        notes: str = "",
    ) -> AdminReview | None:
        """Overwrite the terms of an approved review; status stays approved.

        Returns None if the review does not exist.
        """
        review = await self._reviews.get(review_id)
        if review is None:
            return None
        if review.status != ReviewStatus.APPROVED:
            raise InvalidTransitionError(
                f"Terms can only be adjusted on approved reviews; review {review_id} "
                f"is '{review.status.value}'."
            )

        self._record(
            review,
            ReviewActionType.ADJUST_TERMS,
            notes,
            {
                "original_amount": review.approved_amount,
                "original_term_months": review.approved_term_months,
                "original_interest_rate": review.interest_rate,
                "new_amount": approved_amount,
                "new_term_months": approved_term_months,
                "new_interest_rate": interest_rate,
            },
        )
        review.approved_amount = approved_amount
        review.approved_term_months = approved_term_months
        review.interest_rate = interest_rate
        review.admin_notes = notes
        await self._reviews.put(review)

        logger.info("Review %s terms adjusted", review_id)
        return review

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_review(self, review_id: str) -> AdminReview | None:
        return await self._reviews.get(review_id)

    async def get_review_for_request(self, loan_request_id: str) -> AdminReview | None:
        for review in await self._reviews.list():
            if review.loan_request_id == loan_request_id:
                return review
        return None

    async def get_loan_request(self, loan_request_id: str) -> LoanRequest | None:
        return await self._loan_requests.get(loan_request_id)

    async def list_reviews(self, status: ReviewStatus | None = None) -> list[AdminReview]:
        reviews = await self._reviews.list()
        if status is not None:
            reviews = [r for r in reviews if r.status == status]
        return sorted(reviews, key=lambda r: r.reviewed_at)

    async def get_dashboard_stats(self) -> ReviewDashboardStats:
        reviews = await self._reviews.list()
        by_status = {s: 0 for s in ReviewStatus}
        distribution = RiskDistribution()
        for review in reviews:
            by_status[review.status] += 1
            level = review.risk_assessment.level.value
            setattr(distribution, level, getattr(distribution, level) + 1)

        average = (
            sum(r.risk_assessment.score for r in reviews) / len(reviews) if reviews else 0
        )
        return ReviewDashboardStats(
            total_reviews=len(reviews),
            pending_reviews=by_status[ReviewStatus.PENDING],
            approved_count=by_status[ReviewStatus.APPROVED],
            rejected_count=by_status[ReviewStatus.REJECTED],
            data_requested_count=by_status[ReviewStatus.REQUIRES_ADDITIONAL_DATA],
            average_risk_score=round(average, 2),
            risk_distribution=distribution,
        )

    async def get_priority_queue(self) -> list[AdminReview]:
        """Pending reviews, riskiest first, then oldest first."""
        pending = await self.list_reviews(ReviewStatus.PENDING)
        return sorted(pending, key=lambda r: (-r.risk_assessment.score, r.reviewed_at))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record(
        self,
        review: AdminReview,
        action_type: ReviewActionType,
        notes: str,
        data: dict[str, Any],
    ) -> None:
        review.actions.append(
            AdminAction(
                type=action_type,
                admin_id=review.admin_id,
                data=data,
                notes=notes,
                created_at=self._clock.now(),
            )
        )

    async def _set_request_status(self, loan_request_id: str, status: LoanRequestStatus) -> None:
        loan_request = await self._loan_requests.get(loan_request_id)
        if loan_request is None:
            logger.warning("Loan request %s missing for its review", loan_request_id)
            return
        if loan_request.status == LoanRequestStatus.COMPLETED:
            return
        loan_request.status = status
        await self._loan_requests.put(loan_request)
