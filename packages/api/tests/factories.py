# This project was developed with assistance from AI tools.
"""Shared test factory functions for domain objects.

Every factory takes keyword overrides on top of realistic defaults so a
test only spells out the fields it is about.
"""

from datetime import UTC, datetime, timedelta

from db.enums import (
    LoanStatus,
    PaymentMethod,
    PaymentStatus,
    ReminderType,
    ReviewStatus,
    RiskLevel,
)

from lending.schemas.loan import ActiveLoan, PaymentRecord
from lending.schemas.loan_request import Lender, LoanRequest, RiskAssessment
from lending.schemas.reminder import ReminderPayload, ReminderSchedule
from lending.schemas.review import AdminReview

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


def make_loan_request(**overrides) -> LoanRequest:
    """Medium-sized personal loan from a solid borrower (scores 60, medium)."""
    values = {
        "id": "req-1",
        "borrower_id": "borrower-1",
        "borrower_name": "Sara Ahmed",
        "borrower_contact": "sara@example.com",
        "amount": 2000,
        "repayment_period": 6,
        "purpose": "personal",
        "risk": RiskLevel.MEDIUM,
        "borrower_rating": 4.0,
    }
    values.update(overrides)
    return LoanRequest(**values)


def make_lender(**overrides) -> Lender:
    values = {
        "id": "lender-1",
        "user_id": "user-lender-1",
        "available_amount": 10000,
        "risk_preference": RiskLevel.MEDIUM,
        "preferred_terms": [6, 12],
        "min_amount": 500,
        "max_amount": 5000,
        "rating": 4.0,
    }
    values.update(overrides)
    return Lender(**values)


def make_assessment(score: float = 60, level: RiskLevel = RiskLevel.MEDIUM) -> RiskAssessment:
    return RiskAssessment(score=score, level=level, factors=[], recommendations=[])


def make_review(**overrides) -> AdminReview:
    values = {
        "id": "review-1",
        "loan_request_id": "req-1",
        "admin_id": "admin-1",
        "status": ReviewStatus.PENDING,
        "risk_assessment": make_assessment(),
        "reviewed_at": NOW,
    }
    values.update(overrides)
    return AdminReview(**values)


def make_active_loan(**overrides) -> ActiveLoan:
    """Active loan due 30 days after NOW."""
    values = {
        "id": "loan-1",
        "borrower_id": "borrower-1",
        "borrower_name": "Sara Ahmed",
        "borrower_contact": "sara@example.com",
        "loan_amount": 1200,
        "remaining_amount": 1200,
        "due_date": NOW + timedelta(days=30),
        "status": LoanStatus.ACTIVE,
        "lender_id": "admin-1",
        "lender_name": "P2P Lending Platform",
        "interest_rate": 0,
        "term_months": 12,
        "monthly_payment": 100,
        "payment_link": "https://pay.example.com/loan-1",
        "created_at": NOW - timedelta(days=335),
    }
    values.update(overrides)
    return ActiveLoan(**values)


def make_payment(**overrides) -> PaymentRecord:
    values = {
        "id": "pay-1",
        "loan_id": "loan-1",
        "amount": 100,
        "payment_date": NOW,
        "payment_method": PaymentMethod.BANK_TRANSFER,
        "status": PaymentStatus.COMPLETED,
    }
    values.update(overrides)
    return PaymentRecord(**values)


def make_schedule(**overrides) -> ReminderSchedule:
    values = {
        "id": "loan-1-overdue-0",
        "loan_id": "loan-1",
        "type": ReminderType.OVERDUE,
        "scheduled_date": NOW - timedelta(hours=1),
        "created_at": NOW - timedelta(days=30),
    }
    values.update(overrides)
    return ReminderSchedule(**values)


def make_payload(**overrides) -> ReminderPayload:
    values = {
        "borrower_name": "Sara Ahmed",
        "borrower_contact": "sara@example.com",
        "loan_id": "loan-1",
        "loan_amount": 1200,
        "remaining_amount": 600,
        "due_date": NOW,
        "days_overdue": 3,
        "payment_link": "https://pay.example.com/loan-1",
        "lender_name": "P2P Lending Platform",
        "reminder_type": ReminderType.OVERDUE,
    }
    values.update(overrides)
    return ReminderPayload(**values)


class RecordingNotifier:
    """Notifier fake that records every send.

    ``result`` is returned from ``send``; if it is an exception it is raised.
    """

    def __init__(self, result=True):
        self.result = result
        self.sent: list[tuple[str, ReminderPayload]] = []

    async def send(self, recipient: str, payload: ReminderPayload) -> bool:
        self.sent.append((recipient, payload))
        if isinstance(self.result, BaseException):
            raise self.result
        return self.result
