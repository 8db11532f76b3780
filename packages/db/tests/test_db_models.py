# This project was developed with assistance from AI tools.
"""
Domain model structure tests
"""

from db import ActiveLoanRow, AdminReviewRow, Base, ReminderScheduleRow
from db.enums import LoanStatus, ReviewStatus, RiskLevel


def test_active_loan_relationships():
    """ActiveLoanRow should own payments and reminder schedules."""
    rel_names = {r.key for r in ActiveLoanRow.__mapper__.relationships}
    assert "payments" in rel_names
    assert "reminder_schedules" in rel_names


def test_review_is_unique_per_loan_request():
    constraint_names = {c.name for c in AdminReviewRow.__table__.constraints}
    assert "uq_review_loan_request" in constraint_names


def test_all_lifecycle_tables_registered():
    assert {
        "loan_requests",
        "admin_reviews",
        "active_loans",
        "payments",
        "reminder_schedules",
    } <= set(Base.metadata.tables)


def test_schedule_cascades_from_loan():
    fk = next(iter(ReminderScheduleRow.__table__.c.loan_id.foreign_keys))
    assert fk.column.table.name == "active_loans"
    assert fk.ondelete == "CASCADE"


def test_review_transitions_from_pending():
    allowed = ReviewStatus.valid_transitions()[ReviewStatus.PENDING]
    assert allowed == {
        ReviewStatus.APPROVED,
        ReviewStatus.REJECTED,
        ReviewStatus.REQUIRES_ADDITIONAL_DATA,
    }


def test_terminal_review_statuses_have_no_transitions():
    transitions = ReviewStatus.valid_transitions()
    for status in ReviewStatus.terminal_statuses():
        assert transitions[status] == frozenset()


def test_resubmission_path_cannot_request_more_data():
    allowed = ReviewStatus.valid_transitions()[ReviewStatus.REQUIRES_ADDITIONAL_DATA]
    assert ReviewStatus.REQUIRES_ADDITIONAL_DATA not in allowed


def test_risk_rank_ordering():
    assert RiskLevel.LOW.rank() < RiskLevel.MEDIUM.rank() < RiskLevel.HIGH.rank()


def test_loan_terminal_statuses():
    assert LoanStatus.terminal_statuses() == {LoanStatus.COMPLETED, LoanStatus.DEFAULTED}
