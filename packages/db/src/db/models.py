# This project was developed with assistance from AI tools.
"""
P2P lending lifecycle -- domain models

Loan requests, admin reviews, active loans, payments and reminder
schedules. String primary keys are assigned by the engine, not the database.
"""

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base
from .enums import (
    LoanRequestStatus,
    LoanStatus,
    PaymentMethod,
    PaymentStatus,
    ReminderStatus,
    ReminderType,
    ReviewStatus,
    RiskLevel,
)


class LoanRequestRow(Base):
    """Borrower's request for funding."""

    __tablename__ = "loan_requests"

    id = Column(String(64), primary_key=True)
    borrower_id = Column(String(255), nullable=False, index=True)
    borrower_name = Column(String(255), nullable=False, default="")
    borrower_contact = Column(String(255), nullable=False, default="")
    amount = Column(Numeric(12, 2), nullable=False)
    repayment_period = Column(Integer, nullable=False)
    purpose = Column(String(100), nullable=False)
    category = Column(String(100), nullable=True)
    risk = Column(Enum(RiskLevel, name="risk_level", native_enum=False), nullable=False)
    borrower_rating = Column(Float, nullable=False)
    status = Column(
        Enum(LoanRequestStatus, name="loan_request_status", native_enum=False),
        nullable=False,
        default=LoanRequestStatus.PENDING,
    )
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    review = relationship(
        "AdminReviewRow", back_populates="loan_request", uselist=False, cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<LoanRequestRow(id='{self.id}', status='{self.status}')>"


class AdminReviewRow(Base):
    """Admin decision record, one per loan request."""

    __tablename__ = "admin_reviews"
    __table_args__ = (
        UniqueConstraint("loan_request_id", name="uq_review_loan_request"),
    )

    id = Column(String(64), primary_key=True)
    loan_request_id = Column(
        String(64), ForeignKey("loan_requests.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    admin_id = Column(String(255), nullable=False)
    status = Column(
        Enum(ReviewStatus, name="review_status", native_enum=False),
        nullable=False,
        default=ReviewStatus.PENDING,
    )
    risk_assessment = Column(JSON, nullable=False)
    admin_notes = Column(Text, nullable=False, default="")
    reviewed_at = Column(DateTime(timezone=True), nullable=False)
    additional_data_requested = Column(JSON, nullable=True)
    data_deadline = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    approved_amount = Column(Numeric(12, 2), nullable=True)
    approved_term_months = Column(Integer, nullable=True)
    interest_rate = Column(Float, nullable=True)
    actions = Column(JSON, nullable=False, default=list)

    loan_request = relationship("LoanRequestRow", back_populates="review")

    def __repr__(self):
        return f"<AdminReviewRow(id='{self.id}', status='{self.status}')>"


class ActiveLoanRow(Base):
    """Approved loan accruing a repayment timeline."""

    __tablename__ = "active_loans"

    id = Column(String(64), primary_key=True)
    borrower_id = Column(String(255), nullable=False, index=True)
    borrower_name = Column(String(255), nullable=False, default="")
    borrower_contact = Column(String(255), nullable=False, default="")
    loan_amount = Column(Numeric(12, 2), nullable=False)
    remaining_amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(
        Enum(LoanStatus, name="loan_status", native_enum=False),
        nullable=False,
        default=LoanStatus.ACTIVE,
    )
    lender_id = Column(String(255), nullable=True)
    lender_name = Column(String(255), nullable=True)
    interest_rate = Column(Float, nullable=False, default=0)
    term_months = Column(Integer, nullable=False)
    monthly_payment = Column(Numeric(12, 2), nullable=False)
    payment_link = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_payment_date = Column(DateTime(timezone=True), nullable=True)
    next_payment_date = Column(DateTime(timezone=True), nullable=True)
    reminder_count = Column(Integer, nullable=False, default=0)
    last_reminder_sent = Column(DateTime(timezone=True), nullable=True)

    payments = relationship(
        "PaymentRow", back_populates="loan", cascade="all, delete-orphan",
    )
    reminder_schedules = relationship(
        "ReminderScheduleRow", back_populates="loan", cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<ActiveLoanRow(id='{self.id}', status='{self.status}')>"


class PaymentRow(Base):
    """Repayment applied (or attempted) against an active loan."""

    __tablename__ = "payments"

    id = Column(String(64), primary_key=True)
    loan_id = Column(
        String(64), ForeignKey("active_loans.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False)
    payment_method = Column(
        Enum(PaymentMethod, name="payment_method", native_enum=False),
        nullable=False,
    )
    status = Column(
        Enum(PaymentStatus, name="payment_status", native_enum=False),
        nullable=False,
    )
    reference = Column(String(255), nullable=True)

    loan = relationship("ActiveLoanRow", back_populates="payments")

    def __repr__(self):
        return f"<PaymentRow(id='{self.id}', loan_id='{self.loan_id}', amount={self.amount})>"


class ReminderScheduleRow(Base):
    """Single time-stamped reminder job for one loan."""

    __tablename__ = "reminder_schedules"

    id = Column(String(128), primary_key=True)
    loan_id = Column(
        String(64), ForeignKey("active_loans.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    type = Column(
        Enum(ReminderType, name="reminder_type", native_enum=False),
        nullable=False,
    )
    scheduled_date = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(
        Enum(ReminderStatus, name="reminder_status", native_enum=False),
        nullable=False,
        default=ReminderStatus.PENDING,
    )
    attempts = Column(Integer, nullable=False, default=0)
    max_attempts = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    error_message = Column(Text, nullable=True)

    loan = relationship("ActiveLoanRow", back_populates="reminder_schedules")

    def __repr__(self):
        return f"<ReminderScheduleRow(id='{self.id}', status='{self.status}')>"
