# This project was developed with assistance from AI tools.
"""Schemas for active loans, payments and reminder statistics."""

from datetime import datetime

from db.enums import LoanStatus, PaymentMethod, PaymentStatus, ReminderType
from pydantic import BaseModel, Field

from . import Pagination


class ActiveLoan(BaseModel):
    """Approved loan with its repayment state."""

    id: str
    borrower_id: str = ""
    borrower_name: str = ""
    borrower_contact: str = ""
    loan_amount: float
    remaining_amount: float = Field(ge=0)
    due_date: datetime
    status: LoanStatus = LoanStatus.ACTIVE
    lender_id: str | None = None
    lender_name: str | None = None
    interest_rate: float = 0
    term_months: int
    monthly_payment: float
    payment_link: str
    created_at: datetime
    last_payment_date: datetime | None = None
    next_payment_date: datetime | None = None
    reminder_count: int = 0
    last_reminder_sent: datetime | None = None


class PaymentRecord(BaseModel):
    """Repayment reported by the ledger."""

    id: str
    loan_id: str
    amount: float = Field(gt=0)
    payment_date: datetime
    payment_method: PaymentMethod
    status: PaymentStatus
    reference: str | None = None


class PaymentCreate(BaseModel):
    """Request body for reporting a payment against a loan."""

    id: str
    amount: float = Field(gt=0)
    payment_date: datetime | None = None
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    status: PaymentStatus = PaymentStatus.COMPLETED
    reference: str | None = None


class ReminderStats(BaseModel):
    """Read-only view over loans and sent reminders."""

    total_active_loans: int
    loans_with_upcoming_payments: int
    overdue_loans: int
    reminders_sent_today: int
    reminders_sent_this_week: int
    average_days_overdue: float


class ManualReminderRequest(BaseModel):
    reminder_type: ReminderType


class ManualReminderResponse(BaseModel):
    loan_id: str
    reminder_type: ReminderType
    sent: bool


class LoanResponse(BaseModel):
    data: ActiveLoan


class LoanListResponse(BaseModel):
    data: list[ActiveLoan]
    pagination: Pagination


class PaymentResponse(BaseModel):
    data: PaymentRecord
    loan: ActiveLoan


class PaymentListResponse(BaseModel):
    data: list[PaymentRecord]
    pagination: Pagination
