# This project was developed with assistance from AI tools.
"""Reminder schedule schemas."""

from datetime import datetime

from db.enums import ReminderStatus, ReminderType
from pydantic import BaseModel, Field

from . import Pagination


class ReminderSchedule(BaseModel):
    """One retryable reminder job for one loan and reminder type."""

    id: str
    loan_id: str
    type: ReminderType
    scheduled_date: datetime
    status: ReminderStatus = ReminderStatus.PENDING
    attempts: int = 0
    max_attempts: int = 3
    created_at: datetime
    sent_at: datetime | None = None
    error_message: str | None = None


class ReminderSettings(BaseModel):
    """Scheduling policy for a loan's reminder timeline."""

    upcoming_reminder_days: list[int] = [7, 3, 1]
    overdue_reminder_days: list[int] = [1, 3, 7, 14]
    final_notice_days: int = 30
    max_attempts: int = Field(default=3, ge=1)
    reminder_interval_hours: float = Field(default=24, gt=0)
    enable_reminders: bool = True


class ReminderPayload(BaseModel):
    """Fully resolved data handed to the notifier for rendering."""

    borrower_name: str
    borrower_contact: str
    loan_id: str
    loan_amount: float
    remaining_amount: float
    due_date: datetime
    days_overdue: int | None = None
    payment_link: str
    lender_name: str | None = None
    reminder_type: ReminderType


class ProcessSummary(BaseModel):
    """Outcome counts of one reminder processing pass."""

    processed: int = 0
    sent: int = 0
    failed: int = 0
    cancelled: int = 0


class TickResult(BaseModel):
    """Outcome of one periodic tick (status update + reminder pass)."""

    loans_updated: int
    reminders: ProcessSummary
    ran_at: datetime


class SchedulerStatus(BaseModel):
    is_running: bool
    schedule_count: int
    settings: ReminderSettings


class ScheduleResponse(BaseModel):
    data: ReminderSchedule


class ScheduleListResponse(BaseModel):
    data: list[ReminderSchedule]
    pagination: Pagination
