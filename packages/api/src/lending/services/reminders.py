# This project was developed with assistance from AI tools.
"""Repayment reminder scheduling and delivery.

Each active loan gets a batch of reminder jobs around its due date:
upcoming reminders before it (future instants only), overdue reminders
after it (always, so past ones fire on the next pass) and one final
notice. ``process_reminders()`` is the polling pass driven by the
periodic tick.

Failed jobs are not re-queued automatically; ``reset_failed()`` puts one
back to pending while it still has attempts left.
"""

import logging
import math
from datetime import datetime, timedelta

from db.enums import LoanStatus, ReminderStatus, ReminderType

from ..core.clock import Clock, ensure_tz
from ..schemas.loan import ActiveLoan
from ..schemas.reminder import (
    ProcessSummary,
    ReminderPayload,
    ReminderSchedule,
    ReminderSettings,
    SchedulerStatus,
)
from .notifier import Notifier
from .store import LoanStore, ScheduleStore

logger = logging.getLogger(__name__)

FINAL_NOTICE_MAX_ATTEMPTS = 1


class ReminderRetryError(ValueError):
    """Raised when a schedule cannot be put back to pending."""


def days_overdue(due_date: datetime, now: datetime) -> int:
    """Whole days past due (partial days round up), never negative."""
    elapsed = (now - ensure_tz(due_date)).total_seconds() / 86400
    return max(0, math.ceil(elapsed))


def build_payload(loan: ActiveLoan, reminder_type: ReminderType, now: datetime) -> ReminderPayload:
    """Resolve everything the notifier needs to render one reminder."""
    return ReminderPayload(
        borrower_name=loan.borrower_name,
        borrower_contact=loan.borrower_contact,
        loan_id=loan.id,
        loan_amount=loan.loan_amount,
        remaining_amount=loan.remaining_amount,
        due_date=loan.due_date,
        days_overdue=(
            None if reminder_type == ReminderType.UPCOMING else days_overdue(loan.due_date, now)
        ),
        payment_link=loan.payment_link,
        lender_name=loan.lender_name,
        reminder_type=reminder_type,
    )


class ReminderScheduler:
    """Owns reminder jobs and their pending -> sent/failed/cancelled lifecycle."""

    def __init__(
        self,
        schedules: ScheduleStore,
        loans: LoanStore,
        notifier: Notifier,
        clock: Clock,
        settings: ReminderSettings | None = None,
    ):
        self._schedules = schedules
        self._loans = loans
        self._notifier = notifier
        self._clock = clock
        self._settings = settings or ReminderSettings()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def schedule_loan_reminders(self, loan: ActiveLoan) -> list[ReminderSchedule]:
        """Replace the loan's reminder timeline with a fresh one."""
        await self.clear_loan_schedules(loan.id)

        now = self._clock.now()
        due = ensure_tz(loan.due_date)
        created: list[ReminderSchedule] = []

        for index, days_before in enumerate(self._settings.upcoming_reminder_days):
            when = due - timedelta(days=days_before)
            if when <= now:
                continue
            created.append(
                self._new_schedule(loan.id, ReminderType.UPCOMING, index, when, now)
            )

        for index, days_after in enumerate(self._settings.overdue_reminder_days):
            when = due + timedelta(days=days_after)
            created.append(
                self._new_schedule(loan.id, ReminderType.OVERDUE, index, when, now)
            )

        created.append(
            self._new_schedule(
                loan.id,
                ReminderType.FINAL,
                None,
                due + timedelta(days=self._settings.final_notice_days),
                now,
            )
        )

        for schedule in created:
            await self._schedules.put(schedule)

        logger.info(
            "Scheduled %d reminder(s) for loan %s (due %s)",
            len(created),
            loan.id,
            due.date().isoformat(),
        )
        return created

    def _new_schedule(
        self,
        loan_id: str,
        reminder_type: ReminderType,
        index: int | None,
        when: datetime,
        now: datetime,
    ) -> ReminderSchedule:
        if reminder_type == ReminderType.FINAL:
            schedule_id = f"{loan_id}-final"
            max_attempts = FINAL_NOTICE_MAX_ATTEMPTS
        else:
            schedule_id = f"{loan_id}-{reminder_type.value}-{index}"
            max_attempts = self._settings.max_attempts
        return ReminderSchedule(
            id=schedule_id,
            loan_id=loan_id,
            type=reminder_type,
            scheduled_date=when,
            max_attempts=max_attempts,
            created_at=now,
        )

    async def clear_loan_schedules(self, loan_id: str) -> int:
        """Remove every schedule of a loan, whatever its status."""
        removed = await self._schedules.delete_by_loan(loan_id)
        if removed:
            logger.info("Cleared %d schedule(s) for loan %s", removed, loan_id)
        return removed

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def due_schedules(self) -> list[ReminderSchedule]:
        """Pending schedules whose time has come, oldest first."""
        now = self._clock.now()
        due = [
            s
            for s in await self._schedules.list()
            if s.status == ReminderStatus.PENDING and ensure_tz(s.scheduled_date) <= now
        ]
        return sorted(due, key=lambda s: s.scheduled_date)

    async def process_reminders(self) -> ProcessSummary:
        """Fire every due reminder once; one failure never stops the pass."""
        summary = ProcessSummary()
        if not self._settings.enable_reminders:
            logger.info("Reminders disabled, skipping processing pass")
            return summary

        due = await self.due_schedules()
        logger.info("Processing %d due reminder(s)", len(due))

        for schedule in due:
            summary.processed += 1
            try:
                outcome = await self._process_one(schedule)
            except Exception as exc:
                logger.exception("Reminder %s for loan %s errored", schedule.id, schedule.loan_id)
                outcome = await self._fail_after_error(schedule, exc)
            if outcome == ReminderStatus.SENT:
                summary.sent += 1
            elif outcome == ReminderStatus.CANCELLED:
                summary.cancelled += 1
            else:
                summary.failed += 1

        if due:
            logger.info(
                "Reminder pass done: sent=%d failed=%d cancelled=%d",
                summary.sent,
                summary.failed,
                summary.cancelled,
            )
        return summary

    async def _process_one(self, schedule: ReminderSchedule) -> ReminderStatus:
        loan = await self._loans.get(schedule.loan_id)
        if loan is None:
            logger.warning("Loan %s not found for reminder %s", schedule.loan_id, schedule.id)
            return await self._mark(schedule, ReminderStatus.FAILED, "Loan not found")

        if loan.status == LoanStatus.COMPLETED:
            logger.info("Loan %s is completed, cancelling reminder %s", loan.id, schedule.id)
            return await self._mark(schedule, ReminderStatus.CANCELLED, "Loan completed")

        now = self._clock.now()
        payload = build_payload(loan, schedule.type, now)
        schedule.attempts += 1
        try:
            delivered = await self._notifier.send(loan.borrower_contact, payload)
        except Exception as exc:
            logger.warning(
                "Notifier raised for reminder %s (attempt %d/%d)",
                schedule.id,
                schedule.attempts,
                schedule.max_attempts,
                exc_info=True,
            )
            return await self._mark(schedule, ReminderStatus.FAILED, str(exc) or type(exc).__name__)

        if not delivered:
            logger.warning(
                "Reminder %s for loan %s failed (attempt %d/%d)",
                schedule.id,
                loan.id,
                schedule.attempts,
                schedule.max_attempts,
            )
            return await self._mark(schedule, ReminderStatus.FAILED, "Notification delivery failed")

        schedule.sent_at = now
        await self._mark(schedule, ReminderStatus.SENT)

        loan.reminder_count += 1
        loan.last_reminder_sent = now
        try:
            await self._loans.put(loan)
        except Exception:
            logger.exception(
                "Reminder %s sent but reminder count for loan %s was not saved",
                schedule.id,
                loan.id,
            )
        return ReminderStatus.SENT

    async def _fail_after_error(self, schedule: ReminderSchedule, exc: Exception) -> ReminderStatus:
        try:
            await self._mark(schedule, ReminderStatus.FAILED, str(exc) or type(exc).__name__)
        except Exception:
            logger.exception("Could not record failure of reminder %s", schedule.id)
        return ReminderStatus.FAILED

    async def _mark(
        self,
        schedule: ReminderSchedule,
        status: ReminderStatus,
        error_message: str | None = None,
    ) -> ReminderStatus:
        schedule.status = status
        if error_message:
            schedule.error_message = error_message
        await self._schedules.put(schedule)
        return status

    async def reset_failed(self, schedule_id: str) -> ReminderSchedule | None:
        """Put a failed schedule back to pending so the next pass retries it.

        Returns None if the schedule does not exist. Raises
        ReminderRetryError when it is not failed or has no attempts left.
        """
        schedule = await self._schedules.get(schedule_id)
        if schedule is None:
            return None
        if schedule.status != ReminderStatus.FAILED:
            raise ReminderRetryError(
                f"Only failed reminders can be retried; {schedule_id} is '{schedule.status.value}'."
            )
        if schedule.attempts >= schedule.max_attempts:
            raise ReminderRetryError(
                f"Reminder {schedule_id} used all {schedule.max_attempts} attempt(s)."
            )

        schedule.status = ReminderStatus.PENDING
        schedule.error_message = None
        await self._schedules.put(schedule)
        logger.info(
            "Reminder %s reset to pending (%d/%d attempts used)",
            schedule_id,
            schedule.attempts,
            schedule.max_attempts,
        )
        return schedule

    # ------------------------------------------------------------------
    # Queries / settings
    # ------------------------------------------------------------------

    async def get_schedules(self) -> list[ReminderSchedule]:
        return sorted(await self._schedules.list(), key=lambda s: s.scheduled_date)

    async def get_loan_schedules(self, loan_id: str) -> list[ReminderSchedule]:
        return sorted(await self._schedules.list_by_loan(loan_id), key=lambda s: s.scheduled_date)

    def get_settings(self) -> ReminderSettings:
        return self._settings.model_copy(deep=True)

    def update_settings(self, **changes) -> ReminderSettings:
        """Apply partial settings; only affects timelines scheduled afterwards."""
        self._settings = self._settings.model_copy(update=changes)
        logger.info("Reminder settings updated: %s", sorted(changes))
        return self.get_settings()

    async def get_status(self, *, is_running: bool) -> SchedulerStatus:
        return SchedulerStatus(
            is_running=is_running,
            schedule_count=len(await self._schedules.list()),
            settings=self.get_settings(),
        )
