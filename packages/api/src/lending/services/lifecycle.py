# This project was developed with assistance from AI tools.
"""Loan lifecycle coordination.

Turns approved reviews into active loans, applies repayments, moves loans
through active -> overdue -> defaulted and drives the reminder scheduler.
Every mutating operation and the periodic tick share one registry lock,
so an admin action never interleaves with a tick half-way through.
"""

import asyncio
import logging
import math
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta
from db.enums import (
    LoanRequestStatus,
    LoanStatus,
    PaymentStatus,
    ReminderStatus,
    ReminderType,
    ReviewStatus,
)

from ..core.clock import Clock, SystemClock, ensure_tz
from ..core.config import Settings
from ..schemas.loan import ActiveLoan, PaymentRecord, ReminderStats
from ..schemas.loan_request import BorrowerHistory, LoanRequest
from ..schemas.reminder import ProcessSummary, ReminderSchedule, ReminderSettings, TickResult
from ..schemas.review import AdminReview
from .notifier import Notifier, build_notifier
from .reminders import ReminderScheduler, build_payload, days_overdue
from .review import ReviewInputError, ReviewWorkflow
from .store import Stores, build_memory_stores

logger = logging.getLogger(__name__)

DEFAULT_TERM_MONTHS = 12
DEFAULT_AFTER_DAYS = 90
UPCOMING_WINDOW_DAYS = 7
ATTENTION_WINDOW_DAYS = 3


def calculate_monthly_payment(principal: float, annual_rate: float, term_months: int) -> float:
    """Equal instalment for a loan; straight division when interest-free."""
    if annual_rate == 0:
        return round(principal / term_months, 2)
    monthly_rate = annual_rate / 100 / 12
    growth = (1 + monthly_rate) ** term_months
    return round(principal * monthly_rate * growth / (growth - 1), 2)


def _days_until(due_date: datetime, now: datetime) -> int:
    return math.ceil((ensure_tz(due_date) - now).total_seconds() / 86400)


class LifecycleCoordinator:
    """Owns active loans and payments; fronts the review workflow for admins."""

    def __init__(
        self,
        stores: Stores,
        notifier: Notifier,
        clock: Clock,
        *,
        reminder_settings: ReminderSettings | None = None,
        default_term_months: int = DEFAULT_TERM_MONTHS,
        default_after_days: int = DEFAULT_AFTER_DAYS,
        data_deadline_days: int = 7,
        payment_link_base: str = "https://pay.p2p-lending.local/pay",
        lender_name: str = "P2P Lending Platform",
    ):
        self._stores = stores
        self._loans = stores.loans
        self._payments = stores.payments
        self._notifier = notifier
        self._clock = clock
        self._default_term_months = default_term_months
        self._default_after_days = default_after_days
        self._payment_link_base = payment_link_base.rstrip("/")
        self._lender_name = lender_name
        self._lock = asyncio.Lock()

        self.workflow = ReviewWorkflow(
            stores.reviews,
            stores.loan_requests,
            clock,
            data_deadline_days=data_deadline_days,
        )
        self.scheduler = ReminderScheduler(
            stores.schedules,
            stores.loans,
            notifier,
            clock,
            reminder_settings,
        )

    @property
    def clock(self) -> Clock:
        return self._clock

    # ------------------------------------------------------------------
    # Loan initialisation
    # ------------------------------------------------------------------

    async def initialize_loan_reminders(
        self, review: AdminReview, loan_request: LoanRequest
    ) -> ActiveLoan | None:
        async with self._lock:
            return await self._initialize(review, loan_request)

    async def _initialize(self, review: AdminReview, loan_request: LoanRequest) -> ActiveLoan | None:
        if review.status != ReviewStatus.APPROVED or not review.approved_amount:
            logger.warning(
                "Cannot initialise loan for review %s: status=%s approved_amount=%s",
                review.id,
                review.status.value,
                review.approved_amount,
            )
            return None

        now = self._clock.now()
        term = review.approved_term_months or self._default_term_months
        rate = review.interest_rate or 0
        loan = ActiveLoan(
            id=review.loan_request_id,
            borrower_id=loan_request.borrower_id,
            borrower_name=loan_request.borrower_name,
            borrower_contact=loan_request.borrower_contact,
            loan_amount=review.approved_amount,
            remaining_amount=review.approved_amount,
            due_date=now + relativedelta(months=term),
            status=LoanStatus.ACTIVE,
            lender_id=review.admin_id,
            lender_name=self._lender_name,
            interest_rate=rate,
            term_months=term,
            monthly_payment=calculate_monthly_payment(review.approved_amount, rate, term),
            payment_link=f"{self._payment_link_base}/{review.loan_request_id}",
            created_at=now,
            next_payment_date=now + relativedelta(months=1),
        )
        await self._loans.put(loan)

        loan_request.status = LoanRequestStatus.ACTIVE
        await self._stores.loan_requests.put(loan_request)

        await self.scheduler.schedule_loan_reminders(loan)
        logger.info(
            "Loan %s initialised: amount=%.2f term=%d rate=%s monthly=%.2f",
            loan.id,
            loan.loan_amount,
            term,
            rate,
            loan.monthly_payment,
        )
        return loan

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    async def process_payment(self, payment: PaymentRecord) -> bool:
        """Apply a completed repayment; False when it is not applicable."""
        async with self._lock:
            loan = await self._loans.get(payment.loan_id)
            if loan is None:
                logger.warning("Payment %s rejected: loan %s not found", payment.id, payment.loan_id)
                return False
            if payment.status != PaymentStatus.COMPLETED:
                logger.info("Payment %s is %s, not applied", payment.id, payment.status.value)
                return False
            if loan.status == LoanStatus.COMPLETED:
                logger.warning("Payment %s rejected: loan %s already completed", payment.id, loan.id)
                return False
            if await self._payments.get(payment.id) is not None:
                logger.warning("Payment %s rejected: already recorded", payment.id)
                return False

            paid_at = ensure_tz(payment.payment_date)
            loan.remaining_amount = max(0.0, round(loan.remaining_amount - payment.amount, 2))
            loan.last_payment_date = paid_at

            if loan.remaining_amount <= 0:
                loan.status = LoanStatus.COMPLETED
                loan.next_payment_date = None
                await self.scheduler.clear_loan_schedules(loan.id)
                await self._complete_request(loan.id)
                logger.info("Loan %s fully repaid and completed", loan.id)
            else:
                loan.next_payment_date = paid_at + relativedelta(months=1)

            await self._payments.put(payment)
            await self._loans.put(loan)

            logger.info(
                "Payment %s applied to loan %s: amount=%.2f remaining=%.2f",
                payment.id,
                loan.id,
                payment.amount,
                loan.remaining_amount,
            )
            return True

    async def _complete_request(self, loan_request_id: str) -> None:
        loan_request = await self._stores.loan_requests.get(loan_request_id)
        if loan_request is None:
            return
        loan_request.status = LoanRequestStatus.COMPLETED
        await self._stores.loan_requests.put(loan_request)

    # ------------------------------------------------------------------
    # Status maintenance
    # ------------------------------------------------------------------

    async def update_loan_statuses(self) -> int:
        async with self._lock:
            return await self._update_statuses()

    async def _update_statuses(self) -> int:
        now = self._clock.now()
        updated = 0
        for loan in await self._loans.list():
            if loan.status in LoanStatus.terminal_statuses():
                continue
            overdue_by = days_overdue(loan.due_date, now)
            if overdue_by > self._default_after_days:
                new_status = LoanStatus.DEFAULTED
            elif overdue_by > 0 and loan.status == LoanStatus.ACTIVE:
                new_status = LoanStatus.OVERDUE
            else:
                continue

            logger.info(
                "Loan %s: %s -> %s (%d day(s) past due)",
                loan.id,
                loan.status.value,
                new_status.value,
                overdue_by,
            )
            loan.status = new_status
            await self._loans.put(loan)
            updated += 1

        if updated:
            logger.info("Updated status for %d loan(s)", updated)
        return updated

    async def tick(self) -> TickResult:
        """One periodic pass: refresh statuses, then fire due reminders."""
        async with self._lock:
            loans_updated = await self._update_statuses()
            summary = await self.scheduler.process_reminders()
        return TickResult(
            loans_updated=loans_updated,
            reminders=summary,
            ran_at=self._clock.now(),
        )

    async def process_reminders(self) -> ProcessSummary:
        """Reminder pass alone, without touching loan statuses."""
        async with self._lock:
            return await self.scheduler.process_reminders()

    async def reset_reminder(self, schedule_id: str) -> ReminderSchedule | None:
        async with self._lock:
            return await self.scheduler.reset_failed(schedule_id)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    async def get_reminder_stats(self) -> ReminderStats:
        now = self._clock.now()
        loans = await self._loans.list()
        schedules = await self.scheduler.get_schedules()

        open_loans = [loan for loan in loans if loan.status in (LoanStatus.ACTIVE, LoanStatus.OVERDUE)]
        overdue = [loan for loan in loans if loan.status == LoanStatus.OVERDUE]
        upcoming = [
            loan for loan in open_loans if 0 < _days_until(loan.due_date, now) <= UPCOMING_WINDOW_DAYS
        ]

        sent_at = [
            ensure_tz(s.sent_at)
            for s in schedules
            if s.status == ReminderStatus.SENT and s.sent_at is not None
        ]
        week_ago = now - timedelta(days=7)
        overdue_days = [days_overdue(loan.due_date, now) for loan in overdue]
        average = sum(overdue_days) / len(overdue_days) if overdue_days else 0.0

        return ReminderStats(
            total_active_loans=len(open_loans),
            loans_with_upcoming_payments=len(upcoming),
            overdue_loans=len(overdue),
            reminders_sent_today=sum(1 for t in sent_at if t.date() == now.date()),
            reminders_sent_this_week=sum(1 for t in sent_at if t >= week_ago),
            average_days_overdue=round(average, 1),
        )

    async def get_loans_requiring_attention(self) -> list[ActiveLoan]:
        """Open loans due within three days or already past due, earliest first."""
        now = self._clock.now()
        loans = [
            loan
            for loan in await self._loans.list()
            if loan.status != LoanStatus.COMPLETED
            and _days_until(loan.due_date, now) <= ATTENTION_WINDOW_DAYS
        ]
        return sorted(loans, key=lambda loan: loan.due_date)

    # ------------------------------------------------------------------
    # Manual actions
    # ------------------------------------------------------------------

    async def send_manual_reminder(self, loan_id: str, reminder_type: ReminderType) -> bool:
        async with self._lock:
            loan = await self._loans.get(loan_id)
            if loan is None:
                logger.warning("Manual reminder rejected: loan %s not found", loan_id)
                return False

            now = self._clock.now()
            payload = build_payload(loan, reminder_type, now)
            try:
                delivered = await self._notifier.send(loan.borrower_contact, payload)
            except Exception:
                logger.warning("Manual reminder for loan %s failed", loan_id, exc_info=True)
                return False

            if delivered:
                loan.reminder_count += 1
                loan.last_reminder_sent = now
                await self._loans.put(loan)
                logger.info("Manual %s reminder sent for loan %s", reminder_type.value, loan_id)
            return delivered

    async def delete_loan(self, loan_id: str) -> bool:
        async with self._lock:
            if await self._loans.get(loan_id) is None:
                return False
            payments = await self._payments.delete_by_loan(loan_id)
            schedules = await self.scheduler.clear_loan_schedules(loan_id)
            await self._loans.delete(loan_id)
            logger.info(
                "Loan %s deleted with %d payment(s) and %d schedule(s)",
                loan_id,
                payments,
                schedules,
            )
            return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_loan(self, loan_id: str) -> ActiveLoan | None:
        return await self._loans.get(loan_id)

    async def list_loans(self, status: LoanStatus | None = None) -> list[ActiveLoan]:
        loans = await self._loans.list()
        if status is not None:
            loans = [loan for loan in loans if loan.status == status]
        return sorted(loans, key=lambda loan: loan.created_at)

    async def get_payment_history(self, loan_id: str) -> list[PaymentRecord]:
        payments = await self._payments.list_by_loan(loan_id)
        return sorted(payments, key=lambda p: p.payment_date)

    # ------------------------------------------------------------------
    # Admin facade over the review workflow
    # ------------------------------------------------------------------

    async def submit_for_review(
        self,
        loan_request: LoanRequest,
        history: BorrowerHistory | None,
        admin_id: str,
    ) -> AdminReview:
        async with self._lock:
            return await self.workflow.submit(loan_request, history, admin_id)

    async def approve_review(
        self,
        review_id: str,
        approved_amount: float | None,
        approved_term_months: int | None,
        interest_rate: float | None,
        notes: str = "",
    ) -> AdminReview | None:
        """Approve a review and open its loan."""
        async with self._lock:
            await self._require_loan_request(review_id)
            review = await self.workflow.approve(
                review_id, approved_amount, approved_term_months, interest_rate, notes
            )
            if review is None:
                return None
            await self._initialize_for(review)
            return review

    async def reject_review(self, review_id: str, reason: str, notes: str = "") -> AdminReview | None:
        async with self._lock:
            return await self.workflow.reject(review_id, reason, notes)

    async def request_additional_data(
        self, review_id: str, data_types: list[str], notes: str = ""
    ) -> AdminReview | None:
        async with self._lock:
            return await self.workflow.request_additional_data(review_id, data_types, notes)

    async def adjust_review_terms(
        self,
        review_id: str,
        approved_amount: float,
        approved_term_months: int,
        interest_rate: float,
        notes: str = "",
    ) -> AdminReview | None:
        """Adjust approved terms; opens the loan if it does not exist yet.

        Fast-tracked reviews are approved without terms, so this is where
        their loan gets created.
        """
        async with self._lock:
            await self._require_loan_request(review_id)
            review = await self.workflow.adjust_terms(
                review_id, approved_amount, approved_term_months, interest_rate, notes
            )
            if review is None:
                return None
            if await self._loans.get(review.loan_request_id) is None:
                await self._initialize_for(review)
            return review

    async def _require_loan_request(self, review_id: str) -> None:
        """Refuse a decision whose loan could not be opened.

        Raises:
            ReviewInputError: The review exists but its loan request is gone.
        """
        review = await self.workflow.get_review(review_id)
        if review is None:
            return
        if await self.workflow.get_loan_request(review.loan_request_id) is None:
            logger.warning(
                "Loan request %s missing, refusing decision on review %s",
                review.loan_request_id,
                review_id,
            )
            raise ReviewInputError(
                f"Loan request {review.loan_request_id} for review {review_id} not found"
            )

    async def _initialize_for(self, review: AdminReview) -> ActiveLoan | None:
        loan_request = await self.workflow.get_loan_request(review.loan_request_id)
        return await self._initialize(review, loan_request)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_service: LifecycleCoordinator | None = None


def build_stores(cfg: Settings) -> Stores:
    """Registries for the configured backend."""
    if cfg.STORAGE_BACKEND == "database":
        from .sql_store import build_sql_stores

        return build_sql_stores()
    return build_memory_stores()


def reminder_settings_from(cfg: Settings) -> ReminderSettings:
    return ReminderSettings(
        upcoming_reminder_days=cfg.UPCOMING_REMINDER_DAYS,
        overdue_reminder_days=cfg.OVERDUE_REMINDER_DAYS,
        final_notice_days=cfg.FINAL_NOTICE_DAYS,
        max_attempts=cfg.MAX_REMINDER_ATTEMPTS,
        reminder_interval_hours=cfg.REMINDER_INTERVAL_HOURS,
        enable_reminders=cfg.REMINDERS_ENABLED,
    )


def init_lifecycle_service(
    cfg: Settings,
    *,
    stores: Stores | None = None,
    notifier: Notifier | None = None,
    clock: Clock | None = None,
) -> LifecycleCoordinator:
    """Initialize the lifecycle coordinator singleton. Call from app lifespan."""
    global _service
    _service = LifecycleCoordinator(
        stores or build_stores(cfg),
        notifier or build_notifier(cfg),
        clock or SystemClock(),
        reminder_settings=reminder_settings_from(cfg),
        default_term_months=cfg.DEFAULT_TERM_MONTHS,
        default_after_days=cfg.DEFAULT_AFTER_DAYS,
        data_deadline_days=cfg.ADDITIONAL_DATA_DEADLINE_DAYS,
        payment_link_base=cfg.PAYMENT_LINK_BASE,
        lender_name=cfg.PLATFORM_LENDER_NAME,
    )
    logger.info("Lifecycle service initialised (storage=%s)", cfg.STORAGE_BACKEND)
    return _service


def get_lifecycle_service() -> LifecycleCoordinator:
    """Return the lifecycle coordinator singleton."""
    if _service is None:
        raise RuntimeError("Lifecycle service not initialized -- call init_lifecycle_service() first")
    return _service
