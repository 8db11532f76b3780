# This project was developed with assistance from AI tools.
"""Active loan endpoints: listing, repayments and manual reminders."""

from db.enums import LoanStatus
from fastapi import APIRouter, HTTPException, status

from ..schemas import Pagination
from ..schemas.loan import (
    LoanListResponse,
    LoanResponse,
    ManualReminderRequest,
    ManualReminderResponse,
    PaymentCreate,
    PaymentListResponse,
    PaymentRecord,
    PaymentResponse,
)
from .deps import Coordinator, PageParams

router = APIRouter()


def _not_found(loan_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Loan {loan_id} not found",
    )


@router.get("", response_model=LoanListResponse)
async def list_loans(
    coordinator: Coordinator,
    page: PageParams,
    filter_status: LoanStatus | None = None,
) -> LoanListResponse:
    loans = await coordinator.list_loans(filter_status)
    return LoanListResponse(
        data=page.slice(loans),
        pagination=Pagination.for_page(len(loans), page.offset, page.limit),
    )


@router.get("/attention", response_model=LoanListResponse)
async def loans_requiring_attention(coordinator: Coordinator, page: PageParams) -> LoanListResponse:
    """Open loans due within three days or already past due."""
    loans = await coordinator.get_loans_requiring_attention()
    return LoanListResponse(
        data=page.slice(loans),
        pagination=Pagination.for_page(len(loans), page.offset, page.limit),
    )


@router.get("/{loan_id}", response_model=LoanResponse)
async def get_loan(loan_id: str, coordinator: Coordinator) -> LoanResponse:
    loan = await coordinator.get_loan(loan_id)
    if loan is None:
        raise _not_found(loan_id)
    return LoanResponse(data=loan)


@router.delete("/{loan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_loan(loan_id: str, coordinator: Coordinator) -> None:
    """Remove a loan with its payments and reminder schedules."""
    if not await coordinator.delete_loan(loan_id):
        raise _not_found(loan_id)


@router.post(
    "/{loan_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    loan_id: str, body: PaymentCreate, coordinator: Coordinator
) -> PaymentResponse:
    """Apply a repayment reported by the ledger."""
    if await coordinator.get_loan(loan_id) is None:
        raise _not_found(loan_id)

    payment = PaymentRecord(
        id=body.id,
        loan_id=loan_id,
        amount=body.amount,
        payment_date=body.payment_date or coordinator.clock.now(),
        payment_method=body.payment_method,
        status=body.status,
        reference=body.reference,
    )
    if not await coordinator.process_payment(payment):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Payment {payment.id} was not applied: it must be completed, new, "
                "and target a loan that is not completed."
            ),
        )
    loan = await coordinator.get_loan(loan_id)
    return PaymentResponse(data=payment, loan=loan)


@router.get("/{loan_id}/payments", response_model=PaymentListResponse)
async def payment_history(
    loan_id: str, coordinator: Coordinator, page: PageParams
) -> PaymentListResponse:
    if await coordinator.get_loan(loan_id) is None:
        raise _not_found(loan_id)
    payments = await coordinator.get_payment_history(loan_id)
    return PaymentListResponse(
        data=page.slice(payments),
        pagination=Pagination.for_page(len(payments), page.offset, page.limit),
    )


@router.post("/{loan_id}/reminders", response_model=ManualReminderResponse)
async def send_manual_reminder(
    loan_id: str, body: ManualReminderRequest, coordinator: Coordinator
) -> ManualReminderResponse:
    """Send one reminder now, outside the schedule."""
    if await coordinator.get_loan(loan_id) is None:
        raise _not_found(loan_id)
    sent = await coordinator.send_manual_reminder(loan_id, body.reminder_type)
    return ManualReminderResponse(loan_id=loan_id, reminder_type=body.reminder_type, sent=sent)
