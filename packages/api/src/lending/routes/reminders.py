# This project was developed with assistance from AI tools.
"""Reminder scheduler endpoints."""

from fastapi import APIRouter, HTTPException, status

from ..schemas import Pagination
from ..schemas.loan import ReminderStats
from ..schemas.reminder import (
    ProcessSummary,
    ScheduleListResponse,
    ScheduleResponse,
    SchedulerStatus,
)
from ..services.reminders import ReminderRetryError
from ..services.ticker import get_ticker
from .deps import Coordinator, PageParams

router = APIRouter()


@router.get("/stats", response_model=ReminderStats)
async def reminder_stats(coordinator: Coordinator) -> ReminderStats:
    return await coordinator.get_reminder_stats()


@router.get("/schedules", response_model=ScheduleListResponse)
async def list_schedules(
    coordinator: Coordinator,
    page: PageParams,
    loan_id: str | None = None,
) -> ScheduleListResponse:
    """All reminder schedules, or one loan's, ordered by scheduled time."""
    if loan_id is not None:
        schedules = await coordinator.scheduler.get_loan_schedules(loan_id)
    else:
        schedules = await coordinator.scheduler.get_schedules()
    return ScheduleListResponse(
        data=page.slice(schedules),
        pagination=Pagination.for_page(len(schedules), page.offset, page.limit),
    )


@router.get("/status", response_model=SchedulerStatus)
async def scheduler_status(coordinator: Coordinator) -> SchedulerStatus:
    ticker = get_ticker()
    return await coordinator.scheduler.get_status(
        is_running=ticker is not None and ticker.is_running
    )


@router.post("/process", response_model=ProcessSummary)
async def process_now(coordinator: Coordinator) -> ProcessSummary:
    """Run one reminder pass immediately."""
    return await coordinator.process_reminders()


@router.post("/{schedule_id}/reset", response_model=ScheduleResponse)
async def reset_schedule(schedule_id: str, coordinator: Coordinator) -> ScheduleResponse:
    """Put a failed reminder back to pending for the next pass."""
    try:
        schedule = await coordinator.reset_reminder(schedule_id)
    except ReminderRetryError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        ) from e
    if schedule is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reminder schedule {schedule_id} not found",
        )
    return ScheduleResponse(data=schedule)
