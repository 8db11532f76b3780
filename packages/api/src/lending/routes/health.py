# This project was developed with assistance from AI tools.
"""Liveness endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from ..core.config import settings
from ..services.ticker import get_ticker

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    app: str
    storage: str
    reminders_running: bool


@router.get("/", response_model=HealthResponse)
async def health() -> HealthResponse:
    ticker = get_ticker()
    return HealthResponse(
        status="healthy",
        app=settings.APP_NAME,
        storage=settings.STORAGE_BACKEND,
        reminders_running=ticker is not None and ticker.is_running,
    )
