# This project was developed with assistance from AI tools.
"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .routes import health, loans, reminders, reviews, scoring
from .schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application startup/shutdown lifecycle."""
    from .services.lifecycle import init_lifecycle_service
    from .services.notifier import log_notifier_status
    from .services.ticker import ReminderTicker, set_ticker

    log_notifier_status(settings)
    if settings.STORAGE_BACKEND == "database":
        from db import init_models

        await init_models()

    coordinator = init_lifecycle_service(settings)
    ticker = None
    if settings.REMINDERS_ENABLED:
        ticker = ReminderTicker(coordinator, settings.REMINDER_INTERVAL_HOURS * 3600)
        set_ticker(ticker)
        ticker.start()
    else:
        logger.warning("REMINDERS_ENABLED is false: lifecycle tick not started")
    yield
    if ticker is not None:
        await ticker.stop()
        set_ticker(None)
    if settings.STORAGE_BACKEND == "database":
        from db import dispose_engine

        await dispose_engine()


app = FastAPI(
    title="P2P Lending Lifecycle API",
    description="Loan review, repayment tracking and reminder engine for peer-to-peer lending",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

_HTTP_STATUS_TITLES: dict[int, str] = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
}


def _build_error(
    status_code: int,
    detail: str,
    request_id: str,
    errors: list[dict] | None = None,
) -> ErrorResponse:
    return ErrorResponse(
        type="about:blank",
        title=_HTTP_STATUS_TITLES.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        request_id=request_id,
        errors=errors,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Convert HTTPException to RFC 7807 Problem Details."""
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    body = _build_error(exc.status_code, str(exc.detail), request_id)
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Convert Pydantic validation errors to RFC 7807 Problem Details."""
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    errors = [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]
    body = _build_error(422, "Request validation failed.", request_id, errors)
    return JSONResponse(status_code=422, content=body.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all for unhandled exceptions -- log and return 500."""
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    logger.exception("Unhandled exception (request_id=%s)", request_id)
    body = _build_error(500, "An unexpected error occurred.", request_id)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


# Include routers
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(scoring.router, prefix="/api", tags=["scoring"])
app.include_router(reviews.router, prefix="/api/reviews", tags=["reviews"])
app.include_router(loans.router, prefix="/api/loans", tags=["loans"])
app.include_router(reminders.router, prefix="/api/reminders", tags=["reminders"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint"""
    return {"message": f"Welcome to the {settings.APP_NAME} API"}
