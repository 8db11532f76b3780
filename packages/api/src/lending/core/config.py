# This project was developed with assistance from AI tools.
"""
Application configuration.

All settings read from environment variables with sensible local dev defaults.
Group related settings together; each group becomes a section future PRs extend.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve project root .env regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parents[5]
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Application settings -- single source of truth for env-driven config."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -- App --
    APP_NAME: str = "p2p-lending"
    DEBUG: bool = False

    # -- CORS --
    ALLOWED_HOSTS: list[str] = ["http://localhost:5173"]

    # -- Storage --
    STORAGE_BACKEND: Literal["memory", "database"] = Field(
        default="memory",
        description="Registry backend. 'database' uses DATABASE_URL from the db package.",
    )

    # -- Reminders --
    REMINDERS_ENABLED: bool = Field(
        default=True,
        description="Start the periodic tick loop at application startup.",
    )
    REMINDER_INTERVAL_HOURS: float = Field(
        default=24,
        description="Hours between status/reminder processing passes.",
    )
    UPCOMING_REMINDER_DAYS: list[int] = Field(
        default=[7, 3, 1],
        description="Days before the due date to send upcoming reminders.",
    )
    OVERDUE_REMINDER_DAYS: list[int] = Field(
        default=[1, 3, 7, 14],
        description="Days after the due date to send overdue reminders.",
    )
    FINAL_NOTICE_DAYS: int = Field(
        default=30,
        description="Days after the due date to send the final notice.",
    )
    MAX_REMINDER_ATTEMPTS: int = Field(
        default=3,
        description="Send attempts allowed per reminder (final notice always allows 1).",
    )

    # -- Lifecycle --
    DEFAULT_TERM_MONTHS: int = 12
    DEFAULT_AFTER_DAYS: int = Field(
        default=90,
        description="Days past due after which a loan is marked defaulted.",
    )
    ADDITIONAL_DATA_DEADLINE_DAYS: int = 7
    PAYMENT_LINK_BASE: str = "https://pay.p2p-lending.local/pay"
    PLATFORM_LENDER_NAME: str = "P2P Lending Platform"

    # -- Notifier --
    NOTIFIER_URL: str | None = Field(
        default=None,
        description="Webhook receiving reminder payloads. When unset, reminders are only logged.",
    )
    NOTIFIER_API_KEY: str | None = Field(
        default=None,
        description="Bearer token sent to the notifier webhook.",
    )
    NOTIFIER_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
