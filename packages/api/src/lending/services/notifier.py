# This project was developed with assistance from AI tools.
"""Reminder delivery collaborators.

The engine hands a fully resolved ``ReminderPayload`` to a notifier and
only looks at the boolean outcome. Template rendering, localization and
the actual email/SMS transport live behind the webhook.

Delivery is active when NOTIFIER_URL is set and log-only when it is not.
A failed delivery is reported as ``False``, never raised.
"""

import logging
from typing import Protocol

import httpx

from ..core.config import Settings
from ..schemas.reminder import ReminderPayload

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def send(self, recipient: str, payload: ReminderPayload) -> bool: ...


def _mask_contact(recipient: str) -> str:
    """Keep enough of a contact to correlate logs without leaking it."""
    if len(recipient) <= 4:
        return "***"
    return f"{recipient[:3]}***{recipient[-2:]}"


class LoggingNotifier:
    """Logs reminders instead of delivering them (local dev, demos)."""

    async def send(self, recipient: str, payload: ReminderPayload) -> bool:
        logger.info(
            "Reminder (%s) for loan %s to %s: remaining=%.2f due=%s",
            payload.reminder_type.value,
            payload.loan_id,
            _mask_contact(recipient),
            payload.remaining_amount,
            payload.due_date.date().isoformat(),
        )
        return True


class WebhookNotifier:
    """POSTs reminder payloads to an HTTP delivery service.

    The timeout is enforced here; the scheduler only sees success/failure.
    """

    def __init__(
        self,
        url: str,
        *,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def send(self, recipient: str, payload: ReminderPayload) -> bool:
        body = {"recipient": recipient, "payload": payload.model_dump(mode="json")}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, headers=self._headers(), json=body)
        except httpx.HTTPError as exc:
            logger.warning(
                "Reminder delivery for loan %s failed: %s", payload.loan_id, exc,
            )
            return False

        if response.is_success:
            logger.info(
                "Reminder (%s) delivered for loan %s",
                payload.reminder_type.value,
                payload.loan_id,
            )
            return True

        logger.warning(
            "Reminder delivery for loan %s rejected: HTTP %d",
            payload.loan_id,
            response.status_code,
        )
        return False


def build_notifier(cfg: Settings) -> Notifier:
    """Select the notifier implementation from settings."""
    if cfg.NOTIFIER_URL:
        return WebhookNotifier(
            cfg.NOTIFIER_URL,
            api_key=cfg.NOTIFIER_API_KEY,
            timeout=cfg.NOTIFIER_TIMEOUT_SECONDS,
        )
    return LoggingNotifier()


def log_notifier_status(cfg: Settings) -> None:
    """Log whether reminders are delivered or only logged. Call at startup."""
    if cfg.NOTIFIER_URL:
        logger.info("Reminder delivery ACTIVE (webhook=%s)", cfg.NOTIFIER_URL)
    else:
        logger.warning("Reminder delivery DISABLED: NOTIFIER_URL not set, reminders are logged only")
