from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime

import httpx

from ..config import get_settings
from ..core.clock import ensure_utc

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BookingNotification:
    booking_id: int
    user_id: int
    field_id: int
    event: str
    status: str
    start_at: datetime
    end_at: datetime

    @classmethod
    def from_booking(cls, booking, event: str) -> BookingNotification:
        return cls(
            booking_id=booking.id,
            user_id=booking.user_id,
            field_id=booking.field_id,
            event=event,
            status=booking.status.value,
            start_at=ensure_utc(booking.start_at),
            end_at=ensure_utc(booking.end_at),
        )

    def to_payload(self) -> dict:
        payload = asdict(self)
        payload["start_at"] = self.start_at.isoformat()
        payload["end_at"] = self.end_at.isoformat()
        return payload


def notify_booking_events(
    notifications: list[BookingNotification],
    *,
    client: httpx.Client | None = None,
) -> None:
    if not notifications:
        return

    settings = get_settings()
    webhook_url = settings.notification_webhook_url
    if not webhook_url:
        logger.debug(
            "Notification webhook is not configured; skipping booking notifications",
            extra={"count": len(notifications)},
        )
        return

    owns_client = client is None
    if owns_client:
        client = httpx.Client(timeout=settings.notification_timeout_sec)
    try:
        for notification in notifications:
            try:
                response = client.post(webhook_url, json=notification.to_payload())
                response.raise_for_status()
            except httpx.HTTPError:
                logger.exception(
                    "Failed to send booking notification",
                    extra={"booking_id": notification.booking_id, "event": notification.event},
                )
    finally:
        if owns_client:
            client.close()
