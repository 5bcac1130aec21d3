"""
Outbound notifications (booking confirmations, visit request updates).

Email delivery is an external collaborator. The Notifier composes messages and
hands them to ``deliver``. No mail channel ships with the service, so delivery
is disabled by default and messages are recorded in the structured log as
mock deliveries. A subclass overriding ``deliver`` plus
NOTIFICATIONS_ENABLED=true turns real delivery on.
Notifications run from FastAPI background tasks after the core transaction has
committed, so a delivery failure is logged and never affects stored state.
"""

from __future__ import annotations

from typing import Optional

import structlog

from stayledger.config import NOTIFICATIONS_ENABLED, NOTIFY_FROM
from stayledger.schemas.bookings import BookingRecord
from stayledger.schemas.visit_requests import VisitRequestRecord

logger = structlog.get_logger(__name__)


class Notifier:
    """
    Send short text notifications to an email address.

    Attributes:
        enabled: When False, messages are only logged as mock deliveries
        sender: From address used for delivered messages

    Example:
        >>> notifier = Notifier(enabled=False)
        >>> notifier.send("guest@example.com", "Booking confirmed", "See you soon")
        False
    """

    def __init__(self, enabled: bool = NOTIFICATIONS_ENABLED, sender: str = NOTIFY_FROM):
        self.enabled = enabled
        self.sender = sender

    def send(self, to: Optional[str], subject: str, body: str) -> bool:
        """
        Send one message.

        Returns:
            bool: True if the message was handed to delivery
        """
        if not to:
            logger.info("notification_skipped", subject=subject, reason="no_recipient")
            return False

        if not self.enabled:
            logger.info("notification_mock", to=to, subject=subject, body=body)
            return False

        try:
            self.deliver(to, subject, body)
        except Exception as e:
            logger.exception("notification_failed", to=to, subject=subject, error=str(e))
            return False

        logger.info("notification_sent", to=to, subject=subject)
        return True

    def deliver(self, to: str, subject: str, body: str) -> None:
        """Hand a message to the delivery channel. The base channel only logs it."""
        logger.info(
            "notification_logged", channel="log", sender=self.sender, to=to, subject=subject
        )

    # Message builders

    def booking_confirmed(self, booking: BookingRecord) -> bool:
        body = (
            f"Dear {booking.name},\n\n"
            f"Your booking {booking.booking_ref} for a {booking.room_type} room is confirmed.\n"
            f"Amount paid: {booking.amount_minor / 100:.2f}\n"
            f"Move-in date: {booking.move_in_date or 'to be decided'}\n"
        )
        return self.send(booking.email, "Booking confirmed", body)

    def visit_requested(self, request: VisitRequestRecord, rescheduled: bool) -> bool:
        verb = "rescheduled" if rescheduled else "requested"
        body = (
            f"{request.user_name or request.user_email} {verb} a visit to listing "
            f"{request.listing_id} on {request.visit_date} at {request.visit_time}.\n"
        )
        return self.send(request.owner_email, f"Visit {verb}", body)

    def visit_decided(self, request: VisitRequestRecord) -> bool:
        body = (
            f"Your visit to listing {request.listing_id} on {request.visit_date} "
            f"at {request.visit_time} was {request.status}.\n"
        )
        return self.send(request.user_email, f"Visit {request.status}", body)
