"""
# Reminder Service

Sends event reminders to every registrant of an event.

Messages are sent concurrently (bounded by `REMINDER_MAX_CONCURRENCY`) and the service waits
for every send to settle before deciding the outcome. What a failed recipient means is set by
`REMINDER_FAILURE_POLICY`:

| Policy | On any failure |
|--------|----------------|
| `all_or_nothing` | Raise `ReminderDeliveryError` listing the failed recipients |
| `partial` | Return a `ReminderReport` with `sent_to` and the `failed` recipients |

Event and registration state are never changed by delivery failures.
"""

import asyncio
import html
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from campus_events.config import settings
from campus_events.errors import ReminderDeliveryError, ValidationError
from campus_events.managers.email_manager import EmailManager
from campus_events.managers.logging_manager import get_logger
from campus_events.models.event_models import ReminderFailure, ReminderReport
from campus_events.models.user_models import UserSummary
from campus_events.services.registration_service import RegistrationService

logger = get_logger(prefix="[ReminderService]")


class ReminderPolicy(str, Enum):
    ALL_OR_NOTHING = "all_or_nothing"
    PARTIAL = "partial"


def build_reminder(event: Dict[str, Any], recipient: UserSummary) -> Tuple[str, str, str]:
    """Subject, HTML body and text body for one recipient."""
    start = event["start_date"].strftime("%A, %d %B %Y at %H:%M UTC")
    subject = f"Reminder: {event['title']}"
    title = html.escape(event["title"])
    name = html.escape(recipient.name)
    location = html.escape(event["location"])
    description = html.escape(event.get("description") or "")
    html_body = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
          <h2 style="color: #2c3e50;">{title}</h2>
          <p>Hi {name},</p>
          <p>This is a reminder that you are registered for <strong>{title}</strong>.</p>
          <div style="background-color: #f8f9fa; padding: 15px; border-left: 4px solid #007bff; margin: 20px 0;">
            <p><strong>When:</strong> {start}</p>
            <p><strong>Where:</strong> {location}</p>
          </div>
          <p>{description}</p>
        </div>
      </body>
    </html>
    """
    text_body = (
        f"Hi {recipient.name},\n\n"
        f"This is a reminder that you are registered for {event['title']}.\n\n"
        f"When: {start}\n"
        f"Where: {event['location']}\n\n"
        f"{event.get('description', '')}\n"
    )
    return subject, html_body, text_body


class ReminderService:
    def __init__(
        self,
        registration_service: RegistrationService,
        email_manager: EmailManager,
        policy: Optional[str] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.registration_service = registration_service
        self.email_manager = email_manager
        self.policy = ReminderPolicy(policy or settings.REMINDER_FAILURE_POLICY)
        self.max_concurrency = max_concurrency or settings.REMINDER_MAX_CONCURRENCY

    async def send_event_reminders(self, event_id: str) -> ReminderReport:
        """
        Remind every registrant of `event_id`.

        Raises:
            NotFoundError: The event does not exist.
            ValidationError: The event has no registrants.
            ReminderDeliveryError: At least one send failed under the all-or-nothing policy.
        """
        event, recipients = await self.registration_service.get_recipients(event_id)
        if not recipients:
            raise ValidationError("Event has no registered attendees to remind")

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _send(recipient: UserSummary) -> None:
            async with semaphore:
                subject, html_body, text_body = build_reminder(event, recipient)
                await self.email_manager.send_email(recipient.email, subject, html_body, text_body)

        results = await asyncio.gather(*(_send(r) for r in recipients), return_exceptions=True)

        failed = []
        for recipient, result in zip(recipients, results):
            if isinstance(result, BaseException):
                logger.warning("Failed to send reminder for event %s to %s: %s", event_id, recipient.email, result)
                failed.append(ReminderFailure(email=recipient.email, error=str(result)))

        sent_to = len(recipients) - len(failed)
        if failed and self.policy == ReminderPolicy.ALL_OR_NOTHING:
            logger.error("Reminder batch for event %s failed: %d of %d sends failed", event_id, len(failed), len(recipients))
            raise ReminderDeliveryError(
                f"Failed to send reminders to {len(failed)} of {len(recipients)} recipients", failed=failed
            )

        logger.info("Sent %d reminder(s) for event %s (%d failed)", sent_to, event_id, len(failed))
        return ReminderReport(event_id=event_id, sent_to=sent_to, failed=failed, policy=self.policy.value)
