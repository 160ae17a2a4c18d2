"""
# Email Manager

Sends HTML emails with a plain-text fallback through `aiosmtplib`.

When `SMTP_HOST` is not configured (local development), messages are logged instead of sent.
Delivery failures raise `EmailDeliveryError` so callers decide how a failed recipient affects
the rest of a batch.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib

from campus_events.config import Settings, settings as default_settings
from campus_events.errors import EmailDeliveryError
from campus_events.managers.logging_manager import get_logger

logger = get_logger(prefix="[EmailManager]")


class EmailManager:
    def __init__(self, config: Optional[Settings] = None):
        self.settings: Settings = config or default_settings

    def build_message(self, to_email: str, subject: str, html_content: str, text_content: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.settings.EMAIL_FROM
        message["To"] = to_email
        message.attach(MIMEText(text_content, "plain"))
        message.attach(MIMEText(html_content, "html"))
        return message

    async def send_email(self, to_email: str, subject: str, html_content: str, text_content: str) -> None:
        """
        Send one email.

        Raises:
            EmailDeliveryError: The SMTP server rejected the message or could not be reached.
        """
        cfg = self.settings
        message = self.build_message(to_email, subject, html_content, text_content)

        if not cfg.smtp_configured:
            logger.info("SMTP not configured, email not sent. To: %s, Subject: %s", to_email, subject)
            logger.debug("Email body:\n%s", text_content)
            return

        try:
            async with aiosmtplib.SMTP(
                hostname=cfg.SMTP_HOST,
                port=cfg.SMTP_PORT,
                timeout=cfg.SMTP_TIMEOUT,
                start_tls=cfg.SMTP_USE_TLS,
            ) as smtp:
                if cfg.SMTP_USER and cfg.SMTP_PASSWORD:
                    await smtp.login(cfg.SMTP_USER, cfg.SMTP_PASSWORD.get_secret_value())
                await smtp.send_message(message)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise EmailDeliveryError(f"Failed to send email to {to_email}: {e}") from e

        logger.info("Email sent to %s: %s", to_email, subject)
