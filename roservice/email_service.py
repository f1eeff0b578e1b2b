"""
Email delivery through Resend

A Mailer is constructed once per process (API app or worker) and handed to
the services that notify people. Delivery failures are logged and reported
as False; they never raise.
"""

import logging
from typing import Optional

import resend
from fastapi import Request

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY

logger = logging.getLogger(__name__)


class Mailer:
    def __init__(self, api_key: Optional[str] = RESEND_API_KEY, from_address: str = EMAIL_FROM_ADDRESS):
        self.api_key = api_key
        self.from_address = from_address
        if api_key:
            resend.api_key = api_key
        else:
            logger.warning("RESEND_API_KEY not set - emails will be logged but not sent")

    def send(self, to: str, subject: str, text: str) -> bool:
        """Send a plain-text email. Returns True when the provider accepted it."""
        if not to:
            logger.debug(f"⚠️ No recipient for email '{subject}'")
            return False

        if not self.api_key:
            logger.info(f"📧 [email disabled] to={to} subject='{subject}'")
            return False

        try:
            params = {
                "from": self.from_address,
                "to": [to],
                "subject": subject,
                "text": text,
            }
            response = resend.Emails.send(params)
            logger.info(f"✅ Email sent to {to}: {subject} (id={response.get('id') if response else None})")
            return True
        except Exception as e:
            logger.error(f"❌ Failed to send email to {to}: {e}")
            return False

    def close(self) -> None:
        logger.debug("Mailer closed")


def get_mailer(request: Request) -> Optional[Mailer]:
    """FastAPI dependency: the application's shared Mailer, if any"""
    return getattr(request.app.state, "mailer", None)
