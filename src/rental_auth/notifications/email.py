"""
rental_auth.notifications.email

SMTP email sender.

Responsibilities:
- Send a single message (`send(to, subject, body, html=None)`).
- Keep the blocking SMTP exchange off the event loop.
- Raise typed errors for missing configuration and failed delivery.
"""

from __future__ import annotations

import asyncio
import smtplib
from email.message import EmailMessage
from email.utils import formatdate

from rental_auth.observability.logging import get_logger
from rental_auth.settings import Settings

log = get_logger(__name__)

SMTP_TIMEOUT_SECONDS = 10


class EmailNotConfiguredError(RuntimeError):
    pass


class EmailDeliveryError(RuntimeError):
    pass


class SmtpEmailSender:
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _build_message(self, to: str, subject: str, body: str, html: str | None) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._settings.email_from
        msg["To"] = to
        msg["Subject"] = subject
        msg["Date"] = formatdate(localtime=True)
        msg.set_content(body)
        if html:
            msg.add_alternative(html, subtype="html")
        return msg

    def _send_blocking(self, msg: EmailMessage) -> None:
        s = self._settings
        # Port 465 is implicit TLS; anything else upgrades with STARTTLS.
        if s.smtp_port == 465:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                s.smtp_host, s.smtp_port, timeout=SMTP_TIMEOUT_SECONDS
            )
        else:
            server = smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=SMTP_TIMEOUT_SECONDS)

        try:
            server.ehlo()
            if s.smtp_port != 465:
                server.starttls()
                server.ehlo()
            if s.smtp_username:
                server.login(s.smtp_username, s.smtp_password or "")
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except (smtplib.SMTPException, OSError):
                pass

    async def send(self, to: str, subject: str, body: str, html: str | None = None) -> None:
        if not self._settings.smtp_host:
            raise EmailNotConfiguredError("SMTP host is not set")

        msg = self._build_message(to, subject, body, html)
        try:
            await asyncio.to_thread(self._send_blocking, msg)
        except (smtplib.SMTPException, OSError) as e:
            log.error("email_send_failed", subject=subject, error=str(e))
            raise EmailDeliveryError(f"email delivery failed: {e}") from e

        log.info("email_sent", subject=subject)
