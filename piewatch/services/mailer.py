from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage

import structlog

from ..errors import DeliveryError

log = structlog.get_logger()


class SmtpMailer:
    def __init__(self, host: str, port: int, user: str, password: str, sender: str, recipient: str, timeout: float = 30.0):
        self.host = host
        self.port = int(port)
        self.user = user
        self.password = password
        self.sender = sender
        self.recipient = recipient
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "SmtpMailer":
        settings.require_smtp()
        return cls(
            settings.smtp_host,
            settings.smtp_port,
            settings.smtp_user,
            settings.smtp_pass,
            settings.sender,
            settings.recipient,
            timeout=settings.http_timeout_seconds,
        )

    def _message(self, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = self.recipient
        msg["Subject"] = subject
        msg.set_content(body)
        return msg

    def send(self, subject: str, body: str):
        msg = self._message(subject, body)
        ctx = ssl.create_default_context()
        try:
            # 465 is implicit TLS; anything else upgrades with STARTTLS.
            if self.port == 465:
                with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=ctx) as s:
                    s.login(self.user, self.password)
                    s.send_message(msg)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as s:
                    s.starttls(context=ctx)
                    s.login(self.user, self.password)
                    s.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            log.error("email_send_failed", subject=subject, err=repr(exc))
            raise DeliveryError(f"email delivery failed: {exc}") from exc
        log.info("email_sent", subject=subject, to=self.recipient)
