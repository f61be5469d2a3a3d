# app/core/mailer.py
import logging
from email.errors import MessageError
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Any, Dict, Protocol

import aiosmtplib
from fastapi import Depends

from app.core.settings import MailSettings, get_mail_settings
from app.lib.validation import ContactSubmission

log = logging.getLogger("uvicorn.error")

# Submission port; TLS is upgraded via STARTTLS when offered, never implicit.
MAIL_PORT = 587


class MailTransportError(Exception):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__)

    @property
    def detail(self) -> Dict[str, Any]:
        return {
            "type": type(self.cause).__name__,
            "message": str(self),
            "code": getattr(self.cause, "code", None),
        }


class MailTransport(Protocol):
    async def send(self, message: MIMEMultipart) -> Dict[str, Any]:
        ...


def render_html_body(submission: ContactSubmission) -> str:
    return (
        f"<div>{escape(submission.message)} <br /><br />"
        f"Thank you,<br />{escape(submission.name)}</div>"
    )


def build_contact_message(submission: ContactSubmission, send_to: str) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["From"] = submission.email
    message["To"] = send_to
    message["Subject"] = submission.subject
    message.attach(MIMEText(submission.message, "plain", "utf-8"))
    message.attach(MIMEText(render_html_body(submission), "html", "utf-8"))
    return message


class SmtpMailTransport:
    """Delivers one message per call over a fresh SMTP connection."""

    def __init__(self, host: str, user: str, password: str, port: int = MAIL_PORT):
        self.host = host
        self.user = user
        self.password = password
        self.port = port

    async def send(self, message: MIMEMultipart) -> Dict[str, Any]:
        try:
            rejected, reply = await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.user,
                password=self.password,
                use_tls=False,
                start_tls=None,
            )
        except (aiosmtplib.SMTPException, MessageError, OSError) as exc:
            raise MailTransportError(exc) from exc

        recipients = [addr.strip() for addr in str(message["To"]).split(",") if addr.strip()]
        log.info(f"[mailer] sent to {len(recipients) - len(rejected)} recipient(s) via {self.host}:{self.port}")
        return {
            "accepted": [addr for addr in recipients if addr not in rejected],
            "rejected": {
                addr: {"code": resp.code, "message": resp.message}
                for addr, resp in rejected.items()
            },
            "response": reply,
        }


def get_mail_transport(mail: MailSettings = Depends(get_mail_settings)) -> MailTransport:
    return SmtpMailTransport(mail.host, mail.user, mail.password)
