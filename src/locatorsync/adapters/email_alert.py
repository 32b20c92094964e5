"""SMTP alerter used when a run aborts."""

from __future__ import annotations

import smtplib
import ssl
from email.message import EmailMessage
from logging import getLogger
from typing import TYPE_CHECKING

from locatorsync.domain.errors import ExternalServiceError

if TYPE_CHECKING:
    from collections.abc import Callable

    from locatorsync.config.email import EmailAlertConfig

log = getLogger(__name__)


def build_alert_email(config: EmailAlertConfig, body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = config.sender
    message["To"] = config.recipient
    message["Subject"] = config.subject
    message.set_content(body)
    return message


class EmailAlerter:
    """Sends alerts over implicit-TLS SMTP (port 465 by default)."""

    def __init__(
        self,
        *,
        config: EmailAlertConfig,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP_SSL,
    ) -> None:
        self._config = config
        self._smtp_factory = smtp_factory

    def alert(self, message: str) -> None:
        email = build_alert_email(self._config, message)
        try:
            with self._smtp_factory(
                self._config.smtp_host,
                self._config.smtp_port,
                timeout=self._config.timeout_seconds,
                context=ssl.create_default_context(),
            ) as smtp:
                smtp.login(self._config.sender, self._config.password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            raise ExternalServiceError("email", f"failed to send alert: {exc}") from exc
        log.info("Email notification sent successfully")
