"""SMTP configuration for fatal-error alerts."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int, optional_env_var, require_env_vars

DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 465
DEFAULT_ALERT_SUBJECT = "Notification from locatorsync update"


@dataclass(frozen=True)
class EmailAlertConfig:
    sender: str
    recipient: str
    password: str
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    subject: str = DEFAULT_ALERT_SUBJECT
    timeout_seconds: float = 30.0


def get_email_alert_config() -> EmailAlertConfig:
    values = require_env_vars(("ALERT_EMAIL_FROM", "ALERT_EMAIL_TO", "ALERT_SMTP_PASSWORD"))
    return EmailAlertConfig(
        sender=values["ALERT_EMAIL_FROM"],
        recipient=values["ALERT_EMAIL_TO"],
        password=values["ALERT_SMTP_PASSWORD"],
        smtp_host=optional_env_var("ALERT_SMTP_HOST") or DEFAULT_SMTP_HOST,
        smtp_port=env_int("ALERT_SMTP_PORT", DEFAULT_SMTP_PORT),
    )
