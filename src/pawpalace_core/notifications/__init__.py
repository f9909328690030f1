"""
Outbound notification transports.
"""

from .mailer import (
    MailDispatchQueue,
    MailMessage,
    MailResult,
    MailSender,
    SmtpMailSender,
)

__all__ = [
    "MailDispatchQueue",
    "MailMessage",
    "MailResult",
    "MailSender",
    "SmtpMailSender",
]
