"""
Outbound mail for vaccination reminders.

This module provides the mail sender interface, an SMTP implementation, and a
bounded worker pool that delivers messages in the background so the reminder
pass never waits on the mail server.
"""

import logging
import smtplib
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from email.mime.text import MIMEText
from typing import Dict, List, Optional, Protocol

from ..exceptions import MailDeliveryException
from ..utils.config import MailSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailMessage:
    """A single plain-text email."""

    to: str
    subject: str
    body: str


@dataclass(frozen=True)
class MailResult:
    """Outcome of one background delivery."""

    recipient: str
    success: bool
    error: Optional[str] = None


class MailSender(Protocol):
    """Anything that can deliver one plain-text email, raising on failure."""

    def send(self, to: str, subject: str, body: str) -> None: ...


class SmtpMailSender:
    """Deliver mail through an SMTP server, one connection per message."""

    def __init__(self, settings: MailSettings) -> None:
        """
        Initialize the SMTP sender.

        Args:
            settings: Mail transport settings
        """
        self.settings = settings
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def build_message(self, to: str, subject: str, body: str) -> MIMEText:
        msg = MIMEText(body)
        msg["Subject"] = subject
        msg["From"] = self.settings.from_address or ""
        msg["To"] = to
        return msg

    def send(self, to: str, subject: str, body: str) -> None:
        """
        Send one email.

        Raises:
            MailDeliveryException: If the recipient is empty, the transport is
                not configured, or the SMTP exchange fails
        """
        if not to or not to.strip():
            raise MailDeliveryException("Recipient address is empty")
        if not self.settings.is_configured:
            raise MailDeliveryException(
                "Mail transport is not configured (MAIL_USER/MAIL_PASS)",
                recipient=to,
            )

        msg = self.build_message(to, subject, body)
        try:
            with smtplib.SMTP(self.settings.host, self.settings.port) as server:
                if self.settings.use_tls:
                    server.starttls()
                server.login(self.settings.username, self.settings.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            self.logger.error(f"Failed to send email to {to}: {e}")
            raise MailDeliveryException(
                f"Failed to send email: {e}", recipient=to, original_error=e
            )

        self.logger.info(f"Email sent to {to}: {subject}")


class MailDispatchQueue:
    """
    Bounded worker pool for fire-and-forget mail delivery.

    ``submit`` returns immediately; each delivery's failure is caught and
    logged on the worker thread and reported through the returned future.
    """

    def __init__(self, sender: MailSender, max_workers: int = 4) -> None:
        """
        Initialize the queue.

        Args:
            sender: Mail sender used by the workers
            max_workers: Maximum number of concurrent deliveries
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.sender = sender
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="pawpalace-mail"
        )
        self._lock = threading.Lock()
        self._pending: List[Future] = []
        self._stats: Dict[str, int] = {"submitted": 0, "sent": 0, "failed": 0}
        self._closed = False

    def _deliver(self, message: MailMessage) -> MailResult:
        try:
            self.sender.send(message.to, message.subject, message.body)
        except Exception as e:
            logger.error(
                f"Failed to send email to {message.to}: {e}",
                extra={"recipient": message.to, "subject": message.subject},
            )
            with self._lock:
                self._stats["failed"] += 1
            return MailResult(recipient=message.to, success=False, error=str(e))

        with self._lock:
            self._stats["sent"] += 1
        return MailResult(recipient=message.to, success=True)

    def _forget(self, future: Future) -> None:
        with self._lock:
            if future in self._pending:
                self._pending.remove(future)

    def submit(self, message: MailMessage) -> Future:
        """
        Queue a message for background delivery.

        Raises:
            RuntimeError: If the queue has been shut down
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("Mail dispatch queue is shut down")
            future = self._executor.submit(self._deliver, message)
            self._pending.append(future)
            self._stats["submitted"] += 1
        future.add_done_callback(self._forget)
        return future

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._pending)

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._stats)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for currently queued deliveries.

        Returns:
            True if all finished within ``timeout``
        """
        with self._lock:
            futures = list(self._pending)
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting messages and release the worker threads."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)
        logger.info("Mail dispatch queue shut down")
