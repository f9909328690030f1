"""
Process-wide wiring of the reminder components.

``ReminderRuntime`` owns the database engine, the mail worker pool and the
scheduler, and releases them in reverse order on ``close``.
"""

import logging
from typing import Optional

from .database.connection import create_engine
from .database.session import SessionManager
from .notifications.mailer import MailDispatchQueue, MailSender, SmtpMailSender
from .reminders.scheduler import ReminderScheduler
from .reminders.service import build_reminder_service
from .reminders.store import ReminderStore, SQLAlchemyPetStore
from .utils.config import AppSettings

logger = logging.getLogger(__name__)


class ReminderRuntime:
    """The long-lived objects one reminder process needs."""

    def __init__(
        self,
        scheduler: ReminderScheduler,
        mail_sender: MailSender,
        mail_queue: MailDispatchQueue,
        session_manager: Optional[SessionManager] = None,
    ) -> None:
        self.scheduler = scheduler
        self.mail_sender = mail_sender
        self.mail_queue = mail_queue
        self.session_manager = session_manager

    @classmethod
    def build(
        cls,
        settings: AppSettings,
        store: ReminderStore,
        mail_sender: MailSender,
        session_manager: Optional[SessionManager] = None,
    ) -> "ReminderRuntime":
        """Wire a runtime around an existing store and mail sender."""
        mail_queue = MailDispatchQueue(mail_sender, max_workers=settings.mail.workers)
        service = build_reminder_service(
            store, mail_queue, settings.mail, settings.reminders
        )
        scheduler = ReminderScheduler(service, settings.reminders)
        return cls(scheduler, mail_sender, mail_queue, session_manager)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ReminderRuntime":
        """
        Wire a runtime backed by SQLAlchemy and SMTP.

        Raises:
            ConfigError: If DATABASE_URL is missing or the interval table is invalid
        """
        engine = create_engine(
            settings.database.require_url(),
            pool_size=settings.database.pool_size,
            echo=settings.database.echo,
        )
        session_manager = SessionManager(engine)
        store = SQLAlchemyPetStore(session_manager)
        if not settings.mail.is_configured:
            logger.warning("MAIL_USER/MAIL_PASS not set; reminder emails will fail")
        return cls.build(
            settings, store, SmtpMailSender(settings.mail), session_manager
        )

    async def close(self) -> None:
        """Stop the scheduler, finish queued mail and dispose of the engine."""
        await self.scheduler.stop()
        self.mail_queue.shutdown(wait=True)
        if self.session_manager is not None:
            await self.session_manager.close_all_sessions()
        logger.info("Reminder runtime closed")
