"""
The vaccination reminder pass.

One pass lists every pet with vaccinations, computes the events due tomorrow,
and hands each to the dispatcher. The pass never raises. Bad records are
skipped by the evaluator, a failing event is recorded on its receipt, and a
failure to list pets is reported on the returned ``ReminderRunResult``.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..exceptions import ReminderPassException, log_exception_context
from ..notifications.mailer import MailDispatchQueue
from ..utils.config import MailSettings, ReminderSettings
from ..utils.datetime_utils import (
    add_days,
    format_calendar_date,
    get_current_utc,
    get_current_utc_date,
)
from .dispatcher import DispatchReceipt, ReminderDispatcher
from .evaluator import DueEvent, compute_due_events
from .intervals import VaccineIntervalTable
from .ledger import NotificationLedger
from .store import ReminderStore

logger = logging.getLogger(__name__)


@dataclass
class ReminderRunResult:
    """Summary of one reminder pass."""

    as_of: date
    started_at: datetime
    finished_at: Optional[datetime] = None
    success: bool = True
    skipped: bool = False
    error: Optional[str] = None
    pets_evaluated: int = 0
    events: List[DueEvent] = field(default_factory=list)
    receipts: List[DispatchReceipt] = field(default_factory=list)
    suppressed: int = 0

    @property
    def emails_queued(self) -> int:
        return sum(len(receipt.recipients) for receipt in self.receipts)

    @property
    def lookup_failures(self) -> int:
        return sum(1 for receipt in self.receipts if receipt.failed)

    @property
    def message(self) -> str:
        if self.skipped:
            return "Vaccination reminder pass already in progress; trigger skipped."
        if not self.success:
            return self.error or "Vaccination reminder pass failed"
        return (
            f"{len(self.events)} vaccination(s) due on "
            f"{format_calendar_date(self.due_date)}; {self.emails_queued} reminder(s) queued"
        )

    @property
    def due_date(self) -> date:
        return add_days(self.as_of, 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "as_of": format_calendar_date(self.as_of),
            "success": self.success,
            "skipped": self.skipped,
            "error": self.error,
            "pets_evaluated": self.pets_evaluated,
            "events": [event.to_dict() for event in self.events],
            "emails_queued": self.emails_queued,
            "lookup_failures": self.lookup_failures,
            "suppressed": self.suppressed,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


class VaccinationReminderService:
    """Runs complete, independent reminder passes."""

    def __init__(
        self,
        store: ReminderStore,
        intervals: VaccineIntervalTable,
        dispatcher: ReminderDispatcher,
        ledger: Optional[NotificationLedger] = None,
    ) -> None:
        """
        Initialize the service.

        Args:
            store: Source of pets, adoptions and purchases
            intervals: Interval table, fixed for the service lifetime
            dispatcher: Sends reminders for due events
            ledger: When given, events already dispatched by this process are
                not dispatched again
        """
        self.store = store
        self.intervals = intervals
        self.dispatcher = dispatcher
        self.ledger = ledger

    def _fail(
        self, result: ReminderRunResult, message: str, cause: Exception
    ) -> ReminderRunResult:
        error = ReminderPassException(
            message, as_of=format_calendar_date(result.as_of), original_error=cause
        )
        error.log_error(logger)
        result.success = False
        result.error = error.message
        result.finished_at = get_current_utc()
        return result

    async def run(self, as_of: Optional[date] = None) -> ReminderRunResult:
        """
        Run one pass.

        Args:
            as_of: Reference date; events due the following day are sent.
                Defaults to today's UTC date.
        """
        if as_of is None:
            as_of = get_current_utc_date()

        result = ReminderRunResult(as_of=as_of, started_at=get_current_utc())
        logger.info(f"Running vaccination reminder pass as of {format_calendar_date(as_of)}")

        try:
            pets = await self.store.find_pets_with_vaccinations()
        except Exception as e:
            return self._fail(result, f"Could not load pets for reminder pass: {e}", e)

        result.pets_evaluated = len(pets)
        try:
            result.events = compute_due_events(pets, self.intervals, as_of)
        except Exception as e:
            return self._fail(result, f"Could not evaluate vaccinations: {e}", e)

        for event in result.events:
            if self.ledger is not None and event in self.ledger:
                result.suppressed += 1
                logger.info(
                    f"Reminder for {event.pet_name} ({event.vaccine_type} due "
                    f"{event.next_due_date_str}) already sent by this process"
                )
                continue

            try:
                receipt = await self.dispatcher.dispatch(event)
            except Exception as e:
                log_exception_context(e, {"due_event": event.to_dict()}, logger)
                receipt = DispatchReceipt(event=event, errors=[str(e)])
            result.receipts.append(receipt)
            # failed lookups stay eligible for the next pass
            if self.ledger is not None and not receipt.failed:
                self.ledger.claim(event)

        result.finished_at = get_current_utc()
        logger.info(
            f"Vaccination reminder pass complete: {len(result.events)} due, "
            f"{result.emails_queued} queued, {result.lookup_failures} lookup failure(s)"
        )
        return result


def build_reminder_service(
    store: ReminderStore,
    mail_queue: MailDispatchQueue,
    mail_settings: Optional[MailSettings] = None,
    reminder_settings: Optional[ReminderSettings] = None,
) -> VaccinationReminderService:
    """
    Wire a reminder service from settings.

    Raises:
        ConfigError: If the configured interval table is invalid
    """
    mail_settings = mail_settings or MailSettings()
    reminder_settings = reminder_settings or ReminderSettings()

    intervals = VaccineIntervalTable(reminder_settings.vaccine_intervals)
    dispatcher = ReminderDispatcher(
        store, mail_queue, product_name=mail_settings.product_name
    )
    ledger = NotificationLedger() if reminder_settings.dedup_ledger else None
    return VaccinationReminderService(store, intervals, dispatcher, ledger=ledger)
