"""
Reminder dispatch: resolve the recipients of a due event and queue one email
per recipient.
"""

import logging
from dataclasses import dataclass, field
import uuid
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from ..notifications.mailer import MailDispatchQueue, MailMessage
from .evaluator import DueEvent
from .store import ReminderStore

logger = logging.getLogger(__name__)

SUBJECT_TEMPLATE = "Vaccination Reminder for {pet_name}"
BODY_TEMPLATE = (
    "Hello,\n\n"
    'This is a reminder that your pet "{pet_name}" needs the "{vaccine_type}" '
    "vaccine on {date}.\n\n"
    "Regards,\n"
    "{product_name}"
)


@dataclass
class DispatchReceipt:
    """What the dispatcher did for one due event."""

    event: DueEvent
    recipients: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    @property
    def error(self) -> Optional[str]:
        return "; ".join(self.errors) if self.errors else None


def render_reminder(event: DueEvent, product_name: str) -> Tuple[str, str]:
    """Return ``(subject, body)`` for a due event."""
    subject = SUBJECT_TEMPLATE.format(pet_name=event.pet_name)
    body = BODY_TEMPLATE.format(
        pet_name=event.pet_name,
        vaccine_type=event.vaccine_type,
        date=event.next_due_date_str,
        product_name=product_name,
    )
    return subject, body


def _recipient(record: Optional[Any], attribute: str) -> Optional[str]:
    if record is None:
        return None
    address = getattr(record, attribute, None)
    if not address or not str(address).strip():
        return None
    return str(address).strip()


class ReminderDispatcher:
    """
    Notify the accepted adopter and the buyer of a pet about a due vaccine.

    Both lookups run for every event; zero, one or two emails are queued.
    A failing lookup is logged and reported on the receipt; it never raises.
    """

    def __init__(
        self,
        store: ReminderStore,
        mail_queue: MailDispatchQueue,
        product_name: str = "PawPalace",
    ) -> None:
        self.store = store
        self.mail_queue = mail_queue
        self.product_name = product_name

    def _queue(self, to: str, subject: str, body: str) -> bool:
        try:
            self.mail_queue.submit(MailMessage(to=to, subject=subject, body=body))
        except RuntimeError as e:
            logger.error(f"Could not queue reminder for {to}: {e}")
            return False
        return True

    async def _lookup(
        self,
        receipt: DispatchReceipt,
        name: str,
        lookup: Callable[[uuid.UUID], Awaitable[Optional[Any]]],
    ) -> Optional[Any]:
        event = receipt.event
        try:
            return await lookup(event.pet_id)
        except Exception as e:
            logger.error(
                f"{name} lookup failed for pet {event.pet_id} ({event.vaccine_type}): {e}",
                extra={"due_event": event.to_dict()},
            )
            receipt.errors.append(f"{name}: {e}")
            return None

    async def dispatch(self, event: DueEvent) -> DispatchReceipt:
        """
        Resolve recipients for ``event`` and queue their reminders.

        The adopter and buyer lookups are independent: when one fails, the
        other recipient is still notified and the failure is recorded on the
        receipt.
        """
        receipt = DispatchReceipt(event=event)

        adoption = await self._lookup(
            receipt, "adoption", self.store.find_accepted_adoption
        )
        purchase = await self._lookup(receipt, "purchase", self.store.find_purchase)

        recipients = [
            address
            for address in (
                _recipient(adoption, "adopter_email"),
                _recipient(purchase, "buyer_email"),
            )
            if address
        ]

        if not recipients:
            if not receipt.failed:
                logger.info(
                    f"No adopter or buyer to notify for {event.pet_name} "
                    f"({event.vaccine_type} due {event.next_due_date_str})"
                )
            return receipt

        subject, body = render_reminder(event, self.product_name)
        for address in recipients:
            if self._queue(address, subject, body):
                receipt.recipients.append(address)
                logger.info(
                    f"Reminder queued to {address} for {event.pet_name} "
                    f"({event.vaccine_type} due {event.next_due_date_str})"
                )

        return receipt
