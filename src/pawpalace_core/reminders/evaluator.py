"""
Due-date evaluation for vaccination reminders.

For every pet and every vaccine type in the interval table, the latest dated
dose is found, the interval added, and the resulting due date checked against
the one-day lookahead window that covers exactly "tomorrow".
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, List, Optional, Sequence

from ..exceptions import log_exception_context
from ..models.vaccination import entry_vaccine_type, latest_dose
from ..utils.datetime_utils import add_days, format_calendar_date, get_current_utc_date
from .intervals import VaccineIntervalTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DueWindow:
    """Half-open calendar window ``[start, end)``."""

    start: date
    end: date

    def __contains__(self, value: date) -> bool:
        return self.start <= value < self.end


@dataclass(frozen=True)
class DueEvent:
    """A vaccine whose next dose falls inside the lookahead window."""

    pet_id: uuid.UUID
    pet_name: str
    vaccine_type: str
    last_dose_date: date
    next_due_date: date

    @property
    def next_due_date_str(self) -> str:
        return format_calendar_date(self.next_due_date)

    def to_dict(self) -> dict:
        return {
            "pet_id": str(self.pet_id),
            "pet_name": self.pet_name,
            "vaccine_type": self.vaccine_type,
            "last_dose_date": format_calendar_date(self.last_dose_date),
            "next_due_date": self.next_due_date_str,
        }


def due_window(as_of: date) -> DueWindow:
    """The window covering the day after ``as_of``."""
    tomorrow = add_days(as_of, 1)
    return DueWindow(start=tomorrow, end=add_days(tomorrow, 1))


def evaluate_pet(
    pet: Any, intervals: VaccineIntervalTable, window: DueWindow
) -> List[DueEvent]:
    """
    Compute due events for a single pet.

    ``pet`` only needs ``id``, ``name`` and ``vaccinations`` attributes.
    History types absent from the table are never evaluated.
    """
    vaccinations: Optional[Sequence[Any]] = getattr(pet, "vaccinations", None)
    if not vaccinations:
        return []

    events: List[DueEvent] = []
    for vaccine_key, interval_days in intervals.entries():
        found = latest_dose(vaccinations, vaccine_key)
        if found is None:
            continue

        entry, last_dose = found
        try:
            next_due = add_days(last_dose, interval_days)
        except OverflowError:
            logger.warning(
                f"Skipping {vaccine_key} for pet {pet.id}: "
                f"{format_calendar_date(last_dose)} + {interval_days} days is out of range"
            )
            continue

        if next_due in window:
            events.append(
                DueEvent(
                    pet_id=pet.id,
                    pet_name=pet.name,
                    vaccine_type=entry_vaccine_type(entry),
                    last_dose_date=last_dose,
                    next_due_date=next_due,
                )
            )
    return events


def compute_due_events(
    pets: Iterable[Any],
    intervals: VaccineIntervalTable,
    as_of: Optional[date] = None,
) -> List[DueEvent]:
    """
    Find every (pet, vaccine type) whose next dose is due tomorrow.

    Args:
        pets: Objects with ``id``, ``name`` and raw ``vaccinations``
        intervals: Interval table to evaluate against
        as_of: Reference date; defaults to today's UTC date

    Returns:
        Due events in pet-by-table order. A pet whose evaluation raises is
        logged and contributes no events.
    """
    if as_of is None:
        as_of = get_current_utc_date()

    window = due_window(as_of)
    events: List[DueEvent] = []
    for pet in pets:
        try:
            events.extend(evaluate_pet(pet, intervals, window))
        except Exception as e:
            log_exception_context(
                e,
                {"pet_id": str(getattr(pet, "id", None)), "stage": "evaluate"},
                logger,
                level=logging.WARNING,
            )

    logger.debug(
        f"Evaluated vaccinations as of {format_calendar_date(as_of)}: "
        f"{len(events)} due on {format_calendar_date(window.start)}"
    )
    return events
