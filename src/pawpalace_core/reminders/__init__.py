"""
Vaccination reminder engine.

This module provides the interval table, the due-date evaluator, the
reminder dispatcher, the pass service and the scheduler driver, plus
``build_reminder_service`` to wire them together from settings.
"""

from ..models.vaccination import normalize_vaccinations
from .dispatcher import DispatchReceipt, ReminderDispatcher, render_reminder
from .evaluator import DueEvent, DueWindow, compute_due_events, due_window
from .intervals import DEFAULT_VACCINE_INTERVALS, VaccineIntervalTable
from .ledger import NotificationLedger
from .scheduler import ReminderScheduler
from .service import ReminderRunResult, VaccinationReminderService, build_reminder_service
from .store import ReminderStore, SQLAlchemyPetStore

__all__ = [
    "DEFAULT_VACCINE_INTERVALS",
    "DispatchReceipt",
    "DueEvent",
    "DueWindow",
    "NotificationLedger",
    "ReminderDispatcher",
    "ReminderRunResult",
    "ReminderScheduler",
    "ReminderStore",
    "SQLAlchemyPetStore",
    "VaccinationReminderService",
    "VaccineIntervalTable",
    "build_reminder_service",
    "compute_due_events",
    "due_window",
    "normalize_vaccinations",
    "render_reminder",
]
