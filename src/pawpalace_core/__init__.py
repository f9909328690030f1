"""
PawPalace Core Package

The data layer and vaccination reminder engine of the PawPalace pet adoption
and marketplace platform.

This package includes:

- SQLAlchemy models for pet listings, adoption requests and purchases
- Pydantic schemas for request/response validation and serialization
- Database connection utilities with async SQLAlchemy engine configuration
- The vaccination reminder engine: interval table, due-date evaluator,
  reminder dispatcher, daily scheduler
- An SMTP mail transport with a bounded background worker pool
- Exception handling with retry mechanisms
- Migration support through Alembic integration

Quick Start:
    >>> from datetime import date
    >>> from pawpalace_core.reminders import VaccineIntervalTable, compute_due_events
    >>> from pawpalace_core.models import Pet, PetSpecies

    >>> pet = Pet(
    ...     name="Bella",
    ...     species=PetSpecies.DOG,
    ...     owner_email="owner@example.com",
    ...     vaccinations=[{"vaccineType": "Rabies", "date": "2023-01-10"}],
    ... )
    >>> events = compute_due_events([pet], VaccineIntervalTable({"Rabies": 365}), date(2024, 1, 9))
    >>> events[0].next_due_date_str
    '2024-01-10'

Requirements:
    - Python 3.11+
    - PostgreSQL 13+ (SQLite via aiosqlite for local runs and tests)
    - SQLAlchemy 2.0+
    - Pydantic 2.5+
"""

__version__ = "0.1.0"
__author__ = "PawPalace Platform Team"
__license__ = "MIT"

from . import database, exceptions, models, reminders, schemas, utils

# Convenience imports for common usage patterns
from .database import SessionManager, create_engine
from .exceptions import DatabaseException, PawPalaceException, ValidationException
from .models import AdoptionRequest, Pet, Purchase
from .reminders import (
    ReminderScheduler,
    VaccinationReminderService,
    VaccineIntervalTable,
    compute_due_events,
    normalize_vaccinations,
)

__all__ = [
    # Version and metadata
    "__version__",
    "__author__",
    "__license__",
    # Core modules
    "database",
    "exceptions",
    "models",
    "reminders",
    "schemas",
    "utils",
    # Convenience imports
    "create_engine",
    "SessionManager",
    "PawPalaceException",
    "ValidationException",
    "DatabaseException",
    "Pet",
    "AdoptionRequest",
    "Purchase",
    "ReminderScheduler",
    "VaccinationReminderService",
    "VaccineIntervalTable",
    "compute_due_events",
    "normalize_vaccinations",
]
