"""
Pydantic schemas for validation and serialization.
"""

from .pet import (
    AdoptionRequestCreate,
    AdoptionRequestResponse,
    PetCreate,
    PetResponse,
    PetUpdate,
    PetVaccinationUpdate,
    PurchaseCreate,
    PurchaseResponse,
    VaccinationEntrySchema,
)
from .reminders import (
    DueEventResponse,
    ManualRunResponse,
    ReminderRunResponse,
    TestEmailRequest,
    TestEmailResponse,
)

__all__ = [
    # Pet schemas
    "PetCreate",
    "PetUpdate",
    "PetVaccinationUpdate",
    "PetResponse",
    "VaccinationEntrySchema",
    # Adoption and purchase schemas
    "AdoptionRequestCreate",
    "AdoptionRequestResponse",
    "PurchaseCreate",
    "PurchaseResponse",
    # Reminder schemas
    "DueEventResponse",
    "ManualRunResponse",
    "ReminderRunResponse",
    "TestEmailRequest",
    "TestEmailResponse",
]
