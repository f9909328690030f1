"""
Database models for the pawpalace-core package.

This module contains SQLAlchemy models for pet listings, adoption requests
and purchases, plus the vaccination history helpers the models share with
the reminder engine.
"""

from .adoption import AdoptionRequest, AdoptionStatus

# Base model will be imported by all other models
from .base import Base, BaseModel
from .pet import ListingStatus, Pet, PetPurpose, PetSpecies
from .purchase import Purchase
from .vaccination import entry_vaccine_type, latest_dose, normalize_vaccinations

__all__ = [
    "Base",
    "BaseModel",
    "Pet",
    "PetSpecies",
    "PetPurpose",
    "ListingStatus",
    "AdoptionRequest",
    "AdoptionStatus",
    "Purchase",
    "entry_vaccine_type",
    "latest_dose",
    "normalize_vaccinations",
]
