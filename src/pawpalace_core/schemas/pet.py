"""
Pet, adoption and purchase Pydantic schemas for validation and serialization.

Write schemas normalize vaccination histories the same way the Pet model
does, so data entering through either path is stored identically.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.adoption import AdoptionStatus
from ..models.pet import ListingStatus, PetPurpose, PetSpecies
from ..models.vaccination import normalize_vaccinations
from ..utils.validation import sanitize_string, validate_email


def _checked_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    result = validate_email(value)
    if not result.is_valid:
        raise ValueError(result.errors[0].message)
    return result.value


def _normalized_vaccinations(value: Any) -> List[dict]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError("Invalid vaccinations array")
    return normalize_vaccinations(value)


class VaccinationEntrySchema(BaseModel):
    """A stored vaccination entry. The date is kept as written."""

    model_config = ConfigDict(from_attributes=True)

    vaccine_type: str = Field(..., description="Vaccine type (original casing)")
    date: Optional[Any] = Field(None, description="Date administered as stored")


class PetBase(BaseModel):
    """Fields shared by pet create and response schemas."""

    name: str = Field(..., min_length=1, max_length=100, description="Pet's name")
    species: PetSpecies = Field(..., description="Pet's species")
    breed: Optional[str] = Field(None, max_length=100, description="Pet's breed")
    description: Optional[str] = Field(None, description="Listing description")
    purpose: PetPurpose = Field(PetPurpose.PET, description="'pet' or 'sell'")
    price: Optional[Decimal] = Field(None, description="Asking price for sale listings")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate pet name."""
        cleaned = sanitize_string(v, max_length=100)
        if not cleaned:
            raise ValueError("Pet name cannot be empty")
        return cleaned

    @field_validator("breed")
    @classmethod
    def validate_breed(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return sanitize_string(v, max_length=100) or None


class PetCreate(PetBase):
    """Schema for creating a pet listing."""

    owner_email: str = Field(..., description="Email of the listing owner")
    vaccinations: List[Any] = Field(
        default_factory=list,
        description="Raw vaccination entries; normalized on input",
    )

    @field_validator("owner_email")
    @classmethod
    def validate_owner_email(cls, v: str) -> str:
        return _checked_email(v)

    @field_validator("vaccinations", mode="before")
    @classmethod
    def normalize_vaccination_entries(cls, v: Any) -> List[dict]:
        return _normalized_vaccinations(v)

    @model_validator(mode="after")
    def validate_sale_price(self) -> "PetCreate":
        """Sale listings need a positive price."""
        if self.purpose == PetPurpose.SELL and (self.price is None or self.price <= 0):
            raise ValueError("Price must be a positive number when purpose is 'sell'")
        return self


class PetUpdate(BaseModel):
    """Schema for updating a pet listing; every field is optional."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    species: Optional[PetSpecies] = None
    breed: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    purpose: Optional[PetPurpose] = None
    price: Optional[Decimal] = None
    vaccinations: Optional[List[Any]] = None

    @field_validator("vaccinations", mode="before")
    @classmethod
    def normalize_vaccination_entries(cls, v: Any) -> Optional[List[dict]]:
        if v is None:
            return None
        return _normalized_vaccinations(v)

    @model_validator(mode="after")
    def validate_sale_price(self) -> "PetUpdate":
        if self.price is not None and self.price <= 0:
            raise ValueError("Price must be a positive number")
        if self.purpose == PetPurpose.SELL and self.price is None:
            raise ValueError("Price is required when changing purpose to 'sell'")
        return self


class PetVaccinationUpdate(BaseModel):
    """Schema for replacing a pet's vaccination history."""

    vaccinations: List[Any] = Field(..., description="Raw vaccination entries")

    @field_validator("vaccinations", mode="before")
    @classmethod
    def normalize_vaccination_entries(cls, v: Any) -> List[dict]:
        if v is None:
            raise ValueError("Invalid vaccinations array")
        return _normalized_vaccinations(v)


class PetResponse(PetBase):
    """Schema for pet listing responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_email: str
    status: ListingStatus
    adopted: bool
    sold: bool
    vaccinations: List[VaccinationEntrySchema] = Field(default_factory=list)
    date_added: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AdoptionRequestCreate(BaseModel):
    """Schema for submitting an adoption request."""

    pet_id: UUID
    adopter_email: str = Field(..., description="Email of the prospective adopter")
    adopter_name: Optional[str] = Field(None, max_length=100)
    owner_email: Optional[str] = None
    message: Optional[str] = None

    @field_validator("adopter_email", "owner_email")
    @classmethod
    def validate_emails(cls, v: Optional[str]) -> Optional[str]:
        return _checked_email(v)


class AdoptionRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pet_id: UUID
    adopter_email: Optional[str] = None
    adopter_name: Optional[str] = None
    owner_email: Optional[str] = None
    status: AdoptionStatus
    accepted_at: Optional[datetime] = None


class PurchaseCreate(BaseModel):
    """Schema for recording a purchase."""

    pet_id: UUID
    buyer_email: str = Field(..., description="Email of the buyer")
    buyer_name: Optional[str] = Field(None, max_length=100)
    amount: Optional[Decimal] = Field(None, ge=0)
    payment_reference: Optional[str] = Field(None, max_length=255)

    @field_validator("buyer_email")
    @classmethod
    def validate_buyer_email(cls, v: str) -> str:
        return _checked_email(v)


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pet_id: UUID
    buyer_email: Optional[str] = None
    buyer_name: Optional[str] = None
    amount: Optional[Decimal] = None
    payment_reference: Optional[str] = None
