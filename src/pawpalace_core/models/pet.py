"""
Pet model for the pawpalace-core package.

This module contains the Pet SQLAlchemy model: a marketplace listing that is
either offered for adoption or for sale, together with the vaccination history
the reminder pass evaluates.
"""

import enum
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    Index,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy.sql import func

from ..database.types import JSONType
from ..exceptions import BusinessRuleException
from .base import BaseModel, enum_values
from .vaccination import latest_dose, normalize_vaccinations


class PetSpecies(enum.Enum):
    """Enumeration of pet species listed on the platform."""

    DOG = "dog"
    CAT = "cat"
    RABBIT = "rabbit"
    BIRD = "bird"
    FISH = "fish"
    OTHER = "other"


class PetPurpose(enum.Enum):
    """Why a pet is listed: adoption (``pet``) or sale (``sell``)."""

    PET = "pet"
    SELL = "sell"


class ListingStatus(enum.Enum):
    """Moderation status of a pet listing."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Pet(BaseModel):
    """
    Pet listing with vaccination history.

    New listings start ``pending`` and must be approved before they are shown.
    A listing with purpose ``sell`` must carry a positive price. Vaccinations
    are normalized whenever they are assigned (see ``set_vaccinations``).
    """

    __tablename__ = "pets"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize Pet with default values and normalized vaccinations."""
        if "status" not in kwargs:
            kwargs["status"] = ListingStatus.PENDING
        if "purpose" not in kwargs or kwargs["purpose"] is None:
            kwargs["purpose"] = PetPurpose.PET
        if "adopted" not in kwargs:
            kwargs["adopted"] = False
        if "sold" not in kwargs:
            kwargs["sold"] = False
        kwargs["vaccinations"] = normalize_vaccinations(kwargs.get("vaccinations"))

        super().__init__(**kwargs)
        self.validate_price()

    owner_email: Mapped[str] = mapped_column(
        String(254), nullable=False, index=True, comment="Email of the listing owner"
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="Pet's name")

    species: Mapped[PetSpecies] = mapped_column(
        Enum(PetSpecies, name="pet_species", values_callable=enum_values),
        nullable=False,
        index=True,
        comment="Pet's species",
    )

    breed: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Pet's breed"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Free-text listing description"
    )

    purpose: Mapped[PetPurpose] = mapped_column(
        Enum(PetPurpose, name="pet_purpose", values_callable=enum_values),
        nullable=False,
        default=PetPurpose.PET,
        comment="Adoption listing or sale listing",
    )

    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2), nullable=True, comment="Asking price for sale listings"
    )

    status: Mapped[ListingStatus] = mapped_column(
        Enum(ListingStatus, name="listing_status", values_callable=enum_values),
        nullable=False,
        default=ListingStatus.PENDING,
        index=True,
        comment="Moderation status of the listing",
    )

    adopted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, comment="Whether the pet was adopted"
    )

    sold: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, comment="Whether the pet was sold"
    )

    vaccinations: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Vaccination history as a list of {vaccine_type, date}",
    )

    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="When the listing was created",
    )

    __table_args__ = (
        CheckConstraint(
            "purpose != 'sell' OR (price IS NOT NULL AND price > 0)",
            name="ck_pets_sell_price_positive",
        ),
        Index("idx_pets_status_purpose", "status", "purpose"),
    )

    def __repr__(self) -> str:
        return f"<Pet(id={self.id}, name='{self.name}', species={self.species.value})>"

    @validates("price")
    def _coerce_price(self, key: str, value: Any) -> Optional[Decimal]:
        if value is None or value == "":
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise BusinessRuleException(
                "Price must be a number",
                rule_name="sell_price_positive",
                context={"price": value},
            )

    def validate_price(self) -> None:
        """
        Enforce the sale price rule.

        Raises:
            BusinessRuleException: If purpose is ``sell`` and price is missing
                or not positive
        """
        if self.purpose == PetPurpose.SELL and (self.price is None or self.price <= 0):
            raise BusinessRuleException(
                "Price must be a positive number when purpose is 'sell'",
                rule_name="sell_price_positive",
                context={"price": str(self.price) if self.price is not None else None},
            )

    @property
    def is_available(self) -> bool:
        """Approved, not deleted, and neither adopted nor sold."""
        return (
            self.status == ListingStatus.APPROVED
            and not self.is_deleted
            and not self.adopted
            and not self.sold
        )

    def set_vaccinations(self, raw_entries: Optional[List[Any]]) -> None:
        """Replace the vaccination history with a normalized copy of ``raw_entries``."""
        self.vaccinations = normalize_vaccinations(raw_entries)

    def get_latest_vaccination(self, vaccine_type: str) -> Optional[Dict[str, Any]]:
        """
        Get the most recent vaccination entry of a given type.

        Args:
            vaccine_type: Vaccine type, matched case-insensitively

        Returns:
            The stored entry, or None if no dated entry of that type exists
        """
        found = latest_dose(self.vaccinations, vaccine_type)
        return found[0] if found else None

    def last_vaccinated_on(self, vaccine_type: str) -> Optional[date]:
        """Calendar date of the latest dose of ``vaccine_type``, if any."""
        found = latest_dose(self.vaccinations, vaccine_type)
        return found[1] if found else None

    def approve(self) -> None:
        """Approve the listing."""
        self.status = ListingStatus.APPROVED

    def reject(self) -> None:
        """Reject the listing."""
        self.status = ListingStatus.REJECTED

    def mark_adopted(self) -> None:
        """Flag the pet as adopted."""
        self.adopted = True

    def mark_sold(self) -> None:
        """Flag the pet as sold."""
        self.sold = True
