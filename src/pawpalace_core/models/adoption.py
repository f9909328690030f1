"""
Adoption request model for the pawpalace-core package.
"""

import enum
import uuid
from datetime import datetime
from typing import Any, List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..exceptions import BusinessRuleException
from ..utils.datetime_utils import get_current_utc
from .base import BaseModel, enum_values


class AdoptionStatus(enum.Enum):
    """Enumeration of adoption request statuses."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    CLOSED = "closed"


class AdoptionRequest(BaseModel):
    """
    A request by a prospective adopter to adopt a listed pet.

    At most one request per pet may be ``accepted``; accepting one closes the
    others (see ``SQLAlchemyPetStore.accept_adoption``). The accepted
    adopter's email is where vaccination reminders go.
    """

    __tablename__ = "adoption_requests"

    def __init__(self, **kwargs: Any) -> None:
        if "status" not in kwargs:
            kwargs["status"] = AdoptionStatus.PENDING
        super().__init__(**kwargs)

    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the requested pet",
    )

    adopter_email: Mapped[Optional[str]] = mapped_column(
        String(254), nullable=True, comment="Email of the prospective adopter"
    )

    adopter_name: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Name of the prospective adopter"
    )

    owner_email: Mapped[Optional[str]] = mapped_column(
        String(254), nullable=True, comment="Email of the listing owner"
    )

    message: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True, comment="Message from the adopter"
    )

    status: Mapped[AdoptionStatus] = mapped_column(
        Enum(
            AdoptionStatus,
            name="adoption_status",
            values_callable=enum_values,
        ),
        nullable=False,
        default=AdoptionStatus.PENDING,
        index=True,
        comment="Request status",
    )

    accepted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="When the request was accepted"
    )

    __table_args__ = (Index("idx_adoption_requests_pet_status", "pet_id", "status"),)

    @property
    def is_accepted(self) -> bool:
        return self.status == AdoptionStatus.ACCEPTED

    def accept(self, accepted_at: Optional[datetime] = None) -> None:
        """
        Mark this request as accepted.

        Raises:
            BusinessRuleException: If the request was already closed
        """
        if self.status == AdoptionStatus.CLOSED:
            raise BusinessRuleException(
                "Closed adoption requests cannot be accepted",
                rule_name="adoption_not_closed",
                context={"adoption_request_id": str(self.id)},
            )
        self.status = AdoptionStatus.ACCEPTED
        self.accepted_at = accepted_at or get_current_utc()

    def close(self) -> None:
        """Close the request (another request for the pet was accepted)."""
        self.status = AdoptionStatus.CLOSED

    @staticmethod
    def close_others(requests: List["AdoptionRequest"], accepted_id: uuid.UUID) -> int:
        """Close every request in ``requests`` except ``accepted_id``; return how many changed."""
        closed = 0
        for request in requests:
            if request.id != accepted_id and request.status != AdoptionStatus.CLOSED:
                request.close()
                closed += 1
        return closed
