"""
Purchase model for the pawpalace-core package.
"""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import BaseModel


class Purchase(BaseModel):
    """A completed purchase of a pet listed for sale. The buyer receives reminders."""

    __tablename__ = "purchases"

    pet_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="UUID of the purchased pet",
    )

    buyer_email: Mapped[Optional[str]] = mapped_column(
        String(254), nullable=True, comment="Email of the buyer"
    )

    buyer_name: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True, comment="Name of the buyer"
    )

    amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2), nullable=True, comment="Amount paid"
    )

    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, comment="Payment processor reference"
    )

    __table_args__ = (
        CheckConstraint(
            "amount IS NULL OR amount >= 0", name="ck_purchases_amount_non_negative"
        ),
    )
