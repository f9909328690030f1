"""
Base model class for all SQLAlchemy models in the pawpalace-core package.

This module provides the foundational base model class that all other models
inherit from, including common fields, audit functionality, soft delete
capabilities, and utility methods.

The BaseModel class follows SQLAlchemy 2.0 patterns with:
- UUID primary keys generated client-side (works on PostgreSQL and SQLite)
- Automatic timestamp management for audit trails
- Soft delete functionality so deleted listings drop out of reminder passes

Example:
    >>> from pawpalace_core.models.base import BaseModel
    >>> from sqlalchemy.orm import Mapped, mapped_column
    >>> from sqlalchemy import String

    >>> class Shelter(BaseModel):
    ...     __tablename__ = "shelters"
    ...     name: Mapped[str] = mapped_column(String(100))

    >>> shelter = Shelter(name="Happy Tails")
    >>> shelter.soft_delete()
    >>> shelter.is_deleted
    True
"""

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, TypeVar

from sqlalchemy import Boolean, DateTime, Uuid, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from ..utils.datetime_utils import get_current_utc

# Type variable for model classes
T = TypeVar("T", bound="BaseModel")


def enum_values(enum_class: type) -> List[str]:
    """Column values for an Enum type: the members' values, not their names."""
    return [member.value for member in enum_class]


class Base(DeclarativeBase):
    """
    Base declarative class for all SQLAlchemy models.

    Attributes:
        type_annotation_map: Maps Python types to SQLAlchemy column types
    """

    type_annotation_map = {
        uuid.UUID: Uuid(as_uuid=True),
    }


class BaseModel(Base):
    """
    Abstract base model class providing common functionality for all entities.

    Attributes:
        id (UUID): Primary key, automatically generated UUID4
        created_at (datetime): Timestamp when record was created (UTC)
        updated_at (datetime): Timestamp when record was last updated (UTC)
        created_by (UUID, optional): ID of user who created the record
        updated_by (UUID, optional): ID of user who last updated the record
        deleted_at (datetime, optional): Timestamp when record was soft deleted
        is_deleted (bool): Flag indicating if record is soft deleted (default: False)

    Note:
        This is an abstract base class and cannot be instantiated directly.
        All concrete models must define a __tablename__ attribute.
    """

    __abstract__ = True
    # server defaults (created_at, date_added) are fetched on flush so
    # detached instances stay readable after their session closes
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Audit fields
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )

    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )

    # Soft delete fields
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    def __repr__(self) -> str:
        """Return string representation in the form ``<ModelName(id=uuid)>``."""
        return f"<{self.__class__.__name__}(id={self.id})>"

    def to_dict(self, exclude_deleted: bool = True) -> Dict[str, Any]:
        """
        Convert model instance to a JSON-serializable dictionary.

        Datetimes and dates become ISO strings, UUIDs become strings, enums
        become their values and decimals become floats.

        Args:
            exclude_deleted: If True, returns empty dict for soft-deleted records.

        Returns:
            Dictionary with column names as keys and serialized values.
        """
        if exclude_deleted and self.is_deleted:
            return {}

        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                result[column.key] = str(value)
            elif isinstance(value, enum.Enum):
                result[column.key] = value.value
            elif isinstance(value, Decimal):
                result[column.key] = float(value)
            else:
                result[column.key] = value
        return result

    def soft_delete(self, deleted_by: Optional[uuid.UUID] = None) -> None:
        """
        Mark the record as deleted without removing it from the database.

        Note:
            This method only modifies the instance. You must commit the
            transaction to persist changes to the database.
        """
        self.is_deleted = True
        self.deleted_at = get_current_utc()
        if deleted_by:
            self.updated_by = deleted_by

    @classmethod
    def create_query_filter_active(cls):
        """
        Create a SQLAlchemy filter expression for active (non-deleted) records.

        Example:
            >>> from sqlalchemy import select
            >>> stmt = select(Pet).where(Pet.create_query_filter_active())
        """
        return cls.is_deleted.is_(False)
