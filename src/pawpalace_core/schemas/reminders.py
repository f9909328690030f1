"""
Pydantic schemas for the reminder HTTP surface.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.validation import validate_email


class DueEventResponse(BaseModel):
    """A vaccination due in the lookahead window."""

    model_config = ConfigDict(from_attributes=True)

    pet_id: UUID
    pet_name: str
    vaccine_type: str
    last_dose_date: date
    next_due_date: date


class ReminderRunResponse(BaseModel):
    """Detailed outcome of one reminder pass."""

    model_config = ConfigDict(from_attributes=True)

    as_of: date
    success: bool
    skipped: bool = False
    error: Optional[str] = None
    pets_evaluated: int = 0
    events: List[DueEventResponse] = Field(default_factory=list)
    emails_queued: int = 0
    lookup_failures: int = 0
    suppressed: int = 0
    started_at: datetime
    finished_at: Optional[datetime] = None


class ManualRunResponse(BaseModel):
    """Response of the on-demand reminder trigger."""

    success: bool
    message: str
    result: Optional[ReminderRunResponse] = None


class TestEmailRequest(BaseModel):
    """Request body for sending a single test email."""

    to: str = Field(..., description="Recipient address")
    subject: str = Field(..., min_length=1, description="Subject line")
    message: str = Field(..., description="Plain-text body")

    @field_validator("to")
    @classmethod
    def validate_recipient(cls, v: str) -> str:
        result = validate_email(v)
        if not result.is_valid:
            raise ValueError(result.errors[0].message)
        return result.value


class TestEmailResponse(BaseModel):
    """Response of the test-email endpoint."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
