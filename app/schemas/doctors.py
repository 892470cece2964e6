"""Doctor schemas for request/response validation."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.core.doctor_lifecycle import DoctorStatus

# ============================================================================
# Doctor Base Schemas
# ============================================================================


class DoctorBase(BaseModel):
    """Base schema for doctor."""

    doctor_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=30)
    specialization: list[str] = Field(default_factory=list)
    licenses: list[str] = Field(default_factory=list)
    department: str = Field("", max_length=100)
    about: str = ""


class DoctorCreate(DoctorBase):
    """Schema for creating a doctor."""


class DoctorUpdate(BaseModel):
    """Schema for updating a doctor. Status changes go through the status endpoint."""

    doctor_name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, min_length=1, max_length=30)
    specialization: list[str] | None = None
    licenses: list[str] | None = None
    department: str | None = Field(None, max_length=100)
    about: str | None = None
    sentiment: Literal["positive", "negative", "neutral"] | None = None
    sentiment_score: float | None = Field(None, ge=0, le=1)
    no_of_patients: int | None = Field(None, ge=0)


class DoctorResponse(DoctorBase):
    """Doctor response schema."""

    id: UUID
    email: str
    status: DoctorStatus
    verified: bool
    verification_date: datetime | None = None
    rejection_count: int = 0
    sentiment: str
    sentiment_score: float
    no_of_patients: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ============================================================================
# Doctor Status Schemas
# ============================================================================


class DoctorStatusUpdate(BaseModel):
    """Schema for changing a doctor's status."""

    status: DoctorStatus
    reason: str | None = Field(None, max_length=500)


class DoctorSentimentUpdate(BaseModel):
    """Schema for updating a doctor's patient sentiment summary."""

    sentiment: Literal["positive", "negative", "neutral"]
    sentiment_score: float | None = Field(None, ge=0, le=1)


class DoctorDeleteResponse(BaseModel):
    """Response for a manual doctor deletion."""

    id: UUID
    doctor_name: str
    blacklisted: bool
    message: str
