"""Credential blacklist schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

BlacklistReason = Literal[
    "doctor_deleted", "candidate_rejected_multiple", "license_conflict", "manual"
]


class BlacklistCheck(BaseModel):
    """Credentials to check against the blacklist."""

    email: EmailStr | None = None
    phone: str | None = None
    licenses: list[str] = Field(default_factory=list)


class BlacklistCreate(BlacklistCheck):
    """Schema for a manual blacklist entry."""

    reason: BlacklistReason = "manual"
    original_entity_type: Literal["Doctor", "PendingDoctor"] = "Doctor"
    original_entity_id: UUID | None = None
    original_entity_name: str | None = Field(None, max_length=200)
    description: str | None = None
    expires_at: datetime | None = None

    @model_validator(mode="after")
    def require_credential(self) -> "BlacklistCreate":
        """At least one credential must be blacklisted."""
        if not (self.email or self.phone or self.licenses):
            raise ValueError("Provide at least one of email, phone or licenses")
        return self


class BlacklistResponse(BaseModel):
    """Blacklist entry response schema."""

    id: UUID
    email: str | None = None
    phone: str | None = None
    licenses: list[str] = Field(default_factory=list)
    reason: BlacklistReason
    original_entity_type: str
    original_entity_id: UUID | None = None
    original_entity_name: str | None = None
    description: str | None = None
    rejection_count: int
    is_active: bool
    created_by: UUID | None = None
    blacklisted_at: datetime
    expires_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class BlacklistCheckResponse(BaseModel):
    """Result of a blacklist check."""

    is_blacklisted: bool
    entry: BlacklistResponse | None = None


class BlacklistUpdate(BaseModel):
    """Schema for updating a blacklist entry. Only provided fields change."""

    email: EmailStr | None = None
    phone: str | None = None
    licenses: list[str] | None = None
    reason: BlacklistReason | None = None
    original_entity_name: str | None = Field(None, max_length=200)
    description: str | None = None
    is_active: bool | None = None
    expires_at: datetime | None = None


class ReasonStats(BaseModel):
    """Entry counts for one blacklist reason."""

    count: int
    active_count: int


class BlacklistStats(BaseModel):
    """Blacklist overview."""

    total: int
    active: int
    inactive: int
    by_reason: dict[str, ReasonStats]


class Pagination(BaseModel):
    """Page position of a search result."""

    page: int
    limit: int
    total: int
    pages: int


class BlacklistSearchResponse(BaseModel):
    """A page of blacklist search matches."""

    entries: list[BlacklistResponse]
    pagination: Pagination
