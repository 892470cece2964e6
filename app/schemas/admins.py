"""Admin account schemas."""

import re
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class AdminRole(StrEnum):
    """Admin roles. Super admins see the unredacted activity log."""

    ADMIN = "Admin"
    SUPER_ADMIN = "Super Admin"


class AdminCreate(BaseModel):
    """Schema for creating an admin account."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    role: AdminRole = AdminRole.ADMIN


class AdminResponse(BaseModel):
    """Admin account response schema."""

    id: UUID
    first_name: str
    last_name: str
    email: str
    role: AdminRole
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminProfileUpdate(BaseModel):
    """Schema for an admin updating their own profile."""

    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None


class AdminUpdate(AdminProfileUpdate):
    """Schema for a Super Admin updating any admin account."""

    role: AdminRole | None = None
    is_active: bool | None = None


# At least one lowercase, uppercase, digit and special character
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z\d])")


class PasswordChange(BaseModel):
    """Schema for changing the current admin's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)

    @field_validator("new_password")
    @classmethod
    def check_strength(cls, value: str) -> str:
        if not PASSWORD_PATTERN.match(value):
            raise ValueError(
                "Password must contain uppercase, lowercase, number and special character"
            )
        return value
