"""Admin notification schemas."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

NotificationType = Literal["info", "success", "warning", "alert"]
NotificationCategory = Literal["suspensions", "security", "doctors", "system"]
NotificationPriority = Literal["low", "medium", "high"]


class NotificationResponse(BaseModel):
    """Admin notification response schema."""

    id: UUID
    title: str
    message: str
    type: NotificationType
    category: NotificationCategory
    priority: NotificationPriority
    recipients: str
    related_entity_id: UUID | None = None
    related_entity_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    """List of notifications with unread count."""

    notifications: list[NotificationResponse]
    total: int
    unread: int


class MarkAllReadResponse(BaseModel):
    """Result of marking every notification read."""

    updated: int


class NotificationCreate(BaseModel):
    """Schema for a notification posted by an admin."""

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: NotificationType
    category: NotificationCategory = "system"
    priority: NotificationPriority = "medium"
    related_entity_id: UUID | None = None
    related_entity_type: str | None = Field(None, max_length=50)
    metadata: dict[str, Any] = Field(default_factory=dict)


class CleanupResponse(BaseModel):
    """Result of deleting old read notifications."""

    deleted_count: int


class BucketStats(BaseModel):
    """Notification counts for one category or priority."""

    count: int
    unread_count: int


class NotificationStats(BaseModel):
    """Notification totals broken down by category and priority."""

    total: int
    unread: int
    by_category: dict[str, BucketStats]
    by_priority: dict[str, BucketStats]
