"""Admin activity log schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class AdminActivityResponse(BaseModel):
    """A single audit log entry, possibly anonymized for the viewer."""

    id: str
    admin_id: str
    admin_name: str
    admin_role: str
    action: str
    details: str
    ip_address: str
    user_agent: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    """Page metadata for list responses."""

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class AdminActivityListResponse(BaseModel):
    """Paginated activity log."""

    activities: list[AdminActivityResponse]
    pagination: Pagination


class ActivityCount(BaseModel):
    """Activity count grouped by a key."""

    key: str
    count: int


class AdminActivityStatsResponse(BaseModel):
    """Aggregated activity over a period."""

    period: Literal["1d", "7d", "30d"]
    total_activities: int
    activities_by_action: list[ActivityCount]
    activities_by_admin: list[ActivityCount]
    recent_activities: list[AdminActivityResponse]
