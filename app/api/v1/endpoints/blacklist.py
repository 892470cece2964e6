"""Credential blacklist endpoints."""

from math import ceil
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundException
from app.database import get_db
from app.dependencies import get_activity_logger, get_audit_context, get_current_admin
from app.schemas.blacklist import (
    BlacklistCheck,
    BlacklistCheckResponse,
    BlacklistCreate,
    BlacklistReason,
    BlacklistResponse,
    BlacklistSearchResponse,
    BlacklistStats,
    BlacklistUpdate,
    Pagination,
)
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.blacklist_service import BlacklistService
from app.services.notification_service import NotificationService

router = APIRouter(dependencies=[Depends(get_current_admin)])


@router.get("/", response_model=list[BlacklistResponse])
async def list_blacklist(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    reason: BlacklistReason | None = Query(None),
    is_active: bool | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List blacklist entries, newest first."""
    entries = await BlacklistService.list_entries(
        db, skip=skip, limit=limit, reason=reason, is_active=is_active
    )
    return [BlacklistResponse.model_validate(e) for e in entries]


@router.post("/check", response_model=BlacklistCheckResponse)
async def check_blacklist(
    credentials: BlacklistCheck,
    db: AsyncSession = Depends(get_db),
):
    """Check whether any of the given credentials is blacklisted."""
    entry = await BlacklistService.is_blacklisted(
        db,
        email=credentials.email,
        phone=credentials.phone,
        licenses=credentials.licenses,
    )
    return BlacklistCheckResponse(
        is_blacklisted=entry is not None,
        entry=BlacklistResponse.model_validate(entry) if entry else None,
    )


@router.post("/", response_model=BlacklistResponse, status_code=status.HTTP_201_CREATED)
async def create_blacklist_entry(
    entry_data: BlacklistCreate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """Blacklist credentials manually. At least one credential is required."""
    try:
        entry = await BlacklistService.add_to_blacklist(
            db,
            reason=entry_data.reason,
            original_entity_type=entry_data.original_entity_type,
            email=entry_data.email,
            phone=entry_data.phone,
            licenses=entry_data.licenses,
            original_entity_id=entry_data.original_entity_id,
            original_entity_name=entry_data.original_entity_name,
            description=entry_data.description,
            created_by=audit.admin_id,
            expires_at=entry_data.expires_at,
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.ADD_BLACKLIST,
        f"Blacklisted {entry['original_entity_name'] or entry['email'] or 'credentials'}",
        {"blacklist_id": entry["id"], "reason": entry["reason"]},
    )

    return BlacklistResponse.model_validate(entry)


@router.get("/stats/overview", response_model=BlacklistStats)
async def blacklist_stats(db: AsyncSession = Depends(get_db)):
    """Count entries overall and per reason."""
    return BlacklistStats.model_validate(await BlacklistService.get_stats(db))


@router.get("/search/{query}", response_model=BlacklistSearchResponse)
async def search_blacklist(
    query: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """
    Search entries by email, phone, license, name or description.

    Matching is case-insensitive and results are newest first.
    """
    entries, total = await BlacklistService.search(
        db, query, skip=(page - 1) * limit, limit=limit
    )
    return BlacklistSearchResponse(
        entries=[BlacklistResponse.model_validate(e) for e in entries],
        pagination=Pagination(page=page, limit=limit, total=total, pages=ceil(total / limit)),
    )


@router.get("/{entry_id}", response_model=BlacklistResponse)
async def get_blacklist_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a blacklist entry by ID."""
    entry = await BlacklistService.get_entry(db, entry_id)
    if not entry:
        raise NotFoundException("Blacklist entry not found")
    return BlacklistResponse.model_validate(entry)


@router.delete("/{entry_id}", response_model=BlacklistResponse)
async def deactivate_blacklist_entry(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """Lift a blacklist entry. The entry is kept with ``is_active`` false."""
    entry = await BlacklistService.deactivate(db, entry_id)
    if not entry:
        raise NotFoundException("Blacklist entry not found")

    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.DELETE_BLACKLIST,
        f"Deactivated blacklist entry for {entry['original_entity_name'] or entry['email']}",
        {"blacklist_id": entry["id"]},
    )

    return BlacklistResponse.model_validate(entry)


@router.patch("/{entry_id}", response_model=BlacklistResponse)
async def update_blacklist_entry(
    entry_id: UUID,
    entry_data: BlacklistUpdate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """Update a blacklist entry. Only provided fields are changed."""
    values = entry_data.model_dump(exclude_unset=True, exclude_none=True)
    updated_fields = sorted(values)

    entry = await BlacklistService.update_entry(db, entry_id, values)
    if not entry:
        raise NotFoundException("Blacklist entry not found")

    name = entry["original_entity_name"] or entry["email"] or "credentials"
    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.UPDATE_BLACKLIST,
        f"Updated blacklist entry for {name}",
        {
            "blacklist_id": entry["id"],
            "original_entity_name": entry["original_entity_name"],
            "updated_fields": updated_fields,
        },
    )
    await NotificationService.notify_admins(
        db,
        "Blacklist Entry Updated",
        f"Blacklist entry for {name} was updated by {audit.admin_name}",
        notification_type="info",
        category="security",
        priority="medium",
        related_entity_id=entry["id"],
        related_entity_type="Blacklist",
        metadata={"updated_fields": updated_fields, "action": "blacklist_updated"},
    )

    return BlacklistResponse.model_validate(entry)
