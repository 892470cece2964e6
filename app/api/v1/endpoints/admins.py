"""Admin account endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, NotFoundException
from app.database import get_db
from app.dependencies import (
    get_activity_logger,
    get_audit_context,
    get_current_admin,
    require_super_admin,
)
from app.schemas.admins import (
    AdminCreate,
    AdminProfileUpdate,
    AdminResponse,
    AdminUpdate,
    PasswordChange,
)
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.admin_service import AdminService

router = APIRouter()


@router.get("/me", response_model=AdminResponse)
async def get_me(admin: dict = Depends(get_current_admin)):
    """Get the authenticated admin."""
    return AdminResponse.model_validate(admin)


@router.put("/me", response_model=AdminResponse)
async def update_me(
    profile: AdminProfileUpdate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """Update the authenticated admin's name or email."""
    values = profile.model_dump(exclude_unset=True, exclude_none=True)
    admin = await AdminService.update_admin(db, audit.admin_id, values)

    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.UPDATE_ADMIN,
        "Updated profile information",
        {"updated_fields": sorted(values)},
    )

    return AdminResponse.model_validate(admin)


@router.put("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    password_data: PasswordChange,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """
    Change the authenticated admin's password.

    The new password needs at least eight characters with an uppercase
    letter, a lowercase letter, a digit and a special character.
    """
    await AdminService.change_password(
        db, audit.admin, password_data.current_password, password_data.new_password
    )

    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.UPDATE_ADMIN,
        "Changed password",
        {"action": "password_change"},
    )


@router.get(
    "/",
    response_model=list[AdminResponse],
    dependencies=[Depends(require_super_admin)],
)
async def list_admins(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """List admin accounts. Super Admin only."""
    admins_list = await AdminService.list_admins(db, skip=skip, limit=limit)
    return [AdminResponse.model_validate(a) for a in admins_list]


@router.post(
    "/",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_super_admin)],
)
async def create_admin(
    admin_data: AdminCreate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """Create an admin account. Super Admin only."""
    admin = await AdminService.create_admin(db, admin_data)

    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.CREATE_ADMIN,
        f"Created {admin['role']} {admin['first_name']} {admin['last_name']}",
        {"created_admin_id": admin["id"], "email": admin["email"], "role": admin["role"]},
    )

    return AdminResponse.model_validate(admin)


@router.put(
    "/{admin_id}",
    response_model=AdminResponse,
    dependencies=[Depends(require_super_admin)],
)
async def update_admin(
    admin_id: UUID,
    admin_data: AdminUpdate,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """
    Update an admin account. Super Admin only.

    Super Admins cannot change their own role or deactivate themselves.
    """
    values = admin_data.model_dump(exclude_unset=True, exclude_none=True)
    if admin_id == audit.admin_id and ("role" in values or "is_active" in values):
        raise BadRequestException("You cannot change your own role or active status")

    target = await AdminService.get_admin_by_id(db, admin_id)
    if not target:
        raise NotFoundException("Admin not found")

    admin = await AdminService.update_admin(db, admin_id, values)
    name = f"{admin['first_name']} {admin['last_name']}"

    if admin["role"] != target["role"]:
        details = f"Changed role of {name} from {target['role']} to {admin['role']}"
        metadata = {
            "target_admin_id": admin_id,
            "target_admin_name": name,
            "old_role": target["role"],
            "new_role": admin["role"],
        }
    else:
        details = f"Updated admin account for {name}"
        metadata = {"target_admin_id": admin_id, "updated_fields": sorted(values)}

    await activity_logger.log_activity(db, audit, ActivityAction.UPDATE_ADMIN, details, metadata)

    return AdminResponse.model_validate(admin)


@router.delete(
    "/{admin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_super_admin)],
)
async def delete_admin(
    admin_id: UUID,
    db: AsyncSession = Depends(get_db),
    audit: AuditContext = Depends(get_audit_context),
    activity_logger: ActivityLogger = Depends(get_activity_logger),
):
    """Delete an admin account. Super Admin only; admins cannot delete themselves."""
    if admin_id == audit.admin_id:
        raise BadRequestException("You cannot delete your own account")

    admin = await AdminService.delete_admin(db, admin_id)
    if not admin:
        raise NotFoundException("Admin not found")

    name = f"{admin['first_name']} {admin['last_name']}"
    await activity_logger.log_activity(
        db,
        audit,
        ActivityAction.DELETE_ADMIN,
        f"Deleted admin account for {name}",
        {
            "deleted_admin_id": admin_id,
            "deleted_admin_name": name,
            "deleted_admin_role": admin["role"],
            "deleted_admin_email": admin["email"],
        },
    )
