"""Admin account service."""

from datetime import UTC, datetime
from uuid import UUID

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, ConflictException
from app.core.security import get_password_hash, verify_password
from app.models.admins import admins
from app.schemas.admins import AdminCreate

logger = structlog.get_logger(__name__)


class AdminService:
    """Service for admin account operations."""

    @staticmethod
    async def get_admin_by_id(db: AsyncSession, admin_id: UUID) -> dict | None:
        """Get admin by ID."""
        result = await db.execute(select(admins).where(admins.c.id == admin_id))
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def get_admin_by_email(db: AsyncSession, email: str) -> dict | None:
        """Get admin by email (case-insensitive)."""
        result = await db.execute(select(admins).where(admins.c.email == email.lower()))
        admin = result.mappings().first()
        return dict(admin) if admin else None

    @staticmethod
    async def list_admins(db: AsyncSession, skip: int = 0, limit: int = 50) -> list[dict]:
        """List admin accounts."""
        query = select(admins).order_by(admins.c.created_at.desc()).offset(skip).limit(limit)
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @classmethod
    async def create_admin(cls, db: AsyncSession, admin_data: AdminCreate) -> dict:
        """
        Create an admin account.

        Raises:
            ConflictException: If the email is already registered
        """
        if await cls.get_admin_by_email(db, admin_data.email):
            raise ConflictException("Admin with this email already exists")

        query = (
            admins.insert()
            .values(
                first_name=admin_data.first_name,
                last_name=admin_data.last_name,
                email=admin_data.email.lower(),
                password_hash=get_password_hash(admin_data.password),
                role=admin_data.role.value,
                is_active=True,
            )
            .returning(admins)
        )
        result = await db.execute(query)
        admin = result.mappings().first()

        if not admin:
            raise ValueError("Failed to create admin")

        await db.commit()

        logger.info("admin_created", admin_id=str(admin["id"]), role=admin["role"])
        return dict(admin)

    @staticmethod
    async def update_last_login(db: AsyncSession, admin_id: UUID) -> dict | None:
        """Stamp the admin's last login time."""
        query = (
            update(admins)
            .where(admins.c.id == admin_id)
            .values(last_login_at=datetime.now(UTC))
            .returning(admins)
        )
        result = await db.execute(query)
        admin = result.mappings().first()
        await db.commit()
        return dict(admin) if admin else None

    @classmethod
    async def update_admin(cls, db: AsyncSession, admin_id: UUID, values: dict) -> dict | None:
        """
        Update an admin account. Only the given fields change.

        Raises:
            ConflictException: If the new email belongs to another admin
        """
        if "email" in values:
            values["email"] = values["email"].lower()
            existing = await cls.get_admin_by_email(db, values["email"])
            if existing and existing["id"] != admin_id:
                raise ConflictException("Admin with this email already exists")

        if not values:
            return await cls.get_admin_by_id(db, admin_id)

        query = update(admins).where(admins.c.id == admin_id).values(**values).returning(admins)
        result = await db.execute(query)
        admin = result.mappings().first()
        await db.commit()

        if admin:
            logger.info("admin_updated", admin_id=str(admin_id), fields=sorted(values))
        return dict(admin) if admin else None

    @staticmethod
    async def change_password(
        db: AsyncSession, admin: dict, current_password: str, new_password: str
    ) -> None:
        """
        Replace an admin's password after checking the current one.

        Raises:
            BadRequestException: If the current password is wrong
        """
        if not verify_password(current_password, admin["password_hash"]):
            raise BadRequestException("Current password is incorrect")

        await db.execute(
            update(admins)
            .where(admins.c.id == admin["id"])
            .values(password_hash=get_password_hash(new_password))
        )
        await db.commit()
        logger.info("admin_password_changed", admin_id=str(admin["id"]))

    @staticmethod
    async def delete_admin(db: AsyncSession, admin_id: UUID) -> dict | None:
        """Delete an admin account. Its activity log entries are kept."""
        result = await db.execute(delete(admins).where(admins.c.id == admin_id).returning(admins))
        admin = result.mappings().first()
        await db.commit()

        if admin:
            logger.info("admin_deleted", admin_id=str(admin_id))
        return dict(admin) if admin else None
