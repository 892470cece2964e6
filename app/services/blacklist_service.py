"""Credential blacklist service."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import Text, and_, case, cast, func, or_, select, update
from sqlalchemy.dialects.postgresql import JSONB, array
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.blacklist import blacklist

logger = structlog.get_logger(__name__)


def _normalize_email(email: str | None) -> str | None:
    return email.strip().lower() if email else None


def _in_force(now: datetime) -> Any:
    """Active entries that have not expired."""
    return and_(
        blacklist.c.is_active == True,  # noqa: E712
        or_(blacklist.c.expires_at.is_(None), blacklist.c.expires_at > now),
    )


def license_overlap(licenses: list[str]) -> Any:
    """PostgreSQL condition matching entries that share any of ``licenses``."""
    return cast(blacklist.c.licenses, JSONB).has_any(array(licenses))


class BlacklistService:
    """Service for blacklisted doctor credentials."""

    @staticmethod
    async def add_to_blacklist(
        db: AsyncSession,
        reason: str,
        original_entity_type: str = "Doctor",
        email: str | None = None,
        phone: str | None = None,
        licenses: list[str] | None = None,
        original_entity_id: UUID | None = None,
        original_entity_name: str | None = None,
        description: str | None = None,
        created_by: UUID | None = None,
        expires_at: datetime | None = None,
        rejection_count: int = 0,
    ) -> dict:
        """
        Insert a blacklist entry without committing.

        The caller owns the transaction so the entry can be written atomically
        with the action that caused it.
        """
        query = (
            blacklist.insert()
            .values(
                email=_normalize_email(email),
                phone=phone,
                licenses=licenses or [],
                reason=reason,
                original_entity_type=original_entity_type,
                original_entity_id=original_entity_id,
                original_entity_name=original_entity_name,
                description=description,
                rejection_count=rejection_count,
                created_by=created_by,
                expires_at=expires_at,
            )
            .returning(blacklist)
        )
        result = await db.execute(query)
        entry = result.mappings().first()

        if not entry:
            raise ValueError("Failed to create blacklist entry")

        logger.info("credentials_blacklisted", reason=reason, entity=original_entity_name)
        return dict(entry)

    @staticmethod
    async def is_blacklisted(
        db: AsyncSession,
        email: str | None = None,
        phone: str | None = None,
        licenses: list[str] | None = None,
    ) -> dict | None:
        """
        Find an in-force entry matching any of the given credentials.

        Returns:
            The matching entry, or None if the credentials are clean
        """
        now = datetime.now(UTC)
        email = _normalize_email(email)

        credential_conditions: list = []
        if email:
            credential_conditions.append(blacklist.c.email == email)
        if phone:
            credential_conditions.append(blacklist.c.phone == phone)

        on_postgres = db.get_bind().dialect.name == "postgresql"
        if licenses and on_postgres:
            credential_conditions.append(license_overlap(licenses))

        if credential_conditions:
            result = await db.execute(
                select(blacklist).where(_in_force(now), or_(*credential_conditions)).limit(1)
            )
            entry = result.mappings().first()
            if entry:
                return dict(entry)

        if licenses and not on_postgres:
            # Plain JSON has no overlap operator outside PostgreSQL
            wanted = set(licenses)
            result = await db.execute(select(blacklist).where(_in_force(now)))
            for entry in result.mappings().all():
                if wanted.intersection(entry["licenses"] or []):
                    return dict(entry)

        return None

    @staticmethod
    async def list_entries(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 50,
        reason: str | None = None,
        is_active: bool | None = None,
    ) -> list[dict]:
        """List blacklist entries newest first."""
        conditions: list = []
        if reason:
            conditions.append(blacklist.c.reason == reason)
        if is_active is not None:
            conditions.append(blacklist.c.is_active == is_active)

        query = (
            select(blacklist)
            .where(and_(*conditions) if conditions else True)
            .order_by(blacklist.c.blacklisted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def get_entry(db: AsyncSession, entry_id: UUID) -> dict | None:
        """Get a blacklist entry by ID."""
        result = await db.execute(select(blacklist).where(blacklist.c.id == entry_id))
        entry = result.mappings().first()
        return dict(entry) if entry else None

    @staticmethod
    async def deactivate(db: AsyncSession, entry_id: UUID) -> dict | None:
        """Lift a blacklist entry without deleting its history."""
        query = (
            update(blacklist)
            .where(blacklist.c.id == entry_id)
            .values(is_active=False)
            .returning(blacklist)
        )
        result = await db.execute(query)
        entry = result.mappings().first()
        await db.commit()
        return dict(entry) if entry else None

    @staticmethod
    async def update_entry(db: AsyncSession, entry_id: UUID, values: dict) -> dict | None:
        """Update a blacklist entry. Only the given fields change."""
        if "email" in values:
            values["email"] = _normalize_email(values["email"])

        if not values:
            return await BlacklistService.get_entry(db, entry_id)

        query = (
            update(blacklist)
            .where(blacklist.c.id == entry_id)
            .values(**values)
            .returning(blacklist)
        )
        result = await db.execute(query)
        entry = result.mappings().first()
        await db.commit()
        return dict(entry) if entry else None

    @staticmethod
    async def get_stats(db: AsyncSession) -> dict:
        """Count entries overall and per reason."""
        active = func.sum(case((blacklist.c.is_active == True, 1), else_=0))  # noqa: E712
        query = select(
            blacklist.c.reason,
            func.count().label("entry_count"),
            active.label("active_count"),
        ).group_by(blacklist.c.reason)
        result = await db.execute(query)

        by_reason = {
            row.reason: {"count": row.entry_count, "active_count": int(row.active_count or 0)}
            for row in result.all()
        }
        total = sum(r["count"] for r in by_reason.values())
        active_total = sum(r["active_count"] for r in by_reason.values())
        return {
            "total": total,
            "active": active_total,
            "inactive": total - active_total,
            "by_reason": by_reason,
        }

    @staticmethod
    async def search(
        db: AsyncSession, term: str, skip: int = 0, limit: int = 10
    ) -> tuple[list[dict], int]:
        """
        Case-insensitive search over credentials, names and descriptions.

        Returns:
            The page of matching entries and the total number of matches
        """
        needle = term.strip().lower()
        condition = or_(
            func.lower(blacklist.c.email).contains(needle, autoescape=True),
            func.lower(blacklist.c.phone).contains(needle, autoescape=True),
            func.lower(blacklist.c.original_entity_name).contains(needle, autoescape=True),
            func.lower(blacklist.c.description).contains(needle, autoescape=True),
            func.lower(cast(blacklist.c.licenses, Text)).contains(needle, autoescape=True),
        )

        total = (
            await db.execute(select(func.count()).select_from(blacklist).where(condition))
        ).scalar_one()
        result = await db.execute(
            select(blacklist)
            .where(condition)
            .order_by(blacklist.c.blacklisted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [dict(row) for row in result.mappings().all()], total
