"""Tests for the admin activity log and its role-based redaction."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import admin_activities
from app.services.activity_logger import ActivityAction, ActivityLogger, AuditContext
from app.services.admin_activity_service import redact_activity, serialize_activity

REGULAR_VIEWER = {"role": "Admin"}
SUPER_VIEWER = {"role": "Super Admin"}


@pytest.fixture
def activity_row() -> dict:
    return {
        "id": uuid4(),
        "admin_id": uuid4(),
        "admin_name": "Alice Root",
        "admin_role": "Super Admin",
        "action": "UPDATE_ADMIN",
        "details": "Updated admin Bob",
        "ip_address": "10.0.0.7",
        "user_agent": "Firefox",
        "metadata": {"target": "bob"},
        "created_at": datetime.now(UTC),
    }


def test_super_admin_sees_everything(activity_row):
    """Super Admins get entries untouched."""
    activity = serialize_activity(activity_row)

    assert redact_activity(activity, SUPER_VIEWER) == activity


def test_update_admin_is_anonymized_for_regular_admins(activity_row):
    """Admin updates reach regular admins with the actor masked."""
    redacted = redact_activity(serialize_activity(activity_row), REGULAR_VIEWER)

    assert redacted["admin_id"] == "anonymous"
    assert redacted["admin_name"] == "Admin User"
    assert redacted["admin_role"] == "Admin"
    assert redacted["ip_address"] == "***.***.***.***"
    assert redacted["user_agent"] == "Anonymous Browser"
    assert redacted["metadata"] == {}
    assert redacted["details"] == activity_row["details"]


@pytest.mark.parametrize(
    "action",
    ["CREATE_ADMIN", "DELETE_ADMIN", "PROMOTE_ADMIN", "DEMOTE_ADMIN", "EXPORT_DATA", "SYSTEM_MAINTENANCE"],
)
def test_sensitive_actions_hidden_from_regular_admins(activity_row, action):
    """Sensitive actions are dropped for regular admins."""
    activity_row["action"] = action

    assert redact_activity(serialize_activity(activity_row), REGULAR_VIEWER) is None


def test_ordinary_actions_unchanged(activity_row):
    """Doctor actions are visible as-is."""
    activity_row["action"] = "SUSPEND_DOCTOR"
    activity = serialize_activity(activity_row)

    assert redact_activity(activity, REGULAR_VIEWER) == activity


@pytest.mark.asyncio
async def test_activity_logger_writes_entry(db_session: AsyncSession, test_admin: dict):
    """The logger records actor, origin and metadata."""
    audit = AuditContext(admin=test_admin, ip_address="192.0.2.1", user_agent="pytest")

    written = await ActivityLogger().log_activity(
        db_session, audit, ActivityAction.LOGIN, "Logged in", {"email": test_admin["email"]}
    )

    assert written is True
    row = (await db_session.execute(admin_activities.select())).mappings().one()
    assert row["admin_id"] == test_admin["id"]
    assert row["admin_role"] == "Admin"
    assert row["ip_address"] == "192.0.2.1"
    assert row["metadata"] == {"email": test_admin["email"]}


@pytest.mark.asyncio
async def test_activity_logger_swallows_failures(db_session: AsyncSession, test_admin: dict):
    """A storage failure is reported as False, never raised."""

    class BrokenLogger(ActivityLogger):
        async def _write(self, db, values):
            raise RuntimeError("disk full")

    written = await BrokenLogger().log_activity(
        db_session, AuditContext(admin=test_admin), ActivityAction.LOGIN, "Logged in"
    )

    assert written is False


async def _seed(db: AsyncSession, admin: dict, actions: list[str], **overrides) -> None:
    for action in actions:
        await db.execute(
            insert(admin_activities).values(
                admin_id=admin["id"],
                admin_name=f"{admin['first_name']} {admin['last_name']}",
                admin_role=admin["role"],
                action=action,
                details=f"{action} performed",
                ip_address="10.0.0.1",
                user_agent="pytest",
                metadata={"note": action},
                **overrides,
            )
        )
    await db.commit()


@pytest.mark.asyncio
async def test_list_hides_sensitive_entries_for_regular_admin(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    test_super_admin: dict,
):
    """Totals and pages exclude what a regular admin may not see."""
    await _seed(
        db_session,
        test_super_admin,
        ["CREATE_ADMIN", "UPDATE_ADMIN", "SUSPEND_DOCTOR", "EXPORT_DATA", "APPROVE_DOCTOR"],
    )

    response = await client.get("/api/v1/admin-activities/", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total_items"] == 3
    actions = {a["action"] for a in data["activities"]}
    assert actions == {"UPDATE_ADMIN", "SUSPEND_DOCTOR", "APPROVE_DOCTOR"}

    masked = next(a for a in data["activities"] if a["action"] == "UPDATE_ADMIN")
    assert masked["admin_id"] == "anonymous"
    assert masked["admin_name"] == "Admin User"

    plain = next(a for a in data["activities"] if a["action"] == "SUSPEND_DOCTOR")
    assert plain["admin_id"] == str(test_super_admin["id"])


@pytest.mark.asyncio
async def test_list_shows_everything_to_super_admin(
    client: AsyncClient,
    super_admin_headers: dict,
    db_session: AsyncSession,
    test_super_admin: dict,
):
    """Super Admins see every entry unmasked."""
    await _seed(db_session, test_super_admin, ["CREATE_ADMIN", "UPDATE_ADMIN", "SUSPEND_DOCTOR"])

    response = await client.get("/api/v1/admin-activities/", headers=super_admin_headers)

    data = response.json()
    assert data["pagination"]["total_items"] == 3
    assert all(a["admin_id"] == str(test_super_admin["id"]) for a in data["activities"])


@pytest.mark.asyncio
async def test_list_pagination_and_filters(
    client: AsyncClient,
    super_admin_headers: dict,
    db_session: AsyncSession,
    test_super_admin: dict,
):
    """page/limit and the action filter are honored."""
    await _seed(db_session, test_super_admin, ["SUSPEND_DOCTOR"] * 5 + ["APPROVE_DOCTOR"] * 2)

    response = await client.get(
        "/api/v1/admin-activities/",
        params={"action": "SUSPEND_DOCTOR", "page": 2, "limit": 2},
        headers=super_admin_headers,
    )

    data = response.json()
    assert data["pagination"] == {
        "current_page": 2,
        "total_pages": 3,
        "total_items": 5,
        "items_per_page": 2,
    }
    assert len(data["activities"]) == 2
    assert {a["action"] for a in data["activities"]} == {"SUSPEND_DOCTOR"}


@pytest.mark.asyncio
async def test_list_for_one_admin(
    client: AsyncClient,
    super_admin_headers: dict,
    db_session: AsyncSession,
    test_admin: dict,
    test_super_admin: dict,
):
    """The per-admin view only returns that admin's entries."""
    await _seed(db_session, test_admin, ["APPROVE_DOCTOR", "SUSPEND_DOCTOR"])
    await _seed(db_session, test_super_admin, ["CREATE_ADMIN"])

    response = await client.get(
        f"/api/v1/admin-activities/admin/{test_admin['id']}", headers=super_admin_headers
    )

    data = response.json()
    assert data["pagination"]["total_items"] == 2
    assert {a["admin_id"] for a in data["activities"]} == {str(test_admin["id"])}


@pytest.mark.asyncio
async def test_stats(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    test_admin: dict,
    test_super_admin: dict,
):
    """Stats count by action and admin, with the viewer's redaction applied."""
    await _seed(db_session, test_admin, ["SUSPEND_DOCTOR", "SUSPEND_DOCTOR", "APPROVE_DOCTOR"])
    await _seed(db_session, test_super_admin, ["CREATE_ADMIN", "UPDATE_ADMIN"])
    await _seed(
        db_session,
        test_admin,
        ["REJECT_DOCTOR"],
        created_at=datetime.now(UTC) - timedelta(days=20),
    )

    response = await client.get(
        "/api/v1/admin-activities/stats", params={"period": "7d"}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["period"] == "7d"
    assert data["total_activities"] == 4

    by_action = {item["key"]: item["count"] for item in data["activities_by_action"]}
    assert by_action == {"SUSPEND_DOCTOR": 2, "APPROVE_DOCTOR": 1, "UPDATE_ADMIN": 1}

    by_admin = {item["key"]: item["count"] for item in data["activities_by_admin"]}
    assert by_admin == {"Test Admin": 3}

    assert len(data["recent_activities"]) == 4


@pytest.mark.asyncio
async def test_stats_unknown_period_falls_back(
    client: AsyncClient, auth_headers: dict, test_admin: dict
):
    """An unknown period is treated as 7d."""
    response = await client.get(
        "/api/v1/admin-activities/stats", params={"period": "1y"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["period"] == "7d"
