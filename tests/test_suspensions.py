"""Tests for the doctor suspension workflow."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_activity_logger
from app.main import app
from app.models import admin_activities, blacklist, doctor_suspensions, doctors, notifications
from app.services.activity_logger import ActivityLogger


async def count_records(db: AsyncSession, doctor_id: UUID) -> int:
    query = (
        select(func.count())
        .select_from(doctor_suspensions)
        .where(doctor_suspensions.c.doctor_id == doctor_id)
    )
    return (await db.execute(query)).scalar_one()


async def doctor_status(db: AsyncSession, doctor_id: UUID) -> str | None:
    result = await db.execute(select(doctors.c.status).where(doctors.c.id == doctor_id))
    return result.scalar_one_or_none()


def suspend_url(doctor_id) -> str:
    return f"/api/v1/doctors/{doctor_id}/suspend"


# ============================================================================
# Suspension count
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("existing", "at_warning", "will_delete", "standing"),
    [
        (0, False, False, "clear"),
        (4, False, False, "clear"),
        (5, True, False, "final"),
        (6, True, True, "final"),
    ],
)
async def test_suspension_count_flags(
    client: AsyncClient,
    auth_headers: dict,
    make_doctor,
    add_suspensions,
    existing,
    at_warning,
    will_delete,
    standing,
):
    """Warning starts at five records and the delete flag at six."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], existing)

    response = await client.get(
        f"/api/v1/doctors/{doctor['id']}/suspension-count", headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["doctor_id"] == str(doctor["id"])
    assert data["doctor_name"] == doctor["doctor_name"]
    assert data["suspension_count"] == existing
    assert data["warning_threshold"] == 5
    assert data["deletion_threshold"] == 6
    assert data["is_at_warning_threshold"] is at_warning
    assert data["next_suspension_will_delete"] is will_delete
    assert data["standing"] == standing


@pytest.mark.asyncio
async def test_suspension_count_unknown_doctor(client: AsyncClient, auth_headers: dict):
    """Counting for a missing doctor is a 404."""
    response = await client.get(
        f"/api/v1/doctors/{uuid4()}/suspension-count", headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["error"] == "NotFoundException"


@pytest.mark.asyncio
async def test_suspension_count_requires_auth(client: AsyncClient, make_doctor):
    """Suspension endpoints need a Bearer token."""
    doctor = await make_doctor()

    response = await client.get(f"/api/v1/doctors/{doctor['id']}/suspension-count")

    assert response.status_code == 401


# ============================================================================
# Normal suspension path
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("existing", [0, 1, 2, 3, 4])
async def test_suspend_adds_exactly_one_record(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    make_doctor,
    add_suspensions,
    existing,
):
    """Below the deletion threshold a suspension adds one record and flips status."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], existing)

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["Missed compliance deadline"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["deleted"] is False
    assert data["doctor"]["status"] == "suspended"
    assert data["suspension_count"] == existing + 1
    assert await count_records(db_session, doctor["id"]) == existing + 1
    assert await doctor_status(db_session, doctor["id"]) == "suspended"


@pytest.mark.asyncio
async def test_suspend_first_time_scenario(
    client: AsyncClient,
    auth_headers: dict,
    test_admin: dict,
    db_session: AsyncSession,
    make_doctor,
):
    """An approved doctor with no history is suspended for 30 days."""
    doctor = await make_doctor(status="approved")

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["late filings"], "duration": 30},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["doctor"]["status"] == "suspended"
    assert data["warning"] is None

    suspension = data["suspension"]
    assert suspension["status"] == "active"
    assert suspension["suspension_period"]["duration"] == 30
    assert suspension["suspension_period"]["end_date"] is not None
    assert suspension["reasons"] == [
        {"category": "administrative", "description": "late filings", "severity": "major"}
    ]
    assert suspension["suspended_by"] == str(test_admin["id"])
    assert suspension["reviewed_by"] == []
    assert suspension["appeal_status"] == "none"
    assert suspension["notification_sent"] is True
    assert suspension["doctor_notified"] is True
    assert suspension["patients_notified"] is False
    assert suspension["publicly_visible"] is False

    assert await count_records(db_session, doctor["id"]) == 1


@pytest.mark.asyncio
async def test_suspend_period_is_thirty_days_by_default(
    client: AsyncClient, auth_headers: dict, db_session: AsyncSession, make_doctor
):
    """Without a duration the end date is 30 days after the start."""
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers
    )

    assert response.status_code == 200
    record = (
        (
            await db_session.execute(
                select(doctor_suspensions).where(doctor_suspensions.c.doctor_id == doctor["id"])
            )
        )
        .mappings()
        .one()
    )
    assert record["duration_days"] == 30
    assert record["end_date"] - record["start_date"] == timedelta(days=30)


@pytest.mark.asyncio
async def test_indefinite_suspension(client: AsyncClient, auth_headers: dict, make_doctor):
    """duration -1 leaves the end date and duration empty."""
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["under investigation"], "duration": -1, "suspension_type": "investigation"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    period = response.json()["suspension"]["suspension_period"]
    assert period["end_date"] is None
    assert period["duration"] is None


@pytest.mark.asyncio
async def test_indefinite_suspension_ignores_end_date(
    client: AsyncClient, auth_headers: dict, make_doctor, db_session: AsyncSession
):
    """An end date sent with duration -1 is dropped; the suspension stays open-ended."""
    doctor = await make_doctor()
    end_date = datetime.now(UTC) + timedelta(days=10)

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["x"], "duration": -1, "end_date": end_date.isoformat()},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json()["suspension"]["suspension_period"]["end_date"] is None
    record = (
        (
            await db_session.execute(
                select(doctor_suspensions).where(doctor_suspensions.c.doctor_id == doctor["id"])
            )
        )
        .mappings()
        .one()
    )
    assert record["end_date"] is None
    assert record["duration_days"] is None


@pytest.mark.asyncio
async def test_explicit_end_date_wins(client: AsyncClient, auth_headers: dict, make_doctor):
    """An explicit end date overrides the computed one."""
    doctor = await make_doctor()
    end_date = (datetime.now(UTC) + timedelta(days=10)).replace(microsecond=0)

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["x"], "duration": 30, "end_date": end_date.isoformat()},
        headers=auth_headers,
    )

    assert response.status_code == 200
    returned = datetime.fromisoformat(response.json()["suspension"]["suspension_period"]["end_date"])
    assert returned.replace(tzinfo=None) == end_date.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_system_access_forces_all_impact_flags(
    client: AsyncClient, auth_headers: dict, db_session: AsyncSession, make_doctor
):
    """system_access=true persists all four impact flags as true."""
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]),
        json={
            "reasons": ["x"],
            "impact": {
                "patient_access": False,
                "appointment_scheduling": False,
                "prescription_writing": False,
                "system_access": True,
            },
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    record = (
        (
            await db_session.execute(
                select(doctor_suspensions).where(doctor_suspensions.c.doctor_id == doctor["id"])
            )
        )
        .mappings()
        .one()
    )
    assert record["patient_access"] is True
    assert record["appointment_scheduling"] is True
    assert record["prescription_writing"] is True
    assert record["system_access"] is True


@pytest.mark.asyncio
async def test_warning_when_reaching_warning_threshold(
    client: AsyncClient, auth_headers: dict, make_doctor, add_suspensions
):
    """The fifth suspension carries a warning."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], 4)

    response = await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["suspension_count"] == 5
    assert data["warning"] is not None
    assert "6" in data["warning"]


@pytest.mark.asyncio
async def test_no_warning_below_threshold(
    client: AsyncClient, auth_headers: dict, make_doctor, add_suspensions
):
    """The fourth suspension carries no warning."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], 3)

    response = await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["warning"] is None


# ============================================================================
# Validation
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize("reasons", [[], [""], ["   ", "\t"]])
async def test_blank_reasons_rejected(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    make_doctor,
    reasons,
):
    """Blank reasons are a 400 and nothing is written."""
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]), json={"reasons": reasons}, headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationException"
    assert await count_records(db_session, doctor["id"]) == 0
    assert await doctor_status(db_session, doctor["id"]) == "approved"


@pytest.mark.asyncio
async def test_malformed_request_is_400(client: AsyncClient, auth_headers: dict, make_doctor):
    """Schema violations answer 400 with details."""
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["x"], "severity": "apocalyptic"},
        headers=auth_headers,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "ValidationError"
    assert body["details"]


@pytest.mark.asyncio
async def test_suspend_unknown_doctor(client: AsyncClient, auth_headers: dict):
    """Suspending a missing doctor is a 404."""
    response = await client.post(suspend_url(uuid4()), json={"reasons": ["x"]}, headers=auth_headers)

    assert response.status_code == 404


# ============================================================================
# Escalation to deletion
# ============================================================================


@pytest.mark.asyncio
async def test_sixth_suspension_deletes_doctor(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    make_doctor,
    add_suspensions,
):
    """With five records the next suspension deletes the doctor and every record."""
    doctor = await make_doctor(status="suspended")
    await add_suspensions(doctor["id"], 5)

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["repeat violation"]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["deleted"] is True
    assert data["suspension_count"] == 6
    assert data["doctor"] is None
    assert data["suspension"] is None
    assert "6th" in data["message"]

    assert await doctor_status(db_session, doctor["id"]) is None
    assert await count_records(db_session, doctor["id"]) == 0

    lookup = await client.get(f"/api/v1/doctors/{doctor['id']}", headers=auth_headers)
    assert lookup.status_code == 404


@pytest.mark.asyncio
async def test_deleted_doctor_cannot_be_suspended_again(
    client: AsyncClient, auth_headers: dict, make_doctor, add_suspensions
):
    """Once deleted, a further suspension is a 404, not a second deletion."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], 5)

    first = await client.post(suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers)
    second = await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers
    )

    assert first.json()["deleted"] is True
    assert second.status_code == 404


@pytest.mark.asyncio
async def test_auto_deletion_blacklists_credentials(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    make_doctor,
    add_suspensions,
):
    """The deleted doctor's email is blacklisted and cannot register again."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], 5)

    await client.post(suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers)

    entry = (
        (await db_session.execute(select(blacklist).where(blacklist.c.email == doctor["email"])))
        .mappings()
        .one()
    )
    assert entry["reason"] == "doctor_deleted"
    assert entry["original_entity_id"] == doctor["id"]
    assert entry["is_active"] is True

    response = await client.post(
        "/api/v1/doctors/",
        json={
            "doctor_name": doctor["doctor_name"],
            "email": doctor["email"],
            "phone": "+15559999",
        },
        headers=auth_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_auto_deletion_audit_trail(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    make_doctor,
    add_suspensions,
):
    """Deletion logs SUSPEND_DOCTOR and DELETE_DOCTOR with the final record snapshot."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], 5)

    await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["repeat violation"]}, headers=auth_headers
    )

    rows = (await db_session.execute(select(admin_activities))).mappings().all()
    by_action = {row["action"]: row for row in rows}
    assert set(by_action) == {"SUSPEND_DOCTOR", "DELETE_DOCTOR"}

    delete_meta = by_action["DELETE_DOCTOR"]["metadata"]
    assert delete_meta["auto_deleted"] is True
    assert delete_meta["doctor_id"] == str(doctor["id"])
    assert delete_meta["final_suspension"]["reasons"][0]["description"] == "repeat violation"

    titles = {row["title"] for row in (await db_session.execute(select(notifications))).mappings()}
    assert "Doctor Blacklisted - 6th Suspension" in titles
    assert "Doctor Suspended" in titles


# ============================================================================
# Side effects
# ============================================================================


@pytest.mark.asyncio
async def test_suspension_is_logged(
    client: AsyncClient,
    auth_headers: dict,
    test_admin: dict,
    db_session: AsyncSession,
    make_doctor,
):
    """A suspension writes one SUSPEND_DOCTOR entry naming the doctor and admin."""
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]),
        json={"reasons": ["x"]},
        headers={**auth_headers, "User-Agent": "pytest-client"},
    )
    suspension_id = response.json()["suspension"]["id"]

    rows = (await db_session.execute(select(admin_activities))).mappings().all()
    assert len(rows) == 1
    entry = rows[0]
    assert entry["action"] == "SUSPEND_DOCTOR"
    assert entry["admin_id"] == test_admin["id"]
    assert entry["admin_name"] == "Test Admin"
    assert entry["user_agent"] == "pytest-client"
    assert entry["metadata"]["doctor_id"] == str(doctor["id"])
    assert entry["metadata"]["doctor_name"] == doctor["doctor_name"]
    assert entry["metadata"]["suspension_id"] == suspension_id


class FailingActivityLogger(ActivityLogger):
    """Activity logger whose storage always fails."""

    async def _write(self, db, values):
        raise RuntimeError("audit store unavailable")


@pytest.mark.asyncio
async def test_activity_log_failure_does_not_fail_suspension(
    client: AsyncClient,
    auth_headers: dict,
    db_session: AsyncSession,
    make_doctor,
):
    """The suspension succeeds even when the audit log cannot be written."""
    app.dependency_overrides[get_activity_logger] = FailingActivityLogger
    doctor = await make_doctor()

    response = await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["x"]}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["doctor"]["status"] == "suspended"
    assert await count_records(db_session, doctor["id"]) == 1
    logged = (
        await db_session.execute(select(func.count()).select_from(admin_activities))
    ).scalar_one()
    assert logged == 0


# ============================================================================
# History
# ============================================================================


@pytest.mark.asyncio
async def test_list_suspensions_newest_first(
    client: AsyncClient, auth_headers: dict, make_doctor, add_suspensions
):
    """History lists the newest suspension first."""
    doctor = await make_doctor()
    await add_suspensions(doctor["id"], 2)
    await client.post(
        suspend_url(doctor["id"]), json={"reasons": ["latest"]}, headers=auth_headers
    )

    response = await client.get(
        f"/api/v1/doctors/{doctor['id']}/suspensions", headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 3
    descriptions = [s["reasons"][0]["description"] for s in data["suspensions"]]
    assert descriptions == ["latest", "Past violation 2", "Past violation 1"]


@pytest.mark.asyncio
async def test_list_suspensions_unknown_doctor(client: AsyncClient, auth_headers: dict):
    """History for a missing doctor is a 404."""
    response = await client.get(f"/api/v1/doctors/{uuid4()}/suspensions", headers=auth_headers)

    assert response.status_code == 404
