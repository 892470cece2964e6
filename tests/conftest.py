import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

# Settings are read at import time, so the test database must be chosen first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")  # pragma: allowlist secret
os.environ.setdefault("LOG_FORMAT", "console")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from dotenv import load_dotenv  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import insert  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

# Load environment variables from .env file
load_dotenv()

from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.database import get_db  # noqa: E402
from app.dependencies import get_cache_manager  # noqa: E402
from app.main import app  # noqa: E402
from app.models import admins, doctor_suspensions, doctors, metadata  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "correct-horse-battery"  # pragma: allowlist secret


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client. Redis is replaced by no cache at all."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_manager] = lambda: None

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _insert_admin(db: AsyncSession, role: str, email: str, is_active: bool = True) -> dict:
    admin_id = uuid4()
    values = {
        "id": admin_id,
        "first_name": "Test",
        "last_name": "Super" if role == "Super Admin" else "Admin",
        "email": email,
        "password_hash": get_password_hash(TEST_PASSWORD),
        "role": role,
        "is_active": is_active,
    }
    await db.execute(insert(admins).values(**values))
    await db.commit()
    return values


@pytest.fixture
def admin_password() -> str:
    """Password every test admin is created with."""
    return TEST_PASSWORD


@pytest.fixture
def make_admin(db_session: AsyncSession) -> Callable[..., Awaitable[dict]]:
    """Factory inserting an admin directly."""

    async def _make_admin(role: str = "Admin", email: str = "other@example.com", **kwargs) -> dict:
        return await _insert_admin(db_session, role, email, **kwargs)

    return _make_admin


@pytest_asyncio.fixture
async def test_admin(db_session: AsyncSession) -> dict:
    """A regular admin."""
    return await _insert_admin(db_session, "Admin", "admin@example.com")


@pytest_asyncio.fixture
async def test_super_admin(db_session: AsyncSession) -> dict:
    """A Super Admin."""
    return await _insert_admin(db_session, "Super Admin", "root@example.com")


def _headers_for(admin: dict) -> dict:
    token = create_access_token(
        data={"sub": str(admin["id"]), "role": admin["role"]},
        expires_delta=timedelta(minutes=30),
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_admin: dict) -> dict:
    """Create authentication headers for a regular admin."""
    return _headers_for(test_admin)


@pytest.fixture
def super_admin_headers(test_super_admin: dict) -> dict:
    """Create authentication headers for a Super Admin."""
    return _headers_for(test_super_admin)


@pytest.fixture
def sample_doctor_data() -> dict:
    """Sample doctor payload for the create endpoint."""
    return {
        "doctor_name": "Dr. Jane Smith",
        "email": "jane.smith@example.com",
        "phone": "+15550100",
        "specialization": ["Cardiology"],
        "licenses": ["LIC-1001"],
        "department": "Cardiology",
        "about": "Cardiologist with 10 years of experience",
    }


@pytest.fixture
def make_doctor(db_session: AsyncSession) -> Callable[..., Awaitable[dict]]:
    """Factory inserting a doctor directly."""

    async def _make_doctor(status: str = "approved", **overrides) -> dict:
        doctor_id = uuid4()
        values = {
            "id": doctor_id,
            "doctor_name": f"Dr. Test {doctor_id.hex[:6]}",
            "email": f"doctor-{doctor_id.hex[:8]}@example.com",
            "phone": f"+1555{doctor_id.int % 10_000_000:07d}",
            "specialization": ["General Practice"],
            "licenses": [f"LIC-{doctor_id.hex[:8]}"],
            "status": status,
            "verified": status == "approved",
            **overrides,
        }
        await db_session.execute(insert(doctors).values(**values))
        await db_session.commit()
        return values

    return _make_doctor


@pytest.fixture
def add_suspensions(db_session: AsyncSession) -> Callable[[UUID, int], Awaitable[None]]:
    """Factory inserting past suspension records for a doctor."""

    async def _add_suspensions(doctor_id: UUID, count: int, status: str = "lifted") -> None:
        now = datetime.now(UTC)
        for i in range(count):
            start = now - timedelta(days=400 - i * 60)
            await db_session.execute(
                insert(doctor_suspensions).values(
                    doctor_id=doctor_id,
                    suspension_type="temporary",
                    status=status,
                    severity="minor",
                    reasons=[
                        {
                            "category": "administrative",
                            "description": f"Past violation {i + 1}",
                            "severity": "minor",
                        }
                    ],
                    start_date=start,
                    end_date=start + timedelta(days=30),
                    duration_days=30,
                    suspended_by=uuid4(),
                )
            )
        await db_session.commit()

    return _add_suspensions
