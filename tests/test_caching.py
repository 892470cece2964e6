"""Tests for Redis caching implementation."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.doctor_lifecycle import DoctorStatus
from app.core.redis_client import CacheManager
from app.schemas.doctors import DoctorCreate, DoctorUpdate
from app.services.doctor_service import DoctorService


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    result = cache_manager.get_json("test_key")
    assert result is None
    mock_redis.get.assert_called_once_with("test_key")

    # Test cache hit
    mock_redis.reset_mock()
    mock_redis.get.return_value = '{"name": "Test", "value": 123}'
    result = cache_manager.get_json("test_key")
    assert result == {"name": "Test", "value": 123}
    mock_redis.get.assert_called_once_with("test_key")


def test_cache_manager_set_json():
    """Test CacheManager set_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    test_data = {"name": "Test", "value": 123}

    # Test without TTL
    result = cache_manager.set_json("test_key", test_data)
    assert result is True
    mock_redis.set.assert_called_once()

    # Test with TTL
    mock_redis.reset_mock()
    result = cache_manager.set_json("test_key", test_data, ttl=300)
    assert result is True
    mock_redis.setex.assert_called_once()


def test_cache_manager_fails_open():
    """Redis errors never reach the caller."""
    mock_redis = MagicMock()
    mock_redis.get.side_effect = ConnectionError("redis down")
    mock_redis.setex.side_effect = ConnectionError("redis down")
    mock_redis.delete.side_effect = ConnectionError("redis down")
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.get_json("k") is None
    assert cache_manager.set_json("k", {"a": 1}, ttl=10) is False
    assert cache_manager.delete("k") is False


def test_cache_manager_delete_pattern():
    """Test CacheManager delete_pattern method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    mock_redis.keys.return_value = [
        "doctor:list:0:20:approved",
        "doctor:list:0:10:approved",
        "doctor:list:20:20:pending",
    ]
    mock_redis.delete.return_value = 3

    result = cache_manager.delete_pattern("doctor:list:*")

    mock_redis.keys.assert_called_once_with("doctor:list:*")
    assert result == 3


@pytest.mark.asyncio
async def test_doctor_lookup_is_cached(db_session: AsyncSession, make_doctor):
    """A database hit populates the cache; a cached doctor skips the database."""
    doctor = await make_doctor()
    cache = MagicMock()
    cache.get_json.return_value = None
    service = DoctorService(cache_manager=cache)

    fetched = await service.get_doctor_by_id(db_session, doctor["id"])

    assert fetched["id"] == doctor["id"]
    cache.set_json.assert_called_once()
    key, value = cache.set_json.call_args.args
    assert key == f"doctor:{doctor['id']}"
    assert value["email"] == doctor["email"]
    assert cache.set_json.call_args.kwargs["ttl"] == DoctorService.DOCTOR_CACHE_TTL

    cache.get_json.return_value = {"id": str(doctor["id"]), "doctor_name": "Cached"}
    cached = await service.get_doctor_by_id(db_session, doctor["id"])

    assert cached["doctor_name"] == "Cached"
    assert cache.set_json.call_count == 1


@pytest.mark.asyncio
async def test_doctor_update_invalidates_cache(db_session: AsyncSession, make_doctor):
    """Writes drop the doctor and every cached list."""
    doctor = await make_doctor()
    cache = MagicMock()
    service = DoctorService(cache_manager=cache)

    await service.update_doctor(db_session, doctor["id"], DoctorUpdate(department="Oncology"))

    cache.delete.assert_called_once_with(f"doctor:{doctor['id']}")
    cache.delete_pattern.assert_called_once_with("doctor:list:*")


@pytest.mark.asyncio
async def test_suspension_invalidates_cache(
    client, auth_headers: dict, make_doctor, monkeypatch
):
    """Suspending a doctor evicts it from the cache."""
    doctor = await make_doctor()
    evicted: list = []
    monkeypatch.setattr(
        DoctorService, "invalidate_doctor", lambda self, doctor_id: evicted.append(doctor_id)
    )

    response = await client.post(
        f"/api/v1/doctors/{doctor['id']}/suspend", json={"reasons": ["x"]}, headers=auth_headers
    )

    assert response.status_code == 200
    assert doctor["id"] in evicted


@pytest.mark.asyncio
async def test_doctor_list_is_cached(db_session: AsyncSession, make_doctor):
    """Lists are cached per filter set and served from the cache afterwards."""
    doctor = await make_doctor(status="pending")
    cache = MagicMock()
    cache.get_json.return_value = None
    service = DoctorService(cache_manager=cache)

    listed = await service.get_doctors(db_session, skip=0, limit=20, status=DoctorStatus.PENDING)

    assert [d["id"] for d in listed] == [doctor["id"]]
    cache.get_json.assert_called_once_with("doctor:list:0:20:pending:None")
    key, value = cache.set_json.call_args.args
    assert key == "doctor:list:0:20:pending:None"
    assert value == listed
    assert cache.set_json.call_args.kwargs["ttl"] == DoctorService.DOCTOR_LIST_CACHE_TTL

    cache.get_json.return_value = []
    cached = await service.get_doctors(db_session, skip=0, limit=20, status=DoctorStatus.PENDING)

    assert cached == []
    assert cache.set_json.call_count == 1


@pytest.mark.asyncio
async def test_new_doctor_invalidates_cached_lists(db_session: AsyncSession, sample_doctor_data):
    """Creating a doctor drops every cached list."""
    cache = MagicMock()
    service = DoctorService(cache_manager=cache)

    await service.create_doctor(db_session, DoctorCreate(**sample_doctor_data))

    cache.delete_pattern.assert_called_once_with("doctor:list:*")
