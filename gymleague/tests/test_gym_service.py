"""
Unit tests for gym approval flows.
"""

import pytest

from gymleague.services.gym_service import GymAccessor
from gymleague.services.supabase_service import BackendError


@pytest.mark.asyncio
async def test_create_then_approve_touches_only_that_gym(fallback_mode, storage):
    gyms = GymAccessor(fallback_mode, storage=storage)
    await gyms.load()
    others_before = {g.id: g.model_dump() for g in gyms.list()}

    created = await gyms.add({"name": "Test Gym", "city": "Springfield", "is_approved": False})

    listed = [g for g in gyms.list() if g.id == created.id]
    assert len(listed) == 1
    assert listed[0].is_approved is False
    assert created in gyms.pending()

    await gyms.approve(created.id)

    assert gyms.get(created.id).is_approved is True
    others_after = {g.id: g.model_dump() for g in gyms.list() if g.id != created.id}
    assert others_after == others_before


@pytest.mark.asyncio
async def test_approve_stamps_updated_at(fallback_mode, storage):
    gyms = GymAccessor(fallback_mode, storage=storage)
    created = await gyms.add(
        {"name": "Test Gym", "created_at": "2024-01-01T00:00:00+00:00", "updated_at": "2024-01-01T00:00:00+00:00"}
    )

    approved = await gyms.approve(created.id)

    assert approved.updated_at != "2024-01-01T00:00:00+00:00"
    assert approved.created_at == "2024-01-01T00:00:00+00:00"


@pytest.mark.asyncio
async def test_reject_deletes_gym(fallback_mode, storage):
    gyms = GymAccessor(fallback_mode, storage=storage)
    created = await gyms.add({"name": "Rejected Gym"})

    assert await gyms.reject(created.id) is True

    assert gyms.get(created.id) is None
    assert created.id not in [row["id"] for row in storage.read_json("demo_gyms")]


@pytest.mark.asyncio
async def test_toggle_approval(fallback_mode, storage):
    gyms = GymAccessor(fallback_mode, storage=storage)

    toggled = await gyms.toggle_approval("demo-gym-1")
    assert toggled.is_approved is False
    toggled = await gyms.toggle_approval("demo-gym-1")
    assert toggled.is_approved is True
    assert await gyms.toggle_approval("missing") is None


@pytest.mark.asyncio
async def test_stats(fallback_mode, storage):
    gyms = GymAccessor(fallback_mode, storage=storage)
    await gyms.add({"name": "Pending Gym"})

    assert gyms.stats() == {"total": 3, "approved": 2, "pending": 1}
    assert [g.name for g in gyms.pending()] == ["Pending Gym"]
    assert len(gyms.approved()) == 2


@pytest.mark.asyncio
async def test_remote_approve_failure_propagates(remote_mode, mock_gateway):
    mock_gateway.update.side_effect = BackendError("new row violates row-level security policy")
    gyms = GymAccessor(remote_mode, gateway=mock_gateway)

    with pytest.raises(BackendError, match="row-level security"):
        await gyms.approve("g1")

    mock_gateway.select.assert_not_awaited()
