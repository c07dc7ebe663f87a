"""
Unit tests for the read-only registration listing.
"""

import pytest

from gymleague.services.registration_service import RegistrationAccessor


def registration_row(registration_id, event_id="e1", status="pending", registered_at="2024-03-01T00:00:00+00:00"):
    return {
        "id": registration_id,
        "event_id": event_id,
        "gymnast_id": "gy1",
        "status": status,
        "registered_at": registered_at,
        "approved_at": None,
        "approved_by": None,
        "rejection_reason": None,
        "payment_status": "pending",
        "notes": None,
        "created_at": registered_at,
        "updated_at": registered_at,
        "gymnast": {
            "id": "gy1",
            "user_id": "u1",
            "gym_id": "g1",
            "level": "Level 5",
            "created_at": registered_at,
            "updated_at": registered_at,
            "user": {"id": "u1", "first_name": "Emma", "last_name": "Davis"},
        },
    }


@pytest.mark.asyncio
async def test_remote_listing_joined_and_newest_first(remote_mode, mock_gateway, spy_storage):
    mock_gateway.select.return_value = [
        registration_row("r2", status="approved", registered_at="2024-03-02T00:00:00+00:00"),
        registration_row("r1"),
    ]
    registrations = RegistrationAccessor(remote_mode, storage=spy_storage, gateway=mock_gateway)

    records = await registrations.load()

    assert [r.id for r in records] == ["r2", "r1"]
    assert records[0].gymnast.user.first_name == "Emma"
    assert [r.id for r in registrations.by_status("approved")] == ["r2"]
    kwargs = mock_gateway.select.await_args.kwargs
    assert kwargs["order_by"] == "registered_at"
    assert kwargs["ascending"] is False
    assert "event:events(*)" in kwargs["columns"]
    spy_storage.read_json.assert_not_called()


@pytest.mark.asyncio
async def test_remote_listing_for_one_event(remote_mode, mock_gateway):
    registrations = RegistrationAccessor(remote_mode, gateway=mock_gateway, event_id="e7")

    await registrations.load()

    assert mock_gateway.select.await_args.kwargs["filters"] == {"event_id": "e7"}


@pytest.mark.asyncio
async def test_fallback_lists_nothing_and_is_read_only(fallback_mode, spy_storage, mock_gateway):
    registrations = RegistrationAccessor(fallback_mode, storage=spy_storage, gateway=mock_gateway)

    assert await registrations.load() == []
    with pytest.raises(NotImplementedError):
        await registrations.add({"event_id": "e1"})
    spy_storage.read_json.assert_not_called()
    spy_storage.write_json.assert_not_called()
    mock_gateway.select.assert_not_awaited()
