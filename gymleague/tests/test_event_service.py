"""
Unit tests for event editing and listing.
"""

from datetime import date

import pytest

from gymleague.services.event_service import EventAccessor

NEW_EVENT = {
    "title": "Summer Invitational",
    "event_date": "2024-07-10",
    "location": "Elite Gymnastics Center",
    "host_gym_id": "demo-gym-1",
    "registration_deadline": "2024-06-30",
    "max_participants": 100,
    "entry_fee": 25,
    "created_by": "demo-admin-id",
}


@pytest.mark.asyncio
async def test_edit_entry_fee_leaves_other_fields(fallback_mode, storage):
    events = EventAccessor(fallback_mode, storage=storage)
    created = await events.add(NEW_EVENT)

    edited = await events.edit(created.id, {"entry_fee": 30})

    assert edited.entry_fee == 30
    assert edited.max_participants == 100
    before = created.model_dump(exclude={"entry_fee", "updated_at"})
    after = events.get(created.id).model_dump(exclude={"entry_fee", "updated_at"})
    assert after == before


@pytest.mark.asyncio
async def test_events_listed_by_date(fallback_mode, storage):
    events = EventAccessor(fallback_mode, storage=storage)
    await events.add({**NEW_EVENT, "event_date": "2024-01-05"})

    dates = [e.event_date for e in await events.load()]

    assert dates == sorted(dates)


@pytest.mark.asyncio
async def test_any_status_can_follow_any_other(fallback_mode, storage):
    events = EventAccessor(fallback_mode, storage=storage)
    await events.load()

    await events.set_status("demo-event-1", "completed")
    reopened = await events.set_status("demo-event-1", "draft")

    assert reopened.status == "draft"
    assert [e.id for e in events.by_status("open")] == ["demo-event-2"]


@pytest.mark.asyncio
async def test_invalid_status_rejected(fallback_mode, storage):
    events = EventAccessor(fallback_mode, storage=storage)
    await events.load()

    with pytest.raises(ValueError):
        await events.edit("demo-event-1", {"status": "postponed"})


@pytest.mark.asyncio
async def test_upcoming(fallback_mode, storage):
    events = EventAccessor(fallback_mode, storage=storage)
    await events.load()

    assert [e.id for e in events.upcoming(date(2024, 5, 1))] == ["demo-event-2"]
    assert len(events.upcoming(date(2024, 1, 1))) == 2


@pytest.mark.asyncio
async def test_remote_fetch_embeds_gym_and_creator(remote_mode, mock_gateway):
    events = EventAccessor(remote_mode, gateway=mock_gateway)

    await events.load()

    kwargs = mock_gateway.select.await_args.kwargs
    assert "host_gym:gyms(id,name,city)" in kwargs["columns"]
    assert "creator:user_profiles(id,first_name,last_name)" in kwargs["columns"]
    assert kwargs["order_by"] == "event_date"
    assert kwargs["ascending"] is True
