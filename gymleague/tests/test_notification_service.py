"""
Unit tests for notifications: scoping, read state and realtime inserts.
"""

import pytest
from unittest.mock import AsyncMock

from gymleague.services.notification_service import NotificationAccessor


def notification_row(notification_id, user_id, is_read=False, created_at="2024-01-01T00:00:00+00:00"):
    return {
        "id": notification_id,
        "user_id": user_id,
        "title": "Heads up",
        "message": "Something happened",
        "type": "info",
        "is_read": is_read,
        "action_url": None,
        "created_at": created_at,
    }


@pytest.mark.asyncio
async def test_demo_notifications_visible_and_mark_read(fallback_mode, storage, coach_profile):
    notifications = NotificationAccessor(fallback_mode, storage=storage, acting_user=coach_profile)
    await notifications.load()
    assert notifications.unread_count() == 2

    await notifications.mark_as_read("demo-notif-1")

    assert notifications.unread_count() == 1
    stored = next(r for r in storage.read_json("demo_notifications") if r["id"] == "demo-notif-1")
    assert stored["is_read"] is True


@pytest.mark.asyncio
async def test_mark_all_as_read(fallback_mode, storage):
    notifications = NotificationAccessor(fallback_mode, storage=storage)

    assert await notifications.mark_all_as_read() == 2
    assert notifications.unread_count() == 0


@pytest.mark.asyncio
async def test_other_users_notifications_hidden(fallback_mode, storage, coach_profile):
    notifications = NotificationAccessor(fallback_mode, storage=storage, acting_user=coach_profile)
    await notifications.add(notification_row("n-other", "someone-else"))
    await notifications.add(notification_row("n-mine", coach_profile.id))

    ids = {n.id for n in notifications.list()}

    assert "n-mine" in ids
    assert "n-other" not in ids


@pytest.mark.asyncio
async def test_remote_fetch_scoped_and_limited(remote_mode, mock_gateway, coach_profile):
    notifications = NotificationAccessor(remote_mode, gateway=mock_gateway, acting_user=coach_profile)

    await notifications.load()

    mock_gateway.select.assert_awaited_once_with(
        "notifications",
        columns="*",
        filters={"user_id": coach_profile.id},
        order_by="created_at",
        ascending=False,
        limit=10,
    )


@pytest.mark.asyncio
async def test_remote_without_user_fetches_nothing(remote_mode, mock_gateway):
    notifications = NotificationAccessor(remote_mode, gateway=mock_gateway)

    assert await notifications.load() == []
    mock_gateway.select.assert_not_awaited()


@pytest.mark.asyncio
async def test_realtime_insert_is_prepended(remote_mode, mock_gateway, coach_profile):
    mock_gateway.select.return_value = [notification_row("n1", coach_profile.id)]
    unsubscribe = AsyncMock()
    mock_gateway.subscribe_inserts.return_value = unsubscribe
    notifications = NotificationAccessor(remote_mode, gateway=mock_gateway, acting_user=coach_profile)
    await notifications.load()

    assert await notifications.subscribe() is True
    channel, table, callback = mock_gateway.subscribe_inserts.await_args.args[:3]
    assert table == "notifications"
    assert mock_gateway.subscribe_inserts.await_args.kwargs["row_filter"] == f"user_id=eq.{coach_profile.id}"

    callback(notification_row("n2", coach_profile.id, created_at="2024-02-01T00:00:00+00:00"))
    callback(notification_row("n2", coach_profile.id))
    callback({"id": "broken"})

    assert [n.id for n in notifications.list()] == ["n2", "n1"]

    await notifications.aclose()
    unsubscribe.assert_awaited_once()


@pytest.mark.asyncio
async def test_subscribe_is_noop_in_fallback(fallback_mode, storage, mock_gateway, coach_profile):
    notifications = NotificationAccessor(
        fallback_mode, storage=storage, gateway=mock_gateway, acting_user=coach_profile
    )

    assert await notifications.subscribe() is False
    mock_gateway.subscribe_inserts.assert_not_awaited()
