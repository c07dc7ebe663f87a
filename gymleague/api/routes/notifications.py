"""Notification route handlers. Callers only ever see their own notifications."""

import logging

from fastapi import APIRouter, Depends

from gymleague.api.auth_dependencies import AuthenticatedUser, get_league_data, require_user
from gymleague.api.routes import backend_http_error, collection_response, not_found
from gymleague.models.schemas import CollectionResponse, Notification, UnreadCountResponse
from gymleague.services.league_data import LeagueData
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/notifications", response_model=CollectionResponse)
async def get_notifications(
    unread_only: bool = False,
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    """Latest notifications for the caller."""
    await data.notifications.load()
    items = [n for n in data.notifications.list() if not n.is_read] if unread_only else None
    return collection_response(data.notifications, items)


@router.get("/api/notifications/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    await data.notifications.load()
    return {"count": data.notifications.unread_count()}


@router.put("/api/notifications/mark-all-read")
async def mark_all_notifications_as_read(
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    try:
        count = await data.notifications.mark_all_as_read()
    except BackendError as e:
        raise backend_http_error(e)
    return {"success": True, "count": count}


@router.put("/api/notifications/{notification_id}/read", response_model=Notification)
async def mark_notification_as_read(
    notification_id: str,
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    """Mark one of the caller's notifications as read."""
    await data.notifications.load()
    if data.notifications.get_visible(notification_id) is None:
        raise not_found("Notification", notification_id)
    try:
        updated = await data.notifications.mark_as_read(notification_id)
    except BackendError as e:
        raise backend_http_error(e)
    if updated is None:
        raise not_found("Notification", notification_id)
    return updated
