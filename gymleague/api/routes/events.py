"""Event route handlers."""

import logging
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from gymleague.api.auth_dependencies import (
    AuthenticatedUser,
    get_league_data,
    require_admin,
    require_roles,
    require_user,
)
from gymleague.api.routes import backend_http_error, collection_response, not_found
from gymleague.models.schemas import CollectionResponse, Event, EventStatus, Role
from gymleague.services.league_data import LeagueData
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()

EVENT_MANAGERS = (Role.ADMIN, Role.GYM_ADMIN, Role.HOST)


@router.get("/api/events", response_model=CollectionResponse)
async def list_events(
    status: Optional[EventStatus] = None,
    upcoming_from: Optional[date] = None,
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    """List events in date order, optionally by status or from a given day."""
    await data.events.load()
    items = data.events.list()
    if status is not None:
        items = data.events.by_status(status)
    if upcoming_from is not None:
        upcoming_ids = {event.id for event in data.events.upcoming(upcoming_from)}
        items = [event for event in items if event.id in upcoming_ids]
    return collection_response(data.events, items)


@router.post("/api/events", response_model=Event, status_code=201)
async def create_event(
    payload: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_roles(*EVENT_MANAGERS)),
    data: LeagueData = Depends(get_league_data),
):
    payload = dict(payload)
    payload.setdefault("created_by", user.id)
    try:
        return await data.events.add(payload)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/api/events/{event_id}", response_model=Event)
async def edit_event(
    event_id: str,
    patch: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_roles(*EVENT_MANAGERS)),
    data: LeagueData = Depends(get_league_data),
):
    """Apply an edit to an event; only the given fields change."""
    try:
        event = await data.events.edit(event_id, patch)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if event is None:
        raise not_found("Event", event_id)
    return event


@router.delete("/api/events/{event_id}")
async def delete_event(
    event_id: str,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        removed = await data.events.remove(event_id)
    except BackendError as e:
        raise backend_http_error(e)
    if not removed:
        raise not_found("Event", event_id)
    return {"success": True}
