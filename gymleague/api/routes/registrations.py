"""Event registration route handlers (read-only listing for staff)."""

from typing import Optional

from fastapi import APIRouter, Depends

from gymleague.api.auth_dependencies import AuthenticatedUser, get_league_data, require_roles
from gymleague.api.routes import collection_response
from gymleague.models.schemas import CollectionResponse, RegistrationStatus, Role
from gymleague.services.league_data import LeagueData

router = APIRouter()


@router.get("/api/registrations", response_model=CollectionResponse)
async def list_registrations(
    event_id: Optional[str] = None,
    status: Optional[RegistrationStatus] = None,
    user: AuthenticatedUser = Depends(require_roles(Role.ADMIN, Role.GYM_ADMIN, Role.HOST, Role.COACH)),
    data: LeagueData = Depends(get_league_data),
):
    """Registrations newest first, optionally for one event or status."""
    if event_id is not None:
        data.registrations.event_id = event_id
    await data.registrations.load()
    items = data.registrations.by_status(status) if status is not None else None
    return collection_response(data.registrations, items)
