"""Gymnast roster route handlers (coaches and gym staff)."""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from gymleague.api.auth_dependencies import AuthenticatedUser, get_league_data, require_roles
from gymleague.api.routes import backend_http_error, collection_response, not_found
from gymleague.models.schemas import AwardPointsRequest, CollectionResponse, Gymnast, Role
from gymleague.services.league_data import LeagueData
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()

require_gym_staff = require_roles(Role.ADMIN, Role.GYM_ADMIN, Role.COACH)


@router.get("/api/gymnasts", response_model=CollectionResponse)
async def list_gymnasts(
    pending_only: bool = False,
    user: AuthenticatedUser = Depends(require_gym_staff),
    data: LeagueData = Depends(get_league_data),
):
    """Gymnasts of the caller's gym (all gyms for admins)."""
    await data.gymnasts.load()
    items = data.gymnasts.pending_approvals() if pending_only else None
    return collection_response(data.gymnasts, items)


@router.post("/api/gymnasts", response_model=Gymnast, status_code=201)
async def create_gymnast(
    payload: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_gym_staff),
    data: LeagueData = Depends(get_league_data),
):
    """Add a gymnast. Non-admin staff can only add to their own gym."""
    payload = dict(payload)
    if user.role != Role.ADMIN.value:
        if not user.profile.gym_id:
            raise HTTPException(status_code=403, detail="No gym assigned to this account")
        payload["gym_id"] = user.profile.gym_id
    try:
        return await data.gymnasts.add(payload)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/gymnasts/{gymnast_id}/approve", response_model=Gymnast)
async def approve_gymnast(
    gymnast_id: str,
    user: AuthenticatedUser = Depends(require_gym_staff),
    data: LeagueData = Depends(get_league_data),
):
    try:
        gymnast = await data.gymnasts.approve(gymnast_id, coach_id=user.id)
    except BackendError as e:
        raise backend_http_error(e)
    if gymnast is None:
        raise not_found("Gymnast", gymnast_id)
    logger.info(f"Gymnast {gymnast_id} approved by {user.id}")
    return gymnast


@router.post("/api/gymnasts/{gymnast_id}/reject")
async def reject_gymnast(
    gymnast_id: str,
    user: AuthenticatedUser = Depends(require_gym_staff),
    data: LeagueData = Depends(get_league_data),
):
    """Remove a gymnast still awaiting approval."""
    try:
        removed = await data.gymnasts.reject(gymnast_id)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not removed:
        raise not_found("Gymnast", gymnast_id)
    return {"success": True}


@router.post("/api/gymnasts/{gymnast_id}/points", response_model=Gymnast)
async def award_gymnast_points(
    gymnast_id: str,
    payload: AwardPointsRequest,
    user: AuthenticatedUser = Depends(require_gym_staff),
    data: LeagueData = Depends(get_league_data),
):
    try:
        gymnast = await data.gymnasts.award_points(gymnast_id, payload.points)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if gymnast is None:
        raise not_found("Gymnast", gymnast_id)
    return gymnast
