"""Gym route handlers."""

import logging
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
from gymleague.models.schemas import CollectionResponse, Gym, GymStatsResponse, Role
from gymleague.services.league_data import LeagueData
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/gyms", response_model=CollectionResponse)
async def list_gyms(
    approved: Optional[bool] = None,
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    """List gyms, optionally only approved or only pending ones."""
    await data.gyms.load()
    if approved is None:
        return collection_response(data.gyms)
    items = data.gyms.approved() if approved else data.gyms.pending()
    return collection_response(data.gyms, items)


@router.get("/api/gyms/stats", response_model=GymStatsResponse)
async def gym_stats(
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    await data.gyms.load()
    return data.gyms.stats()


@router.post("/api/gyms", response_model=Gym, status_code=201)
async def create_gym(
    payload: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_roles(Role.ADMIN, Role.GYM_ADMIN)),
    data: LeagueData = Depends(get_league_data),
):
    """Register a gym. Gyms created by gym admins start pending approval."""
    payload = dict(payload)
    if user.role != Role.ADMIN.value:
        payload["is_approved"] = False
        payload.setdefault("admin_id", user.id)
    try:
        return await data.gyms.add(payload)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/api/gyms/{gym_id}", response_model=Gym)
async def update_gym(
    gym_id: str,
    patch: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        gym = await data.gyms.update(gym_id, patch)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if gym is None:
        raise not_found("Gym", gym_id)
    return gym


@router.post("/api/gyms/{gym_id}/approve", response_model=Gym)
async def approve_gym(
    gym_id: str,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        gym = await data.gyms.approve(gym_id)
    except BackendError as e:
        raise backend_http_error(e)
    if gym is None:
        raise not_found("Gym", gym_id)
    logger.info(f"Gym {gym_id} approved by {user.id}")
    return gym


@router.post("/api/gyms/{gym_id}/reject")
async def reject_gym(
    gym_id: str,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    """Reject a pending gym (deletes it)."""
    try:
        await data.gyms.load()
        removed = await data.gyms.reject(gym_id)
    except BackendError as e:
        raise backend_http_error(e)
    if not removed:
        raise not_found("Gym", gym_id)
    logger.info(f"Gym {gym_id} rejected by {user.id}")
    return {"success": True}


@router.delete("/api/gyms/{gym_id}")
async def delete_gym(
    gym_id: str,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        removed = await data.gyms.remove(gym_id)
    except BackendError as e:
        raise backend_http_error(e)
    if not removed:
        raise not_found("Gym", gym_id)
    return {"success": True}
