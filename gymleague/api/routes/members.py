"""Member management route handlers (admin only for changes)."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from gymleague.api.auth_dependencies import (
    AuthenticatedUser,
    get_league_data,
    require_admin,
    require_roles,
)
from gymleague.api.routes import backend_http_error, collection_response, not_found
from gymleague.models.schemas import CollectionResponse, Member, Role, SetRoleRequest
from gymleague.services.league_data import LeagueData
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/members", response_model=CollectionResponse)
async def list_members(
    role: Optional[Role] = None,
    user: AuthenticatedUser = Depends(require_roles(Role.ADMIN, Role.GYM_ADMIN, Role.COACH)),
    data: LeagueData = Depends(get_league_data),
):
    await data.members.load()
    items = data.members.by_role(role) if role is not None else None
    return collection_response(data.members, items)


@router.post("/api/members", response_model=Member, status_code=201)
async def create_member(
    payload: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        return await data.members.add(payload)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/api/members/{member_id}", response_model=Member)
async def update_member(
    member_id: str,
    patch: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        member = await data.members.update(member_id, patch)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if member is None:
        raise not_found("Member", member_id)
    return member


@router.post("/api/members/{member_id}/toggle-active", response_model=Member)
async def toggle_member_active(
    member_id: str,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        member = await data.members.toggle_active(member_id)
    except BackendError as e:
        raise backend_http_error(e)
    if member is None:
        raise not_found("Member", member_id)
    return member


@router.post("/api/members/{member_id}/role", response_model=Member)
async def set_member_role(
    member_id: str,
    payload: SetRoleRequest,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        member = await data.members.set_role(member_id, payload.role)
    except BackendError as e:
        raise backend_http_error(e)
    if member is None:
        raise not_found("Member", member_id)
    logger.info(f"Member {member_id} role set to {member.role} by {user.id}")
    return member


@router.delete("/api/members/{member_id}")
async def delete_member(
    member_id: str,
    user: AuthenticatedUser = Depends(require_admin),
    data: LeagueData = Depends(get_league_data),
):
    try:
        removed = await data.members.remove(member_id)
    except BackendError as e:
        raise backend_http_error(e)
    if not removed:
        raise not_found("Member", member_id)
    return {"success": True}
