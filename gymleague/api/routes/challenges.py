"""Challenge route handlers."""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from gymleague.api.auth_dependencies import (
    AuthenticatedUser,
    get_league_data,
    require_roles,
    require_user,
)
from gymleague.api.routes import backend_http_error, collection_response, not_found
from gymleague.models.schemas import Challenge, ChallengeDifficulty, CollectionResponse, Role
from gymleague.services.league_data import LeagueData
from gymleague.services.supabase_service import BackendError

logger = logging.getLogger(__name__)
router = APIRouter()

require_challenge_author = require_roles(Role.ADMIN, Role.COACH)


@router.get("/api/challenges", response_model=CollectionResponse)
async def list_challenges(
    difficulty: Optional[ChallengeDifficulty] = None,
    user: AuthenticatedUser = Depends(require_user),
    data: LeagueData = Depends(get_league_data),
):
    """Active challenges, optionally of one difficulty."""
    await data.challenges.load()
    if difficulty is not None:
        items = data.challenges.by_difficulty(difficulty)
    else:
        items = data.challenges.active()
    return collection_response(data.challenges, items)


@router.post("/api/challenges", response_model=Challenge, status_code=201)
async def create_challenge(
    payload: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_challenge_author),
    data: LeagueData = Depends(get_league_data),
):
    payload = dict(payload)
    payload.setdefault("created_by", user.id)
    try:
        return await data.challenges.add(payload)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/api/challenges/{challenge_id}", response_model=Challenge)
async def update_challenge(
    challenge_id: str,
    patch: Dict[str, Any] = Body(...),
    user: AuthenticatedUser = Depends(require_challenge_author),
    data: LeagueData = Depends(get_league_data),
):
    try:
        challenge = await data.challenges.update(challenge_id, patch)
    except BackendError as e:
        raise backend_http_error(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if challenge is None:
        raise not_found("Challenge", challenge_id)
    return challenge
