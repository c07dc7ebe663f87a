"""Health check route."""

from typing import Optional

from fastapi import APIRouter, Depends

from gymleague.api.auth_dependencies import AuthenticatedUser, get_current_user_optional
from gymleague.models.schemas import HealthResponse
from gymleague.services.storage_mode import resolve_storage_mode

router = APIRouter()


@router.get("/api/health", response_model=HealthResponse)
async def health_check(user: Optional[AuthenticatedUser] = Depends(get_current_user_optional)):
    """Report which storage mode the caller (or an anonymous caller) is served from."""
    mode = resolve_storage_mode(user.id if user else None)
    if mode.is_remote:
        message = "Connected to Supabase backend"
    else:
        message = "Running in demo mode with local storage"
    return HealthResponse(status="healthy", storage_mode=mode.name, message=message)
