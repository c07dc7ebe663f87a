"""
Authentication and authorization dependencies for FastAPI routes.

Bearer tokens are either a demo session id (fallback mode) or a backend JWT,
which is verified with the backend auth service. Role checks run here, on the
server, before any route touches a collection.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from gymleague.models.schemas import Role, UserProfile
from gymleague.services.league_data import LeagueData
from gymleague.services.session_service import find_demo_profile
from gymleague.services.settings_service import get_backend_settings
from gymleague.services.storage_mode import BackendCredentials, is_demo_identity
from gymleague.services.supabase_service import BackendError, get_supabase_gateway

logger = logging.getLogger(__name__)

security = HTTPBearer()


@dataclass
class AuthenticatedUser:
    """Caller identity resolved from the bearer token."""

    profile: UserProfile
    access_token: str
    is_demo: bool = False

    @property
    def id(self) -> str:
        return self.profile.id

    @property
    def role(self) -> str:
        return self.profile.role


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthenticatedUser:
    """
    Dependency to get the current authenticated user from the bearer token.

    Raises:
        HTTPException: If the token is invalid or has no profile
    """
    token = credentials.credentials
    settings = get_backend_settings()

    if is_demo_identity(token, settings):
        profile = find_demo_profile(token)
        if profile is None:
            raise _unauthorized("Invalid authentication token")
        return AuthenticatedUser(profile=profile, access_token=token, is_demo=True)

    if not settings.is_backend_configured:
        raise _unauthorized("Invalid authentication token")

    gateway = get_supabase_gateway(
        BackendCredentials(
            url=settings.supabase_url, api_key=settings.supabase_anon_key, access_token=token
        )
    )
    try:
        identity = await gateway.get_user(token)
        row = await gateway.select_one("user_profiles", "id", identity.id) if identity else None
    except BackendError as e:
        if e.is_network_error:
            logger.error(f"Could not verify token: {e.message}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Authentication service unavailable")
        raise _unauthorized("Invalid authentication token")

    if identity is None:
        raise _unauthorized("Invalid authentication token")
    if row is None:
        raise _unauthorized("User profile not found")
    return AuthenticatedUser(profile=UserProfile.model_validate(row), access_token=token)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
) -> Optional[AuthenticatedUser]:
    """Like get_current_user, but None when no valid token is provided."""
    if credentials is None:
        return None
    try:
        return await get_current_user(credentials)
    except HTTPException:
        return None


async def require_user(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    """Require any authenticated user."""
    return user


def require_roles(*roles: Role):
    """Build a dependency that admits only the given roles."""
    allowed = {Role(role).value for role in roles}

    async def _dep(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if user.role not in allowed:
            logger.info(f"User {user.id} with role {user.role} denied; requires {sorted(allowed)}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return _dep


require_admin = require_roles(Role.ADMIN)


async def get_league_data(
    user: AuthenticatedUser = Depends(get_current_user),
) -> AsyncIterator[LeagueData]:
    """Accessor set for the caller, closed when the request finishes."""
    data = LeagueData.for_user(user.profile, access_token=user.access_token)
    try:
        yield data
    finally:
        await data.aclose()
