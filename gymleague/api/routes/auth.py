"""Authentication route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from gymleague.api.auth_dependencies import AuthenticatedUser, require_user
from gymleague.api.routes import limiter
from gymleague.models.schemas import AuthResponse, LoginRequest, SignupRequest, UserProfile
from gymleague.services.session_service import AuthenticationError, SessionProvider

logger = logging.getLogger(__name__)
router = APIRouter()


def _auth_response(provider: SessionProvider) -> AuthResponse:
    return AuthResponse(
        access_token=provider.access_token,
        token_type="bearer",
        is_demo=provider.is_demo_session,
        profile=provider.user,
    )


@router.post("/api/auth/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def login(request: Request, payload: LoginRequest):
    """Login with email and password (demo accounts included)."""
    provider = SessionProvider(remember_session=False)
    try:
        await provider.login(payload.email, payload.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=e.message)
    finally:
        await provider.aclose()
    if provider.error:
        logger.warning(f"Logged in {payload.email} without a profile: {provider.error}")
    return _auth_response(provider)


@router.post("/api/auth/signup", response_model=AuthResponse)
@limiter.limit("5/minute")
async def signup(request: Request, payload: SignupRequest):
    """Create an account and sign in."""
    provider = SessionProvider(remember_session=False)
    try:
        await provider.sign_up(payload.email, payload.password, payload.first_name, payload.last_name)
    except AuthenticationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        await provider.aclose()
    return _auth_response(provider)


@router.get("/api/auth/me", response_model=UserProfile)
async def get_me(user: AuthenticatedUser = Depends(require_user)):
    """Profile of the authenticated caller."""
    return user.profile


@router.post("/api/auth/logout")
async def logout(user: AuthenticatedUser = Depends(require_user)):
    """
    End the caller's session.

    Only the caller's own demo session is removed from local storage; backend
    tokens are simply discarded by the client.
    """
    if user.is_demo:
        provider = SessionProvider(remember_session=False)
        provider.user = user.profile
        await provider.logout()
    logger.info(f"User {user.id} logged out")
    return {"success": True}
