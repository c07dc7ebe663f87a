"""
Storage mode selection for the data-access layer.

An accessor is constructed with an explicit StorageMode: either Remote (with the
backend credentials it should use) or Fallback (local durable storage only).
The mode is never inferred by the accessor itself.
"""

from dataclasses import dataclass
from typing import Optional

from gymleague.services.settings_service import BackendSettings, get_backend_settings


@dataclass(frozen=True)
class BackendCredentials:
    """Endpoint and API key of the hosted backend, plus the caller's session token."""

    url: str
    api_key: str
    access_token: Optional[str] = None


@dataclass(frozen=True)
class StorageMode:
    """Remote(credentials) when credentials are set, Fallback otherwise."""

    credentials: Optional[BackendCredentials] = None

    @classmethod
    def remote(cls, credentials: BackendCredentials) -> "StorageMode":
        return cls(credentials=credentials)

    @classmethod
    def fallback(cls) -> "StorageMode":
        return cls(credentials=None)

    @property
    def is_remote(self) -> bool:
        return self.credentials is not None

    @property
    def name(self) -> str:
        return "remote" if self.is_remote else "fallback"


def is_demo_identity(user_id: Optional[str], settings: Optional[BackendSettings] = None) -> bool:
    """True when the identity carries the reserved demo prefix."""
    if not user_id:
        return False
    settings = settings or get_backend_settings()
    return user_id.startswith(settings.demo_id_prefix)


def resolve_storage_mode(
    user_id: Optional[str] = None,
    access_token: Optional[str] = None,
    settings: Optional[BackendSettings] = None,
) -> StorageMode:
    """
    Decide the storage mode for an acting identity.

    Remote mode requires a configured backend (non-empty URL and key) AND an
    identity without the demo prefix. Everything else uses fallback mode.

    Args:
        user_id: Acting identity id (None for an anonymous caller)
        access_token: Caller's backend session token, forwarded in remote mode
        settings: Backend settings (read from the environment when omitted)

    Returns:
        StorageMode for this identity
    """
    settings = settings or get_backend_settings()
    if not settings.is_backend_configured:
        return StorageMode.fallback()
    if is_demo_identity(user_id, settings):
        return StorageMode.fallback()
    return StorageMode.remote(
        BackendCredentials(
            url=settings.supabase_url,
            api_key=settings.supabase_anon_key,
            access_token=access_token,
        )
    )
