"""
Session/identity provider.

Tracks the current authenticated identity and its profile record. A demo
session (fixed demo credentials, or a signup while the backend is not
configured) is persisted in local storage under `demo_user_<id>` (and, for a
client that remembers its session, under `demo_user`) and always runs in
fallback mode; any other session is a backend session whose profile is
loaded from `user_profiles`.
"""

import asyncio
import logging
import time
from typing import Any, Dict, Optional, Set

from gymleague.models.schemas import Role, UserProfile
from gymleague.services.local_storage import LocalStorage, get_local_storage
from gymleague.services.settings_service import BackendSettings, get_backend_settings
from gymleague.services.storage_mode import (
    BackendCredentials,
    StorageMode,
    is_demo_identity,
    resolve_storage_mode,
)
from gymleague.services.supabase_service import (
    AuthIdentity,
    BackendError,
    SupabaseGateway,
    get_supabase_gateway,
)
from gymleague.utils.constants import DEMO_PASSWORD, DEMO_SESSION_KEY_PREFIX, DEMO_USER_KEY
from gymleague.utils.datetime_utils import utcnow_iso

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Supabase credentials are not configured."
PROFILE_LOAD_FAILED_MESSAGE = "Failed to load user profile"
EMAIL_NOT_CONFIRMED = "Email not confirmed"

_DEMO_USER_FIELDS: Dict[str, Dict[str, Any]] = {
    "admin@demo.com": {
        "id": "demo-admin-id",
        "first_name": "League",
        "last_name": "Administrator",
        "role": Role.ADMIN,
        "gym_id": None,
    },
    "coach@demo.com": {
        "id": "demo-coach-id",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "role": Role.COACH,
        "gym_id": "demo-gym-id",
    },
    "gymnast@demo.com": {
        "id": "demo-gymnast-id",
        "first_name": "Emma",
        "last_name": "Davis",
        "role": Role.GYMNAST,
        "gym_id": "demo-gym-id",
    },
}

DEMO_USERS = tuple(_DEMO_USER_FIELDS)


class AuthenticationError(Exception):
    """Login or signup failed; the message is shown to the user as-is."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def demo_session_key(user_id: str) -> str:
    return f"{DEMO_SESSION_KEY_PREFIX}{user_id}"


def demo_profile(email: str) -> Optional[UserProfile]:
    """Fresh profile for one of the fixed demo accounts."""
    fields = _DEMO_USER_FIELDS.get(email)
    if fields is None:
        return None
    now = utcnow_iso()
    return UserProfile(email=email, is_active=True, created_at=now, updated_at=now, **fields)


def find_demo_profile(user_id: str, storage: Optional[LocalStorage] = None) -> Optional[UserProfile]:
    """
    Resolve a demo session id to its profile.

    Checks the fixed demo accounts first, then the entry stored for that id
    (which covers demo signups).
    """
    for email, fields in _DEMO_USER_FIELDS.items():
        if fields["id"] == user_id:
            return demo_profile(email)
    storage = storage or get_local_storage()
    try:
        stored = storage.read_json(demo_session_key(user_id))
        profile = UserProfile.model_validate(stored) if stored else None
    except ValueError as e:
        logger.warning(f"Ignoring unreadable demo session {user_id}: {e}")
        return None
    if profile is not None and profile.id == user_id:
        return profile
    return None


class SessionProvider:
    """
    Current identity, its profile, and the login/signup/logout flows.

    Attributes:
        user: Profile of the signed-in user (None when logged out or when the
            profile could not be loaded)
        identity: Backend auth identity (None for demo sessions)
        is_loading: True until initialize() settles and during login/signup
        error: Last user-facing error message

    Args:
        remember_session: Also store the demo session as this client's current
            session (restored by initialize). API handlers pass False.
    """

    def __init__(
        self,
        settings: Optional[BackendSettings] = None,
        storage: Optional[LocalStorage] = None,
        gateway: Optional[SupabaseGateway] = None,
        remember_session: bool = True,
    ):
        self.settings = settings or get_backend_settings()
        self.remember_session = remember_session
        self.user: Optional[UserProfile] = None
        self.identity: Optional[AuthIdentity] = None
        self.is_loading = True
        self.error: Optional[str] = None
        self._storage = storage
        self._gateway = gateway
        self._auth_subscription: Any = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def storage(self) -> LocalStorage:
        if self._storage is None:
            self._storage = get_local_storage()
        return self._storage

    @property
    def gateway(self) -> SupabaseGateway:
        if self._gateway is None:
            if not self.settings.is_backend_configured:
                raise RuntimeError(NOT_CONFIGURED_MESSAGE)
            self._gateway = get_supabase_gateway(
                BackendCredentials(url=self.settings.supabase_url, api_key=self.settings.supabase_anon_key)
            )
        return self._gateway

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def is_demo_session(self) -> bool:
        return self.user is not None and is_demo_identity(self.user.id, self.settings)

    @property
    def access_token(self) -> Optional[str]:
        """Bearer token for API callers: the demo id, or the backend JWT."""
        if self.is_demo_session:
            return self.user.id
        return self.identity.access_token if self.identity else None

    def storage_mode(self) -> StorageMode:
        user_id = self.user.id if self.user else (self.identity.id if self.identity else None)
        return resolve_storage_mode(user_id, self.identity.access_token if self.identity else None, self.settings)

    def _start_demo_session(self, profile: UserProfile) -> UserProfile:
        logger.info(f"Using demo mode for {profile.email}")
        self.user = profile
        self.identity = None
        stored = profile.model_dump(mode="json")
        self.storage.write_json(demo_session_key(profile.id), stored)
        if self.remember_session:
            self.storage.write_json(DEMO_USER_KEY, stored)
        return profile

    def _new_demo_id(self) -> str:
        stamp = int(time.time() * 1000)
        while self.storage.get_item(demo_session_key(f"{self.settings.demo_id_prefix}{stamp}")) is not None:
            stamp += 1
        return f"{self.settings.demo_id_prefix}{stamp}"

    def _restore_demo_session(self) -> Optional[UserProfile]:
        try:
            stored = self.storage.read_json(DEMO_USER_KEY)
            if stored is None:
                return None
            profile = UserProfile.model_validate(stored)
        except ValueError as e:
            logger.warning(f"Error parsing demo user, removing: {e}")
            self.storage.remove_item(DEMO_USER_KEY)
            return None
        logger.info(f"Found demo user in local storage: {profile.email}")
        return profile

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    async def initialize(self) -> Optional[UserProfile]:
        """
        Establish the session at startup.

        A persisted demo session wins. Otherwise the backend is asked for an
        existing session under a bounded wait; loading is cleared whatever the
        outcome so callers never wait indefinitely.
        """
        self.is_loading = True
        try:
            demo_user = self._restore_demo_session()
            if demo_user is not None:
                self.user = demo_user
                return self.user

            if not self.settings.is_backend_configured:
                logger.info("Backend not configured; starting logged out")
                return None

            try:
                await asyncio.wait_for(self._bootstrap(), timeout=self.settings.session_bootstrap_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Session check did not resolve within {self.settings.session_bootstrap_timeout}s"
                )
            except BackendError as e:
                logger.error(f"Error checking existing session: {e.message}")
            return self.user
        finally:
            self.is_loading = False

    async def _bootstrap(self) -> None:
        if self._auth_subscription is None:
            self._auth_subscription = await self.gateway.on_auth_state_change(self._on_auth_state_change)
        identity = await self.gateway.get_session_identity()
        logger.debug(f"Existing session: {identity.id if identity else None}")
        if identity is not None:
            self.identity = identity
            await self.load_profile(identity)

    def _on_auth_state_change(self, event: str, identity: Optional[AuthIdentity]) -> None:
        logger.debug(f"Auth state change: {event}")
        if self.is_demo_session:
            return
        if identity is None:
            self.identity = None
            self.user = None
            self.is_loading = False
            return
        self.identity = identity
        task = asyncio.get_running_loop().create_task(self.load_profile(identity))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def load_profile(self, identity: AuthIdentity) -> Optional[UserProfile]:
        """
        Load (or create) the profile for a backend identity.

        A missing profile is synthesized from the identity and persisted. Any
        failure leaves the session signed in with no profile and sets `error`.
        """
        try:
            row = await asyncio.wait_for(
                self.gateway.select_one("user_profiles", "id", identity.id),
                timeout=self.settings.profile_query_timeout,
            )
            if row is None:
                logger.info(f"No user profile found for user {identity.id}; creating one")
                profile = self._default_profile(identity)
                await self.gateway.insert("user_profiles", profile.model_dump(mode="json"))
            else:
                profile = UserProfile.model_validate(row)
        except asyncio.TimeoutError:
            logger.error(f"Profile query for {identity.id} timed out")
            self.user = None
            self.error = PROFILE_LOAD_FAILED_MESSAGE
            return None
        except (BackendError, ValueError) as e:
            logger.error(f"Error loading user profile for {identity.id}: {e}")
            self.user = None
            self.error = PROFILE_LOAD_FAILED_MESSAGE
            return None
        self.user = profile
        return profile

    @staticmethod
    def _default_profile(identity: AuthIdentity) -> UserProfile:
        metadata = identity.metadata or {}
        email = identity.email or ""
        now = utcnow_iso()
        return UserProfile(
            id=identity.id,
            email=email,
            first_name=metadata.get("first_name") or email.split("@")[0] or "New",
            last_name=metadata.get("last_name") or "User",
            role=Role.GYMNAST,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Login / signup / logout
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> Optional[UserProfile]:
        """
        Sign in with email and password.

        Demo credentials always start a demo session. Otherwise the backend is
        used; an unconfirmed demo account with the demo password also falls
        back to its demo profile.

        Raises:
            AuthenticationError: With the backend's message, or NOT_CONFIGURED_MESSAGE
        """
        self.is_loading = True
        self.error = None
        try:
            profile = demo_profile(email) if password == DEMO_PASSWORD else None
            if profile is not None:
                return self._start_demo_session(profile)

            if not self.settings.is_backend_configured:
                raise AuthenticationError(NOT_CONFIGURED_MESSAGE)

            try:
                identity = await self.gateway.sign_in(email, password)
            except BackendError as e:
                fallback = demo_profile(email)
                if EMAIL_NOT_CONFIRMED in e.message and password == DEMO_PASSWORD and fallback:
                    return self._start_demo_session(fallback)
                raise AuthenticationError(e.message) from e

            logger.info(f"Backend login successful for {email}")
            self.identity = identity
            return await self.load_profile(identity)
        except AuthenticationError as e:
            logger.warning(f"Login failed for {email}: {e.message}")
            self.error = e.message
            raise
        finally:
            self.is_loading = False

    async def sign_up(self, email: str, password: str, first_name: str, last_name: str) -> Optional[UserProfile]:
        """
        Create an account and sign in.

        With no backend configured, a demo gymnast profile is created and
        persisted locally instead.

        Raises:
            AuthenticationError: The backend rejected the signup or sign-in
        """
        self.is_loading = True
        self.error = None
        try:
            if not self.settings.is_backend_configured:
                now = utcnow_iso()
                profile = UserProfile(
                    id=self._new_demo_id(),
                    email=email,
                    first_name=first_name,
                    last_name=last_name,
                    role=Role.GYMNAST,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                )
                return self._start_demo_session(profile)

            try:
                identity = await self.gateway.sign_up(email, password)
                now = utcnow_iso()
                await self.gateway.insert(
                    "user_profiles",
                    {
                        "id": identity.id,
                        "email": email,
                        "first_name": first_name,
                        "last_name": last_name,
                        "role": Role.GYMNAST.value,
                        "is_active": True,
                        "created_at": now,
                        "updated_at": now,
                    },
                )
                identity = await self.gateway.sign_in(email, password)
            except BackendError as e:
                self.error = e.message
                logger.warning(f"Sign up failed for {email}: {e.message}")
                raise AuthenticationError(e.message) from e

            self.identity = identity
            return await self.load_profile(identity)
        finally:
            self.is_loading = False

    async def logout(self) -> None:
        """Clear this session's demo entry and sign out of the backend."""
        self.error = None
        was_demo = self.is_demo_session
        if was_demo:
            self.storage.remove_item(demo_session_key(self.user.id))
        if self.remember_session:
            self.storage.remove_item(DEMO_USER_KEY)
        if self.settings.is_backend_configured and not was_demo:
            try:
                await self.gateway.sign_out()
            except BackendError as e:
                logger.error(f"Logout error: {e.message}")
                self.error = e.message
        self.user = None
        self.identity = None

    async def aclose(self) -> None:
        """Stop listening for auth changes and cancel pending profile loads."""
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
