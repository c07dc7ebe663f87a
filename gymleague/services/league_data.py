"""
Accessor set for one acting identity.

The storage mode is resolved once here, when the set is built, and handed to
every accessor explicitly. A process serving several identities builds one
LeagueData per identity, so demo and real users can be served side by side.

Usage:
    async with LeagueData.for_user(profile, access_token) as data:
        gyms = await data.gyms.load()
"""

import asyncio
import logging
from typing import List, Optional

from gymleague.models.schemas import UserProfile
from gymleague.services.challenge_service import ChallengeAccessor
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.event_service import EventAccessor
from gymleague.services.gym_service import GymAccessor
from gymleague.services.gymnast_service import GymnastAccessor
from gymleague.services.local_storage import LocalStorage
from gymleague.services.member_service import MemberAccessor
from gymleague.services.notification_service import NotificationAccessor
from gymleague.services.registration_service import RegistrationAccessor
from gymleague.services.settings_service import BackendSettings
from gymleague.services.storage_mode import StorageMode, resolve_storage_mode
from gymleague.services.supabase_service import SupabaseGateway, get_supabase_gateway

logger = logging.getLogger(__name__)


class LeagueData:
    """The collection accessors for one identity, sharing one mode, store and gateway."""

    def __init__(
        self,
        mode: StorageMode,
        user: Optional[UserProfile] = None,
        storage: Optional[LocalStorage] = None,
        gateway: Optional[SupabaseGateway] = None,
    ):
        self.mode = mode
        self.user = user
        if mode.is_remote and gateway is None:
            gateway = get_supabase_gateway(mode.credentials)
        shared = dict(storage=storage, gateway=gateway if mode.is_remote else None, acting_user=user)
        self.gyms = GymAccessor(mode, **shared)
        self.events = EventAccessor(mode, **shared)
        self.members = MemberAccessor(mode, **shared)
        self.gymnasts = GymnastAccessor(mode, **shared)
        self.challenges = ChallengeAccessor(mode, **shared)
        self.notifications = NotificationAccessor(mode, **shared)
        self.registrations = RegistrationAccessor(mode, **shared)

    @classmethod
    def for_user(
        cls,
        user: Optional[UserProfile],
        access_token: Optional[str] = None,
        settings: Optional[BackendSettings] = None,
        storage: Optional[LocalStorage] = None,
        gateway: Optional[SupabaseGateway] = None,
    ) -> "LeagueData":
        mode = resolve_storage_mode(user.id if user else None, access_token, settings)
        logger.debug(f"League data for {user.id if user else 'anonymous'} in {mode.name} mode")
        return cls(mode, user=user, storage=storage, gateway=gateway)

    @property
    def accessors(self) -> List[CollectionAccessor]:
        return [
            self.gyms,
            self.events,
            self.members,
            self.gymnasts,
            self.challenges,
            self.notifications,
            self.registrations,
        ]

    async def load_all(self) -> None:
        """Hydrate every collection concurrently."""
        await asyncio.gather(*(accessor.load() for accessor in self.accessors))

    async def aclose(self) -> None:
        await asyncio.gather(*(accessor.aclose() for accessor in self.accessors))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
