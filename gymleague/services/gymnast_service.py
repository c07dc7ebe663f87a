"""
Gymnast collection accessor.

Gymnasts are scoped to the acting user's gym: the remote query filters by the
user's gym_id, and coaches in fallback mode only see their own gym's roster.
A gymnast starts pending, becomes active when a coach approves them, and can
be removed (rejected) while still pending.
"""

import logging
from typing import Any, Dict, List, Optional

from gymleague.models.schemas import Gymnast, MembershipStatus, Role
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.seed_data import seed_gymnasts
from gymleague.utils.constants import GYMNASTS_KEY
from gymleague.utils.datetime_utils import utcnow_iso

logger = logging.getLogger(__name__)


class GymnastAccessor(CollectionAccessor[Gymnast]):
    table = "gymnasts"
    storage_key = GYMNASTS_KEY
    label = "gymnasts"
    record_model = Gymnast
    select_columns = "*, user:user_profiles(id,first_name,last_name,email,date_of_birth)"
    order_by = "created_at"
    ascending = False
    relation_fields = ("user",)

    def seed_records(self) -> List[dict]:
        return seed_gymnasts()

    @property
    def _scoped_gym_id(self) -> Optional[str]:
        """Gym the acting user is limited to; None means every gym (admins)."""
        if self.acting_user is None or self.acting_user.role == Role.ADMIN.value:
            return None
        return self.acting_user.gym_id

    def should_fetch_remote(self) -> bool:
        if self.acting_user is None:
            return False
        if self.acting_user.role == Role.ADMIN.value:
            return True
        if not self.acting_user.gym_id:
            logger.info(f"User {self.acting_user.id} has no gym; not fetching gymnasts")
            return False
        return True

    def remote_filters(self) -> Dict[str, Any]:
        gym_id = self._scoped_gym_id
        return {"gym_id": gym_id} if gym_id else {}

    def is_visible(self, record: Gymnast) -> bool:
        gym_id = self._scoped_gym_id
        return gym_id is None or record.gym_id == gym_id

    async def approve(self, gymnast_id: str, coach_id: str) -> Optional[Gymnast]:
        """Coach approval: pending -> active. Gymnasts of other gyms count as missing."""
        await self.load()
        if self.get_visible(gymnast_id) is None:
            return None
        now = utcnow_iso()
        return await self.update(
            gymnast_id,
            {
                "approved_by_coach": True,
                "approved_by_coach_at": now,
                "approved_by_coach_id": coach_id,
                "membership_status": MembershipStatus.ACTIVE,
                "updated_at": now,
            },
        )

    async def reject(self, gymnast_id: str) -> bool:
        """
        Remove a gymnast who has not been approved yet.

        Gymnasts of other gyms count as missing (returns False).

        Raises:
            ValueError: If the gymnast was already approved by a coach
        """
        await self.load()
        gymnast = self.get_visible(gymnast_id)
        if gymnast is None:
            return False
        if gymnast.approved_by_coach:
            raise ValueError(f"Gymnast {gymnast_id} is already approved and cannot be rejected")
        return await self.remove(gymnast_id)

    async def award_points(self, gymnast_id: str, points: int) -> Optional[Gymnast]:
        """
        Add points to a gymnast's accumulated counter.

        Gymnasts of other gyms count as missing (returns None).

        Raises:
            ValueError: If the counter would become negative
        """
        await self.load()
        gymnast = self.get_visible(gymnast_id)
        if gymnast is None:
            return None
        total = gymnast.total_points + points
        if total < 0:
            raise ValueError("total_points cannot be negative")
        return await self.update(gymnast_id, {"total_points": total, "updated_at": utcnow_iso()})

    def pending_approvals(self) -> List[Gymnast]:
        return [gymnast for gymnast in self.list() if not gymnast.approved_by_coach]
