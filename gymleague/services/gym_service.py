"""
Gym collection accessor.

Gyms are created pending approval; an administrator approves them (visible and
operable) or rejects them (deleted).
"""

import logging
from typing import Dict, List, Optional

from gymleague.models.schemas import Gym
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.seed_data import seed_gyms
from gymleague.utils.constants import GYMS_KEY
from gymleague.utils.datetime_utils import utcnow_iso

logger = logging.getLogger(__name__)


class GymAccessor(CollectionAccessor[Gym]):
    """Gyms ordered by creation time, newest first."""

    table = "gyms"
    storage_key = GYMS_KEY
    label = "gyms"
    record_model = Gym
    order_by = "created_at"
    ascending = False

    def seed_records(self) -> List[dict]:
        return seed_gyms()

    async def approve(self, gym_id: str) -> Optional[Gym]:
        """Mark a gym approved. Other gyms are untouched."""
        return await self.update(gym_id, {"is_approved": True, "updated_at": utcnow_iso()})

    async def reject(self, gym_id: str) -> bool:
        """Reject a pending gym by deleting it."""
        gym = self.get(gym_id)
        if gym is not None and gym.is_approved:
            logger.info(f"Rejecting already approved gym {gym_id}")
        return await self.remove(gym_id)

    async def toggle_approval(self, gym_id: str) -> Optional[Gym]:
        await self.load()
        gym = self.get(gym_id)
        if gym is None:
            return None
        return await self.update(gym_id, {"is_approved": not gym.is_approved, "updated_at": utcnow_iso()})

    def pending(self) -> List[Gym]:
        return [gym for gym in self.list() if not gym.is_approved]

    def approved(self) -> List[Gym]:
        return [gym for gym in self.list() if gym.is_approved]

    def stats(self) -> Dict[str, int]:
        gyms = self.list()
        approved = sum(1 for gym in gyms if gym.is_approved)
        return {"total": len(gyms), "approved": approved, "pending": len(gyms) - approved}
