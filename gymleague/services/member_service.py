"""
Member (user profile) collection accessor.
"""

from typing import List, Optional

from gymleague.models.schemas import Member, Role
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.seed_data import seed_members
from gymleague.utils.constants import MEMBERS_KEY
from gymleague.utils.datetime_utils import utcnow_iso


class MemberAccessor(CollectionAccessor[Member]):
    table = "user_profiles"
    storage_key = MEMBERS_KEY
    label = "members"
    record_model = Member
    select_columns = "*, gym:gyms(id,name,city)"
    order_by = "created_at"
    ascending = False
    relation_fields = ("gym",)

    def seed_records(self) -> List[dict]:
        return seed_members()

    async def toggle_active(self, member_id: str) -> Optional[Member]:
        await self.load()
        member = self.get(member_id)
        if member is None:
            return None
        return await self.update(member_id, {"is_active": not member.is_active, "updated_at": utcnow_iso()})

    async def set_role(self, member_id: str, role: Role) -> Optional[Member]:
        return await self.update(member_id, {"role": Role(role), "updated_at": utcnow_iso()})

    def by_role(self, role: Role) -> List[Member]:
        role = Role(role).value
        return [member for member in self.list() if member.role == role]
