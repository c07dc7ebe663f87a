"""
Event registration listing (read-only).

Registrations are only read from the remote backend, joined with their event
and their gymnast (and the gymnast's profile), newest first. Demo mode has no
registrations, so fallback mode always lists nothing and never touches local
storage.
"""

from typing import Any, Dict, List, Optional

from gymleague.models.schemas import Registration, RegistrationStatus
from gymleague.services.collection_service import CollectionAccessor


class RegistrationAccessor(CollectionAccessor[Registration]):
    table = "registrations"
    label = "registrations"
    record_model = Registration
    select_columns = (
        "*, event:events(*), "
        "gymnast:gymnasts(*, user:user_profiles(id,first_name,last_name,email,date_of_birth))"
    )
    order_by = "registered_at"
    ascending = False
    relation_fields = ("event", "gymnast")

    def __init__(self, *args, event_id: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.event_id = event_id

    def remote_filters(self) -> Dict[str, Any]:
        return {"event_id": self.event_id} if self.event_id else {}

    async def _fetch(self) -> List[Registration]:
        if not self.mode.is_remote:
            return []
        return await super()._fetch()

    async def add(self, data):
        raise NotImplementedError("registrations are read-only")

    async def update(self, record_id, patch):
        raise NotImplementedError("registrations are read-only")

    async def remove(self, record_id):
        raise NotImplementedError("registrations are read-only")

    def for_event(self, event_id: str) -> List[Registration]:
        return [registration for registration in self.list() if registration.event_id == event_id]

    def by_status(self, status: RegistrationStatus) -> List[Registration]:
        status = RegistrationStatus(status).value
        return [registration for registration in self.list() if registration.status == status]
