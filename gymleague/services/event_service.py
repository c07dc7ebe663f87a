"""
Event collection accessor.

Events are listed by date (earliest first) with their host gym and creator
embedded. Status is a free value within EventStatus; no transition graph is
enforced, so any status may be set from any other.
"""

from datetime import date
from typing import Any, List, Mapping, Optional

from gymleague.models.schemas import Event, EventStatus
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.seed_data import seed_events
from gymleague.utils.constants import EVENTS_KEY
from gymleague.utils.datetime_utils import parse_record_date, utcnow_iso


class EventAccessor(CollectionAccessor[Event]):
    table = "events"
    storage_key = EVENTS_KEY
    label = "events"
    record_model = Event
    select_columns = (
        "*, host_gym:gyms(id,name,city), creator:user_profiles(id,first_name,last_name)"
    )
    order_by = "event_date"
    ascending = True
    relation_fields = ("host_gym", "creator")

    def seed_records(self) -> List[dict]:
        return seed_events()

    async def edit(self, event_id: str, patch: Mapping[str, Any]) -> Optional[Event]:
        """Apply an edit form's fields and stamp updated_at."""
        return await self.update(event_id, {**patch, "updated_at": utcnow_iso()})

    async def set_status(self, event_id: str, status: EventStatus) -> Optional[Event]:
        return await self.edit(event_id, {"status": EventStatus(status)})

    def by_status(self, status: EventStatus) -> List[Event]:
        status = EventStatus(status).value
        return [event for event in self.list() if event.status == status]

    def upcoming(self, on_or_after: date) -> List[Event]:
        """Events on or after the given day, in date order."""
        return [
            event for event in self.list() if parse_record_date(event.event_date) >= on_or_after
        ]
