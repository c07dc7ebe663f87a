"""
Notification accessor for in-app notifications.

Notifications are created by backend triggers (or seeded in demo mode) and
are only ever mutated by marking them read. Remote listings are scoped to the
acting user and limited to the latest few; new rows can be pushed into the
cache through a realtime INSERT subscription.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from gymleague.models.schemas import Notification
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.seed_data import seed_notifications
from gymleague.utils.constants import NOTIFICATION_FETCH_LIMIT, NOTIFICATIONS_KEY

logger = logging.getLogger(__name__)


class NotificationAccessor(CollectionAccessor[Notification]):
    table = "notifications"
    storage_key = NOTIFICATIONS_KEY
    label = "notifications"
    record_model = Notification
    order_by = "created_at"
    ascending = False
    remote_limit = NOTIFICATION_FETCH_LIMIT

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._unsubscribers: List[Callable[[], Any]] = []

    def seed_records(self) -> List[dict]:
        return seed_notifications()

    def should_fetch_remote(self) -> bool:
        return self.acting_user is not None

    def remote_filters(self) -> Dict[str, Any]:
        return {"user_id": self.acting_user.id} if self.acting_user else {}

    def is_visible(self, record: Notification) -> bool:
        # Demo notifications carry no user and are shown to everyone
        if record.user_id is None:
            return True
        return self.acting_user is not None and record.user_id == self.acting_user.id

    async def mark_as_read(self, notification_id: str) -> Optional[Notification]:
        return await self.update(notification_id, {"is_read": True})

    async def mark_all_as_read(self) -> int:
        """
        Mark every visible unread notification as read.

        Returns:
            Number of notifications marked
        """
        await self.load()
        unread = [n.id for n in self.list() if not n.is_read]
        for notification_id in unread:
            await self.mark_as_read(notification_id)
        return len(unread)

    def unread_count(self) -> int:
        return sum(1 for notification in self.list() if not notification.is_read)

    def _receive(self, row: dict) -> None:
        try:
            notification = Notification.model_validate(row)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed realtime notification: {e}")
            return
        if self.get(notification.id) is not None:
            return
        self.items = [notification, *self.items]
        logger.info(f"Received notification {notification.id} for user {notification.user_id}")

    async def subscribe(self) -> bool:
        """
        Listen for new notifications for the acting user.

        Only available in remote mode with an acting user; otherwise nothing is
        subscribed and False is returned. Inserted rows are prepended to the cache.
        """
        self._ensure_open()
        if not self.mode.is_remote or self.acting_user is None:
            return False
        unsubscribe = await self.gateway.subscribe_inserts(
            f"notifications:{self.acting_user.id}",
            self.table,
            self._receive,
            row_filter=f"user_id=eq.{self.acting_user.id}",
        )
        self._unsubscribers.append(unsubscribe)
        return True

    async def aclose(self) -> None:
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            try:
                await unsubscribe()
            except Exception as e:
                logger.warning(f"Error removing notification subscription: {e}")
        await super().aclose()
