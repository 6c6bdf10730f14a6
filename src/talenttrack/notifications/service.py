from __future__ import annotations

from ..common.datetime_utils import utc_now
from ..resources.service import ResourceService


class NotificationService(ResourceService):
    def mark_read(self, notification_id: int) -> dict:
        notification = self._repo.require(notification_id)
        if notification.get("is_read"):
            return notification
        return self._repo.update(notification_id, {"is_read": True, "read_at": utc_now().replace(tzinfo=None)})
