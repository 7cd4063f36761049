"""
Notifications feature: scheduler interface shared by the delivery backends.

A backend schedules one-shot notifications and hands back an opaque
handle. The handle is only ever used to cancel that notification later.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationStyle:
    """How loud a notification is, derived from reminder priority."""
    channel_id: str
    sound: str | None
    urgency: str
    require_interaction: bool = False


PRIORITY_STYLES: dict[str, NotificationStyle] = {
    "high": NotificationStyle("high-priority", "default", "high", require_interaction=True),
    "medium": NotificationStyle("reminders", "default", "default"),
    "low": NotificationStyle("reminders", None, "normal"),
}


def style_for(priority: str) -> NotificationStyle:
    return PRIORITY_STYLES.get(priority, PRIORITY_STYLES["medium"])


@dataclass
class NotificationData:
    """Metadata attached to a scheduled reminder notification."""
    reminder_id: str
    priority: str = "medium"
    note_id: str | None = None
    push_token: str | None = None

    def to_payload(self) -> dict:
        data = {"reminderId": self.reminder_id, "priority": self.priority}
        if self.note_id:
            data["noteId"] = self.note_id
        return data


@dataclass
class ScheduledNotification:
    """Everything needed to deliver one notification."""
    title: str
    body: str
    trigger_at: datetime
    data: NotificationData
    style: NotificationStyle = field(init=False)

    def __post_init__(self):
        if self.trigger_at.tzinfo is None:
            self.trigger_at = self.trigger_at.replace(tzinfo=timezone.utc)
        self.style = style_for(self.data.priority)


class NotificationScheduler:
    """Schedule / cancel capability. Subclasses implement the _hooks."""

    name = "base"

    async def request_permission(self, push_token: str | None = None) -> bool:
        return True

    async def schedule(
        self,
        title: str,
        body: str,
        trigger_at: datetime,
        data: NotificationData,
    ) -> str | None:
        """Schedule a one-shot notification. Returns a handle, or None on failure."""
        notification = ScheduledNotification(title, body, trigger_at, data)
        try:
            handle = await self._schedule(notification)
        except Exception as e:
            logger.error(f"❌ [{self.name}] Could not schedule reminder {data.reminder_id}: {e}")
            return None
        if handle:
            logger.info(f"🔔 [{self.name}] Reminder {data.reminder_id} scheduled for {trigger_at.isoformat()} ({handle})")
        return handle

    async def cancel(self, handle: str) -> None:
        """Cancel a scheduled notification. Unknown or fired handles are ignored."""
        try:
            await self._cancel(handle)
        except Exception as e:
            logger.warning(f"⚠️ [{self.name}] Cancel of {handle} ignored: {e}")

    async def cancel_all(self) -> None:
        pass

    def start(self) -> None:
        pass

    def shutdown(self) -> None:
        pass

    async def _schedule(self, notification: ScheduledNotification) -> str | None:
        raise NotImplementedError

    async def _cancel(self, handle: str) -> None:
        raise NotImplementedError
