"""
Notifications feature: in-process timer backend.

Fallback when no push service is configured (the "web" platform): each
notification is a call_later timer on the running event loop and is
delivered through a callback, which by default only logs it.
"""

import asyncio
import itertools
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from rememberly.features.notifications.base import NotificationScheduler, ScheduledNotification

logger = logging.getLogger(__name__)

IMMEDIATE_PREFIX = "timer-immediate-"
TIMER_PREFIX = "timer-"


def log_delivery(notification: ScheduledNotification) -> None:
    logger.info(
        f"🔔 Reminder: {notification.title} - {notification.body} "
        f"[{notification.style.channel_id}]"
    )


class TimerNotificationScheduler(NotificationScheduler):
    name = "web"

    def __init__(self, deliver: Callable[[ScheduledNotification], None] = log_delivery):
        self._deliver = deliver
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._ids = itertools.count(1)

    @property
    def pending(self) -> list[str]:
        return list(self._timers)

    async def _schedule(self, notification: ScheduledNotification) -> str:
        delay = (notification.trigger_at - datetime.now(timezone.utc)).total_seconds()
        if delay <= 0:
            # Trigger time already passed: show it now
            self._deliver(notification)
            return f"{IMMEDIATE_PREFIX}{notification.data.reminder_id}"

        handle = f"{TIMER_PREFIX}{next(self._ids)}"
        loop = asyncio.get_running_loop()
        self._timers[handle] = loop.call_later(delay, self._fire, handle, notification)
        return handle

    def _fire(self, handle: str, notification: ScheduledNotification) -> None:
        self._timers.pop(handle, None)
        self._deliver(notification)

    async def _cancel(self, handle: str) -> None:
        if handle.startswith(IMMEDIATE_PREFIX):
            return
        timer = self._timers.pop(handle, None)
        if timer is None:
            logger.debug(f"No pending timer for {handle}")
            return
        timer.cancel()

    async def cancel_all(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()

    def shutdown(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
