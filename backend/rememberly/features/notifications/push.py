"""
Notifications feature: native push backend.

Uses APScheduler to hold one DateTrigger job per reminder; when the job
fires the notification is sent to the device through the Expo push API.
The job id is the notification handle.
"""

import logging
import uuid
from datetime import datetime, timezone

import httpx
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.date import DateTrigger

from rememberly.config import get_settings
from rememberly.features.notifications.base import NotificationScheduler, ScheduledNotification

logger = logging.getLogger(__name__)

JOB_PREFIX = "reminder-"


def build_push_message(notification: ScheduledNotification) -> dict:
    """Expo push message with channel, sound and priority from the style."""
    style = notification.style
    message = {
        "to": notification.data.push_token,
        "title": notification.title,
        "body": notification.body,
        "data": notification.data.to_payload(),
        "priority": style.urgency,
        "channelId": style.channel_id,
        "categoryId": "reminder",
    }
    if style.sound:
        message["sound"] = style.sound
    return message


async def send_push_notification(message: dict, client: httpx.AsyncClient | None = None) -> bool:
    """POST one message to the Expo push API.

    Returns:
        True if the push service accepted the message, False otherwise.
    """
    settings = get_settings()
    headers = {"Accept": "application/json"}
    if settings.EXPO_ACCESS_TOKEN:
        headers["Authorization"] = f"Bearer {settings.EXPO_ACCESS_TOKEN}"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=float(settings.PUSH_TIMEOUT)) as own_client:
                response = await own_client.post(settings.EXPO_PUSH_URL, json=message, headers=headers)
        else:
            response = await client.post(settings.EXPO_PUSH_URL, json=message, headers=headers)
        data = response.json().get("data", {})
    except Exception as e:
        logger.error(f"❌ Failed to send push notification: {e}")
        return False

    if isinstance(data, list):
        data = data[0] if data else {}
    if data.get("status") == "ok":
        logger.info(f"✅ Push sent (ticket: {data.get('id', 'N/A')})")
        return True
    logger.error(f"❌ Push API error: {data}")
    return False


async def deliver(message: dict) -> None:
    """APScheduler job callback."""
    await send_push_notification(message)


class PushNotificationScheduler(NotificationScheduler):
    name = "native"

    def __init__(self, scheduler: BaseScheduler | None = None):
        settings = get_settings()
        self.scheduler = scheduler or AsyncIOScheduler(timezone=settings.NOTIFICATION_TIMEZONE)

    async def request_permission(self, push_token: str | None = None) -> bool:
        # Expo tokens look like ExponentPushToken[...] / ExpoPushToken[...]
        return bool(push_token) and push_token.startswith(("ExponentPushToken[", "ExpoPushToken["))

    async def _schedule(self, notification: ScheduledNotification) -> str | None:
        if not notification.data.push_token:
            logger.warning(
                f"⚠️ No push token registered, reminder {notification.data.reminder_id} "
                f"will not be delivered"
            )
            return None

        # A trigger time in the past is delivered right away
        run_date = max(notification.trigger_at, datetime.now(timezone.utc))
        job_id = f"{JOB_PREFIX}{uuid.uuid4().hex}"
        self.scheduler.add_job(
            func=deliver,
            trigger=DateTrigger(run_date=run_date),
            args=[build_push_message(notification)],
            id=job_id,
            misfire_grace_time=None,
        )
        return job_id

    async def _cancel(self, handle: str) -> None:
        try:
            self.scheduler.remove_job(handle)
        except JobLookupError:
            # Already fired or never existed
            logger.debug(f"No scheduled job for {handle}")

    async def cancel_all(self) -> None:
        for job in self.scheduler.get_jobs():
            if job.id.startswith(JOB_PREFIX):
                self.scheduler.remove_job(job.id)

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("📅 Push notification scheduler started")

    def shutdown(self) -> None:
        """Gracefully shutdown the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("📅 Push notification scheduler shut down.")
