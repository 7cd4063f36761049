"""
Notifications feature: pick the delivery backend once at startup.
"""

import logging

from rememberly.config import Settings
from rememberly.features.notifications.base import NotificationScheduler
from rememberly.features.notifications.push import PushNotificationScheduler
from rememberly.features.notifications.timer import TimerNotificationScheduler

logger = logging.getLogger(__name__)


def detect_platform(settings: Settings) -> str:
    """native when a push service is configured, web otherwise."""
    platform = settings.NOTIFICATION_PLATFORM.lower()
    if platform == "auto":
        return "native" if settings.EXPO_ACCESS_TOKEN else "web"
    if platform not in ("native", "web"):
        raise ValueError(
            f"Unknown notification platform: '{settings.NOTIFICATION_PLATFORM}'. "
            f"Supported: auto, native, web"
        )
    return platform


def create_notification_scheduler(settings: Settings) -> NotificationScheduler:
    platform = detect_platform(settings)
    logger.info(f"🔔 Notification platform: {platform}")
    if platform == "native":
        return PushNotificationScheduler()
    return TimerNotificationScheduler()
