"""
Reminders feature: session-scoped cache of active reminders, coupled to
notification scheduling.

Scheduling and cancelling notifications never fails a store action: a
reminder without a notification handle is still a valid reminder.
"""

import bisect
import logging
from datetime import datetime, timedelta, timezone

from supabase import Client

from rememberly.core.exceptions import ReminderInPastError, ReminderNotFoundError
from rememberly.core.store import RemoteStore
from rememberly.features.notifications.base import NotificationData, NotificationScheduler
from rememberly.features.reminders.formatting import natural_input
from rememberly.features.reminders.schemas import Reminder, ReminderCreate

logger = logging.getLogger(__name__)

DEFAULT_BODY = "Reminder notification"


def _by_time(reminder: Reminder) -> datetime:
    return reminder.remind_at


class ReminderStore(RemoteStore):
    """Active (not completed) reminders of the signed-in user, soonest first."""

    def __init__(self, db: Client, notifier: NotificationScheduler):
        super().__init__(db)
        self.notifier = notifier
        self.reminders: list[Reminder] = []
        self.push_token: str | None = None

    def get_reminder(self, reminder_id: str) -> Reminder | None:
        return next((r for r in self.reminders if r.id == reminder_id), None)

    def split_by_due(self, now: datetime | None = None) -> tuple[list[Reminder], list[Reminder]]:
        """(overdue, upcoming) partition of the cache."""
        now = now or datetime.now(timezone.utc)
        overdue = [r for r in self.reminders if r.remind_at < now]
        upcoming = [r for r in self.reminders if r.remind_at >= now]
        return overdue, upcoming

    async def register_push_token(self, push_token: str) -> bool:
        """Record the device token notifications are delivered to."""
        granted = await self.notifier.request_permission(push_token)
        if granted:
            self.push_token = push_token
        return granted

    # ── Notification helpers ─────────────────────────────

    def _notification_data(self, reminder: Reminder) -> NotificationData:
        return NotificationData(
            reminder_id=reminder.id,
            priority=reminder.priority.value,
            note_id=reminder.note_id,
            push_token=self.push_token,
        )

    async def _schedule(self, reminder: Reminder, trigger_at: datetime) -> str | None:
        try:
            return await self.notifier.schedule(
                reminder.title,
                reminder.description or DEFAULT_BODY,
                trigger_at,
                self._notification_data(reminder),
            )
        except Exception as e:
            logger.error(f"❌ Scheduling notification for reminder {reminder.id} failed: {e}")
            return None

    async def _cancel(self, reminder: Reminder | None) -> None:
        if reminder is None or not reminder.notification_id:
            return
        try:
            await self.notifier.cancel(reminder.notification_id)
        except Exception as e:
            logger.warning(f"⚠️ Cancel of notification {reminder.notification_id} ignored: {e}")

    # ── Actions ──────────────────────────────────────────

    async def fetch_reminders(self) -> None:
        generation = self._next_generation()
        async with self._operation(generation):
            try:
                user_id = await self._current_user_id()
                rows = await self._execute(
                    self.db.table("reminders")
                    .select("*")
                    .eq("user_id", user_id)
                    .eq("is_completed", False)
                    .order("remind_at", desc=False)
                )
            except Exception as e:
                if self._is_current(generation):
                    self._record_error(e, "fetch_reminders")
                return

            if not self._is_current(generation):
                logger.debug("Discarding superseded reminders fetch")
                return
            reminders = [Reminder(**row) for row in rows]
            self.reminders = sorted(
                (r for r in reminders if not r.is_completed), key=_by_time
            )

    async def create_reminder(self, data: ReminderCreate) -> Reminder | None:
        """Insert a reminder, schedule its notification, keep the cache sorted."""
        async with self._operation():
            try:
                if data.remind_at <= datetime.now(timezone.utc):
                    raise ReminderInPastError()
                user_id = await self._current_user_id()
                insert_data = {
                    "user_id": user_id,
                    "title": data.title,
                    "description": data.description or "",
                    "remind_at": data.remind_at.isoformat(),
                    "priority": data.priority.value,
                    "natural_input": natural_input(data.title, data.remind_at),
                    "note_id": data.note_id,
                    "is_completed": False,
                }
                rows = await self._execute(self.db.table("reminders").insert(insert_data))
                reminder = Reminder(**rows[0])
            except Exception as e:
                self._record_error(e, "create_reminder")
                return None

            handle = await self._schedule(reminder, reminder.remind_at)
            if handle:
                try:
                    await self._execute(
                        self.db.table("reminders")
                        .update({"notification_id": handle})
                        .eq("id", reminder.id)
                    )
                except Exception as e:
                    logger.warning(f"⚠️ Could not persist notification id for reminder {reminder.id}: {e}")
                reminder = reminder.model_copy(update={"notification_id": handle})

            reminders = list(self.reminders)
            bisect.insort(reminders, reminder, key=_by_time)
            self.reminders = reminders
            logger.info(f"✅ Created reminder {reminder.id} ({reminder.natural_input})")
            return reminder

    async def complete_reminder(self, reminder_id: str) -> bool:
        async with self._operation():
            await self._cancel(self.get_reminder(reminder_id))
            try:
                rows = await self._execute(
                    self.db.table("reminders")
                    .update({"is_completed": True})
                    .eq("id", reminder_id)
                )
                if not rows:
                    raise ReminderNotFoundError(reminder_id)
            except Exception as e:
                self._record_error(e, "complete_reminder")
                return False

            self.reminders = [r for r in self.reminders if r.id != reminder_id]
            return True

    async def delete_reminder(self, reminder_id: str) -> bool:
        async with self._operation():
            await self._cancel(self.get_reminder(reminder_id))
            try:
                rows = await self._execute(
                    self.db.table("reminders")
                    .delete()
                    .eq("id", reminder_id)
                )
                if not rows:
                    raise ReminderNotFoundError(reminder_id)
            except Exception as e:
                self._record_error(e, "delete_reminder")
                return False

            self.reminders = [r for r in self.reminders if r.id != reminder_id]
            return True

    async def snooze_reminder(self, reminder_id: str, minutes: int) -> Reminder | None:
        """Push a reminder `minutes` into the future and reschedule it."""
        async with self._operation():
            try:
                reminder = self.get_reminder(reminder_id)
                if reminder is None:
                    raise ReminderNotFoundError(reminder_id)
                if minutes <= 0:
                    raise ValueError("Snooze minutes must be positive")
            except Exception as e:
                self._record_error(e, "snooze_reminder")
                return None

            await self._cancel(reminder)
            new_remind_at = datetime.now(timezone.utc) + timedelta(minutes=minutes)
            handle = await self._schedule(reminder, new_remind_at)

            try:
                await self._execute(
                    self.db.table("reminders")
                    .update({
                        "remind_at": new_remind_at.isoformat(),
                        "notification_id": handle,
                    })
                    .eq("id", reminder_id)
                )
            except Exception as e:
                # The old notification is already gone; drop the new one too
                if handle:
                    await self.notifier.cancel(handle)
                self._record_error(e, "snooze_reminder")
                return None

            snoozed = reminder.model_copy(
                update={"remind_at": new_remind_at, "notification_id": handle}
            )
            self.reminders = sorted(
                (snoozed if r.id == reminder_id else r for r in self.reminders),
                key=_by_time,
            )
            return snoozed
