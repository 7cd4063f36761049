"""
Unit tests for ReminderStore: ordering, notification coupling, snooze.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from conftest import reminder_row
from rememberly.core.exceptions import NotificationError, OFFLINE_MESSAGE
from rememberly.features.notifications.base import NotificationScheduler
from rememberly.features.reminders.formatting import format_reminder_time, natural_input
from rememberly.features.reminders.schemas import Priority, ReminderCreate
from rememberly.features.reminders.store import ReminderStore


class RecordingScheduler(NotificationScheduler):
    name = "recording"

    def __init__(self):
        self.scheduled = []
        self.cancelled = []

    async def _schedule(self, notification):
        self.scheduled.append(notification)
        return f"handle-{len(self.scheduled)}"

    async def _cancel(self, handle):
        self.cancelled.append(handle)


class FailingScheduler(NotificationScheduler):
    name = "failing"

    async def _schedule(self, notification):
        raise NotificationError("Permission not granted for push notifications")

    async def _cancel(self, handle):
        raise NotificationError("unknown handle")


def _in(minutes: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


def _create(title: str, minutes: int, **kwargs) -> ReminderCreate:
    return ReminderCreate(title=title, remind_at=_in(minutes), **kwargs)


class TestFetchReminders:
    def test_sorted_ascending_without_completed(self, fake_db):
        fake_db.tables["reminders"] = [
            reminder_row(_in(120), title="later"),
            reminder_row(_in(10), title="soon"),
            reminder_row(_in(5), title="done", is_completed=True),
            reminder_row(_in(1), title="not mine", user_id="other"),
        ]
        store = ReminderStore(fake_db, RecordingScheduler())
        asyncio.run(store.fetch_reminders())

        assert [r.title for r in store.reminders] == ["soon", "later"]
        assert not any(r.is_completed for r in store.reminders)
        times = [r.remind_at for r in store.reminders]
        assert times == sorted(times)

    def test_offline_fetch_keeps_cache(self, fake_db):
        fake_db.tables["reminders"] = [reminder_row(_in(10))]
        store = ReminderStore(fake_db, RecordingScheduler())
        asyncio.run(store.fetch_reminders())
        fake_db.fail("reminders", "select", httpx.ConnectError("Connection refused"))
        asyncio.run(store.fetch_reminders())

        assert len(store.reminders) == 1
        assert store.is_offline is True
        assert store.error == OFFLINE_MESSAGE


class TestCreateReminder:
    def test_schedules_and_persists_handle(self, fake_db):
        notifier = RecordingScheduler()
        store = ReminderStore(fake_db, notifier)

        reminder = asyncio.run(store.create_reminder(
            _create("Dentist", 60, description="Bring card", priority=Priority.HIGH, note_id="n1")
        ))

        assert reminder.notification_id == "handle-1"
        assert fake_db.tables["reminders"][0]["notification_id"] == "handle-1"
        assert reminder.natural_input.startswith('Remind me about "Dentist" on ')
        sent = notifier.scheduled[0]
        assert sent.body == "Bring card"
        assert sent.style.channel_id == "high-priority"
        assert sent.data.note_id == "n1"

    def test_cache_stays_sorted(self, fake_db):
        store = ReminderStore(fake_db, RecordingScheduler())

        async def scenario():
            await store.create_reminder(_create("third", 90))
            await store.create_reminder(_create("first", 10))
            await store.create_reminder(_create("second", 45))

        asyncio.run(scenario())
        assert [r.title for r in store.reminders] == ["first", "second", "third"]

    def test_scheduling_failure_is_not_fatal(self, fake_db):
        store = ReminderStore(fake_db, FailingScheduler())
        reminder = asyncio.run(store.create_reminder(_create("Water plants", 30)))

        assert reminder is not None
        assert reminder.notification_id is None
        assert store.reminders[0].id == reminder.id
        assert store.reminders[0].notification_id is None
        assert store.error is None

    def test_past_time_rejected(self, fake_db):
        store = ReminderStore(fake_db, RecordingScheduler())
        assert asyncio.run(store.create_reminder(_create("Too late", -5))) is None
        assert store.error == "Please select a future date and time"
        assert fake_db.tables["reminders"] == []

    def test_requires_session_user(self, anonymous_db):
        store = ReminderStore(anonymous_db, RecordingScheduler())
        assert asyncio.run(store.create_reminder(_create("x", 5))) is None
        assert store.error == "User not authenticated"

    def test_blank_title_rejected_by_schema(self):
        with pytest.raises(ValueError):
            ReminderCreate(title="   ", remind_at=_in(5))


class TestCompleteAndDelete:
    def _seeded(self, fake_db, notifier):
        store = ReminderStore(fake_db, notifier)

        async def seed():
            await store.create_reminder(_create("a", 10))
            await store.create_reminder(_create("b", 20))

        asyncio.run(seed())
        return store

    def test_complete_cancels_and_removes(self, fake_db):
        notifier = RecordingScheduler()
        store = self._seeded(fake_db, notifier)
        target = store.reminders[0]

        assert asyncio.run(store.complete_reminder(target.id)) is True
        assert [r for r in store.reminders if r.id == target.id] == []
        assert notifier.cancelled == [target.notification_id]
        row = next(r for r in fake_db.tables["reminders"] if r["id"] == target.id)
        assert row["is_completed"] is True

    def test_delete_cancels_and_removes(self, fake_db):
        notifier = RecordingScheduler()
        store = self._seeded(fake_db, notifier)
        target = store.reminders[1]

        assert asyncio.run(store.delete_reminder(target.id)) is True
        assert [r for r in store.reminders if r.id == target.id] == []
        assert all(r["id"] != target.id for r in fake_db.tables["reminders"])
        assert notifier.cancelled == [target.notification_id]

    def test_unknown_id_is_not_found(self, fake_db):
        store = self._seeded(fake_db, RecordingScheduler())

        assert asyncio.run(store.complete_reminder("missing")) is False
        assert store.error == "Reminder not found"
        assert asyncio.run(store.delete_reminder("missing")) is False
        assert store.error == "Reminder not found"
        assert len(store.reminders) == 2

    def test_cancel_failure_is_ignored(self, fake_db):
        store = ReminderStore(fake_db, FailingScheduler())
        fake_db.tables["reminders"] = [reminder_row(_in(10), notification_id="gone")]
        asyncio.run(store.fetch_reminders())

        assert asyncio.run(store.complete_reminder(store.reminders[0].id)) is True
        assert store.reminders == []


class TestSnooze:
    def test_snooze_moves_and_resorts(self, fake_db):
        notifier = RecordingScheduler()
        store = ReminderStore(fake_db, notifier)

        async def scenario():
            first = await store.create_reminder(_create("first", 10))
            await store.create_reminder(_create("second", 30))
            before = datetime.now(timezone.utc)
            snoozed = await store.snooze_reminder(first.id, 60)
            return first, snoozed, before

        first, snoozed, before = asyncio.run(scenario())

        expected = before + timedelta(minutes=60)
        assert abs((snoozed.remind_at - expected).total_seconds()) < 5
        assert [r.title for r in store.reminders] == ["second", "first"]
        assert first.notification_id in notifier.cancelled
        assert snoozed.notification_id == "handle-3"
        row = next(r for r in fake_db.tables["reminders"] if r["id"] == first.id)
        assert row["notification_id"] == "handle-3"

    def test_snooze_with_failed_scheduling_persists_null_handle(self, fake_db):
        fake_db.tables["reminders"] = [reminder_row(_in(10), notification_id="old")]
        store = ReminderStore(fake_db, FailingScheduler())
        asyncio.run(store.fetch_reminders())

        snoozed = asyncio.run(store.snooze_reminder(store.reminders[0].id, 15))
        assert snoozed.notification_id is None
        assert fake_db.tables["reminders"][0]["notification_id"] is None

    def test_snooze_unknown_id(self, fake_db):
        store = ReminderStore(fake_db, RecordingScheduler())
        assert asyncio.run(store.snooze_reminder("missing", 15)) is None
        assert store.error == "Reminder not found"

    def test_split_by_due(self, fake_db):
        now = datetime.now(timezone.utc)
        fake_db.tables["reminders"] = [
            reminder_row(now - timedelta(minutes=5), title="overdue"),
            reminder_row(now + timedelta(minutes=5), title="upcoming"),
        ]
        store = ReminderStore(fake_db, RecordingScheduler())
        asyncio.run(store.fetch_reminders())

        overdue, upcoming = store.split_by_due(now)
        assert [r.title for r in overdue] == ["overdue"]
        assert [r.title for r in upcoming] == ["upcoming"]


class TestFormatting:
    now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(minutes=1), "in 1 minute"),
            (timedelta(minutes=45), "in 45 minutes"),
            (timedelta(hours=3), "in 3 hours"),
            (timedelta(days=2), "in 2 days"),
            (timedelta(minutes=-30), "30 minutes ago"),
            (timedelta(hours=-1), "1 hour ago"),
            (timedelta(days=-3), "3 days ago"),
        ],
    )
    def test_relative(self, delta, expected):
        assert format_reminder_time(self.now + delta, self.now) == expected

    def test_far_future_shows_date(self):
        assert format_reminder_time(self.now + timedelta(days=10), self.now) == "Mon, May 11, 12:00 PM"

    def test_natural_input(self):
        text = natural_input("Pay rent", datetime(2026, 11, 1, 9, 30, tzinfo=timezone.utc))
        assert text == 'Remind me about "Pay rent" on Nov 01, 2026 at 09:30 AM UTC'
