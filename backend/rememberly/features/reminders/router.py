"""
Reminders feature: API routes for reminder management.
"""

from fastapi import APIRouter, Depends, status

from rememberly.core.dependencies import get_session
from rememberly.core.exceptions import store_error_to_http
from rememberly.core.session import AppSession
from rememberly.features.reminders.formatting import format_reminder_time
from rememberly.features.reminders.schemas import ReminderCreate, SnoozeRequest

router = APIRouter()


def _raise_store_error(session: AppSession):
    store = session.reminders
    raise store_error_to_http(store.error or "Request failed", store.is_offline)


def _with_due_label(reminder) -> dict:
    return {**reminder.model_dump(mode="json"), "due_label": format_reminder_time(reminder.remind_at)}


@router.get("/")
async def list_reminders(refresh: bool = True, session: AppSession = Depends(get_session)):
    """Active reminders split into overdue and upcoming, soonest first."""
    store = session.reminders
    if refresh or not store.reminders:
        await store.fetch_reminders()
        if store.error and not store.reminders:
            _raise_store_error(session)

    overdue, upcoming = store.split_by_due()
    return {
        "data": [_with_due_label(r) for r in store.reminders],
        "overdue": [r.id for r in overdue],
        "upcoming": [r.id for r in upcoming],
        "error": store.error,
        "offline": store.is_offline,
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_reminder(data: ReminderCreate, session: AppSession = Depends(get_session)):
    """Create a reminder and schedule its notification."""
    reminder = await session.reminders.create_reminder(data)
    if reminder is None:
        _raise_store_error(session)
    return {"data": _with_due_label(reminder)}


@router.post("/{reminder_id}/complete")
async def complete_reminder(reminder_id: str, session: AppSession = Depends(get_session)):
    if not await session.reminders.complete_reminder(reminder_id):
        _raise_store_error(session)
    return {"message": "Reminder completed"}


@router.post("/{reminder_id}/snooze")
async def snooze_reminder(
    reminder_id: str,
    data: SnoozeRequest,
    session: AppSession = Depends(get_session),
):
    """Snooze by N minutes (the client offers 15, 60 and 1440)."""
    reminder = await session.reminders.snooze_reminder(reminder_id, data.minutes)
    if reminder is None:
        _raise_store_error(session)
    return {"data": _with_due_label(reminder)}


@router.delete("/{reminder_id}")
async def delete_reminder(reminder_id: str, session: AppSession = Depends(get_session)):
    if not await session.reminders.delete_reminder(reminder_id):
        _raise_store_error(session)
    return {"message": "Reminder deleted"}
