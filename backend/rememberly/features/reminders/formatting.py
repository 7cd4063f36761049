"""
Reminders feature: human-readable reminder times.
"""

from datetime import datetime, timezone


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def describe_remind_at(remind_at: datetime) -> str:
    """Absolute form used in natural_input, e.g. 'Oct 18, 2026 at 03:30 PM UTC'."""
    return remind_at.strftime("%b %d, %Y at %I:%M %p %Z").strip()


def natural_input(title: str, remind_at: datetime) -> str:
    return f'Remind me about "{title}" on {describe_remind_at(remind_at)}'


def format_reminder_time(remind_at: datetime, now: datetime | None = None) -> str:
    """Relative form: 'in 5 minutes', '2 hours ago', or a date a week+ out."""
    now = now or datetime.now(timezone.utc)
    diff = (remind_at - now).total_seconds()

    if diff < 0:
        minutes = int(-diff // 60)
        if minutes < 60:
            return f"{_plural(minutes, 'minute')} ago"
        if minutes < 60 * 24:
            return f"{_plural(minutes // 60, 'hour')} ago"
        return f"{_plural(minutes // (60 * 24), 'day')} ago"

    minutes = int(diff // 60)
    if minutes < 60:
        return f"in {_plural(minutes, 'minute')}"
    if minutes < 60 * 24:
        return f"in {_plural(minutes // 60, 'hour')}"
    if minutes < 60 * 24 * 7:
        return f"in {_plural(minutes // (60 * 24), 'day')}"
    return remind_at.strftime("%a, %b %d, %I:%M %p")
