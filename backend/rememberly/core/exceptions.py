"""
Custom exception classes and error classification for unified error handling.
"""

import httpx
from fastapi import HTTPException, status

OFFLINE_MESSAGE = (
    "Unable to connect to the server. "
    "Please check your internet connection and try again."
)

# Substrings that identify a transport failure in an error message
NETWORK_ERROR_MARKERS = (
    "Failed to fetch",
    "Network request failed",
    "Connection refused",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "timed out",
)

NOTE_NOT_FOUND = "Note not found"
REMINDER_NOT_FOUND = "Reminder not found"


class AppBaseError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class NotAuthenticatedError(AppBaseError):
    """Raised when an operation needs a signed-in user and there is none."""
    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message=message, detail="Please sign in again.")


class NoteNotFoundError(AppBaseError):
    """Raised when an update or delete matched no note of the session user."""
    def __init__(self, note_id: str):
        super().__init__(
            message=NOTE_NOT_FOUND,
            detail=f"No note with id '{note_id}'.",
        )


class ReminderNotFoundError(AppBaseError):
    """Raised when a reminder id is not in the active cache or the table."""
    def __init__(self, reminder_id: str):
        super().__init__(
            message=REMINDER_NOT_FOUND,
            detail=f"No active reminder with id '{reminder_id}'.",
        )


class ReminderInPastError(AppBaseError):
    """Raised when a reminder would fire at or before the current time."""
    def __init__(self):
        super().__init__(
            message="Please select a future date and time",
            detail="remind_at must be later than now.",
        )


class UrlFetchError(AppBaseError):
    """Raised when URL content cannot be retrieved for a url note."""
    def __init__(self, url: str, original_error: str | None = None):
        super().__init__(message="Could not fetch URL content", detail=original_error or url)


class NotificationError(AppBaseError):
    """Raised by a notification backend when a job cannot be scheduled."""


# ── Classification ───────────────────────────────────────

def is_network_error(error: BaseException) -> bool:
    """True for transport failures (DNS, refused connection, timeouts)."""
    if isinstance(error, (httpx.TransportError, ConnectionError, TimeoutError)):
        return True
    message = str(error)
    return any(marker in message for marker in NETWORK_ERROR_MARKERS)


def classify_error(error: BaseException) -> tuple[str, bool]:
    """Map an exception to (user-facing message, is_offline)."""
    if is_network_error(error):
        return OFFLINE_MESSAGE, True
    if isinstance(error, AppBaseError):
        return error.message, False
    message = getattr(error, "message", None) or str(error)
    return message or "An unexpected error occurred. Please try again.", False


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AppBaseError, status_code: int = 400) -> HTTPException:
    """Convert an AppBaseError to an HTTPException with consistent JSON body."""
    return HTTPException(
        status_code=status_code,
        detail={
            "error": error.message,
            "detail": error.detail,
            "type": type(error).__name__,
        },
    )


def store_error_to_http(message: str, is_offline: bool) -> HTTPException:
    """Convert the error a store recorded into an HTTPException."""
    if is_offline:
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif message == NotAuthenticatedError().message:
        code = status.HTTP_401_UNAUTHORIZED
    elif message in (NOTE_NOT_FOUND, REMINDER_NOT_FOUND):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(
        status_code=code,
        detail={"error": message, "offline": is_offline},
    )
