"""
Application sessions: one per signed-in user.

A session owns its own Supabase client (carrying the user's JWT) and the
notes/reminder stores caching that user's rows. Sessions live in the
registry from sign-in until sign-out, token expiry or application shutdown.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from supabase import Client

from rememberly.core.database import create_supabase_client
from rememberly.core.exceptions import NotAuthenticatedError
from rememberly.features.auth.service import AuthResult, AuthService
from rememberly.features.notes.store import NotesStore
from rememberly.features.notifications.base import NotificationScheduler
from rememberly.features.reminders.store import ReminderStore

logger = logging.getLogger(__name__)


def token_expiry(auth_session: Any) -> datetime | None:
    """Expiry of a Supabase auth session (`expires_at` epoch, else `expires_in`)."""
    expires_at = getattr(auth_session, "expires_at", None)
    if expires_at:
        return datetime.fromtimestamp(expires_at, tz=timezone.utc)
    expires_in = getattr(auth_session, "expires_in", None)
    if expires_in:
        return datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    return None


@dataclass
class AppSession:
    db: Client
    user_id: str
    email: str | None
    access_token: str
    notes: NotesStore
    reminders: ReminderStore
    expires_at: datetime | None = None
    auth: AuthService = field(init=False)

    def __post_init__(self):
        self.auth = AuthService(self.db)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def drop_caches(self) -> None:
        self.notes.notes = []
        self.reminders.reminders = []

    async def close(self) -> None:
        """Sign out remotely and drop the cached rows."""
        await self.auth.sign_out()
        self.drop_caches()


class SessionRegistry:
    """Access token → AppSession."""

    def __init__(
        self,
        notifier: NotificationScheduler,
        client_factory: Callable[[], Client] = create_supabase_client,
    ):
        self.notifier = notifier
        self._client_factory = client_factory
        self._sessions: dict[str, AppSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def _build(self, db: Client, result: AuthResult) -> AppSession:
        self.prune_expired()
        session = AppSession(
            db=db,
            user_id=str(result.user.id),
            email=getattr(result.user, "email", None),
            access_token=result.session.access_token,
            notes=NotesStore(db),
            reminders=ReminderStore(db, self.notifier),
            expires_at=token_expiry(result.session),
        )
        self._sessions[session.access_token] = session
        logger.info(f"✅ Session opened for user {session.user_id}")
        return session

    async def open(self, email: str, password: str) -> tuple[AppSession | None, AuthResult]:
        """Sign in with a fresh client and register the session."""
        db = self._client_factory()
        result = await AuthService(db).sign_in(email, password)
        if not result.ok or result.session is None:
            return None, result
        return self._build(db, result), result

    async def register(self, email: str, password: str) -> tuple[AppSession | None, AuthResult]:
        """Sign up; a session is only opened when no email confirmation is pending."""
        db = self._client_factory()
        result = await AuthService(db).sign_up(email, password)
        if not result.ok or result.session is None:
            return None, result
        return self._build(db, result), result

    def get(self, access_token: str) -> AppSession:
        """Raises NotAuthenticatedError for unknown, closed or expired sessions."""
        session = self._sessions.get(access_token)
        if session is None:
            raise NotAuthenticatedError()
        if session.is_expired():
            self.evict(access_token)
            raise NotAuthenticatedError("Session expired")
        return session

    def evict(self, access_token: str) -> None:
        """Forget a session whose token is no longer valid. No remote sign-out."""
        session = self._sessions.pop(access_token, None)
        if session is not None:
            session.drop_caches()
            logger.info(f"⌛ Session evicted for user {session.user_id}")

    def prune_expired(self) -> None:
        now = datetime.now(timezone.utc)
        for token in [t for t, s in self._sessions.items() if s.is_expired(now)]:
            self.evict(token)

    async def close(self, access_token: str) -> None:
        session = self._sessions.pop(access_token, None)
        if session is not None:
            await session.close()
            logger.info(f"👋 Session closed for user {session.user_id}")

    async def close_all(self) -> None:
        for token in list(self._sessions):
            await self.close(token)
