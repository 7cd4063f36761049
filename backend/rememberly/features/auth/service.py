"""
Auth feature: Supabase (GoTrue) sign-up, sign-in, sign-out and session user.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from supabase import Client

from rememberly.core.exceptions import classify_error, is_network_error

logger = logging.getLogger(__name__)

STALE_SESSION_MESSAGE = "Session from session_id claim in JWT does not exist"


@dataclass
class AuthResult:
    """Outcome of sign-up / sign-in: either user+session or an error message."""
    user: Any = None
    session: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.user is not None


class AuthService:
    """Wraps the auth API of one Supabase client."""

    def __init__(self, db: Client):
        self.db = db
        # Set by get_current_user when the token no longer resolves to a user
        self.session_expired = False

    async def _credentials_call(self, method, email: str, password: str) -> AuthResult:
        try:
            response = await asyncio.to_thread(method, {"email": email, "password": password})
        except Exception as e:
            message, _ = classify_error(e)
            logger.error(f"❌ Auth request failed for {email}: {e}")
            return AuthResult(error=message)
        return AuthResult(user=response.user, session=response.session)

    async def sign_up(self, email: str, password: str) -> AuthResult:
        return await self._credentials_call(self.db.auth.sign_up, email, password)

    async def sign_in(self, email: str, password: str) -> AuthResult:
        return await self._credentials_call(self.db.auth.sign_in_with_password, email, password)

    async def sign_out(self) -> str | None:
        """Returns an error message, or None when signed out cleanly."""
        try:
            await asyncio.to_thread(self.db.auth.sign_out)
        except Exception as e:
            logger.error(f"Sign out error: {e}")
            return "Failed to sign out. Please try again."
        return None

    async def get_current_user(self):
        """The session user, or None.

        A stale session is cleared; a network failure also yields None so
        cached data stays usable offline. Any other auth error (expired or
        invalid JWT) is logged and marks the session as expired.
        """
        self.session_expired = False
        try:
            response = await asyncio.to_thread(self.db.auth.get_user)
        except Exception as e:
            if is_network_error(e):
                logger.warning(f"⚠️ Offline while reading current user: {e}")
                return None
            if STALE_SESSION_MESSAGE in str(e):
                await self.sign_out()
            else:
                logger.error(f"❌ Could not read current user: {e}")
            self.session_expired = True
            return None

        user = getattr(response, "user", None)
        if user is None:
            self.session_expired = True
        return user
