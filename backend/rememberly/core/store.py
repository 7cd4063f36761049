"""
Shared base for session-scoped stores that mirror a Supabase table.

A store owns a local cache plus the `loading` / `error` / `is_offline`
flags the client renders. The cache is only mutated after the remote call
has succeeded.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from supabase import Client

from rememberly.core.exceptions import NotAuthenticatedError, classify_error

logger = logging.getLogger(__name__)


class RemoteStore:
    """Loading/error bookkeeping and gateway helpers shared by all stores."""

    def __init__(self, db: Client):
        self.db = db
        self.loading = False
        self.error: str | None = None
        self.is_offline = False
        self._generation = 0

    # ── State ────────────────────────────────────────────

    @asynccontextmanager
    async def _operation(self, generation: int | None = None):
        """Wrap one store action: loading on, previous error cleared.

        A fetch passes its generation so that finishing after a newer fetch
        started leaves `loading` to the newer one.
        """
        self.loading = True
        self.error = None
        self.is_offline = False
        try:
            yield
        finally:
            if generation is None or self._is_current(generation):
                self.loading = False

    def _record_error(self, error: BaseException, action: str) -> None:
        message, offline = classify_error(error)
        self.error = message
        self.is_offline = offline
        if offline:
            logger.warning(f"⚠️ {type(self).__name__}.{action}: offline ({error})")
        else:
            logger.error(f"❌ {type(self).__name__}.{action} failed: {error}")

    def clear_error(self) -> None:
        self.error = None
        self.is_offline = False

    # ── Fetch ordering ───────────────────────────────────

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ── Gateway ──────────────────────────────────────────

    async def _execute(self, query) -> list[dict]:
        """Run a blocking Supabase query in a worker thread, return rows."""
        result = await asyncio.to_thread(query.execute)
        return result.data or []

    async def _current_user_id(self) -> str:
        """Return the session user's id or raise NotAuthenticatedError."""
        response = await asyncio.to_thread(self.db.auth.get_user)
        user = getattr(response, "user", None)
        if user is None:
            raise NotAuthenticatedError()
        return str(user.id)
