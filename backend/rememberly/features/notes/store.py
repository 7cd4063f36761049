"""
Notes feature: session-scoped cache of the notes table.
"""

import logging
from datetime import datetime, timezone

from supabase import Client

from rememberly.core.exceptions import NoteNotFoundError
from rememberly.core.store import RemoteStore
from rememberly.features.notes.schemas import Note, NoteCreate, NoteUpdate

logger = logging.getLogger(__name__)


class NotesStore(RemoteStore):
    """Notes of the signed-in user, newest first."""

    def __init__(self, db: Client):
        super().__init__(db)
        self.notes: list[Note] = []

    def get_note(self, note_id: str) -> Note | None:
        return next((n for n in self.notes if n.id == note_id), None)

    async def fetch_notes(self) -> None:
        """Reload the cache. On failure the previous notes stay in place."""
        generation = self._next_generation()
        async with self._operation(generation):
            try:
                user_id = await self._current_user_id()
                rows = await self._execute(
                    self.db.table("notes")
                    .select("*")
                    .eq("user_id", user_id)
                    .order("created_at", desc=True)
                )
            except Exception as e:
                if self._is_current(generation):
                    self._record_error(e, "fetch_notes")
                return

            if not self._is_current(generation):
                logger.debug("Discarding superseded notes fetch")
                return
            self.notes = [Note(**row) for row in rows]

    async def create_note(self, data: NoteCreate) -> Note | None:
        """Insert a note and prepend it to the cache. Returns None on failure."""
        async with self._operation():
            try:
                user_id = await self._current_user_id()
                insert_data = {**data.model_dump(mode="json"), "user_id": user_id}
                rows = await self._execute(self.db.table("notes").insert(insert_data))
                note = Note(**rows[0])
            except Exception as e:
                self._record_error(e, "create_note")
                return None

            self.notes = [note, *self.notes]
            logger.info(f"✅ Created {note.type.value} note {note.id}")
            return note

    async def update_note(self, note_id: str, patch: NoteUpdate) -> Note | None:
        """Apply a partial update remotely, then replace the cached note with the stored row."""
        async with self._operation():
            update_data = patch.model_dump(exclude_none=True)
            try:
                if not update_data:
                    note = self.get_note(note_id)
                    if note is None:
                        raise NoteNotFoundError(note_id)
                    return note

                user_id = await self._current_user_id()
                rows = await self._execute(
                    self.db.table("notes")
                    .update({**update_data, "updated_at": datetime.now(timezone.utc).isoformat()})
                    .eq("id", note_id)
                    .eq("user_id", user_id)
                )
                if not rows:
                    raise NoteNotFoundError(note_id)
                note = Note(**rows[0])
            except Exception as e:
                self._record_error(e, "update_note")
                return None

            self.notes = [note if n.id == note_id else n for n in self.notes]
            return note

    async def delete_note(self, note_id: str) -> bool:
        """Hard delete a note remotely, then drop it from the cache."""
        async with self._operation():
            try:
                user_id = await self._current_user_id()
                rows = await self._execute(
                    self.db.table("notes")
                    .delete()
                    .eq("id", note_id)
                    .eq("user_id", user_id)
                )
                if not rows:
                    raise NoteNotFoundError(note_id)
            except Exception as e:
                self._record_error(e, "delete_note")
                return False

            self.notes = [n for n in self.notes if n.id != note_id]
            return True
