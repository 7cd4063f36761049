"""
Notes feature: capture flow that turns raw content into a note row.
"""

from rememberly.features.notes.schemas import NoteCreate, NoteType
from rememberly.features.summarizer.service import Summarizer


class NoteComposer:
    """Fetch (for URLs), summarize and build the NoteCreate row."""

    def __init__(self, summarizer: Summarizer):
        self.summarizer = summarizer

    async def compose(self, content: str, note_type: NoteType = NoteType.TEXT) -> NoteCreate:
        """Build a note from what the user captured.

        For url notes `content` is the URL, for file/image notes it is the
        local file URI returned by the picker.

        Raises:
            ValueError: If content is blank.
            UrlFetchError: If the URL cannot be fetched.
        """
        reference = content.strip()
        if not reference:
            raise ValueError("Please enter some content")

        body = content
        if note_type == NoteType.URL:
            body = await self.summarizer.fetch_url_content(reference)

        result = await self.summarizer.summarize(body, note_type.value)

        return NoteCreate(
            title=result.title,
            original_content=body,
            summary=result.summary,
            type=note_type,
            tags=result.tags,
            source_url=reference if note_type == NoteType.URL else None,
            file_url=reference if note_type in (NoteType.FILE, NoteType.IMAGE) else None,
        )
