"""
Notes feature: search, type filter, sorting and tag-based categories.
"""

from rememberly.features.notes.schemas import CategorySummary, Note, NoteType, SortOption

# Tag keywords that place a note in a category
CATEGORIES: dict[str, dict] = {
    "health": {
        "name": "Health",
        "description": "Medical, fitness, wellness",
        "keywords": {"health", "fitness", "medical", "wellness", "exercise", "diet"},
    },
    "technology": {
        "name": "Technology",
        "description": "AI, software, gadgets",
        "keywords": {"technology", "ai", "software", "programming", "tech", "code"},
    },
    "finance": {
        "name": "Finance",
        "description": "Investment, banking, crypto",
        "keywords": {"finance", "money", "investment", "banking", "crypto", "stocks"},
    },
    "news": {
        "name": "News",
        "description": "Current events, politics",
        "keywords": {"news", "politics", "current", "events", "world", "breaking"},
    },
}


def _matches(note: Note, query: str) -> bool:
    q = query.lower()
    return (
        q in note.title.lower()
        or q in note.original_content.lower()
        or q in (note.summary or "").lower()
        or any(q in tag.lower() for tag in note.tags)
    )


def filter_notes(
    notes: list[Note],
    query: str = "",
    note_type: NoteType | None = None,
    sort_by: SortOption = SortOption.NEWEST,
) -> list[Note]:
    """Explore view: keyword match on title/content/summary/tags, then sort."""
    result = [
        n for n in notes
        if (not query or _matches(n, query))
        and (note_type is None or n.type == note_type)
    ]

    match sort_by:
        case SortOption.NEWEST:
            result.sort(key=lambda n: n.created_at, reverse=True)
        case SortOption.OLDEST:
            result.sort(key=lambda n: n.created_at)
        case SortOption.TITLE:
            result.sort(key=lambda n: n.title.casefold())
        case SortOption.TYPE:
            result.sort(key=lambda n: n.type.value)
    return result


def notes_in_category(notes: list[Note], category_id: str) -> list[Note]:
    """Notes with at least one tag in the category's keyword list.

    Raises:
        KeyError: If the category id is unknown.
    """
    keywords = CATEGORIES[category_id]["keywords"]
    return [n for n in notes if any(tag.lower() in keywords for tag in n.tags)]


def categorize(notes: list[Note]) -> list[CategorySummary]:
    return [
        CategorySummary(
            id=category_id,
            name=info["name"],
            description=info["description"],
            count=len(notes_in_category(notes, category_id)),
        )
        for category_id, info in CATEGORIES.items()
    ]
