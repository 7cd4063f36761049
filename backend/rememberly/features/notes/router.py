"""
Notes feature: API routes for capture, explore, categories and note detail.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from rememberly.core.dependencies import get_session, get_summarizer_dep
from rememberly.core.exceptions import UrlFetchError, app_error_to_http, store_error_to_http
from rememberly.core.session import AppSession
from rememberly.features.notes.explore import categorize, filter_notes, notes_in_category
from rememberly.features.notes.schemas import ComposeRequest, NoteType, NoteUpdate, SortOption
from rememberly.features.notes.service import NoteComposer
from rememberly.features.summarizer.service import Summarizer

router = APIRouter()


async def _ensure_loaded(session: AppSession, refresh: bool = False) -> None:
    store = session.notes
    if refresh or not store.notes:
        await store.fetch_notes()
        if store.error and not store.notes:
            raise store_error_to_http(store.error, store.is_offline)


def _raise_store_error(session: AppSession):
    raise store_error_to_http(session.notes.error or "Request failed", session.notes.is_offline)


@router.get("/")
async def list_notes(
    q: str = "",
    type: NoteType | None = None,
    sort: SortOption = SortOption.NEWEST,
    refresh: bool = False,
    session: AppSession = Depends(get_session),
):
    """List (and optionally search/filter/sort) the user's notes."""
    await _ensure_loaded(session, refresh)
    notes = filter_notes(session.notes.notes, q, type, sort)
    return {
        "data": notes,
        "error": session.notes.error,
        "offline": session.notes.is_offline,
    }


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_note(
    data: ComposeRequest,
    session: AppSession = Depends(get_session),
    summarizer: Summarizer = Depends(get_summarizer_dep),
):
    """Capture content: fetch (URLs), summarize, save."""
    try:
        note_data = await NoteComposer(summarizer).compose(data.content, data.type)
    except UrlFetchError as e:
        raise app_error_to_http(e, status.HTTP_502_BAD_GATEWAY)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    note = await session.notes.create_note(note_data)
    if note is None:
        _raise_store_error(session)
    return {"data": note}


@router.get("/categories")
async def list_categories(session: AppSession = Depends(get_session)):
    """Tag-based categories with note counts."""
    await _ensure_loaded(session)
    return {"data": categorize(session.notes.notes)}


@router.get("/categories/{category_id}")
async def category_notes(category_id: str, session: AppSession = Depends(get_session)):
    await _ensure_loaded(session)
    try:
        notes = notes_in_category(session.notes.notes, category_id)
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown category")
    return {"data": notes}


@router.get("/{note_id}")
async def get_note(note_id: str, session: AppSession = Depends(get_session)):
    await _ensure_loaded(session)
    note = session.notes.get_note(note_id)
    if note is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return {"data": note}


@router.put("/{note_id}")
async def update_note(
    note_id: str,
    data: NoteUpdate,
    session: AppSession = Depends(get_session),
):
    """Update title, content, summary or tags of a note."""
    note = await session.notes.update_note(note_id, data)
    if note is None:
        _raise_store_error(session)
    return {"data": note}


@router.delete("/{note_id}")
async def delete_note(note_id: str, session: AppSession = Depends(get_session)):
    """Permanently delete a note."""
    if not await session.notes.delete_note(note_id):
        _raise_store_error(session)
    return {"message": "Note deleted"}
