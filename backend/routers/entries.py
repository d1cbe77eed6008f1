import logging

from fastapi import APIRouter, Depends, HTTPException, status

from core.config import Settings
from core.dependencies import get_settings, get_store
from db.errors import NotFound, StoreError
from db.store import EntryStore
from schemas.entries import EntryCreate, EntryList, EntryRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries")


@router.get("", response_model=EntryList)
async def list_entries(store: EntryStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    """Get the most recently created entries, newest first"""
    try:
        entries = await store.list_recent(settings.entries_list_limit)
    except StoreError:
        logger.exception("Database error while listing entries")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch entries",
        )
    return {"entries": [entry.to_summary for entry in entries], "count": len(entries)}


@router.get("/{entry_id}", response_model=EntryRead)
async def get_entry(entry_id: str, store: EntryStore = Depends(get_store)):
    """Get an entry by ID"""
    # Anything but plain ASCII digits cannot name a row, so it is reported as a plain miss.
    if not (entry_id.isascii() and entry_id.isdigit()):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")

    try:
        entry = await store.get(int(entry_id))
    except NotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    except StoreError:
        logger.exception("Database error while fetching entry %s", entry_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch entry",
        )
    return entry.to_schema


@router.post("", response_model=EntryRead, status_code=status.HTTP_201_CREATED)
async def create_entry(entry: EntryCreate, store: EntryStore = Depends(get_store)):
    """Create a new entry"""
    # 0, "" and null are all treated as missing
    if not entry.quantity or not entry.location:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="quantity and location are required",
        )

    # Constraint violations (e.g. a negative quantity) are reported like any other store failure.
    try:
        created = await store.insert(entry.quantity, entry.location, entry.notes)
    except StoreError:
        logger.exception("Database error while creating entry")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create entry",
        )
    return created.to_schema
