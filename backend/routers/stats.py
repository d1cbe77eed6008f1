import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from core.dependencies import get_store
from db.errors import StoreError
from db.store import EntryStore
from schemas.stats import DailyStatsList, LocationStatsList, StatsRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats")


def _failed(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


@router.get("", response_model=StatsRead)
async def get_stats(store: EntryStore = Depends(get_store)):
    """Totals across all entries and for today"""
    try:
        totals = await store.aggregate_totals()
        today = await store.aggregate_today()
    except StoreError:
        logger.exception("Database error while computing stats")
        raise _failed("Failed to fetch stats")
    return StatsRead(
        total_entries=totals.count,
        total_quantity=totals.total,
        today_entries=today.count,
        today_quantity=today.total,
    )


@router.get("/daily", response_model=DailyStatsList)
async def get_daily_stats(store: EntryStore = Depends(get_store)):
    """Per-day count, sum and average of quantity, newest day first"""
    try:
        days = await store.daily_stats()
    except StoreError:
        logger.exception("Database error while reading daily_stats")
        raise _failed("Failed to fetch daily stats")
    return {"days": [asdict(d) for d in days], "count": len(days)}


@router.get("/locations", response_model=LocationStatsList)
async def get_location_stats(store: EntryStore = Depends(get_store)):
    """Per-location count and sum of quantity, largest total first"""
    try:
        locations = await store.location_stats()
    except StoreError:
        logger.exception("Database error while reading location_stats")
        raise _failed("Failed to fetch location stats")
    return {"locations": [asdict(loc) for loc in locations], "count": len(locations)}
