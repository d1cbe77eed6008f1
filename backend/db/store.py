"""
Entry store: persistence of entries and on-read aggregates.

Every operation borrows one pooled session for its own duration and gives it
back on every exit path. SQLAlchemy and driver exceptions are translated
into ``db.errors``; nothing is retried.
"""

from __future__ import annotations

import asyncio
import re
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any, AsyncIterator, List, NamedTuple

from sqlalchemy import func, select, text
from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .entry import LOCATION_MAX_LENGTH, Entry
from .errors import ConstraintViolation, NotFound, StorageError, StorageUnavailable, StoreError
from .views import daily_stats, location_stats

# id and quantity are 32-bit integer columns; larger ids can never match a row.
INT_MAX = 2**31 - 1
MAX_ENTRY_ID = INT_MAX


class Aggregate(NamedTuple):
    count: int
    total: int


@dataclass(frozen=True)
class DailyStat:
    date: date
    entry_count: int
    total_quantity: int
    avg_quantity: float


@dataclass(frozen=True)
class LocationStat:
    location: str
    entry_count: int
    total_quantity: int


_INT_TEXT = re.compile(r"\s*[+-]?[0-9]+\s*")


def _coerce_int(field: str, value: Any) -> int:
    # bool is an int subclass, but a JSON true is not a count
    if isinstance(value, bool):
        raise ConstraintViolation(f"{field} must be an integer, got a boolean")
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    elif isinstance(value, str) and _INT_TEXT.fullmatch(value):
        result = int(value)
    else:
        raise ConstraintViolation(f"{field} must be an integer, got {value!r}")
    if abs(result) > INT_MAX:
        raise ConstraintViolation(f"{field} is out of range")
    return result


def _coerce_text(field: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConstraintViolation(f"{field} must be text, got {type(value).__name__}")


def _as_date(value) -> date:
    # PostgreSQL returns a date, SQLite an ISO string
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class EntryStore:
    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_maker() as session:
            # Failing to check out a connection means the database is unreachable;
            # failures after that are classified by what the statement hit.
            try:
                await session.connection()
            except (SQLAlchemyError, OSError, asyncio.TimeoutError) as exc:
                # asyncpg surfaces refused/timed out connects without wrapping them
                raise StorageUnavailable(str(exc)) from exc

            try:
                yield session
            except StoreError:
                raise
            except IntegrityError as exc:
                raise ConstraintViolation(str(exc.orig)) from exc
            except DBAPIError as exc:
                if exc.connection_invalidated or isinstance(exc, InterfaceError):
                    raise StorageUnavailable(str(exc.orig)) from exc
                raise StorageError(str(exc.orig)) from exc
            except SQLAlchemyError as exc:
                raise StorageError(str(exc)) from exc
            except (OSError, asyncio.TimeoutError) as exc:
                raise StorageUnavailable(str(exc)) from exc

    async def ping(self) -> None:
        async with self._session() as session:
            await session.execute(text("SELECT 1"))

    async def insert(self, quantity: Any, location: Any, notes: Any = None) -> Entry:
        """Persist a new entry and return the stored row.

        Accepts raw request values: integral numbers and digit strings for
        quantity, text or numbers for location and notes. Anything else raises
        ``ConstraintViolation``; quantity > 0 is enforced by the table's CHECK
        constraint.
        """
        if quantity is None:
            raise ConstraintViolation("quantity is required")
        if not location:
            raise ConstraintViolation("location is required")

        quantity = _coerce_int("quantity", quantity)
        location = _coerce_text("location", location)
        if len(location) > LOCATION_MAX_LENGTH:
            raise ConstraintViolation(f"location is longer than {LOCATION_MAX_LENGTH} characters")
        if notes is not None:
            notes = _coerce_text("notes", notes)

        async with self._session() as session:
            entry = Entry(quantity=quantity, location=location, notes=notes)
            session.add(entry)
            await session.commit()
            await session.refresh(entry)
            return entry

    async def get(self, entry_id: int) -> Entry:
        if not 0 < entry_id <= MAX_ENTRY_ID:
            raise NotFound(f"Entry {entry_id} not found")
        async with self._session() as session:
            entry = await session.get(Entry, entry_id)
        if entry is None:
            raise NotFound(f"Entry {entry_id} not found")
        return entry

    async def list_recent(self, limit: int) -> List[Entry]:
        """Newest first; id breaks created_at ties so the order is stable."""
        stmt = select(Entry).order_by(Entry.created_at.desc(), Entry.id.desc()).limit(limit)
        async with self._session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _aggregate(self, *criteria) -> Aggregate:
        stmt = select(func.count(Entry.id), func.coalesce(func.sum(Entry.quantity), 0))
        if criteria:
            stmt = stmt.where(*criteria)
        async with self._session() as session:
            result = await session.execute(stmt)
            count, total = result.one()
        return Aggregate(count=int(count or 0), total=int(total or 0))

    async def aggregate_totals(self) -> Aggregate:
        return await self._aggregate()

    async def aggregate_today(self) -> Aggregate:
        """Entries whose created_at falls on the database's current date."""
        return await self._aggregate(func.date(Entry.created_at) == func.current_date())

    async def daily_stats(self) -> List[DailyStat]:
        stmt = select(daily_stats).order_by(daily_stats.c.date.desc())
        async with self._session() as session:
            rows = (await session.execute(stmt)).all()
        return [
            DailyStat(
                date=_as_date(row.date),
                entry_count=int(row.entry_count),
                total_quantity=int(row.total_quantity or 0),
                avg_quantity=float(row.avg_quantity or 0),
            )
            for row in rows
        ]

    async def location_stats(self) -> List[LocationStat]:
        stmt = select(location_stats).order_by(
            location_stats.c.total_quantity.desc(), location_stats.c.location
        )
        async with self._session() as session:
            rows = (await session.execute(stmt)).all()
        return [
            LocationStat(
                location=row.location,
                entry_count=int(row.entry_count),
                total_quantity=int(row.total_quantity or 0),
            )
            for row in rows
        ]
