"""
Insert a few sample entries (skipped when the table already has rows).

Run locally:
  PYTHONPATH=backend python backend/scripts/seed_sample_entries.py
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from core.config import settings
from db.database import build_engine, build_session_maker, create_db_and_tables
from db.store import EntryStore


@dataclass(frozen=True)
class SeedEntry:
    quantity: int
    location: str
    notes: Optional[str] = None


SEED_ENTRIES: list[SeedEntry] = [
    SeedEntry(quantity=1, location="Office", notes="Morning break"),
    SeedEntry(quantity=2, location="Home", notes="After lunch"),
    SeedEntry(quantity=1, location="Car", notes="Commute home"),
]


async def seed(store: EntryStore) -> int:
    """Insert SEED_ENTRIES into an empty table; return how many rows were added."""
    totals = await store.aggregate_totals()
    if totals.count:
        return 0
    for item in SEED_ENTRIES:
        await store.insert(item.quantity, item.location, item.notes)
    return len(SEED_ENTRIES)


async def main() -> None:
    engine = build_engine(settings)
    try:
        await create_db_and_tables(engine, settings.db_app_role)
        added = await seed(EntryStore(build_session_maker(engine)))
    finally:
        await engine.dispose()
    if added:
        print(f"Inserted {added} sample entries")
    else:
        print("entries already has rows, nothing seeded")


if __name__ == "__main__":
    asyncio.run(main())
