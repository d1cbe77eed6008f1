"""
Create the entries table, its views, the updated_at trigger and role grants.

Run locally:
  PYTHONPATH=backend python backend/scripts/init_schema.py

It uses the same DB_* / DATABASE_URL env vars as the backend (dotenv supported by core.config).
Set DB_APP_ROLE to grant the application role access to the table and views.
"""

from __future__ import annotations

import asyncio

from core.config import settings
from db.database import build_engine, create_db_and_tables


async def main() -> None:
    engine = build_engine(settings)
    try:
        await create_db_and_tables(engine, settings.db_app_role)
    finally:
        await engine.dispose()
    grants = f", grants for role {settings.db_app_role}" if settings.db_app_role else ""
    print(f"Schema ready: entries, daily_stats, location_stats{grants}")


if __name__ == "__main__":
    asyncio.run(main())
