import asyncio

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from db.database import build_engine, build_session_maker, create_db_and_tables
from db.store import EntryStore
from main import create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'entries.db'}", db_app_role=None)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def run_store(settings):
    """Run ``scenario(store, session_maker)`` against a fresh schema in one event loop."""

    def run(scenario, *, create_schema: bool = True):
        async def _main():
            engine = build_engine(settings)
            try:
                if create_schema:
                    await create_db_and_tables(engine)
                session_maker = build_session_maker(engine)
                return await scenario(EntryStore(session_maker), session_maker)
            finally:
                await engine.dispose()

        return asyncio.run(_main())

    return run
