from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import Settings


class Base(DeclarativeBase):
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; its pool bounds simultaneous store connections."""
    kwargs = {"echo": settings.database_echo, "pool_pre_ping": True}
    if not settings.is_sqlite:
        kwargs["pool_size"] = settings.db_pool_size
    return create_async_engine(settings.database_url, **kwargs)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables(engine: AsyncEngine, app_role: Optional[str] = None) -> None:
    """Create the entries table, its views and (on PostgreSQL) trigger and grants."""
    # importing migrations registers the Entry model on Base.metadata
    from .migrations import apply_grants, create_updated_at_trigger, create_views

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await create_views(engine)
    await create_updated_at_trigger(engine)
    if app_role:
        await apply_grants(engine, app_role)

