"""Database schema utilities: views, updated_at trigger and role grants"""
import logging

from sqlalchemy.engine import Dialect
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy import Select

from .views import VIEWS

logger = logging.getLogger(__name__)


def view_ddl(name: str, query: Select, dialect: Dialect) -> str:
    """Compile a view body into CREATE VIEW DDL for the given dialect."""
    body = query.compile(dialect=dialect, compile_kwargs={"literal_binds": True})
    if dialect.name == "postgresql":
        return f"CREATE OR REPLACE VIEW {name} AS {body}"
    return f"CREATE VIEW IF NOT EXISTS {name} AS {body}"


async def create_views(engine: AsyncEngine):
    """Create (or replace) the daily_stats and location_stats views"""
    async with engine.begin() as conn:
        for name, query in VIEWS.items():
            await conn.exec_driver_sql(view_ddl(name, query, conn.dialect))
            logger.debug("View %s is up to date", name)


async def create_updated_at_trigger(engine: AsyncEngine):
    """Reset entries.updated_at on every row update, including raw SQL updates"""
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.exec_driver_sql(
                """
                CREATE OR REPLACE FUNCTION update_updated_at()
                RETURNS TRIGGER AS $$
                BEGIN
                    NEW.updated_at = CURRENT_TIMESTAMP;
                    RETURN NEW;
                END;
                $$ LANGUAGE plpgsql
                """
            )
            await conn.exec_driver_sql("DROP TRIGGER IF EXISTS entries_update_trigger ON entries")
            await conn.exec_driver_sql(
                """
                CREATE TRIGGER entries_update_trigger
                BEFORE UPDATE ON entries
                FOR EACH ROW
                EXECUTE FUNCTION update_updated_at()
                """
            )
        elif conn.dialect.name == "sqlite":
            # SQLite has no BEFORE UPDATE row rewrite; patch the row after the update.
            # Recursive triggers are off by default, so the inner UPDATE does not re-fire.
            await conn.exec_driver_sql(
                """
                CREATE TRIGGER IF NOT EXISTS entries_update_trigger
                AFTER UPDATE ON entries
                FOR EACH ROW
                BEGIN
                    UPDATE entries SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
                END
                """
            )
        else:
            logger.warning("No updated_at trigger for dialect %s; relying on ORM onupdate", conn.dialect.name)


async def apply_grants(engine: AsyncEngine, role: str):
    """Grant the application role read on entries and views, insert/update on entries"""
    async with engine.begin() as conn:
        if conn.dialect.name != "postgresql":
            logger.info("Skipping grants for role %s: %s has no roles", role, conn.dialect.name)
            return
        quoted = conn.dialect.identifier_preparer.quote(role)
        statements = [
            f"GRANT SELECT, INSERT, UPDATE ON entries TO {quoted}",
            f"GRANT USAGE, SELECT ON SEQUENCE entries_id_seq TO {quoted}",
        ]
        statements += [f"GRANT SELECT ON {name} TO {quoted}" for name in VIEWS]
        for statement in statements:
            await conn.exec_driver_sql(statement)
        logger.info("Granted entries access to role %s", role)
