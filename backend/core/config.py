import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """Runtime configuration read from the environment (and `.env`).

    Values are read when an instance is created; keyword arguments override
    individual settings, e.g. ``Settings(database_url="sqlite+aiosqlite:///x.db")``.
    """

    def __init__(self, **overrides):
        self.db_user: str = os.getenv("DB_USER", "entrylog")
        self.db_password: str = os.getenv("DB_PASSWORD", "password")
        self.db_host: str = os.getenv("DB_HOST", "localhost")
        self.db_port: int = int(os.getenv("DB_PORT", "5432"))
        self.db_name: str = os.getenv("DB_NAME", "entrylog")

        # Full SQLAlchemy URL; built from the DB_* parts when left empty.
        self.database_url: str = os.getenv("DATABASE_URL", "")
        self.database_echo: bool = _env_bool("DATABASE_ECHO")
        self.db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "10"))

        # Role granted read/insert/update when the schema is initialised (PostgreSQL only)
        self.db_app_role = os.getenv("DB_APP_ROLE") or None

        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = int(os.getenv("PORT", "3000"))
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.cors_origins: List[str] = _env_list("CORS_ORIGINS", "*")

        self.entries_list_limit: int = int(os.getenv("ENTRIES_LIST_LIMIT", "100"))

        for name, value in overrides.items():
            if not hasattr(self, name):
                raise TypeError(f"Unknown setting: {name}")
            setattr(self, name, value)

        if not self.database_url:
            self.database_url = (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
