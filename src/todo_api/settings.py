from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import URL


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'sql' (default) or 'memory'
    - DATABASE_URL: full SQLAlchemy URL; when set, the DB_* parts are ignored
    - DB_HOST, DB_PORT, DB_USER, DB_PASSWORD, DB_NAME: MySQL connection parts
    - DB_TABLE: table holding the todo rows. Default 'bb_todo_v1'
    - DB_ECHO: 'true' to log every SQL statement (default: false)
    - HOST, PORT: address the HTTP server binds to. Default 0.0.0.0:9999
    - LOG_LEVEL: root logging level. Default 'INFO'
    """

    persistence_backend: str
    database_url_override: Optional[str]
    db_host: str
    db_port: int
    db_user: str
    db_password: str
    db_name: str
    db_table: str
    db_echo: bool
    host: str
    port: int
    log_level: str

    # PUBLIC_INTERFACE
    def database_url(self) -> str:
        """Return the SQLAlchemy URL for the configured database, password included."""
        if self.database_url_override:
            return self.database_url_override
        url = URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
            query={"charset": "utf8mb4"},
        )
        return url.render_as_string(hide_password=False)


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "sql").strip().lower()
    if backend not in {"sql", "memory"}:
        backend = "sql"

    override = os.getenv("DATABASE_URL", "").strip() or None

    return Settings(
        persistence_backend=backend,
        database_url_override=override,
        db_host=_get_env("DB_HOST", "localhost").strip(),
        db_port=_parse_int(_get_env("DB_PORT", "3306"), 3306),
        db_user=_get_env("DB_USER", "godemo"),
        db_password=_get_env("DB_PASSWORD", "godemo"),
        db_name=_get_env("DB_NAME", "godemo").strip(),
        db_table=_get_env("DB_TABLE", "bb_todo_v1").strip(),
        db_echo=_parse_bool(_get_env("DB_ECHO", "false"), False),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "9999"), 9999),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
    )
