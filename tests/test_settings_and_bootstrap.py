import asyncio
import json
import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import make_url

from todo_api.db import SQLRepository
from todo_api.errors import StorageError
from todo_api.generate_openapi import generate_openapi
from todo_api.logs import configure_logging
from todo_api.main import create_app
from todo_api.repositories import InMemoryRepository, get_repository
from todo_api.settings import get_settings

_ENV_VARS = [
    "PERSISTENCE_BACKEND",
    "DATABASE_URL",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_TABLE",
    "DB_ECHO",
    "HOST",
    "PORT",
    "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.persistence_backend == "sql"
        assert s.db_table == "bb_todo_v1"
        assert s.db_echo is False
        assert s.host == "0.0.0.0"
        assert s.port == 9999
        assert s.log_level == "INFO"

        url = make_url(s.database_url())
        assert url.drivername == "mysql+pymysql"
        assert url.username == "godemo"
        assert url.password == "godemo"
        assert url.host == "localhost"
        assert url.port == 3306
        assert url.database == "godemo"
        assert url.query["charset"] == "utf8mb4"

    def test_db_parts_from_env(self, clean_env):
        clean_env.setenv("DB_HOST", "db.internal")
        clean_env.setenv("DB_PORT", "3307")
        clean_env.setenv("DB_USER", "todo")
        clean_env.setenv("DB_PASSWORD", "p@ss:word")
        clean_env.setenv("DB_NAME", "todos")
        url = make_url(get_settings().database_url())
        assert url.host == "db.internal"
        assert url.port == 3307
        assert url.username == "todo"
        assert url.password == "p@ss:word"
        assert url.database == "todos"

    def test_database_url_override(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite:///./todos.db")
        clean_env.setenv("DB_HOST", "ignored")
        assert get_settings().database_url() == "sqlite:///./todos.db"

    def test_unknown_backend_falls_back_to_sql(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "mongo")
        assert get_settings().persistence_backend == "sql"

    def test_bad_port_falls_back(self, clean_env):
        clean_env.setenv("PORT", "http")
        assert get_settings().port == 9999

    def test_echo_flag(self, clean_env):
        clean_env.setenv("DB_ECHO", "yes")
        assert get_settings().db_echo is True


class TestRepositoryFactory:
    def test_memory_backend(self, clean_env):
        clean_env.setenv("PERSISTENCE_BACKEND", "memory")
        assert isinstance(get_repository(), InMemoryRepository)

    def test_sql_backend_uses_configured_table(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        clean_env.setenv("DB_TABLE", "custom_todo")
        repo = get_repository()
        assert isinstance(repo, SQLRepository)
        repo.ensure_schema()
        created = repo.add("x", 1)
        assert repo.get(created["id"])["title"] == "x"
        repo.close()


class TestBootstrap:
    def test_app_built_from_settings(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        with TestClient(create_app()) as c:
            assert c.get("/").json()["backend"] == "sql"
            res = c.post("/api/v1/todo", json={"title": "boot", "status": 1})
            assert res.json()["status"] == 200

    def test_unreachable_database_fails_schema_setup(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'missing-dir' / 'todos.db'}"
        repo = SQLRepository(url)
        with pytest.raises(StorageError):
            repo.ensure_schema()
        repo.close()

    def test_failed_schema_setup_still_closes_repository(self):
        closed = []

        class BrokenSchemaRepository(InMemoryRepository):
            def ensure_schema(self):
                raise StorageError("connection refused")

            def close(self):
                closed.append(True)

        app = create_app(repository=BrokenSchemaRepository())

        async def start():
            async with app.router.lifespan_context(app):
                pass

        with pytest.raises(StorageError):
            asyncio.run(start())
        assert closed == [True]


class TestLogging:
    def test_configure_logging_sets_level(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
            configure_logging("nonsense")
            assert root.level == logging.INFO
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)


class TestOpenAPI:
    def test_generate_openapi_writes_schema(self, tmp_path):
        out = tmp_path / "interfaces" / "openapi.json"
        path = generate_openapi(str(out))
        assert path == str(out)
        schema = json.loads(out.read_text(encoding="utf-8"))
        assert "/api/v1/todo" in schema["paths"]
        assert "/api/v1/todo/{todo_id}" in schema["paths"]
        assert {"health", "todos"} <= {t["name"] for t in schema["tags"]}
