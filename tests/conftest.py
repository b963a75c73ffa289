from typing import List

import pytest
from fastapi.testclient import TestClient

from todo_api.db import SQLRepository
from todo_api.errors import StorageError
from todo_api.main import create_app
from todo_api.models import TodoEntity
from todo_api.repositories import InMemoryRepository, Repository


class FailingRepository(Repository):
    """Repository whose every operation fails as if the database were unreachable."""

    name = "failing"

    def add(self, title: str, status: int) -> TodoEntity:
        raise StorageError("connection refused")

    def get(self, todo_id: int) -> TodoEntity:
        raise StorageError("connection refused")

    def list(self, status: int = 1) -> List[TodoEntity]:
        raise StorageError("connection refused")

    def update(self, todo_id: int, title: str, status: int) -> TodoEntity:
        raise StorageError("connection refused")

    def delete(self, todo_id: int) -> None:
        raise StorageError("connection refused")


def _sqlite_repository() -> SQLRepository:
    repo = SQLRepository("sqlite://", table_name="bb_todo_test")
    repo.ensure_schema()
    return repo


@pytest.fixture(params=["memory", "sql"])
def repo(request):
    r = InMemoryRepository() if request.param == "memory" else _sqlite_repository()
    yield r
    r.close()


@pytest.fixture(params=["memory", "sql"])
def client(request):
    r = InMemoryRepository() if request.param == "memory" else _sqlite_repository()
    with TestClient(create_app(repository=r)) as c:
        yield c


@pytest.fixture
def failing_client():
    with TestClient(create_app(repository=FailingRepository())) as c:
        yield c
