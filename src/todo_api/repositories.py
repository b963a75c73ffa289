from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import List, Optional

from .errors import NotFound
from .models import TodoEntity
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

DEFAULT_LIST_STATUS = 1


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    name: str = "abstract"

    @abstractmethod
    def add(self, title: str, status: int) -> TodoEntity:
        """Insert a new todo and return it with id and timestamps assigned."""

    @abstractmethod
    def get(self, todo_id: int) -> TodoEntity:
        """Return the todo with this id. Raises NotFound."""

    @abstractmethod
    def list(self, status: int = DEFAULT_LIST_STATUS) -> List[TodoEntity]:
        """Return every todo with the given status, ordered by id. Empty list when none match."""

    @abstractmethod
    def update(self, todo_id: int, title: str, status: int) -> TodoEntity:
        """
        Overwrite title and status of an existing todo and refresh updated_at.

        Both values are written as given, zero and empty values included.
        Raises NotFound.
        """

    @abstractmethod
    def delete(self, todo_id: int) -> None:
        """Physically remove a todo. Raises NotFound."""

    def ensure_schema(self) -> None:
        """Create backing storage if it does not exist yet."""

    def close(self) -> None:
        """Release any held resources."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and local runs.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def add(self, title: str, status: int) -> TodoEntity:
        now = self._now()
        entity: TodoEntity = {
            "id": self._allocate_id(),
            "title": title,
            "status": status,
            "created_at": now,
            "updated_at": now,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        logger.debug("created todo %s", entity["id"])
        return entity.copy()

    def get(self, todo_id: int) -> TodoEntity:
        with self._lock:
            item = self._items.get(todo_id)
            if item is None:
                raise NotFound(todo_id)
            return item.copy()

    def list(self, status: int = DEFAULT_LIST_STATUS) -> List[TodoEntity]:
        with self._lock:
            matching = [t for t in self._items.values() if t["status"] == status]
            return [t.copy() for t in sorted(matching, key=lambda t: t["id"])]

    def update(self, todo_id: int, title: str, status: int) -> TodoEntity:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                raise NotFound(todo_id)

            updated = existing.copy()
            updated["title"] = title
            updated["status"] = status
            updated["updated_at"] = self._now()

            self._items[todo_id] = updated
            logger.debug("updated todo %s", todo_id)
            return updated.copy()

    def delete(self, todo_id: int) -> None:
        with self._lock:
            if self._items.pop(todo_id, None) is None:
                raise NotFound(todo_id)
        logger.debug("deleted todo %s", todo_id)


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - sql: SQLRepository against settings.database_url()
    - memory: InMemoryRepository
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "memory":
        return InMemoryRepository()

    from .db import SQLRepository

    return SQLRepository(
        settings.database_url(),
        table_name=settings.db_table,
        echo=settings.db_echo,
    )
