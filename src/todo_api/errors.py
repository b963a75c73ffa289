from __future__ import annotations


class TodoError(Exception):
    """Base class for record store failures."""


# PUBLIC_INTERFACE
class NotFound(TodoError):
    """Raised when no todo row matches the requested id."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"todo {todo_id} not found")
        self.todo_id = todo_id


# PUBLIC_INTERFACE
class StorageError(TodoError):
    """
    Raised when the database is unreachable or rejects a statement.

    The underlying driver/ORM exception is chained as ``__cause__``.
    """

