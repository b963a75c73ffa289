from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    Transient copy of a todo row, as returned by every repository backend.

    Fields:
    - id: Unique integer identifier assigned by storage
    - title: Free-form title
    - status: Small unsigned integer (0..255), meaning is up to the client
    - created_at: Creation timestamp, never changed afterwards
    - updated_at: Refreshed on every update
    """

    id: int
    title: str
    status: int
    created_at: datetime
    updated_at: datetime
