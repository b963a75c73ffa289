from __future__ import annotations

from typing import Any, Dict, Iterable, List, Union

from fastapi.responses import JSONResponse

from .models import TodoEntity
from .schemas import TodoOut


def serialize_todo(entity: TodoEntity) -> Dict[str, Any]:
    """Render a repository entity in its wire shape (created_time/updated_time keys)."""
    return TodoOut.model_validate(entity).model_dump(mode="json", by_alias=True)


def serialize_todos(entities: Iterable[TodoEntity]) -> List[Dict[str, Any]]:
    return [serialize_todo(e) for e in entities]


# PUBLIC_INTERFACE
def envelope(
    code: int,
    message: str,
    data: Union[Dict[str, Any], List[Any], str] = "",
) -> Dict[str, Any]:
    """
    Build the standard response body.

    Args:
        code: Business code for the "status" field.
        message: Human-readable outcome.
        data: Serialized payload, or "" on failure.

    Returns:
        Dict with keys: status, message, data.
    """
    return {"status": int(code), "message": message, "data": data}


# PUBLIC_INTERFACE
def respond(
    http_status: int,
    code: int,
    message: str,
    data: Union[Dict[str, Any], List[Any], str] = "",
) -> JSONResponse:
    """Wrap an envelope in a JSONResponse with the given HTTP status."""
    return JSONResponse(status_code=http_status, content=envelope(code, message, data))
