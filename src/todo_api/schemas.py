from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Business codes carried in the envelope "status" field
CODE_OK = 200
CODE_MALFORMED_INPUT = 4000
CODE_NOT_FOUND = 5005
CODE_CREATE_FAILED = 5005
CODE_UPDATE_FAILED = 5006
CODE_DELETE_FAILED = 5007


# PUBLIC_INTERFACE
class TodoIn(BaseModel):
    """
    Request body for creating or replacing a Todo item.

    Omitted fields fall back to their zero values. Unknown keys such as
    ``id`` or the timestamps are ignored; storage assigns those.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={"example": {"title": "Buy groceries", "status": 1}},
    )

    title: str = Field(default="", description="Free-form title")
    status: int = Field(default=0, ge=0, le=255, description="Application-defined status code")


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Todo item as serialized in response payloads.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "Buy groceries",
                "status": 1,
                "created_time": "2025-01-25T10:15:30",
                "updated_time": "2025-01-26T09:00:00",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Free-form title")
    status: int = Field(..., description="Application-defined status code")
    created_at: datetime = Field(..., serialization_alias="created_time", description="Creation timestamp")
    updated_at: datetime = Field(..., serialization_alias="updated_time", description="Last update timestamp")


# PUBLIC_INTERFACE
class Envelope(BaseModel):
    """
    Uniform response body. ``status`` is the business code, not the HTTP status.
    """

    status: int = Field(..., description="Business code, 200 on success")
    message: str = Field(..., description="Human-readable outcome")
    data: Any = Field(
        default="", description="Payload on success, empty string on failure"
    )
