from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from ..errors import NotFound, StorageError
from ..repositories import DEFAULT_LIST_STATUS, Repository
from ..schemas import (
    CODE_CREATE_FAILED,
    CODE_DELETE_FAILED,
    CODE_NOT_FOUND,
    CODE_OK,
    CODE_UPDATE_FAILED,
    Envelope,
    TodoIn,
)
from ..utils import respond, serialize_todo, serialize_todos

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")

_ENVELOPE_DOC = {"model": Envelope}


def get_repo(request: Request) -> Repository:
    """
    Resolve the repository the application was started with.
    """
    return request.app.state.repository


def _not_found() -> JSONResponse:
    return respond(status.HTTP_404_NOT_FOUND, CODE_NOT_FOUND, "record not found")


# PUBLIC_INTERFACE
@router.get(
    "/hello",
    summary="Hello",
    tags=["health"],
    responses={200: _ENVELOPE_DOC},
)
def hello() -> JSONResponse:
    """Liveness greeting."""
    return respond(status.HTTP_200_OK, CODE_OK, "hello Todo")


# PUBLIC_INTERFACE
@router.post(
    "/todo",
    summary="Create Todo",
    description="Create a new Todo item and return it with its assigned id and timestamps.",
    tags=["todos"],
    responses={200: {**_ENVELOPE_DOC, "description": "Created, or business code 5005 when the insert failed"}},
)
def add_todo(payload: TodoIn, repo: Repository = Depends(get_repo)) -> JSONResponse:
    """
    Create a new Todo.
    """
    try:
        created = repo.add(payload.title, payload.status)
    except StorageError:
        logger.exception("create todo failed")
        return respond(status.HTTP_200_OK, CODE_CREATE_FAILED, "create failed")
    return respond(status.HTTP_200_OK, CODE_OK, "ok", serialize_todo(created))


# PUBLIC_INTERFACE
@router.get(
    "/todo",
    summary="List Todos",
    description="List every Todo item with the given status (1 when omitted), ordered by id.",
    tags=["todos"],
    responses={200: _ENVELOPE_DOC, 404: _ENVELOPE_DOC},
)
def list_todos(
    status_filter: int = Query(DEFAULT_LIST_STATUS, alias="status", ge=0, le=255, description="Status to match"),
    repo: Repository = Depends(get_repo),
) -> JSONResponse:
    """
    List todos by status.
    """
    try:
        items = repo.list(status_filter)
    except StorageError:
        logger.exception("list todos with status %s failed", status_filter)
        return _not_found()
    return respond(status.HTTP_200_OK, CODE_OK, "ok", serialize_todos(items))


# PUBLIC_INTERFACE
@router.get(
    "/todo/{todo_id}",
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    tags=["todos"],
    responses={200: _ENVELOPE_DOC, 404: _ENVELOPE_DOC},
)
def get_todo(todo_id: int, repo: Repository = Depends(get_repo)) -> JSONResponse:
    """
    Retrieve a single Todo item by its ID.
    """
    try:
        item = repo.get(todo_id)
    except NotFound:
        logger.info("todo %s not found", todo_id)
        return _not_found()
    except StorageError:
        logger.exception("get todo %s failed", todo_id)
        return _not_found()
    return respond(status.HTTP_200_OK, CODE_OK, "ok", serialize_todo(item))


# PUBLIC_INTERFACE
@router.put(
    "/todo/{todo_id}",
    summary="Replace Todo",
    description=(
        "Overwrite title and status of an existing Todo item. Omitted fields are written "
        "as their zero values."
    ),
    tags=["todos"],
    responses={
        200: {**_ENVELOPE_DOC, "description": "Updated, or business code 5006 when the update failed"},
        404: _ENVELOPE_DOC,
    },
)
def update_todo(todo_id: int, payload: TodoIn, repo: Repository = Depends(get_repo)) -> JSONResponse:
    """
    Full overwrite of title and status.
    """
    try:
        updated = repo.update(todo_id, payload.title, payload.status)
    except NotFound:
        logger.info("todo %s not found", todo_id)
        return _not_found()
    except StorageError:
        logger.exception("update todo %s failed", todo_id)
        return respond(status.HTTP_200_OK, CODE_UPDATE_FAILED, "update failed")
    return respond(status.HTTP_200_OK, CODE_OK, "ok", serialize_todo(updated))


# PUBLIC_INTERFACE
@router.delete(
    "/todo/{todo_id}",
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    tags=["todos"],
    responses={200: {**_ENVELOPE_DOC, "description": "Deleted, or business code 5007 when nothing was deleted"}},
)
def delete_todo(todo_id: int, repo: Repository = Depends(get_repo)) -> JSONResponse:
    """
    Delete a Todo. Failures keep HTTP 200 and report business code 5007.
    """
    try:
        repo.delete(todo_id)
    except NotFound:
        logger.info("todo %s not found", todo_id)
        return respond(status.HTTP_200_OK, CODE_DELETE_FAILED, "delete failed")
    except StorageError:
        logger.exception("delete todo %s failed", todo_id)
        return respond(status.HTTP_200_OK, CODE_DELETE_FAILED, "delete failed")
    return respond(status.HTTP_200_OK, CODE_OK, "delete success")
