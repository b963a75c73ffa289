from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generator, List

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    SmallInteger,
    Table,
    Text,
    create_engine,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from .errors import NotFound, StorageError
from .models import TodoEntity
from .repositories import DEFAULT_LIST_STATUS, Repository

logger = logging.getLogger(__name__)

_ID_TYPE = Integer().with_variant(mysql.INTEGER(unsigned=True), "mysql")
# Largest id any backend can bind (signed 64-bit)
MAX_ID = 2**63 - 1

_STATUS_TYPE = SmallInteger().with_variant(mysql.TINYINT(unsigned=True), "mysql")


def todo_table(name: str, metadata: MetaData) -> Table:
    """Describe the todo table under the given name."""
    return Table(
        name,
        metadata,
        Column("id", _ID_TYPE, primary_key=True, autoincrement=True),
        Column("title", Text, nullable=False),
        Column("status", _STATUS_TYPE, nullable=False, default=0),
        Column("created_at", DateTime, nullable=False),
        Column("updated_at", DateTime, nullable=False),
        sqlite_autoincrement=True,
    )


def make_engine(url: str, echo: bool = False) -> Engine:
    """
    Build an engine for the URL. In-memory SQLite gets a single shared
    connection so every session sees the same database.

    Statement echo goes through the "sqlalchemy.engine" logger so it shares
    the root handler instead of SQLAlchemy attaching its own.
    """
    if echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    parsed = make_url(url)
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if parsed.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(parsed, **kwargs)


def _check_id(todo_id: int) -> None:
    # ids outside the storable range cannot exist
    if not 0 <= todo_id <= MAX_ID:
        raise NotFound(todo_id)


class SQLRepository(Repository):
    """
    Relational repository implementing the Repository interface with SQLAlchemy Core.
    """

    name = "sql"

    def __init__(self, url: str, table_name: str = "bb_todo_v1", echo: bool = False) -> None:
        self._engine = make_engine(url, echo=echo)
        self._metadata = MetaData()
        self._table = todo_table(table_name, self._metadata)

    @property
    def engine(self) -> Engine:
        return self._engine

    @contextmanager
    def _conn(self) -> Generator[Connection, None, None]:
        try:
            with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def _row_to_entity(self, row: Any) -> TodoEntity:
        return {
            "id": int(row.id),
            "title": str(row.title),
            "status": int(row.status),
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }

    def _fetch(self, conn: Connection, todo_id: int) -> TodoEntity:
        _check_id(todo_id)
        row = conn.execute(select(self._table).where(self._table.c.id == todo_id)).first()
        if row is None:
            raise NotFound(todo_id)
        return self._row_to_entity(row)

    def ensure_schema(self) -> None:
        try:
            self._metadata.create_all(self._engine, checkfirst=True)
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    def close(self) -> None:
        self._engine.dispose()

    def add(self, title: str, status: int) -> TodoEntity:
        now = datetime.now()
        with self._conn() as conn:
            result = conn.execute(
                insert(self._table).values(
                    title=title, status=status, created_at=now, updated_at=now
                )
            )
            new_id = result.inserted_primary_key[0]
            entity = self._fetch(conn, new_id)
        logger.debug("created todo %s", new_id)
        return entity

    def get(self, todo_id: int) -> TodoEntity:
        with self._conn() as conn:
            return self._fetch(conn, todo_id)

    def list(self, status: int = DEFAULT_LIST_STATUS) -> List[TodoEntity]:
        stmt = (
            select(self._table)
            .where(self._table.c.status == status)
            .order_by(self._table.c.id)
        )
        with self._conn() as conn:
            return [self._row_to_entity(r) for r in conn.execute(stmt)]

    def update(self, todo_id: int, title: str, status: int) -> TodoEntity:
        with self._conn() as conn:
            self._fetch(conn, todo_id)
            conn.execute(
                update(self._table)
                .where(self._table.c.id == todo_id)
                .values(title=title, status=status, updated_at=datetime.now())
            )
            entity = self._fetch(conn, todo_id)
        logger.debug("updated todo %s", todo_id)
        return entity

    def delete(self, todo_id: int) -> None:
        _check_id(todo_id)
        with self._conn() as conn:
            result = conn.execute(delete(self._table).where(self._table.c.id == todo_id))
            if result.rowcount == 0:
                raise NotFound(todo_id)
        logger.debug("deleted todo %s", todo_id)
