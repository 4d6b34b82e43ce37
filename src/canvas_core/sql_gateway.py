"""Gateway implementation backed by SQLAlchemy.

Sessions are synchronous; each gateway call runs in a worker thread so the
event loop keeps serving other clients while the query is in flight.
"""
import asyncio
import enum
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .database import create_db_engine, create_session_factory, create_schema
from .gateway import (
    EMBED_PROJECT,
    EMBED_TASKS,
    PROJECT_SUMMARY_COLUMNS,
    Filters,
    Gateway,
    GatewayError,
    RecordNotFound,
    Row,
    Search,
)
from .models import MODELS_BY_TABLE

logger = logging.getLogger("canvas-core.sql_gateway")


def _plain(value: Any) -> Any:
    """Convert ORM attribute values to JSON-friendly primitives."""
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _to_row(obj, columns: Optional[Sequence[str]] = None, embed: Optional[str] = None) -> Row:
    row = {
        column.name: _plain(getattr(obj, column.key))
        for column in obj.__table__.columns
        if not columns or column.name in columns
    }
    if embed == EMBED_TASKS:
        row["tasks"] = [_to_row(task) for task in obj.tasks]
    elif embed == EMBED_PROJECT:
        row["project"] = _to_row(obj.project, PROJECT_SUMMARY_COLUMNS) if obj.project else None
    return row


class SqlGateway(Gateway):
    """Direct SQL access to the Canvas tables."""

    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str, create_tables: bool = False) -> "SqlGateway":
        engine = create_db_engine(database_url)
        if create_tables:
            create_schema(engine)
        return cls(create_session_factory(engine), engine)

    @contextmanager
    def _session(self):
        session: Session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error: {e}")
            raise GatewayError(str(e)) from e
        finally:
            session.close()

    @staticmethod
    def _model(table: str):
        try:
            return MODELS_BY_TABLE[table]
        except KeyError:
            raise GatewayError(f'Unknown table "{table}"')

    @staticmethod
    def _column(model, name: str):
        column = model.__table__.columns.get(name)
        if column is None:
            raise GatewayError(f'Column "{name}" does not exist on "{model.__tablename__}"')
        return getattr(model, column.key)

    # ------------------------------------------------------------------
    # Synchronous implementations (run in a worker thread)
    # ------------------------------------------------------------------

    def _get(self, table, row_id, columns, embed) -> Row:
        model = self._model(table)
        with self._session() as session:
            obj = session.get(model, row_id)
            if obj is None:
                raise RecordNotFound(f'No row in "{table}" with id "{row_id}"', status_code=404)
            return _to_row(obj, columns, embed)

    def _select(self, table, filters, search, order_by, descending, limit, columns, embed) -> list[Row]:
        model = self._model(table)
        with self._session() as session:
            query = session.query(model)

            for name, value in (filters or {}).items():
                column = self._column(model, name)
                if isinstance(value, (list, tuple, set)):
                    query = query.filter(column.in_(list(value)))
                else:
                    query = query.filter(column == value)

            if search:
                text, search_columns = search
                pattern = f"%{text}%"
                query = query.filter(
                    or_(*[self._column(model, name).ilike(pattern) for name in search_columns])
                )

            if order_by:
                column = self._column(model, order_by)
                query = query.order_by(column.desc() if descending else column.asc())

            if limit is not None:
                query = query.limit(limit)

            return [_to_row(obj, columns, embed) for obj in query.all()]

    def _insert(self, table, values) -> Row:
        model = self._model(table)
        with self._session() as session:
            attributes = {self._column(model, name).key: value for name, value in values.items()}
            obj = model(**attributes)
            session.add(obj)
            session.commit()
            session.refresh(obj)
            return _to_row(obj)

    def _update(self, table, row_id, values) -> Row:
        model = self._model(table)
        with self._session() as session:
            obj = session.get(model, row_id)
            if obj is None:
                raise RecordNotFound(f'No row in "{table}" with id "{row_id}"', status_code=404)
            for name, value in values.items():
                setattr(obj, self._column(model, name).key, value)
            session.commit()
            session.refresh(obj)
            return _to_row(obj)

    def _delete(self, table, row_id) -> None:
        model = self._model(table)
        with self._session() as session:
            obj = session.get(model, row_id)
            if obj is None:
                raise RecordNotFound(f'No row in "{table}" with id "{row_id}"', status_code=404)
            session.delete(obj)
            session.commit()

    # ------------------------------------------------------------------
    # Gateway interface
    # ------------------------------------------------------------------

    async def get(self, table, row_id, columns=None, embed=None) -> Row:
        return await asyncio.to_thread(self._get, table, row_id, columns, embed)

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        search: Optional[Search] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None,
        embed: Optional[str] = None,
    ) -> list[Row]:
        return await asyncio.to_thread(
            self._select, table, filters, search, order_by, descending, limit, columns, embed
        )

    async def insert(self, table, values) -> Row:
        return await asyncio.to_thread(self._insert, table, values)

    async def update(self, table, row_id, values) -> Row:
        return await asyncio.to_thread(self._update, table, row_id, values)

    async def delete(self, table, row_id) -> None:
        await asyncio.to_thread(self._delete, table, row_id)

    async def aclose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
