"""Datastore gateway interface.

Entity operations only talk to the store through this interface. Rows are
plain dicts keyed by column name. Two implementations exist:

- rest_gateway.RestGateway: Supabase/PostgREST over HTTP (httpx)
- sql_gateway.SqlGateway: direct SQL access (SQLAlchemy)

Filters map a column to a scalar (equality) or to a list/tuple (membership).
A search is a ``(text, columns)`` pair: case-insensitive substring match on
any of the columns.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

WORKSPACES = "workspaces"
PROJECTS = "projects"
TASKS = "tasks"
TEAM_MEMBERS = "team_members"

# Embedded relations: projects may embed their tasks, tasks their owning project
EMBED_TASKS = "tasks"
EMBED_PROJECT = "project"
PROJECT_SUMMARY_COLUMNS = ("id", "name", "workspace_id")

Row = dict[str, Any]
Filters = dict[str, Any]
Search = tuple[str, Sequence[str]]


class GatewayError(Exception):
    """Raised when the backing store rejects or fails a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class RecordNotFound(GatewayError):
    """Raised when a single-row lookup matches no row."""


class Gateway(ABC):
    """Async accessor for the remote relational store."""

    @abstractmethod
    async def get(
        self,
        table: str,
        row_id: str,
        columns: Optional[Sequence[str]] = None,
        embed: Optional[str] = None,
    ) -> Row:
        """Fetch one row by id. Raises RecordNotFound if absent."""

    @abstractmethod
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
        """Fetch rows matching every filter (and the search, if given)."""

    @abstractmethod
    async def insert(self, table: str, values: Row) -> Row:
        """Insert one row and return it as stored."""

    @abstractmethod
    async def update(self, table: str, row_id: str, values: Row) -> Row:
        """Apply a partial update and return the updated row."""

    @abstractmethod
    async def delete(self, table: str, row_id: str) -> None:
        """Delete one row by id."""

    async def exists(self, table: str, row_id: str) -> bool:
        try:
            await self.get(table, row_id, columns=("id",))
        except RecordNotFound:
            return False
        return True

    async def aclose(self) -> None:
        """Release the underlying connection handle."""
