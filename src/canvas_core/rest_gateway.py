"""Gateway implementation for Supabase's PostgREST API.

Requests go to ``<SUPABASE_URL>/rest/v1/<table>`` authenticated with the
service role key. One ``httpx.AsyncClient`` is shared for the lifetime of
the process.
"""
import logging
from typing import Any, Optional, Sequence

import httpx
from pydantic_core import to_jsonable_python

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

logger = logging.getLogger("canvas-core.rest_gateway")

# Postgres "invalid text representation", e.g. a malformed uuid in an id filter
INVALID_TEXT_REPRESENTATION = "22P02"

_RESERVED = set(',()"\\:')

EMBED_SELECTS = {
    EMBED_TASKS: "tasks(*)",
    EMBED_PROJECT: f"project:projects({','.join(PROJECT_SUMMARY_COLUMNS)})",
}


def _quote(value: Any) -> str:
    """Quote a filter value when it contains PostgREST reserved characters."""
    text = str(value)
    if any(char in _RESERVED for char in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _select_clause(columns: Optional[Sequence[str]], embed: Optional[str]) -> str:
    parts = [",".join(columns) if columns else "*"]
    if embed:
        parts.append(EMBED_SELECTS[embed])
    return ",".join(parts)


def build_query_params(
    filters: Optional[Filters] = None,
    search: Optional[Search] = None,
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
    columns: Optional[Sequence[str]] = None,
    embed: Optional[str] = None,
) -> dict[str, str]:
    """Translate gateway query arguments into PostgREST query parameters."""
    params = {"select": _select_clause(columns, embed)}

    for name, value in (filters or {}).items():
        if isinstance(value, (list, tuple, set)):
            params[name] = f"in.({','.join(_quote(item) for item in value)})"
        elif value is None:
            params[name] = "is.null"
        else:
            params[name] = f"eq.{_quote(value)}"

    if search:
        text, search_columns = search
        pattern = _quote(f"*{text}*")
        params["or"] = "(" + ",".join(f"{name}.ilike.{pattern}" for name in search_columns) + ")"

    if order_by:
        params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"

    if limit is not None:
        params["limit"] = str(limit)

    return params


class RestGateway(Gateway):
    """Supabase REST access using the service role key."""

    def __init__(
        self,
        supabase_url: str,
        service_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=f"{supabase_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            },
            timeout=timeout,
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[dict] = None,
        json: Any = None,
        prefer_representation: bool = False,
    ) -> Any:
        headers = {"Prefer": "return=representation"} if prefer_representation else None
        try:
            response = await self._client.request(
                method,
                f"/{table}",
                params=params,
                json=to_jsonable_python(json) if json is not None else None,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error(f"Request error during {method} /{table}: {type(e).__name__}: {e}")
            raise GatewayError(f"Connection failed - {e}") from e

        if response.is_error:
            raise self._error_from(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from(response: httpx.Response) -> GatewayError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.text or f"HTTP {response.status_code}"
        logger.error(
            f"PostgREST error {response.status_code} for {response.request.method} "
            f"{response.request.url}: {message}"
        )
        if body.get("code") == INVALID_TEXT_REPRESENTATION:
            return RecordNotFound(message, status_code=response.status_code)
        return GatewayError(message, status_code=response.status_code)

    async def get(self, table, row_id, columns=None, embed=None) -> Row:
        params = build_query_params(filters={"id": row_id}, limit=1, columns=columns, embed=embed)
        rows = await self._request("GET", table, params=params)
        if not rows:
            raise RecordNotFound(f'No row in "{table}" with id "{row_id}"', status_code=404)
        return rows[0]

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
        params = build_query_params(filters, search, order_by, descending, limit, columns, embed)
        return await self._request("GET", table, params=params) or []

    async def insert(self, table, values) -> Row:
        rows = await self._request("POST", table, json=values, prefer_representation=True)
        if not rows:
            raise GatewayError(f'Insert into "{table}" returned no row')
        return rows[0]

    async def update(self, table, row_id, values) -> Row:
        params = {"id": f"eq.{_quote(row_id)}"}
        rows = await self._request("PATCH", table, params=params, json=values, prefer_representation=True)
        if not rows:
            raise RecordNotFound(f'No row in "{table}" with id "{row_id}"', status_code=404)
        return rows[0]

    async def delete(self, table, row_id) -> None:
        await self._request("DELETE", table, params={"id": f"eq.{_quote(row_id)}"})

    async def aclose(self) -> None:
        await self._client.aclose()
