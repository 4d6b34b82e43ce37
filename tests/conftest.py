"""Shared fixtures: operations run against the SQL gateway on in-memory SQLite."""
import asyncio

import pytest

from canvas_core import projects, tasks
from canvas_core.context import Context
from canvas_core.gateway import TEAM_MEMBERS, WORKSPACES, Gateway, GatewayError
from canvas_core.sql_gateway import SqlGateway


def run(coro):
    """Drive an async operation from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def gateway():
    gateway = SqlGateway.from_url("sqlite://", create_tables=True)
    yield gateway
    run(gateway.aclose())


@pytest.fixture
def ctx(gateway):
    return Context(gateway=gateway)


@pytest.fixture
def workspace(gateway):
    return run(gateway.insert(WORKSPACES, {"name": "Acme Studio", "color": "#10B981"}))


@pytest.fixture
def team(gateway, workspace):
    return [
        run(gateway.insert(TEAM_MEMBERS, {
            "workspace_id": workspace["id"],
            "name": name,
            "email": f"{name.lower()}@acme.test",
            "role": "developer",
        }))
        for name in ("Ada", "Grace")
    ]


@pytest.fixture
def project(ctx, workspace):
    result = run(projects.create_project(ctx, workspace["id"], "Website Redesign", status="active"))
    assert result.success, result
    return result.data


def add_task(ctx, project_id, title, **fields):
    result = run(tasks.create_task(ctx, project_id, title, **fields))
    assert result.success, result
    return result.data


def progress_of(ctx, project_id):
    return run(projects.get_project(ctx, project_id, include_tasks=False)).data["progress"]


class FailingGateway(Gateway):
    """Delegates to ``inner`` but raises for the given (method, table) pairs.

    Every call is recorded in ``calls`` as ``(method, table)``.
    """

    def __init__(self, inner, fail_on, message="boom"):
        self.inner = inner
        self.fail_on = set(fail_on)
        self.message = message
        self.calls = []

    def _check(self, method, table):
        self.calls.append((method, table))
        if (method, table) in self.fail_on:
            raise GatewayError(self.message)

    async def get(self, table, row_id, columns=None, embed=None):
        self._check("get", table)
        return await self.inner.get(table, row_id, columns, embed)

    async def select(self, table, filters=None, search=None, order_by=None,
                     descending=False, limit=None, columns=None, embed=None):
        self._check("select", table)
        return await self.inner.select(
            table, filters, search, order_by, descending, limit, columns, embed
        )

    async def insert(self, table, values):
        self._check("insert", table)
        return await self.inner.insert(table, values)

    async def update(self, table, row_id, values):
        self._check("update", table)
        return await self.inner.update(table, row_id, values)

    async def delete(self, table, row_id):
        self._check("delete", table)
        await self.inner.delete(table, row_id)
