"""Tests for the SSE transport's HTTP surface."""
from fastapi.testclient import TestClient

from canvas_core.config import Settings
from canvas_mcp.server import SERVER_NAME, SERVER_VERSION
from canvas_mcp.sse import create_app


def make_client(ctx):
    settings = Settings(_env_file=None, database_url="sqlite://")
    return TestClient(create_app(ctx, settings))


class TestHealth:

    def test_reports_server_state(self, ctx):
        with make_client(ctx) as client:
            response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["mode"] == "sse"
        assert body["server"] == SERVER_NAME
        assert body["version"] == SERVER_VERSION
        assert body["tools"] == 19
        assert body["activeConnections"] == 0
        assert body["uptime"] >= 0
        assert "timestamp" in body


class TestRoot:

    def test_describes_endpoints_and_tools(self, ctx):
        with make_client(ctx) as client:
            body = client.get("/").json()

        assert body["name"] == "Limitless Canvas MCP Server"
        assert body["endpoints"]["sse"] == "/sse"
        assert body["endpoints"]["health"] == "/health"
        assert "move_task" in body["tools"]
        assert len(body["tools"]) == 19


class TestCors:

    def test_configured_origin_allowed(self, ctx):
        with make_client(ctx) as client:
            response = client.get("/health", headers={"Origin": "https://claude.ai"})

        assert response.headers["access-control-allow-origin"] == "https://claude.ai"

    def test_localhost_origin_allowed(self, ctx):
        with make_client(ctx) as client:
            response = client.get("/health", headers={"Origin": "http://localhost:5173"})

        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    def test_unknown_origin_rejected(self, ctx):
        with make_client(ctx) as client:
            response = client.get("/health", headers={"Origin": "https://example.test"})

        assert "access-control-allow-origin" not in response.headers


class TestMessageEndpoint:

    def test_unknown_session_is_rejected(self, ctx):
        with make_client(ctx) as client:
            response = client.post("/message/?session_id=not-a-session", json={})

        assert response.status_code == 400
