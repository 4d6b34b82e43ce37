"""Tests for tool dispatch and response formatting."""
import json

from canvas_mcp import formatters, handlers, tools
from canvas_core.results import ErrorCode, fail, ok

from conftest import add_task, run


class TestToolCatalog:

    def test_every_tool_has_a_handler(self):
        names = [tool.name for tool in tools.get_tools()]

        assert len(names) == 19
        assert set(names) == set(handlers.TOOL_HANDLERS)

    def test_required_arguments_are_declared(self):
        by_name = {tool.name: tool for tool in tools.get_tools()}

        assert by_name["move_task"].inputSchema["required"] == ["task_id", "new_status"]
        assert by_name["create_project"].inputSchema["required"] == ["workspace_id", "name"]
        assert "required" not in by_name["list_projects"].inputSchema


class TestDispatch:

    def test_unknown_tool(self, ctx):
        result = run(handlers.dispatch(ctx, "drop_database", {}))

        assert result.code == ErrorCode.UNKNOWN_TOOL
        assert result.error == "Unknown tool: drop_database"

    def test_missing_required_argument(self, ctx):
        result = run(handlers.dispatch(ctx, "get_task", {}))

        assert result.code == ErrorCode.INVALID_ARGUMENTS
        assert "task_id" in result.error

    def test_wrong_enum_value(self, ctx, project):
        result = run(handlers.dispatch(
            ctx, "create_task", {"project_id": project["id"], "title": "X", "priority": "urgent"}
        ))

        assert result.code == ErrorCode.INVALID_ARGUMENTS
        assert "priority" in result.error

    def test_invalid_move_status_reaches_operation(self, ctx, project):
        task = add_task(ctx, project["id"], "Ship it")

        result = run(handlers.dispatch(
            ctx, "move_task", {"task_id": task["id"], "new_status": "archived"}
        ))

        assert result.code == ErrorCode.INVALID_STATUS

    def test_routes_to_operation(self, ctx, workspace):
        result = run(handlers.dispatch(
            ctx, "create_project", {"workspace_id": workspace["id"], "name": "Via MCP", "status": "active"}
        ))

        assert result.success
        assert result.data["status"] == "active"

    def test_omitted_fields_are_not_cleared(self, ctx, project):
        task = add_task(ctx, project["id"], "Ship it", description="Before Friday")

        result = run(handlers.dispatch(ctx, "update_task", {"task_id": task["id"], "priority": "high"}))

        assert result.data["description"] == "Before Friday"
        assert result.data["priority"] == "high"

    def test_explicit_null_clears_field(self, ctx, project):
        task = add_task(ctx, project["id"], "Ship it", description="Before Friday")

        result = run(handlers.dispatch(ctx, "update_task", {"task_id": task["id"], "description": None}))

        assert result.data["description"] is None

    def test_null_progress_is_clamped(self, ctx, project):
        result = run(handlers.dispatch(
            ctx, "update_project", {"project_id": project["id"], "progress": None}
        ))

        assert result.success
        assert result.data["progress"] == 0

    def test_unexpected_exception_becomes_internal_error(self, ctx, monkeypatch):
        async def explode(ctx, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setitem(
            handlers.TOOL_HANDLERS,
            "list_workspaces",
            handlers.ToolHandler(handlers.TOOL_HANDLERS["list_workspaces"].schema, explode),
        )

        result = run(handlers.dispatch(ctx, "list_workspaces", {}))

        assert result.code == ErrorCode.INTERNAL_ERROR
        assert result.error == "RuntimeError: boom"

    def test_none_arguments(self, ctx):
        result = run(handlers.dispatch(ctx, "list_workspaces", None))

        assert result.success
        assert result.data == []


class TestFormatters:

    def test_success_envelope(self):
        text = formatters.format_result(ok({"id": "t1"}, "Done"))

        assert json.loads(text) == {"success": True, "message": "Done", "data": {"id": "t1"}}
        assert text.startswith("{\n  ")

    def test_success_without_message(self):
        assert json.loads(formatters.format_result(ok([]))) == {"success": True, "data": []}

    def test_error_envelope(self):
        text = formatters.format_result(fail("Task missing", ErrorCode.TASK_NOT_FOUND))

        assert json.loads(text) == {
            "success": False,
            "error": "Task missing",
            "code": "TASK_NOT_FOUND",
        }

    def test_non_ascii_is_kept(self):
        assert "→" in formatters.format_result(ok(None, "Moved from todo → done"))

    def test_call_tool_result_flags_errors(self):
        error = formatters.to_call_tool_result(fail("nope", ErrorCode.INVALID_STATUS))
        success = formatters.to_call_tool_result(ok(1))

        assert error.isError is True
        assert success.isError is False
        assert json.loads(error.content[0].text)["code"] == "INVALID_STATUS"
