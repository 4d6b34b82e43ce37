"""Tool dispatch shared between the stdio and SSE transports.

Each tool name maps to a pydantic input schema and a ``canvas_core``
operation. ``dispatch`` decodes the raw argument dict, runs the operation
and always returns a result envelope:

- unknown tool name: ``UNKNOWN_TOOL``, nothing is called
- arguments that do not fit the schema: ``INVALID_ARGUMENTS``
- any exception escaping the operation: ``INTERNAL_ERROR``

Transport-specific rendering lives in formatters.py.
"""
import logging
import traceback
from typing import Any, Awaitable, Callable, NamedTuple, Optional

from pydantic import ValidationError

from canvas_core import projects, schemas, tasks, workspaces
from canvas_core.context import Context
from canvas_core.results import ErrorCode, ToolResult, fail

logger = logging.getLogger("canvas-mcp.handlers")


class ToolHandler(NamedTuple):
    """Input schema and operation for one tool."""

    schema: type[schemas.ToolInput]
    operation: Callable[..., Awaitable[ToolResult]]


TOOL_HANDLERS: dict[str, ToolHandler] = {
    # Workspace handlers
    "list_workspaces": ToolHandler(schemas.ListWorkspacesInput, workspaces.list_workspaces),
    "get_workspace": ToolHandler(schemas.WorkspaceInput, workspaces.get_workspace),
    "get_workspace_summary": ToolHandler(schemas.WorkspaceInput, workspaces.get_workspace_summary),
    "get_work_in_progress": ToolHandler(schemas.WorkspaceInput, workspaces.get_work_in_progress),
    # Project handlers
    "list_projects": ToolHandler(schemas.ListProjectsInput, projects.list_projects),
    "get_project": ToolHandler(schemas.GetProjectInput, projects.get_project),
    "create_project": ToolHandler(schemas.CreateProjectInput, projects.create_project),
    "update_project": ToolHandler(schemas.UpdateProjectInput, projects.update_project),
    "update_project_progress": ToolHandler(
        schemas.UpdateProjectProgressInput, projects.update_project_progress
    ),
    # Task handlers
    "create_task": ToolHandler(schemas.CreateTaskInput, tasks.create_task),
    "get_task": ToolHandler(schemas.TaskInput, tasks.get_task),
    "update_task": ToolHandler(schemas.UpdateTaskInput, tasks.update_task),
    "move_task": ToolHandler(schemas.MoveTaskInput, tasks.move_task),
    "start_task": ToolHandler(schemas.TaskInput, tasks.start_task),
    "complete_task": ToolHandler(schemas.TaskInput, tasks.complete_task),
    "review_task": ToolHandler(schemas.TaskInput, tasks.review_task),
    "search_tasks": ToolHandler(schemas.SearchTasksInput, tasks.search_tasks),
    "list_project_tasks": ToolHandler(schemas.ListProjectTasksInput, tasks.list_project_tasks),
    "delete_task": ToolHandler(schemas.TaskInput, tasks.delete_task),
}


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"]) or "arguments"
        problems.append(f"{field}: {detail['msg']}")
    return "; ".join(problems)


async def dispatch(ctx: Context, name: str, arguments: Optional[dict[str, Any]]) -> ToolResult:
    """Run the tool called ``name`` with ``arguments`` and return its envelope."""
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        logger.warning(f"Unknown tool requested: {name}")
        return fail(f"Unknown tool: {name}", ErrorCode.UNKNOWN_TOOL)

    try:
        params = handler.schema.model_validate(arguments or {})
    except ValidationError as e:
        message = _describe_validation_error(e)
        logger.info(f"Invalid arguments for {name}: {message}")
        return fail(f"Invalid arguments for {name}: {message}", ErrorCode.INVALID_ARGUMENTS)

    try:
        return await handler.operation(ctx, **params.model_dump(exclude_unset=True))
    except Exception as e:
        logger.error(f"Unexpected error during {name} call:")
        logger.error(f"  Error type: {type(e).__name__}")
        logger.error(f"  Error message: {str(e)}")
        logger.error(f"  Arguments: {arguments}")
        logger.error(f"  Traceback:\n{traceback.format_exc()}")
        return fail(f"{type(e).__name__}: {str(e)}", ErrorCode.INTERNAL_ERROR)
