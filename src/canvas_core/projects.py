"""Project operations, including progress calculation and sync.

``progress`` is derived from task statuses: task operations call
``sync_project_progress`` after any write that can change the share of
done tasks.
"""
import logging
from typing import Any, Optional

from .context import Context
from .gateway import EMBED_TASKS, PROJECTS, TASKS, WORKSPACES, GatewayError
from .models import Priority, ProjectItemType, ProjectStatus, TaskStatus, utcnow
from .progress import clamp_progress, completion_percentage, count_task_statuses
from .results import (
    ErrorCode,
    ToolResult,
    database_error,
    fail,
    ok,
    project_not_found,
    workspace_not_found,
)

logger = logging.getLogger("canvas-core.projects")

UPDATABLE_FIELDS = (
    "name",
    "description",
    "status",
    "priority",
    "progress",
    "budget",
    "spent",
    "due_date",
)


async def list_projects(
    ctx: Context,
    workspace_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: Optional[int] = None,
) -> ToolResult:
    """List a workspace's projects, most recently updated first.

    Falls back to the configured default workspace when ``workspace_id`` is
    not given.
    """
    workspace_id = workspace_id or ctx.default_workspace_id
    if not workspace_id:
        return fail(
            "workspace_id is required. Either provide it or set DEFAULT_WORKSPACE_ID.",
            ErrorCode.MISSING_WORKSPACE_ID,
        )

    filters: dict[str, Any] = {"workspace_id": workspace_id}
    if status:
        filters["status"] = status

    try:
        if not await ctx.gateway.exists(WORKSPACES, workspace_id):
            return workspace_not_found(workspace_id)
        projects = await ctx.gateway.select(
            PROJECTS, filters=filters, order_by="updated_at", descending=True, limit=limit or None
        )
    except GatewayError as e:
        return database_error("list projects", e)

    return ok(projects, f"Found {len(projects)} project(s)")


async def get_project(ctx: Context, project_id: str, include_tasks: bool = True) -> ToolResult:
    """Get a project, by default with its tasks and a per-status task count."""
    try:
        if not await ctx.gateway.exists(PROJECTS, project_id):
            return project_not_found(project_id)
        project = await ctx.gateway.get(
            PROJECTS, project_id, embed=EMBED_TASKS if include_tasks else None
        )
    except GatewayError as e:
        return database_error("get project", e)

    if not include_tasks:
        return ok(project, f'Project "{project["name"]}"')

    project["tasks"] = project.get("tasks") or []
    task_counts = count_task_statuses(project["tasks"])
    project["task_counts"] = task_counts
    return ok(project, f'Project "{project["name"]}" with {task_counts["total"]} task(s)')


async def create_project(
    ctx: Context,
    workspace_id: str,
    name: str,
    description: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    budget: Optional[float] = None,
    due_date: Optional[str] = None,
    client_id: Optional[str] = None,
    estimated_duration_hours: Optional[float] = None,
) -> ToolResult:
    """Create a project. Progress always starts at 0."""
    now = utcnow()
    values = {
        "workspace_id": workspace_id,
        "name": name,
        "description": description or None,
        "status": status or ProjectStatus.PLANNING.value,
        "priority": priority or Priority.MEDIUM.value,
        "progress": 0,
        "budget": budget,
        "due_date": due_date or None,
        "client_id": client_id or None,
        "estimated_duration_hours": estimated_duration_hours,
        "item_type": ProjectItemType.PROJECT.value,
        "created_at": now,
        "updated_at": now,
    }

    try:
        if not await ctx.gateway.exists(WORKSPACES, workspace_id):
            return workspace_not_found(workspace_id)
        project = await ctx.gateway.insert(PROJECTS, values)
    except GatewayError as e:
        return database_error("create project", e)

    logger.info(f"Created project {project['id']} ({project['name']}) in workspace {workspace_id}")
    return ok(project, f'Created project "{project["name"]}" (ID: {project["id"]})')


async def update_project(ctx: Context, project_id: str, **changes: Any) -> ToolResult:
    """Apply the given fields to a project.

    Only keyword arguments actually passed are written, so ``description=None``
    clears the description while omitting it leaves it alone. ``progress`` is
    clamped to 0..100 and ``updated_at`` is always refreshed.
    """
    updates: dict[str, Any] = {
        field: value for field, value in changes.items() if field in UPDATABLE_FIELDS
    }
    if "progress" in updates:
        # An explicit null clamps to 0; the column is NOT NULL
        updates["progress"] = clamp_progress(updates["progress"] or 0)
    updates["updated_at"] = utcnow()

    try:
        if not await ctx.gateway.exists(PROJECTS, project_id):
            return project_not_found(project_id)
        project = await ctx.gateway.update(PROJECTS, project_id, updates)
    except GatewayError as e:
        return database_error("update project", e)

    logger.debug(f"Updated project {project_id}: {sorted(updates)}")
    return ok(project, f'Updated project "{project["name"]}"')


async def update_project_progress(ctx: Context, project_id: str, progress: float) -> ToolResult:
    return await update_project(ctx, project_id, progress=clamp_progress(progress))


async def calculate_project_progress(ctx: Context, project_id: str) -> ToolResult:
    """Percentage of the project's tasks that are done (0 with no tasks)."""
    try:
        tasks = await ctx.gateway.select(
            TASKS, filters={"project_id": project_id}, columns=("status",)
        )
    except GatewayError as e:
        return database_error("calculate progress", e)

    if not tasks:
        return ok(0, "No tasks in project")

    statuses = [task["status"] for task in tasks]
    progress = completion_percentage(statuses)
    done = statuses.count(TaskStatus.DONE.value)
    return ok(progress, f"{done}/{len(statuses)} tasks completed ({progress}%)")


async def sync_project_progress(ctx: Context, project_id: str) -> ToolResult:
    """Recompute progress from task statuses and write it back."""
    progress_result = await calculate_project_progress(ctx, project_id)
    if not progress_result.success:
        return progress_result

    return await update_project_progress(ctx, project_id, progress_result.data)
