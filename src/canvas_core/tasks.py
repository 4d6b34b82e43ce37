"""Task operations.

Every write that can change a project's share of done tasks (create, status
change, move, delete) is followed by a progress sync on the owning project.
A failed sync is logged but does not fail the task operation itself, since
the task write already succeeded.
"""
import logging
from typing import Any, Optional

from . import projects
from .context import Context
from .gateway import EMBED_PROJECT, PROJECTS, TASKS, GatewayError, RecordNotFound
from .models import Priority, TaskStatus, TASK_STATUSES, utcnow
from .results import (
    ErrorCode,
    ToolResult,
    database_error,
    fail,
    ok,
    project_not_found,
    task_not_found,
)

logger = logging.getLogger("canvas-core.tasks")

UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "assignee",
    "due_date",
    "tags",
)

SEARCH_COLUMNS = ("title", "description")
DEFAULT_SEARCH_LIMIT = 20


async def _sync_progress(ctx: Context, project_id: str) -> None:
    result = await projects.sync_project_progress(ctx, project_id)
    if not result.success:
        logger.warning(f"Progress sync failed for project {project_id}: {result.error}")


async def get_next_task_order(ctx: Context, project_id: str) -> int:
    """Next ``order`` value for a new task: current maximum + 1, or 0."""
    rows = await ctx.gateway.select(
        TASKS,
        filters={"project_id": project_id},
        order_by="order",
        descending=True,
        limit=1,
        columns=("order",),
    )
    if rows:
        return (rows[0].get("order") or 0) + 1
    return 0


async def create_task(
    ctx: Context,
    project_id: str,
    title: str,
    description: Optional[str] = None,
    status: Optional[str] = None,
    priority: Optional[str] = None,
    assignee: Optional[str] = None,
    due_date: Optional[str] = None,
    tags: Optional[list[str]] = None,
) -> ToolResult:
    """Create a task at the end of its project's ordering."""
    status = status or TaskStatus.TODO.value
    try:
        if not await ctx.gateway.exists(PROJECTS, project_id):
            return project_not_found(project_id)

        now = utcnow()
        order = await get_next_task_order(ctx, project_id)
        task = await ctx.gateway.insert(
            TASKS,
            {
                "project_id": project_id,
                "title": title,
                "description": description or None,
                "status": status,
                "priority": priority or Priority.MEDIUM.value,
                "assignee": assignee or None,
                "due_date": due_date or None,
                "tags": tags or None,
                "order": order,
                "created_at": now,
                "updated_at": now,
            },
        )
    except GatewayError as e:
        return database_error("create task", e)

    # A new task changes the denominator even when it is not done
    await _sync_progress(ctx, project_id)

    logger.info(f"Created task {task['id']} in project {project_id} at order {order}")
    return ok(task, f'Created task "{task["title"]}" in {status} column')


async def get_task(ctx: Context, task_id: str) -> ToolResult:
    """Get a task with a short summary of its project."""
    try:
        task = await ctx.gateway.get(TASKS, task_id, embed=EMBED_PROJECT)
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("get task", e)

    return ok(task, f'Task: "{task["title"]}"')


async def update_task(ctx: Context, task_id: str, **changes: Any) -> ToolResult:
    """Apply the given fields to a task.

    Omitted fields are left alone; explicitly passed ones (including None)
    are written. Progress is re-synced only when ``status`` is passed.
    """
    try:
        current = await ctx.gateway.get(TASKS, task_id, columns=("project_id",))
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("update task", e)

    updates: dict[str, Any] = {
        field: value for field, value in changes.items() if field in UPDATABLE_FIELDS
    }
    updates["updated_at"] = utcnow()

    try:
        task = await ctx.gateway.update(TASKS, task_id, updates)
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("update task", e)

    if "status" in updates:
        await _sync_progress(ctx, current["project_id"])

    return ok(task, f'Updated task "{task["title"]}"')


async def move_task(ctx: Context, task_id: str, new_status: str) -> ToolResult:
    """Move a task to another kanban column. Any column may follow any other."""
    if new_status not in TASK_STATUSES:
        return fail(
            f'Invalid status "{new_status}". Valid statuses: {", ".join(TASK_STATUSES)}',
            ErrorCode.INVALID_STATUS,
        )

    try:
        current = await ctx.gateway.get(TASKS, task_id, columns=("project_id", "title", "status"))
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("move task", e)

    previous_status = current["status"]

    try:
        task = await ctx.gateway.update(
            TASKS, task_id, {"status": new_status, "updated_at": utcnow()}
        )
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("move task", e)

    await _sync_progress(ctx, current["project_id"])

    logger.info(f"Moved task {task_id} from {previous_status} to {new_status}")
    return ok(task, f'Moved "{task["title"]}" from {previous_status} → {new_status}')


async def start_task(ctx: Context, task_id: str) -> ToolResult:
    return await move_task(ctx, task_id, TaskStatus.IN_PROGRESS.value)


async def complete_task(ctx: Context, task_id: str) -> ToolResult:
    return await move_task(ctx, task_id, TaskStatus.DONE.value)


async def review_task(ctx: Context, task_id: str) -> ToolResult:
    return await move_task(ctx, task_id, TaskStatus.REVIEW.value)


async def search_tasks(
    ctx: Context,
    query: str,
    workspace_id: Optional[str] = None,
    project_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> ToolResult:
    """Case-insensitive keyword search over task titles and descriptions.

    A workspace scope is resolved to that workspace's project ids first, so
    ``limit`` counts only matches inside the workspace.
    """
    filters: dict[str, Any] = {}
    if project_id:
        filters["project_id"] = project_id
    if status:
        filters["status"] = status

    try:
        if workspace_id:
            workspace_projects = await ctx.gateway.select(
                PROJECTS, filters={"workspace_id": workspace_id}, columns=("id",)
            )
            project_ids = [row["id"] for row in workspace_projects]
            if project_id:
                project_ids = [pid for pid in project_ids if pid == project_id]
            if not project_ids:
                return ok([], f'Found 0 task(s) matching "{query}"')
            filters["project_id"] = project_ids

        tasks = await ctx.gateway.select(
            TASKS,
            filters=filters,
            search=(query, SEARCH_COLUMNS),
            order_by="updated_at",
            descending=True,
            limit=limit or DEFAULT_SEARCH_LIMIT,
            embed=EMBED_PROJECT,
        )
    except GatewayError as e:
        return database_error("search tasks", e)

    return ok(tasks, f'Found {len(tasks)} task(s) matching "{query}"')


async def list_project_tasks(ctx: Context, project_id: str, status: Optional[str] = None) -> ToolResult:
    """List a project's tasks in board order, optionally for one column."""
    filters: dict[str, Any] = {"project_id": project_id}
    if status:
        filters["status"] = status

    try:
        if not await ctx.gateway.exists(PROJECTS, project_id):
            return project_not_found(project_id)
        tasks = await ctx.gateway.select(TASKS, filters=filters, order_by="order")
    except GatewayError as e:
        return database_error("list tasks", e)

    suffix = f" in {status}" if status else ""
    return ok(tasks, f"Found {len(tasks)} task(s){suffix}")


async def delete_task(ctx: Context, task_id: str) -> ToolResult:
    try:
        task = await ctx.gateway.get(TASKS, task_id, columns=("project_id", "title"))
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("delete task", e)

    try:
        await ctx.gateway.delete(TASKS, task_id)
    except RecordNotFound:
        return task_not_found(task_id)
    except GatewayError as e:
        return database_error("delete task", e)

    await _sync_progress(ctx, task["project_id"])

    logger.info(f"Deleted task {task_id} from project {task['project_id']}")
    return ok({"deleted": True}, f'Deleted task "{task["title"]}"')
