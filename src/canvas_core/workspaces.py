"""Workspace operations.

Workspaces are created elsewhere; these operations only read them and
aggregate their projects, tasks and team members.
"""
import logging
from typing import Optional

from .context import Context
from .gateway import PROJECTS, TASKS, TEAM_MEMBERS, WORKSPACES, GatewayError
from .models import ProjectStatus, TaskStatus
from .progress import count_project_statuses, count_task_statuses
from .results import ToolResult, database_error, ok, workspace_not_found

logger = logging.getLogger("canvas-core.workspaces")

RECENT_PROJECTS_LIMIT = 5


async def list_workspaces(ctx: Context, limit: Optional[int] = None) -> ToolResult:
    """List workspaces, most recently updated first."""
    try:
        workspaces = await ctx.gateway.select(
            WORKSPACES, order_by="updated_at", descending=True, limit=limit or None
        )
    except GatewayError as e:
        return database_error("list workspaces", e)

    return ok(workspaces, f"Found {len(workspaces)} workspace(s)")


async def get_workspace(ctx: Context, workspace_id: str) -> ToolResult:
    try:
        if not await ctx.gateway.exists(WORKSPACES, workspace_id):
            return workspace_not_found(workspace_id)
        workspace = await ctx.gateway.get(WORKSPACES, workspace_id)
    except GatewayError as e:
        return database_error("get workspace", e)

    return ok(workspace, f'Workspace: "{workspace["name"]}"')


async def get_workspace_summary(ctx: Context, workspace_id: str) -> ToolResult:
    """Summarize a workspace: project and task counts, team size, recent projects.

    Fetches run one after another; the first failing fetch aborts the rest.
    """
    gateway = ctx.gateway
    try:
        if not await gateway.exists(WORKSPACES, workspace_id):
            return workspace_not_found(workspace_id)
        workspace = await gateway.get(WORKSPACES, workspace_id)
    except GatewayError as e:
        return database_error("get workspace", e)

    try:
        projects = await gateway.select(PROJECTS, filters={"workspace_id": workspace_id})
    except GatewayError as e:
        return database_error("get projects", e)

    tasks = []
    project_ids = [project["id"] for project in projects]
    if project_ids:
        try:
            tasks = await gateway.select(TASKS, filters={"project_id": project_ids})
        except GatewayError as e:
            return database_error("get tasks", e)

    try:
        team_members = await gateway.select(
            TEAM_MEMBERS, filters={"workspace_id": workspace_id}, columns=("id",)
        )
    except GatewayError as e:
        return database_error("get team members", e)

    project_counts = count_project_statuses(projects)
    task_counts = count_task_statuses(tasks, snake_case=True)

    active_projects = [p for p in projects if p.get("status") == ProjectStatus.ACTIVE.value]
    active_projects.sort(key=lambda p: p.get("updated_at") or "", reverse=True)

    summary = {
        "workspace": workspace,
        "projects": project_counts,
        "tasks": task_counts,
        "team_members": len(team_members),
        "recent_projects": active_projects[:RECENT_PROJECTS_LIMIT],
    }
    logger.debug(f"Summarized workspace {workspace_id}: {project_counts} / {task_counts}")

    return ok(
        summary,
        f'Workspace "{workspace["name"]}": {project_counts["total"]} projects, '
        f'{task_counts["total"]} tasks',
    )


async def get_work_in_progress(ctx: Context, workspace_id: str) -> ToolResult:
    """Tasks in the in-progress or review columns across a workspace."""
    gateway = ctx.gateway
    try:
        if not await gateway.exists(WORKSPACES, workspace_id):
            return workspace_not_found(workspace_id)
        projects = await gateway.select(
            PROJECTS, filters={"workspace_id": workspace_id}, columns=("id",)
        )
    except GatewayError as e:
        return database_error("get projects", e)

    project_ids = [project["id"] for project in projects]
    if not project_ids:
        return ok([], "No projects in workspace")

    try:
        tasks = await gateway.select(
            TASKS,
            filters={
                "project_id": project_ids,
                "status": [TaskStatus.IN_PROGRESS.value, TaskStatus.REVIEW.value],
            },
            order_by="updated_at",
            descending=True,
        )
    except GatewayError as e:
        return database_error("get tasks", e)

    return ok(tasks, f"{len(tasks)} task(s) in progress or review")
