"""Pydantic input schemas, one per MCP tool.

The dispatcher decodes each tool's argument dict into its schema before
calling the operation. Update schemas are dumped with ``exclude_unset`` so
an omitted field means "leave unchanged" while an explicit null is applied.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Priority, ProjectStatus, TaskStatus


class ToolInput(BaseModel):
    """Base schema: unknown keys are ignored, enums dump as their values."""

    model_config = ConfigDict(use_enum_values=True, extra="ignore")


# Workspace Schemas

class ListWorkspacesInput(ToolInput):
    limit: Optional[int] = Field(None, ge=1, description="Maximum number of workspaces to return")


class WorkspaceInput(ToolInput):
    """Input for tools addressing a single workspace."""

    workspace_id: str = Field(..., min_length=1)


# Project Schemas

class ListProjectsInput(ToolInput):
    workspace_id: Optional[str] = None
    status: Optional[ProjectStatus] = None
    limit: Optional[int] = Field(None, ge=1)


class GetProjectInput(ToolInput):
    project_id: str = Field(..., min_length=1)
    include_tasks: bool = True


class CreateProjectInput(ToolInput):
    workspace_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    budget: Optional[float] = None
    due_date: Optional[str] = None
    client_id: Optional[str] = None
    estimated_duration_hours: Optional[float] = None


class UpdateProjectInput(ToolInput):
    project_id: str = Field(..., min_length=1)
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[Priority] = None
    progress: Optional[float] = None
    budget: Optional[float] = None
    spent: Optional[float] = None
    due_date: Optional[str] = None


class UpdateProjectProgressInput(ToolInput):
    project_id: str = Field(..., min_length=1)
    progress: float


# Task Schemas

class CreateTaskInput(ToolInput):
    project_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee: Optional[str] = None
    due_date: Optional[str] = None
    tags: Optional[list[str]] = None


class TaskInput(ToolInput):
    """Input for tools addressing a single task."""

    task_id: str = Field(..., min_length=1)


class UpdateTaskInput(ToolInput):
    task_id: str = Field(..., min_length=1)
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    assignee: Optional[str] = None
    due_date: Optional[str] = None
    tags: Optional[list[str]] = None


class MoveTaskInput(ToolInput):
    task_id: str = Field(..., min_length=1)
    # Plain string: move_task reports unrecognized statuses itself (INVALID_STATUS)
    new_status: str


class SearchTasksInput(ToolInput):
    query: str
    workspace_id: Optional[str] = None
    project_id: Optional[str] = None
    status: Optional[TaskStatus] = None
    limit: int = Field(20, ge=1)


class ListProjectTasksInput(ToolInput):
    project_id: str = Field(..., min_length=1)
    status: Optional[TaskStatus] = None
