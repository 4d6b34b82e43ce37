"""Shared MCP tool definitions for Canvas.

This module provides the definitive list of MCP tools used by both stdio and SSE transports.
The schemas describe the arguments to the calling agent; arguments are decoded
again by the dispatcher (see handlers.py) before any operation runs.
"""

from mcp.types import Tool

from canvas_core.models import PRIORITIES, PROJECT_STATUSES, TASK_STATUSES


def _task_id_schema(description: str) -> dict:
    return {
        "type": "object",
        "properties": {
            "task_id": {
                "type": "string",
                "description": description
            }
        },
        "required": ["task_id"]
    }


def _workspace_id_schema() -> dict:
    return {
        "type": "object",
        "properties": {
            "workspace_id": {
                "type": "string",
                "description": "The workspace ID"
            }
        },
        "required": ["workspace_id"]
    }


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Canvas project management."""
    return [
        # ============================================================================
        # Workspace Tools
        # ============================================================================
        Tool(
            name="list_workspaces",
            description="List all workspaces accessible to the service. Returns workspace names, IDs, and colors.",
            inputSchema={
                "type": "object",
                "properties": {
                    "limit": {
                        "type": "number",
                        "description": "Maximum number of workspaces to return"
                    }
                }
            }
        ),
        Tool(
            name="get_workspace",
            description="Get details about a specific workspace by ID.",
            inputSchema=_workspace_id_schema()
        ),
        Tool(
            name="get_workspace_summary",
            description="Get a comprehensive summary of a workspace including project counts, "
                       "task counts by status, team size, and recent active projects.",
            inputSchema=_workspace_id_schema()
        ),
        Tool(
            name="get_work_in_progress",
            description="Get all tasks currently in-progress or in-review for a workspace. "
                       "Useful for understanding current work.",
            inputSchema=_workspace_id_schema()
        ),
        # ============================================================================
        # Project Tools
        # ============================================================================
        Tool(
            name="list_projects",
            description="List all projects in a workspace. Use this to see what projects exist and their current status. "
                       "Common pattern: list_workspaces() → list_projects(workspace_id=...) → get_project(project_id=...).",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspace_id": {
                        "type": "string",
                        "description": "Workspace ID (optional if DEFAULT_WORKSPACE_ID is set)"
                    },
                    "status": {
                        "type": "string",
                        "enum": PROJECT_STATUSES,
                        "description": "Filter by project status"
                    },
                    "limit": {
                        "type": "number",
                        "description": "Maximum number of projects to return"
                    }
                }
            }
        ),
        Tool(
            name="get_project",
            description="Get detailed information about a specific project including all its tasks organized by status.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": "string",
                        "description": "The project ID"
                    },
                    "include_tasks": {
                        "type": "boolean",
                        "description": "Whether to include tasks (default: true)"
                    }
                },
                "required": ["project_id"]
            }
        ),
        Tool(
            name="create_project",
            description="Create a new project in a workspace.",
            inputSchema={
                "type": "object",
                "properties": {
                    "workspace_id": {
                        "type": "string",
                        "description": "The workspace ID to create the project in"
                    },
                    "name": {
                        "type": "string",
                        "description": "Project name"
                    },
                    "description": {
                        "type": "string",
                        "description": "Project description"
                    },
                    "status": {
                        "type": "string",
                        "enum": PROJECT_STATUSES,
                        "description": "Initial project status (default: planning)"
                    },
                    "priority": {
                        "type": "string",
                        "enum": PRIORITIES,
                        "description": "Project priority (default: medium)"
                    },
                    "budget": {
                        "type": "number",
                        "description": "Project budget"
                    },
                    "due_date": {
                        "type": "string",
                        "description": "Due date in ISO format (e.g., 2024-12-31)"
                    },
                    "client_id": {
                        "type": "string",
                        "description": "Client the project is for"
                    },
                    "estimated_duration_hours": {
                        "type": "number",
                        "description": "Estimated hours to complete"
                    }
                },
                "required": ["workspace_id", "name"]
            }
        ),
        Tool(
            name="update_project",
            description="Update project details like name, description, status, priority, or progress. "
                       "Only the fields you pass are changed.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": "string",
                        "description": "The project ID to update"
                    },
                    "name": {"type": "string", "description": "New project name"},
                    "description": {"type": "string", "description": "New description"},
                    "status": {
                        "type": "string",
                        "enum": PROJECT_STATUSES,
                        "description": "New status"
                    },
                    "priority": {
                        "type": "string",
                        "enum": PRIORITIES,
                        "description": "New priority"
                    },
                    "progress": {
                        "type": "number",
                        "description": "Progress percentage (0-100, clamped)"
                    },
                    "budget": {"type": "number", "description": "New budget"},
                    "spent": {"type": "number", "description": "Amount spent"},
                    "due_date": {"type": "string", "description": "New due date"}
                },
                "required": ["project_id"]
            }
        ),
        Tool(
            name="update_project_progress",
            description="Quick way to update just the project progress percentage. "
                       "Note: progress is recalculated from task statuses whenever tasks change.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": "string",
                        "description": "The project ID"
                    },
                    "progress": {
                        "type": "number",
                        "description": "Progress percentage (0-100)"
                    }
                },
                "required": ["project_id", "progress"]
            }
        ),
        # ============================================================================
        # Task Tools
        # ============================================================================
        Tool(
            name="create_task",
            description="Create a new task in a project. Use when discovering new work that needs to be done.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": "string",
                        "description": "The project ID to add the task to"
                    },
                    "title": {
                        "type": "string",
                        "description": "Task title"
                    },
                    "description": {
                        "type": "string",
                        "description": "Task description with details"
                    },
                    "status": {
                        "type": "string",
                        "enum": TASK_STATUSES,
                        "description": "Initial status (default: todo)"
                    },
                    "priority": {
                        "type": "string",
                        "enum": PRIORITIES,
                        "description": "Task priority (default: medium)"
                    },
                    "assignee": {
                        "type": "string",
                        "description": "Assignee name or ID"
                    },
                    "due_date": {
                        "type": "string",
                        "description": "Due date in ISO format"
                    },
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Tags for categorization"
                    }
                },
                "required": ["project_id", "title"]
            }
        ),
        Tool(
            name="get_task",
            description="Get detailed information about a specific task.",
            inputSchema=_task_id_schema("The task ID")
        ),
        Tool(
            name="update_task",
            description="Update task details like title, description, priority, or due date.",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": {
                        "type": "string",
                        "description": "The task ID to update"
                    },
                    "title": {"type": "string", "description": "New title"},
                    "description": {"type": "string", "description": "New description"},
                    "status": {
                        "type": "string",
                        "enum": TASK_STATUSES,
                        "description": "New status"
                    },
                    "priority": {
                        "type": "string",
                        "enum": PRIORITIES,
                        "description": "New priority"
                    },
                    "assignee": {"type": "string", "description": "New assignee"},
                    "due_date": {"type": "string", "description": "New due date"},
                    "tags": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "New tags"
                    }
                },
                "required": ["task_id"]
            }
        ),
        Tool(
            name="move_task",
            description="Move a task to a different kanban column (status). Use this when task status changes.",
            inputSchema={
                "type": "object",
                "properties": {
                    "task_id": {
                        "type": "string",
                        "description": "The task ID to move"
                    },
                    "new_status": {
                        "type": "string",
                        "enum": TASK_STATUSES,
                        "description": "The new status/column"
                    }
                },
                "required": ["task_id", "new_status"]
            }
        ),
        Tool(
            name="start_task",
            description="Start working on a task (moves to in-progress). Use when beginning implementation.",
            inputSchema=_task_id_schema("The task ID to start")
        ),
        Tool(
            name="complete_task",
            description="Mark a task as complete (moves to done). Use when finishing implementation.",
            inputSchema=_task_id_schema("The task ID to complete")
        ),
        Tool(
            name="review_task",
            description="Move a task to review status. Use when implementation is done and needs review.",
            inputSchema=_task_id_schema("The task ID to review")
        ),
        Tool(
            name="search_tasks",
            description="Search for tasks by keyword across projects. Useful for finding related work.",
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Search query (searches title and description)"
                    },
                    "workspace_id": {
                        "type": "string",
                        "description": "Limit search to specific workspace"
                    },
                    "project_id": {
                        "type": "string",
                        "description": "Limit search to specific project"
                    },
                    "status": {
                        "type": "string",
                        "enum": TASK_STATUSES,
                        "description": "Filter by status"
                    },
                    "limit": {
                        "type": "number",
                        "description": "Maximum results (default: 20)"
                    }
                },
                "required": ["query"]
            }
        ),
        Tool(
            name="list_project_tasks",
            description="List all tasks in a project, optionally filtered by status.",
            inputSchema={
                "type": "object",
                "properties": {
                    "project_id": {
                        "type": "string",
                        "description": "The project ID"
                    },
                    "status": {
                        "type": "string",
                        "enum": TASK_STATUSES,
                        "description": "Filter by status"
                    }
                },
                "required": ["project_id"]
            }
        ),
        Tool(
            name="delete_task",
            description="Delete a task. Use with caution.",
            inputSchema=_task_id_schema("The task ID to delete")
        ),
    ]
