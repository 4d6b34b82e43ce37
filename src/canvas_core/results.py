"""Result envelope returned by every tool operation.

Operations never raise past their own boundary. They return either a
``ToolSuccess`` carrying the payload or a ``ToolError`` carrying a
human-readable message and a symbolic ``ErrorCode``. Callers branch on
``result.success`` before touching ``data`` or ``error``.
"""
import enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel


class ErrorCode(str, enum.Enum):
    """Symbolic error codes attached to ``ToolError``."""

    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    MISSING_WORKSPACE_ID = "MISSING_WORKSPACE_ID"
    INVALID_STATUS = "INVALID_STATUS"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    DATABASE_ERROR = "DATABASE_ERROR"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ToolSuccess(BaseModel):
    """Successful outcome with its payload."""

    success: Literal[True] = True
    data: Any = None
    message: Optional[str] = None


class ToolError(BaseModel):
    """Failed outcome with a message and error code."""

    success: Literal[False] = False
    error: str
    code: ErrorCode


ToolResult = Union[ToolSuccess, ToolError]


def ok(data: Any, message: Optional[str] = None) -> ToolSuccess:
    return ToolSuccess(data=data, message=message)


def fail(error: str, code: ErrorCode) -> ToolError:
    return ToolError(error=error, code=code)


def workspace_not_found(workspace_id: str) -> ToolError:
    return fail(f'Workspace with ID "{workspace_id}" not found.', ErrorCode.WORKSPACE_NOT_FOUND)


def project_not_found(project_id: str) -> ToolError:
    return fail(f'Project with ID "{project_id}" not found.', ErrorCode.PROJECT_NOT_FOUND)


def task_not_found(task_id: str) -> ToolError:
    return fail(f'Task with ID "{task_id}" not found.', ErrorCode.TASK_NOT_FOUND)


def database_error(action: str, exc: Exception) -> ToolError:
    """Wrap a gateway failure, keeping the backend message verbatim."""
    return fail(f"Failed to {action}: {exc}", ErrorCode.DATABASE_ERROR)
