"""Status enums and SQLAlchemy database models.

The tables mirror the Limitless Canvas schema. They are used by the SQL
gateway; the REST gateway talks to the same tables through PostgREST.
"""
from datetime import datetime, timezone
from uuid import uuid4
import enum

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Float,
    DateTime,
    ForeignKey,
    Enum,
    ARRAY,
    JSON,
)
from sqlalchemy.orm import declarative_base, relationship

# Base class for all models
Base = declarative_base()


class TaskStatus(str, enum.Enum):
    """Kanban column of a task, ordered left to right."""

    BACKLOG = "backlog"
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"


class Priority(str, enum.Enum):
    """Priority shared by projects and tasks."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ProjectStatus(str, enum.Enum):
    """Project lifecycle status."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"
    PLANNING = "planning"


class ProjectItemType(str, enum.Enum):
    """Kind of item stored in the projects table."""

    PROJECT = "project"
    TASK = "task"
    QUICK_TASK = "quick_task"


TASK_STATUSES = [status.value for status in TaskStatus]
PROJECT_STATUSES = [status.value for status in ProjectStatus]
PRIORITIES = [priority.value for priority in Priority]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def _enum_column(enum_cls, **kwargs) -> Column:
    # Store the hyphenated values ("in-progress"), not the member names.
    return Column(
        Enum(
            enum_cls,
            values_callable=lambda members: [member.value for member in members],
            native_enum=False,
            length=20,
        ),
        **kwargs,
    )


TagList = ARRAY(Text).with_variant(JSON(), "sqlite")


class Workspace(Base):
    """Top-level grouping that owns projects and team members."""

    __tablename__ = "workspaces"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(200), nullable=False)
    color = Column(String(20), nullable=False, default="#8B5CF6")
    logo = Column(Text, nullable=True)
    owner_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    projects = relationship("Project", back_populates="workspace")
    team_members = relationship("TeamMember", back_populates="workspace")


class Project(Base):
    """Unit of work inside a workspace, tracked by status and progress."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = _enum_column(ProjectStatus, nullable=False, default=ProjectStatus.PLANNING)
    priority = _enum_column(Priority, nullable=False, default=Priority.MEDIUM)
    progress = Column(Integer, nullable=False, default=0)
    budget = Column(Float, nullable=True)
    spent = Column(Float, nullable=True)
    due_date = Column(String(32), nullable=True)
    client_id = Column(String(36), nullable=True)
    team_size = Column(Integer, nullable=True)
    item_type = _enum_column(ProjectItemType, nullable=False, default=ProjectItemType.PROJECT)
    estimated_duration_hours = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    workspace = relationship("Workspace", back_populates="projects")
    tasks = relationship("Task", back_populates="project", order_by="Task.order")


class Task(Base):
    """A single kanban card inside a project."""

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    status = _enum_column(TaskStatus, nullable=False, default=TaskStatus.TODO)
    priority = _enum_column(Priority, nullable=False, default=Priority.MEDIUM)
    assignee = Column(String(200), nullable=True)
    due_date = Column(String(32), nullable=True)
    tags = Column(TagList, nullable=True)
    order = Column("order", Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    project = relationship("Project", back_populates="tasks")


class TeamMember(Base):
    """Workspace member. Read-only here, only counted in summaries."""

    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=_new_id)
    workspace_id = Column(String(36), ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False)
    role = Column(String(100), nullable=False)
    avatar = Column(Text, nullable=True)
    department = Column(String(200), nullable=True)
    status = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    workspace = relationship("Workspace", back_populates="team_members")


MODELS_BY_TABLE = {
    model.__tablename__: model
    for model in (Workspace, Project, Task, TeamMember)
}
