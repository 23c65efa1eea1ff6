"""Task snapshot models consumed by the automation engine."""

from enum import StrEnum

from pydantic import BaseModel, Field


class TaskStatus(StrEnum):
    """Kanban column a task sits in."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"  # Terminal


class TaskPriority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Task(BaseModel):
    """Read-only task snapshot supplied by the host application."""

    id: str = Field(..., description="Unique task ID")
    title: str = Field(..., description="Task title")
    description: str = Field(default="", description="Detailed task description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Current board column")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    responsible: str | None = Field(default=None, description="Responsible user ID or name")
    due_date: str | None = Field(default=None, description="Due date (YYYY-MM-DD)")
    due_time: str | None = Field(default=None, description="Due time (HH:MM), end of day when absent")
    tags: list[str] = Field(default_factory=list, description="Ordered tags, duplicates allowed")
    project_id: str = Field(default="", description="Owning project ID")
    created_at: str | None = Field(default=None, description="Creation timestamp (ISO format)")
    updated_at: str | None = Field(default=None, description="Last update timestamp (ISO format)")


class ContextUser(BaseModel):
    """User acting on the task, used for template placeholders."""

    id: str
    name: str
    email: str = ""


class ContextProject(BaseModel):
    """Project the task belongs to."""

    id: str
    name: str
    manager_id: str | None = None


class AutomationContext(BaseModel):
    """Everything a rule can look at when it is evaluated."""

    task: Task
    previous_task: Task | None = None
    user: ContextUser | None = None
    project: ContextProject | None = None
