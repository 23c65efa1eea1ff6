"""Notification domain models."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class NotificationType(StrEnum):
    """Visual category of a notification."""

    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    AUTOMATION = "automation"


class Notification(BaseModel):
    """User-facing message produced by a send_notification action."""

    id: str = Field(..., description="Unique notification ID")
    type: NotificationType = Field(default=NotificationType.AUTOMATION, description="Notification category")
    title: str = Field(..., description="Rendered title")
    message: str = Field(..., description="Rendered message")
    task_id: str | None = Field(default=None, description="Task that triggered the notification")
    task_title: str | None = Field(default=None, description="Task title at generation time")
    project_id: str | None = Field(default=None, description="Project of the triggering task")
    is_read: bool = Field(default=False, description="Whether the user has read it")
    created_at: datetime = Field(..., description="Creation timestamp")
    automation_rule_id: str | None = Field(default=None, description="Originating rule (may no longer exist)")
    automation_rule_name: str | None = Field(default=None, description="Originating rule name at generation time")
