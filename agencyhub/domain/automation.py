"""Automation rule domain models and enums."""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from agencyhub.domain.notification import NotificationType


class TriggerType(StrEnum):
    """Event category that makes a rule eligible for evaluation."""

    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_COMPLETED = "task_completed"
    DUE_DATE_APPROACHING = "due_date_approaching"
    STATUS_CHANGED = "status_changed"


class ConditionField(StrEnum):
    """Task fields a condition can inspect."""

    PRIORITY = "priority"
    STATUS = "status"
    RESPONSIBLE = "responsible"
    DUE_DATE = "dueDate"  # Resolves to signed hours until due
    TAGS = "tags"


class ConditionOperator(StrEnum):
    """Comparison operators supported by conditions."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class ActionType(StrEnum):
    """Side effects a rule can perform."""

    SEND_NOTIFICATION = "send_notification"
    ASSIGN_USER = "assign_user"
    CHANGE_STATUS = "change_status"
    ADD_TAG = "add_tag"
    SEND_EMAIL = "send_email"


class Condition(BaseModel):
    """Single field/operator/value comparison against task state.

    ``field`` and ``operator`` are kept as plain strings so that rules with
    unrecognized values can still be stored; they simply never match.
    """

    field: str = Field(..., description="One of ConditionField")
    operator: str = Field(..., description="One of ConditionOperator")
    value: str = Field(..., description="Right-hand side of the comparison")

    @field_validator("value", mode="before")
    @classmethod
    def coerce_value_to_str(cls, v: object) -> object:
        """Accept numeric values from JSON payloads (e.g. ``24`` for dueDate)."""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v


class Trigger(BaseModel):
    """Trigger type plus the conditions that must all hold."""

    type: TriggerType
    conditions: list[Condition] = Field(default_factory=list)


class SendNotificationAction(BaseModel):
    """Emit a templated notification."""

    type: Literal["send_notification"] = "send_notification"
    title: str = ""
    message: str = ""
    severity: NotificationType = NotificationType.AUTOMATION


class AssignUserAction(BaseModel):
    """Assign the task to the project manager or an explicit user."""

    type: Literal["assign_user"] = "assign_user"
    role: str | None = Field(default=None, description='"manager" assigns to the project manager')
    user_id: str | None = None


class ChangeStatusAction(BaseModel):
    """Move the task to another status."""

    type: Literal["change_status"] = "change_status"
    status: str


class AddTagAction(BaseModel):
    """Add a tag unless the task already carries it."""

    type: Literal["add_tag"] = "add_tag"
    tag: str


class SendEmailAction(BaseModel):
    """Send an email about the task."""

    type: Literal["send_email"] = "send_email"
    recipients: list[str] = Field(default_factory=list)
    subject: str = ""
    body: str = ""


Action = Annotated[
    SendNotificationAction | AssignUserAction | ChangeStatusAction | AddTagAction | SendEmailAction,
    Field(discriminator="type"),
]


class AutomationRule(BaseModel):
    """Named trigger-condition-action tuple."""

    id: str = Field(..., description="Unique rule ID")
    name: str = Field(..., description="Human-readable name")
    description: str = Field(default="", description="What the rule does")
    trigger: Trigger
    actions: list[Action] = Field(default_factory=list, description="Actions run in declared order")
    is_active: bool = Field(default=True, description="Inactive rules are never dispatched")
    created_at: datetime
    last_triggered: datetime | None = None
    trigger_count: int = Field(default=0, ge=0, description="Number of times the rule matched")
