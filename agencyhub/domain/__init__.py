"""Domain models and DTOs."""

from agencyhub.domain.automation import (
    Action,
    ActionType,
    AddTagAction,
    AssignUserAction,
    AutomationRule,
    ChangeStatusAction,
    Condition,
    ConditionField,
    ConditionOperator,
    SendEmailAction,
    SendNotificationAction,
    Trigger,
    TriggerType,
)
from agencyhub.domain.create_models import RuleCreate
from agencyhub.domain.notification import Notification, NotificationType
from agencyhub.domain.task import AutomationContext, ContextProject, ContextUser, Task, TaskPriority, TaskStatus
from agencyhub.domain.update_models import RuleUpdate


__all__ = [
    "Action",
    "ActionType",
    "AddTagAction",
    "AssignUserAction",
    "AutomationContext",
    "AutomationRule",
    "ChangeStatusAction",
    "Condition",
    "ConditionField",
    "ConditionOperator",
    "ContextProject",
    "ContextUser",
    "Notification",
    "NotificationType",
    "RuleCreate",
    "RuleUpdate",
    "SendEmailAction",
    "SendNotificationAction",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "Trigger",
    "TriggerType",
]
