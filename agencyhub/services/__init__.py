"""Automation engine services."""

from agencyhub.services.automation_service import ActiveTaskProvider, AutomationService
from agencyhub.services.effects import AutomationEffects, LoggingEffects
from agencyhub.services.notification_service import NotificationSink
from agencyhub.services.rule_store import InMemoryRuleStore, default_rules
from agencyhub.services.task_registry import TaskRegistry


__all__ = [
    "ActiveTaskProvider",
    "AutomationEffects",
    "AutomationService",
    "InMemoryRuleStore",
    "LoggingEffects",
    "NotificationSink",
    "TaskRegistry",
    "default_rules",
]
