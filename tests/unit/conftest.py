"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Callable
from datetime import timedelta

import pytest

from agencyhub.domain.automation import Condition, SendNotificationAction, Trigger, TriggerType
from agencyhub.domain.create_models import RuleCreate
from agencyhub.domain.task import Task
from agencyhub.services.automation_service import AutomationService
from agencyhub.services.notification_service import NotificationSink
from agencyhub.services.task_registry import TaskRegistry
from tests.unit.mocks import FakeClock, RecordingEffects


@pytest.fixture
def clock() -> FakeClock:
    """Provides a virtual clock fixed at 2025-06-10 10:00 UTC."""
    return FakeClock()


@pytest.fixture
def effects() -> RecordingEffects:
    return RecordingEffects()


@pytest.fixture
def sink() -> NotificationSink:
    return NotificationSink()


@pytest.fixture
def registry() -> TaskRegistry:
    return TaskRegistry()


@pytest.fixture
def service(clock, effects, sink, registry) -> AutomationService:
    """Automation service with the built-in rules and recording side effects."""
    return AutomationService(
        notifications=sink,
        effects=effects,
        clock=clock,
        active_tasks=registry.active_tasks,
    )


@pytest.fixture
def empty_service(clock, effects, sink, registry) -> AutomationService:
    """Automation service with no seeded rules."""
    return AutomationService(
        notifications=sink,
        effects=effects,
        clock=clock,
        active_tasks=registry.active_tasks,
        seed_default_rules=False,
    )


@pytest.fixture
def make_task(clock) -> Callable[..., Task]:
    """Factory for task snapshots; ``due_in_hours`` sets due date/time relative to the clock."""

    def _make(task_id: str = "task-1", *, due_in_hours: float | None = None, **fields) -> Task:
        data = {"id": task_id, "title": "Design review", "project_id": "proj-1", **fields}
        if due_in_hours is not None:
            due_at = clock.now() + timedelta(hours=due_in_hours)
            data["due_date"] = due_at.date().isoformat()
            data["due_time"] = due_at.strftime("%H:%M")
        return Task(**data)

    return _make


@pytest.fixture
def notify_rule() -> Callable[..., RuleCreate]:
    """Factory for a rule that only sends a notification."""

    def _make(
        trigger_type: TriggerType,
        conditions: list[Condition] | None = None,
        *,
        name: str = "Test rule",
        message: str = "{{taskTitle}} matched",
    ) -> RuleCreate:
        return RuleCreate(
            name=name,
            description="Rule used in tests",
            trigger=Trigger(type=trigger_type, conditions=conditions or []),
            actions=[SendNotificationAction(title="Test", message=message)],
        )

    return _make
