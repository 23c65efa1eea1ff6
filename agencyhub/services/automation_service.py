"""Automation service: routes task lifecycle events to matching rules.

Data flow for every event:
    task mutation -> rules of the matching trigger type (active only)
                  -> condition evaluation (AND)
                  -> action execution
                  -> notifications published, rule counters updated

One instance is built by the application's composition root and passed
to whatever needs it.
"""

import logging
from collections.abc import Awaitable, Callable

from agencyhub.core.clock import Clock, SystemClock
from agencyhub.core.errors import classify_automation_error
from agencyhub.core.logging import log_with_rule_context, span
from agencyhub.domain.automation import AutomationRule, TriggerType
from agencyhub.domain.create_models import RuleCreate
from agencyhub.domain.notification import Notification
from agencyhub.domain.task import AutomationContext, ContextProject, ContextUser, Task, TaskStatus
from agencyhub.domain.update_models import RuleUpdate
from agencyhub.models.service_models import DispatchResult, DueDateCheckResult
from agencyhub.services.action_executor import ActionExecutor
from agencyhub.services.condition_evaluator import evaluate_conditions
from agencyhub.services.effects import AutomationEffects, LoggingEffects
from agencyhub.services.notification_service import NotificationListener, NotificationRepository, NotificationSink
from agencyhub.services.rule_store import InMemoryRuleStore, RuleRepository, default_rules


logger = logging.getLogger(__name__)

ActiveTaskProvider = Callable[[], Awaitable[list[Task]]]


async def no_active_tasks() -> list[Task]:
    """Active-task provider used when the host supplies none."""
    return []


class AutomationService:
    """Rule store, dispatcher and notification sink behind one facade."""

    def __init__(
        self,
        *,
        rules: RuleRepository | None = None,
        notifications: NotificationRepository | None = None,
        effects: AutomationEffects | None = None,
        clock: Clock | None = None,
        active_tasks: ActiveTaskProvider | None = None,
        seed_default_rules: bool = True,
    ) -> None:
        self._clock = clock or SystemClock()
        self._notifications = notifications if notifications is not None else NotificationSink()
        if rules is None:
            seeded = default_rules(created_at=self._clock.now()) if seed_default_rules else []
            rules = InMemoryRuleStore(seeded)
        self._rules = rules
        self._executor = ActionExecutor(
            notifications=self._notifications,
            effects=effects or LoggingEffects(),
            clock=self._clock,
        )
        self._active_tasks = active_tasks or no_active_tasks

    # Task lifecycle events

    async def on_task_created(
        self,
        *,
        task: Task,
        user: ContextUser | None = None,
        project: ContextProject | None = None,
    ) -> list[DispatchResult]:
        context = AutomationContext(task=task, user=user, project=project)
        return [await self.dispatch(TriggerType.TASK_CREATED, context)]

    async def on_task_updated(
        self,
        *,
        task: Task,
        previous_task: Task,
        user: ContextUser | None = None,
        project: ContextProject | None = None,
    ) -> list[DispatchResult]:
        """Dispatch every trigger type that applies to one task mutation.

        status_changed fires when the status differs, task_completed when the
        task just moved into done, and task_updated always.
        """
        context = AutomationContext(task=task, previous_task=previous_task, user=user, project=project)
        results = []

        if task.status != previous_task.status:
            results.append(await self.dispatch(TriggerType.STATUS_CHANGED, context))

        if task.status == TaskStatus.DONE and previous_task.status != TaskStatus.DONE:
            results.append(await self.dispatch(TriggerType.TASK_COMPLETED, context))

        results.append(await self.dispatch(TriggerType.TASK_UPDATED, context))
        return results

    async def check_due_dates(self) -> DueDateCheckResult:
        """Dispatch due_date_approaching once for every active task.

        There is no cooldown: a rule whose condition keeps holding fires on
        every tick.
        """
        with span("automation_service.check_due_dates"):
            tasks = await self._active_tasks()
            matched = 0
            for task in tasks:
                result = await self.dispatch(TriggerType.DUE_DATE_APPROACHING, AutomationContext(task=task))
                matched += len(result.matched_rule_ids)

            logger.info("Due-date check: %d tasks checked, %d rule matches", len(tasks), matched)
            return DueDateCheckResult(tasks_checked=len(tasks), rules_matched=matched)

    async def dispatch(self, trigger_type: TriggerType, context: AutomationContext) -> DispatchResult:
        """Evaluate every active rule of ``trigger_type`` and run the ones that match."""
        with span(f"automation_service.dispatch.{trigger_type}"):
            result = DispatchResult(trigger_type=trigger_type, task_id=context.task.id)

            for rule in self._rules.active_rules_for(trigger_type):
                result.evaluated_rule_ids.append(rule.id)
                try:
                    matched = evaluate_conditions(
                        conditions=rule.trigger.conditions,
                        task=context.task,
                        now=self._clock.now(),
                    )
                except Exception as e:
                    error = classify_automation_error(e, stage="condition")
                    log_with_rule_context(
                        logger,
                        "error",
                        f"Skipping rule after evaluation error: {e}",
                        rule_id=rule.id,
                        task_id=context.task.id,
                        error_code=error.code,
                    )
                    result.failed_rule_ids.append(rule.id)
                    continue

                if not matched:
                    continue

                await self._run_rule(rule=rule, context=context)
                result.matched_rule_ids.append(rule.id)

            if result.matched_rule_ids:
                logger.info(
                    "%s on task %s matched %d/%d rules",
                    trigger_type,
                    context.task.id,
                    len(result.matched_rule_ids),
                    len(result.evaluated_rule_ids),
                )
            return result

    async def _run_rule(self, *, rule: AutomationRule, context: AutomationContext) -> None:
        log_with_rule_context(
            logger,
            "info",
            f"Running automation '{rule.name}'",
            rule_id=rule.id,
            task_id=context.task.id,
            trigger_type=str(rule.trigger.type),
        )
        await self._executor.execute_actions(rule=rule, context=context)
        self._rules.record_trigger(rule.id, triggered_at=self._clock.now())

    # Rule management

    def list_rules(self) -> list[AutomationRule]:
        return self._rules.list_all()

    def get_rule(self, rule_id: str) -> AutomationRule | None:
        return self._rules.get(rule_id)

    def add_rule(self, data: RuleCreate) -> AutomationRule:
        return self._rules.add(data, created_at=self._clock.now())

    def update_rule(self, rule_id: str, patch: RuleUpdate) -> bool:
        return self._rules.update(rule_id, patch)

    def delete_rule(self, rule_id: str) -> bool:
        return self._rules.remove(rule_id)

    def toggle_rule(self, rule_id: str) -> bool:
        return self._rules.toggle_active(rule_id)

    # Notifications

    def list_notifications(self, *, project_id: str | None = None, unread_only: bool = False) -> list[Notification]:
        return self._notifications.list_notifications(project_id=project_id, unread_only=unread_only)

    def list_notifications_for_display(self, *, project_id: str | None = None) -> list[Notification]:
        return self._notifications.list_for_display(project_id=project_id)

    def unread_notification_count(self, *, project_id: str | None = None) -> int:
        return self._notifications.unread_count(project_id=project_id)

    def mark_notification_as_read(self, notification_id: str) -> bool:
        return self._notifications.mark_read(notification_id)

    def mark_notification_as_unread(self, notification_id: str) -> bool:
        return self._notifications.mark_unread(notification_id)

    def mark_all_notifications_as_read(self, *, project_id: str | None = None) -> int:
        return self._notifications.mark_all_read(project_id=project_id)

    def delete_notification(self, notification_id: str) -> bool:
        return self._notifications.delete(notification_id)

    def clear_notifications(self, *, project_id: str | None = None) -> int:
        return self._notifications.clear(project_id=project_id)

    def on_notification(self, callback: NotificationListener) -> None:
        self._notifications.subscribe(callback)

    def off_notification(self, callback: NotificationListener) -> bool:
        return self._notifications.unsubscribe(callback)
