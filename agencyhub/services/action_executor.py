"""Action executor: performs the actions of a matched automation rule."""

import logging
import uuid

from agencyhub.core.clock import Clock
from agencyhub.core.config import Constants
from agencyhub.core.errors import classify_automation_error
from agencyhub.core.logging import log_with_rule_context
from agencyhub.domain.automation import (
    Action,
    AddTagAction,
    AssignUserAction,
    AutomationRule,
    ChangeStatusAction,
    SendEmailAction,
    SendNotificationAction,
)
from agencyhub.domain.notification import Notification
from agencyhub.domain.task import AutomationContext
from agencyhub.models.service_models import ActionOutcome
from agencyhub.services.effects import AutomationEffects
from agencyhub.services.notification_service import NotificationRepository


logger = logging.getLogger(__name__)

MANAGER_ROLE = "manager"


def render_template(template: str, context: AutomationContext) -> str:
    """Substitute ``{{placeholder}}`` tokens with values from the context.

    Placeholders are replaced one after another in a fixed order, so a
    placeholder that appears inside an earlier value (a task titled
    ``{{taskId}}``) is expanded too. Unknown placeholders are left untouched.
    """
    task = context.task
    values = (
        ("taskTitle", task.title),
        ("taskId", task.id),
        ("taskStatus", str(task.status)),
        ("taskPriority", str(task.priority)),
        ("userName", context.user.name if context.user and context.user.name else Constants.DEFAULT_USER_NAME),
        (
            "projectName",
            context.project.name if context.project and context.project.name else Constants.DEFAULT_PROJECT_NAME,
        ),
    )
    rendered = template
    for placeholder, value in values:
        rendered = rendered.replace("{{" + placeholder + "}}", value)
    return rendered


class ActionExecutor:
    """Runs rule actions in declared order.

    Actions are independent: a failing action is logged and the next one
    still runs. Nothing is rolled back.
    """

    def __init__(self, *, notifications: NotificationRepository, effects: AutomationEffects, clock: Clock) -> None:
        self._notifications = notifications
        self._effects = effects
        self._clock = clock

    async def execute_actions(self, *, rule: AutomationRule, context: AutomationContext) -> list[ActionOutcome]:
        outcomes = []
        for action in rule.actions:
            try:
                await self.execute_action(action=action, rule=rule, context=context)
            except Exception as e:
                error = classify_automation_error(e, stage="action")
                log_with_rule_context(
                    logger,
                    "error",
                    f"Automation action {action.type} failed: {e}",
                    rule_id=rule.id,
                    task_id=context.task.id,
                    error_code=error.code,
                )
                outcomes.append(
                    ActionOutcome(rule_id=rule.id, action_type=action.type, success=False, error_code=error.code)
                )
            else:
                outcomes.append(ActionOutcome(rule_id=rule.id, action_type=action.type, success=True))
        return outcomes

    async def execute_action(self, *, action: Action, rule: AutomationRule, context: AutomationContext) -> None:
        match action:
            case SendNotificationAction():
                self.send_notification(action=action, rule=rule, context=context)
            case AssignUserAction():
                await self._assign_user(action=action, context=context)
            case ChangeStatusAction():
                await self._change_status(action=action, context=context)
            case AddTagAction():
                await self._add_tag(action=action, context=context)
            case SendEmailAction():
                await self._effects.send_email(task=context.task, email=action)

    def send_notification(
        self,
        *,
        action: SendNotificationAction,
        rule: AutomationRule,
        context: AutomationContext,
    ) -> Notification:
        """Render the notification templates and publish the result."""
        task = context.task
        notification = Notification(
            id=f"{Constants.NOTIFICATION_ID_PREFIX}-{uuid.uuid4().hex}",
            type=action.severity,
            title=render_template(action.title, context),
            message=render_template(action.message, context),
            task_id=task.id,
            task_title=task.title,
            project_id=task.project_id or None,
            is_read=False,
            created_at=self._clock.now(),
            automation_rule_id=rule.id,
            automation_rule_name=rule.name,
        )
        self._notifications.publish(notification)
        return notification

    async def _assign_user(self, *, action: AssignUserAction, context: AutomationContext) -> None:
        project = context.project
        if action.role == MANAGER_ROLE and project is not None and project.manager_id:
            await self._effects.assign_task(task=context.task, user_id=project.manager_id)
        elif action.user_id:
            await self._effects.assign_task(task=context.task, user_id=action.user_id)
        else:
            logger.debug("assign_user on task %s had no assignee to resolve", context.task.id)

    async def _change_status(self, *, action: ChangeStatusAction, context: AutomationContext) -> None:
        if action.status:
            await self._effects.change_task_status(task=context.task, status=action.status)

    async def _add_tag(self, *, action: AddTagAction, context: AutomationContext) -> None:
        if action.tag and action.tag not in context.task.tags:
            await self._effects.add_task_tag(task=context.task, tag=action.tag)
