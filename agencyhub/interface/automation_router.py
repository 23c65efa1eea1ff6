"""HTTP interface to the automation engine for the host application."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel

from agencyhub.core.errors import ErrorCategory, not_found_response
from agencyhub.domain.automation import AutomationRule
from agencyhub.domain.create_models import RuleCreate
from agencyhub.domain.notification import Notification
from agencyhub.domain.task import ContextProject, ContextUser, Task
from agencyhub.domain.update_models import RuleUpdate
from agencyhub.models.service_models import DispatchResult, DueDateCheckResult
from agencyhub.services.automation_service import AutomationService
from agencyhub.services.task_registry import TaskRegistry


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/automations", tags=["automations"])


class TaskCreatedEvent(BaseModel):
    """Payload sent by the host when a task is created."""

    task: Task
    user: ContextUser | None = None
    project: ContextProject | None = None


class TaskUpdatedEvent(BaseModel):
    """Payload sent by the host when a task is updated."""

    task: Task
    previous_task: Task
    user: ContextUser | None = None
    project: ContextProject | None = None


class NotificationList(BaseModel):
    """Notifications for the notification center plus the unread badge count."""

    notifications: list[Notification]
    unread_count: int


class BulkResult(BaseModel):
    """Number of records a bulk operation touched."""

    count: int


def get_automation_service(request: Request) -> AutomationService:
    """Return the service built by the application's lifespan."""
    return request.app.state.automation_service


def get_task_registry(request: Request) -> TaskRegistry:
    """Return the registry that feeds the due-date check."""
    return request.app.state.task_registry


def _rule_not_found(rule_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=not_found_response(ErrorCategory.RULE_NOT_FOUND, rule_id).model_dump(mode="json"),
    )


def _notification_not_found(notification_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=not_found_response(ErrorCategory.NOTIFICATION_NOT_FOUND, notification_id).model_dump(mode="json"),
    )


# Rules


@router.get("/rules")
async def list_rules(service: AutomationService = Depends(get_automation_service)) -> list[AutomationRule]:
    return service.list_rules()


@router.post("/rules", status_code=status.HTTP_201_CREATED)
async def create_rule(
    data: RuleCreate,
    service: AutomationService = Depends(get_automation_service),
) -> AutomationRule:
    return service.add_rule(data)


@router.get("/rules/{rule_id}")
async def get_rule(rule_id: str, service: AutomationService = Depends(get_automation_service)) -> AutomationRule:
    rule = service.get_rule(rule_id)
    if rule is None:
        raise _rule_not_found(rule_id)
    return rule


@router.patch("/rules/{rule_id}")
async def update_rule(
    rule_id: str,
    patch: RuleUpdate,
    service: AutomationService = Depends(get_automation_service),
) -> AutomationRule:
    if not service.update_rule(rule_id, patch):
        raise _rule_not_found(rule_id)
    return service.get_rule(rule_id)


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(rule_id: str, service: AutomationService = Depends(get_automation_service)) -> Response:
    if not service.delete_rule(rule_id):
        raise _rule_not_found(rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/rules/{rule_id}/toggle")
async def toggle_rule(rule_id: str, service: AutomationService = Depends(get_automation_service)) -> AutomationRule:
    if not service.toggle_rule(rule_id):
        raise _rule_not_found(rule_id)
    return service.get_rule(rule_id)


# Notifications


@router.get("/notifications")
async def list_notifications(
    project_id: str | None = None,
    unread_only: bool = False,
    service: AutomationService = Depends(get_automation_service),
) -> NotificationList:
    notifications = service.list_notifications_for_display(project_id=project_id)
    if unread_only:
        notifications = [n for n in notifications if not n.is_read]
    return NotificationList(
        notifications=notifications,
        unread_count=service.unread_notification_count(project_id=project_id),
    )


@router.post("/notifications/read-all")
async def mark_all_notifications_read(
    project_id: str | None = None,
    service: AutomationService = Depends(get_automation_service),
) -> BulkResult:
    return BulkResult(count=service.mark_all_notifications_as_read(project_id=project_id))


@router.post("/notifications/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: str,
    service: AutomationService = Depends(get_automation_service),
) -> Response:
    if not service.mark_notification_as_read(notification_id):
        raise _notification_not_found(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/notifications/{notification_id}/unread", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_unread(
    notification_id: str,
    service: AutomationService = Depends(get_automation_service),
) -> Response:
    if not service.mark_notification_as_unread(notification_id):
        raise _notification_not_found(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/notifications/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    service: AutomationService = Depends(get_automation_service),
) -> Response:
    if not service.delete_notification(notification_id):
        raise _notification_not_found(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/notifications")
async def clear_notifications(
    project_id: str | None = None,
    service: AutomationService = Depends(get_automation_service),
) -> BulkResult:
    return BulkResult(count=service.clear_notifications(project_id=project_id))


# Task lifecycle events


@router.post("/events/task-created")
async def task_created(
    event: TaskCreatedEvent,
    service: AutomationService = Depends(get_automation_service),
    registry: TaskRegistry = Depends(get_task_registry),
) -> list[DispatchResult]:
    registry.upsert(event.task)
    return await service.on_task_created(task=event.task, user=event.user, project=event.project)


@router.post("/events/task-updated")
async def task_updated(
    event: TaskUpdatedEvent,
    service: AutomationService = Depends(get_automation_service),
    registry: TaskRegistry = Depends(get_task_registry),
) -> list[DispatchResult]:
    registry.upsert(event.task)
    return await service.on_task_updated(
        task=event.task,
        previous_task=event.previous_task,
        user=event.user,
        project=event.project,
    )


@router.delete("/events/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def task_deleted(task_id: str, registry: TaskRegistry = Depends(get_task_registry)) -> Response:
    """Stop tracking a deleted task for due-date checks."""
    if not registry.remove(task_id):
        logger.debug("Task %s was not tracked", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/events/due-date-check")
async def run_due_date_check(service: AutomationService = Depends(get_automation_service)) -> DueDateCheckResult:
    """Run a due-date check immediately instead of waiting for the next tick."""
    return await service.check_due_dates()
