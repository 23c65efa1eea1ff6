"""Notification sink: stores automation notifications and fans them out to listeners."""

import logging
from collections.abc import Callable
from typing import Protocol

from agencyhub.domain.notification import Notification


logger = logging.getLogger(__name__)

NotificationListener = Callable[[Notification], None]


class NotificationRepository(Protocol):
    """Storage interface for generated notifications."""

    def publish(self, notification: Notification) -> None: ...

    def list_notifications(self, *, project_id: str | None = None, unread_only: bool = False) -> list[Notification]: ...

    def list_for_display(self, *, project_id: str | None = None) -> list[Notification]: ...

    def unread_count(self, *, project_id: str | None = None) -> int: ...

    def mark_read(self, notification_id: str) -> bool: ...

    def mark_unread(self, notification_id: str) -> bool: ...

    def mark_all_read(self, *, project_id: str | None = None) -> int: ...

    def delete(self, notification_id: str) -> bool: ...

    def clear(self, *, project_id: str | None = None) -> int: ...

    def subscribe(self, callback: NotificationListener) -> None: ...

    def unsubscribe(self, callback: NotificationListener) -> bool: ...


class NotificationSink:
    """In-memory notification store with synchronous listener fan-out."""

    def __init__(self) -> None:
        self._notifications: list[Notification] = []
        self._listeners: list[NotificationListener] = []

    def __len__(self) -> int:
        return len(self._notifications)

    def _find(self, notification_id: str) -> Notification | None:
        return next((n for n in self._notifications if n.id == notification_id), None)

    @staticmethod
    def _in_scope(notification: Notification, project_id: str | None) -> bool:
        return project_id is None or notification.project_id == project_id

    def publish(self, notification: Notification) -> None:
        """Store a notification, then invoke every listener with it.

        A failing listener is logged and does not prevent delivery to the rest.
        """
        self._notifications.append(notification)
        logger.info(
            "Notification %s created (rule=%s task=%s)",
            notification.id,
            notification.automation_rule_id,
            notification.task_id,
        )

        for callback in list(self._listeners):
            try:
                callback(notification.model_copy())
            except Exception:
                logger.exception("Notification listener %r failed for %s", callback, notification.id)

    def list_notifications(self, *, project_id: str | None = None, unread_only: bool = False) -> list[Notification]:
        """Return copies in insertion order, optionally scoped to a project or to unread ones."""
        return [
            n.model_copy()
            for n in self._notifications
            if self._in_scope(n, project_id) and not (unread_only and n.is_read)
        ]

    def list_for_display(self, *, project_id: str | None = None) -> list[Notification]:
        """Return notifications ordered for the notification center: unread first, newest first."""
        notifications = self.list_notifications(project_id=project_id)
        notifications.sort(key=lambda n: n.created_at, reverse=True)
        notifications.sort(key=lambda n: n.is_read)
        return notifications

    def unread_count(self, *, project_id: str | None = None) -> int:
        return sum(1 for n in self._notifications if not n.is_read and self._in_scope(n, project_id))

    def mark_read(self, notification_id: str) -> bool:
        notification = self._find(notification_id)
        if notification is None:
            return False
        notification.is_read = True
        return True

    def mark_unread(self, notification_id: str) -> bool:
        notification = self._find(notification_id)
        if notification is None:
            return False
        notification.is_read = False
        return True

    def mark_all_read(self, *, project_id: str | None = None) -> int:
        """Mark every unread notification in scope as read. Returns how many changed."""
        changed = 0
        for notification in self._notifications:
            if not notification.is_read and self._in_scope(notification, project_id):
                notification.is_read = True
                changed += 1
        return changed

    def delete(self, notification_id: str) -> bool:
        notification = self._find(notification_id)
        if notification is None:
            return False
        self._notifications.remove(notification)
        return True

    def clear(self, *, project_id: str | None = None) -> int:
        """Remove every notification in scope. Returns how many were removed."""
        kept = [n for n in self._notifications if not self._in_scope(n, project_id)]
        removed = len(self._notifications) - len(kept)
        self._notifications = kept
        if removed:
            logger.info("Cleared %d notifications (project=%s)", removed, project_id)
        return removed

    def subscribe(self, callback: NotificationListener) -> None:
        """Register a listener called synchronously for every new notification."""
        self._listeners.append(callback)

    def unsubscribe(self, callback: NotificationListener) -> bool:
        try:
            self._listeners.remove(callback)
        except ValueError:
            return False
        return True
