"""Side-effect port used by the action executor.

The automation core only depends on ``AutomationEffects``. The host
application supplies a real implementation (task repository, mailer);
``LoggingEffects`` is the default and only records what would happen.
"""

import logging
from typing import Protocol

from agencyhub.domain.automation import SendEmailAction
from agencyhub.domain.task import Task


logger = logging.getLogger(__name__)


class AutomationEffects(Protocol):
    """Capabilities the action executor needs from the host application."""

    async def assign_task(self, *, task: Task, user_id: str) -> None:
        """Assign the task to a user."""
        ...

    async def change_task_status(self, *, task: Task, status: str) -> None:
        """Move the task to another status."""
        ...

    async def add_task_tag(self, *, task: Task, tag: str) -> None:
        """Append a tag to the task."""
        ...

    async def send_email(self, *, task: Task, email: SendEmailAction) -> None:
        """Send an email about the task."""
        ...


class LoggingEffects:
    """Effects implementation that only logs the intended side effect."""

    async def assign_task(self, *, task: Task, user_id: str) -> None:
        logger.info("Assigning task %s to user %s", task.id, user_id)

    async def change_task_status(self, *, task: Task, status: str) -> None:
        logger.info("Changing status of task %s from %s to %s", task.id, task.status, status)

    async def add_task_tag(self, *, task: Task, tag: str) -> None:
        logger.info("Adding tag '%s' to task %s", tag, task.id)

    async def send_email(self, *, task: Task, email: SendEmailAction) -> None:
        logger.info(
            "Sending email about task %s",
            task.id,
            extra={"recipients": email.recipients, "subject": email.subject},
        )
