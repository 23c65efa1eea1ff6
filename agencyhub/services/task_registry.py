"""In-memory registry of task snapshots reported by the host application.

Serves as the default source of "active tasks" for the due-date tick.
"""

from agencyhub.domain.task import Task, TaskStatus


class TaskRegistry:
    """Latest known snapshot per task id."""

    def __init__(self) -> None:
        self._tasks: dict[str, Task] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def upsert(self, task: Task) -> None:
        self._tasks[task.id] = task.model_copy(deep=True)

    def remove(self, task_id: str) -> bool:
        return self._tasks.pop(task_id, None) is not None

    def get(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return None if task is None else task.model_copy(deep=True)

    async def active_tasks(self) -> list[Task]:
        """Return every task that is not done."""
        return [task.model_copy(deep=True) for task in self._tasks.values() if task.status != TaskStatus.DONE]
