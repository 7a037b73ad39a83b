from core.domain.errors import TaskNotFoundError
from core.domain.models.task import Task, utcnow
from core.domain.models.task_changes import TaskChanges
from core.domain.ports.task_repository import TaskRepository


class UpdateTaskUseCase:
    """
    Merges a change set into a stored task.

    Used for both PUT and PATCH: fields left ``UNSET`` keep their stored
    value, and ``updated_at`` is refreshed even when nothing else changed.
    """

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, task_id: int, changes: TaskChanges) -> Task:
        task = self._repository.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        changes.apply_to(task)
        now = utcnow()
        # updated_at never precedes created_at.
        task.updated_at = max(now, task.created_at) if task.created_at else now

        return self._repository.save(task)
