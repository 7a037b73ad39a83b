from dataclasses import dataclass
from datetime import date

from core.domain.models.task import Task, TaskPriority, TaskStatus, utcnow
from core.domain.ports.task_repository import TaskRepository


@dataclass(slots=True)
class CreateTaskCommand:
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None


class CreateTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: CreateTaskCommand) -> Task:
        now = utcnow()
        task = Task(
            title=cmd.title,
            description=cmd.description,
            status=cmd.status,
            priority=cmd.priority,
            due_date=cmd.due_date,
            created_at=now,
            updated_at=now,
        )
        return self._repository.save(task)
