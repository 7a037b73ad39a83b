from dataclasses import dataclass

from core.domain.ports.task_repository import TaskRepository


@dataclass(slots=True)
class DeleteTaskCommand:
    id: int


class DeleteTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: DeleteTaskCommand) -> bool:
        """Returns False when there was nothing to delete."""
        return self._repository.delete(cmd.id)
