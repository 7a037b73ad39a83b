from abc import ABC, abstractmethod

from core.domain.models.task import Task
from core.domain.models.task_query import TaskPage, TaskQuery


class TaskRepository(ABC):
    @abstractmethod
    def list(self, query: TaskQuery) -> TaskPage:
        raise NotImplementedError

    @abstractmethod
    def save(self, task: Task) -> Task:
        """Inserts the task when it has no id yet, otherwise overwrites the stored row."""
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: int) -> Task | None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: int) -> bool:
        raise NotImplementedError
