import logging
import os
from functools import lru_cache

from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksUseCase
from core.application.update_task import UpdateTaskUseCase
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_task_repository() -> TaskRepository:
    orm = os.getenv("ORM", "peewee").lower()

    if orm == "sqlalchemy":
        from infrastructure.sqlalchemy.repository.task_repository import (
            SqlAlchemyTaskRepository,
        )

        logger.info("Using SQLAlchemy task repository")
        return SqlAlchemyTaskRepository()

    # Default to Peewee
    from infrastructure.peewee.repository.task_repository import PeeweeTaskRepository

    logger.info("Using Peewee task repository")
    return PeeweeTaskRepository()


def get_create_task_use_case() -> CreateTaskUseCase:
    return CreateTaskUseCase(repository=get_task_repository())


def get_update_task_use_case() -> UpdateTaskUseCase:
    return UpdateTaskUseCase(repository=get_task_repository())


def get_delete_task_use_case() -> DeleteTaskUseCase:
    return DeleteTaskUseCase(repository=get_task_repository())


def get_get_task_use_case() -> GetTaskUseCase:
    return GetTaskUseCase(repository=get_task_repository())


def get_list_tasks_use_case() -> ListTasksUseCase:
    return ListTasksUseCase(repository=get_task_repository())
