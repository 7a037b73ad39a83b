import logging
from functools import reduce
from operator import and_

from peewee import Case, fn

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_query import (
    PRIORITY_RANK,
    SortField,
    TaskFilters,
    TaskPage,
    TaskQuery,
)
from core.domain.ports.task_repository import TaskRepository
from infrastructure.peewee.model.models import TaskModel
from infrastructure.peewee.session.db import db
from infrastructure.timestamps import from_storage, to_storage

logger = logging.getLogger(__name__)

_PRIORITY_RANK = Case(
    TaskModel.priority,
    [(priority.value, rank) for priority, rank in PRIORITY_RANK.items()],
)

_SORT_COLUMNS = {
    SortField.DUE_DATE: TaskModel.due_date,
    SortField.CREATED_AT: TaskModel.created_at,
    SortField.PRIORITY: _PRIORITY_RANK,
}


def _to_domain(model: TaskModel) -> Task:
    return Task(
        id=model.id,
        title=model.title,
        description=model.description,
        status=TaskStatus(model.status),
        priority=TaskPriority(model.priority),
        due_date=model.due_date,
        created_at=from_storage(model.created_at),
        updated_at=from_storage(model.updated_at),
    )


def _where(filters: TaskFilters):
    predicates = []
    if filters.status is not None:
        predicates.append(TaskModel.status == filters.status.value)
    if filters.priority is not None:
        predicates.append(TaskModel.priority == filters.priority.value)
    term = filters.search_term
    if term is not None:
        predicates.append(
            fn.LOWER(TaskModel.title).contains(term)
            | fn.LOWER(TaskModel.description).contains(term)
        )
    if filters.due_date_from is not None:
        predicates.append(TaskModel.due_date >= filters.due_date_from)
    if filters.due_date_to is not None:
        predicates.append(TaskModel.due_date <= filters.due_date_to)
    if not predicates:
        return None
    return reduce(and_, predicates)


class PeeweeTaskRepository(TaskRepository):
    def __init__(self):
        # Ensure tables exist. In a real production app, this might be handled by migrations.
        db.connect(reuse_if_open=True)
        db.create_tables([TaskModel], safe=True)

    def save(self, task: Task) -> Task:
        fields = {
            "title": task.title,
            "description": task.description,
            "status": task.status.value,
            "priority": task.priority.value,
            "due_date": task.due_date,
            "created_at": to_storage(task.created_at),
            "updated_at": to_storage(task.updated_at),
        }
        with db.atomic():
            if task.id is None:
                model = TaskModel.create(**fields)
                logger.debug(f"Inserted task {model.id}")
            else:
                TaskModel.update(**fields).where(TaskModel.id == task.id).execute()
                model = TaskModel.get_by_id(task.id)
        return _to_domain(model)

    def get(self, task_id: int) -> Task | None:
        try:
            return _to_domain(TaskModel.get(TaskModel.id == task_id))
        except TaskModel.DoesNotExist:
            return None

    def list(self, query: TaskQuery) -> TaskPage:
        select = TaskModel.select()
        where = _where(query.filters)
        if where is not None:
            select = select.where(where)

        total = select.count()

        column = _SORT_COLUMNS[query.sort.field]
        if query.sort.descending:
            order = (column.desc(), TaskModel.id.desc())
        else:
            order = (column.asc(), TaskModel.id.asc())

        rows = select.order_by(*order).limit(query.limit).offset(query.offset)
        return TaskPage(
            data=[_to_domain(row) for row in rows],
            total=total,
            page=query.page,
            limit=query.limit,
        )

    def delete(self, task_id: int) -> bool:
        deleted = TaskModel.delete().where(TaskModel.id == task_id).execute()
        return deleted > 0
