from sqlalchemy import and_, case, delete, func, or_, select, true

from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_query import (
    PRIORITY_RANK,
    SortField,
    TaskFilters,
    TaskPage,
    TaskQuery,
)
from core.domain.ports.task_repository import TaskRepository
from infrastructure.sqlalchemy.model.models import TaskModel
from infrastructure.sqlalchemy.session.db import get_session, init_db
from infrastructure.timestamps import from_storage, to_storage

_PRIORITY_RANK = case(
    {priority.value: rank for priority, rank in PRIORITY_RANK.items()},
    value=TaskModel.priority,
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


def _conditions(filters: TaskFilters) -> list:
    conditions = []
    if filters.status is not None:
        conditions.append(TaskModel.status == filters.status.value)
    if filters.priority is not None:
        conditions.append(TaskModel.priority == filters.priority.value)
    term = filters.search_term
    if term is not None:
        conditions.append(
            or_(
                func.lower(TaskModel.title).contains(term, autoescape=True),
                func.lower(TaskModel.description).contains(term, autoescape=True),
            )
        )
    if filters.due_date_from is not None:
        conditions.append(TaskModel.due_date >= filters.due_date_from)
    if filters.due_date_to is not None:
        conditions.append(TaskModel.due_date <= filters.due_date_to)
    return conditions


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self) -> None:
        init_db()

    def save(self, task: Task) -> Task:
        session = get_session()
        try:
            model = TaskModel(
                id=task.id,
                title=task.title,
                description=task.description,
                status=task.status.value,
                priority=task.priority.value,
                due_date=task.due_date,
                created_at=to_storage(task.created_at),
                updated_at=to_storage(task.updated_at),
            )
            if task.id is None:
                session.add(model)
            else:
                model = session.merge(model)
            session.commit()
            return _to_domain(model)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, task_id: int) -> Task | None:
        session = get_session()
        try:
            model = session.get(TaskModel, task_id)
            if model is None:
                return None
            return _to_domain(model)
        finally:
            session.close()

    def list(self, query: TaskQuery) -> TaskPage:
        session = get_session()
        try:
            where = and_(true(), *_conditions(query.filters))

            total = session.scalar(select(func.count()).select_from(TaskModel).where(where))

            column = _SORT_COLUMNS[query.sort.field]
            if query.sort.descending:
                order = (column.desc(), TaskModel.id.desc())
            else:
                order = (column.asc(), TaskModel.id.asc())

            stmt = (
                select(TaskModel)
                .where(where)
                .order_by(*order)
                .limit(query.limit)
                .offset(query.offset)
            )
            return TaskPage(
                data=[_to_domain(model) for model in session.scalars(stmt)],
                total=total or 0,
                page=query.page,
                limit=query.limit,
            )
        finally:
            session.close()

    def delete(self, task_id: int) -> bool:
        session = get_session()
        try:
            result = session.execute(delete(TaskModel).where(TaskModel.id == task_id))
            session.commit()
            return result.rowcount > 0
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
