import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from core.domain.models.task import TaskPriority, TaskStatus
from core.domain.models.task_query import (
    DEFAULT_LIMIT,
    DEFAULT_PAGE,
    MAX_LIMIT,
    MAX_PAGE,
    SortKey,
    TaskFilters,
    TaskPage,
    TaskQuery,
)
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _coerce_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


def _coerce_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


class _Unmatchable(Exception):
    """A filter value that no stored task can ever satisfy."""


def _coerce_enum(enum_cls, value: Any):
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise _Unmatchable(f"{enum_cls.__name__}={value!r}") from None


@dataclass(slots=True)
class ListTasksCommand:
    """
    Raw list parameters as they arrive from the outside (query strings).

    Nothing here is validated up front: bad page/limit values fall back to
    the defaults and an unknown sort token falls back to ``created_at:desc``.
    """

    page: Any = None
    limit: Any = None
    status: Any = None
    priority: Any = None
    search: str | None = None
    sort: str | None = None
    due_date_from: Any = None
    due_date_to: Any = None

    @property
    def page_number(self) -> int:
        return min(_coerce_int(self.page, DEFAULT_PAGE), MAX_PAGE)

    @property
    def page_size(self) -> int:
        return min(_coerce_int(self.limit, DEFAULT_LIMIT), MAX_LIMIT)

    def to_query(self) -> TaskQuery:
        filters = TaskFilters(
            status=_coerce_enum(TaskStatus, self.status),
            priority=_coerce_enum(TaskPriority, self.priority),
            search=self.search or None,
            due_date_from=_coerce_date(self.due_date_from),
            due_date_to=_coerce_date(self.due_date_to),
        )
        return TaskQuery(
            filters=filters,
            sort=SortKey.parse(self.sort),
            page=self.page_number,
            limit=self.page_size,
        )


class ListTasksUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, cmd: ListTasksCommand | None = None) -> TaskPage:
        cmd = cmd or ListTasksCommand()
        try:
            query = cmd.to_query()
        except _Unmatchable as e:
            logger.debug(f"Filter {e} matches nothing, skipping the store")
            return TaskPage(data=[], total=0, page=cmd.page_number, limit=cmd.page_size)

        logger.debug(
            f"Listing tasks page={query.page} limit={query.limit} sort={query.sort}"
        )
        return self._repository.list(query)
