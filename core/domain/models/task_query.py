"""
Value objects describing a filtered, sorted, paginated read of tasks.

Repositories receive a fully resolved ``TaskQuery`` (defaults applied, limit
capped, sort key validated) and only have to render it against their ORM.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from core.domain.models.task import Task, TaskPriority, TaskStatus

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps (page - 1) * limit within a signed 64-bit SQL integer.
MAX_PAGE = (2**63 - 1) // MAX_LIMIT


class SortField(Enum):
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"
    PRIORITY = "priority"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


# Rank used when ordering by priority: low < medium < high.
PRIORITY_RANK: dict[TaskPriority, int] = {
    TaskPriority.LOW: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.HIGH: 2,
}


@dataclass(frozen=True, slots=True)
class SortKey:
    field: SortField = SortField.CREATED_AT
    direction: SortDirection = SortDirection.DESC

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    @classmethod
    def parse(cls, raw: str | None) -> "SortKey":
        """
        Parses a ``field:direction`` token.

        Anything outside the supported pairs resolves to the default
        ordering (``created_at:desc``) instead of failing.
        """
        if not raw:
            return cls()
        field_name, _, direction = raw.strip().partition(":")
        try:
            return cls(SortField(field_name), SortDirection(direction))
        except ValueError:
            return cls()

    def __str__(self) -> str:
        return f"{self.field.value}:{self.direction.value}"


@dataclass(frozen=True, slots=True)
class TaskFilters:
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    due_date_from: date | None = None
    due_date_to: date | None = None

    @property
    def search_term(self) -> str | None:
        """Lower-cased search text, or None when there is nothing to match."""
        if self.search is None or self.search == "":
            return None
        return self.search.lower()

    def matches(self, task: Task) -> bool:
        """In-memory evaluation of the same conjunctive predicate the SQL renders."""
        if self.status is not None and task.status is not self.status:
            return False
        if self.priority is not None and task.priority is not self.priority:
            return False
        term = self.search_term
        if term is not None:
            in_title = term in task.title.lower()
            in_description = task.description is not None and term in task.description.lower()
            if not (in_title or in_description):
                return False
        if self.due_date_from is not None:
            if task.due_date is None or task.due_date < self.due_date_from:
                return False
        if self.due_date_to is not None:
            if task.due_date is None or task.due_date > self.due_date_to:
                return False
        return True


@dataclass(frozen=True, slots=True)
class TaskQuery:
    filters: TaskFilters = field(default_factory=TaskFilters)
    sort: SortKey = field(default_factory=SortKey)
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True)
class TaskPage:
    data: list[Task]
    total: int
    page: int
    limit: int

    @property
    def is_empty(self) -> bool:
        return not self.data
