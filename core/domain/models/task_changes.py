from dataclasses import dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Iterator, TypeVar

from core.domain.models.task import Task, TaskPriority, TaskStatus

T = TypeVar("T")


class _Unset(Enum):
    """Marks a field that was not supplied at all (as opposed to ``None``)."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = _Unset.UNSET

Maybe = T | _Unset


@dataclass(slots=True)
class TaskChanges:
    """
    Set of fields to overwrite on an existing task.

    Only fields holding a value other than ``UNSET`` are applied, so the same
    object serves full (PUT) and partial (PATCH) updates. ``None`` is a real
    value here: it clears ``description`` or ``due_date``.
    """

    title: Maybe[str] = UNSET
    description: Maybe[str | None] = UNSET
    status: Maybe[TaskStatus] = UNSET
    priority: Maybe[TaskPriority] = UNSET
    due_date: Maybe[date | None] = UNSET

    def present(self) -> Iterator[tuple[str, Any]]:
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not UNSET:
                yield f.name, value

    def is_empty(self) -> bool:
        return next(self.present(), None) is None

    def apply_to(self, task: Task) -> Task:
        for name, value in self.present():
            setattr(task, name, value)
        return task
