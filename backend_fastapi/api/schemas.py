from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from core.domain.models.task import TaskPriority, TaskStatus
from core.domain.models.task_query import TaskPage

NO_RESULTS_MESSAGE = "No results found."


class TaskOut(BaseModel):
    """Public shape of a task."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime


class ListMeta(BaseModel):
    page: int
    limit: int
    total: int


class TaskListResponse(BaseModel):
    data: list[TaskOut]
    meta: ListMeta
    message: str | None = None

    @classmethod
    def from_page(cls, result: TaskPage) -> "TaskListResponse":
        extra = {"message": NO_RESULTS_MESSAGE} if result.is_empty else {}
        return cls(
            data=[TaskOut.model_validate(task) for task in result.data],
            meta=ListMeta(page=result.page, limit=result.limit, total=result.total),
            **extra,
        )


class MessageResponse(BaseModel):
    message: str


class FieldErrorOut(BaseModel):
    field: str
    message: str


class ErrorDetail(BaseModel):
    code: str
    message: str
    fields: list[FieldErrorOut] | None = None


class ErrorResponse(BaseModel):
    error: ErrorDetail
