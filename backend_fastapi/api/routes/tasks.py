from typing import Any

from fastapi import APIRouter, Body, Depends, status

from backend_fastapi.api.deps import (
    create_task_use_case,
    delete_task_use_case,
    get_task_use_case,
    list_tasks_use_case,
    update_task_use_case,
)
from backend_fastapi.api.errors import TASK_NOT_FOUND_MESSAGE
from backend_fastapi.api.schemas import (
    ErrorResponse,
    MessageResponse,
    TaskListResponse,
    TaskOut,
)
from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskCommand, DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksCommand, ListTasksUseCase
from core.application.update_task import UpdateTaskUseCase
from core.application.validation import validate_create_payload, validate_update_payload
from core.domain.errors import TaskNotFoundError

router = APIRouter(prefix="/tasks", tags=["tasks"])

_BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": TASK_NOT_FOUND_MESSAGE}}


@router.get(
    "",
    response_model=TaskListResponse,
    response_model_exclude_unset=True,
    summary="List tasks",
)
def list_tasks(
    page: str | None = None,
    limit: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    sort: str | None = None,
    search: str | None = None,
    due_date_from: str | None = None,
    due_date_to: str | None = None,
    use_case: ListTasksUseCase = Depends(list_tasks_use_case),
) -> TaskListResponse:
    """
    Returns one page of tasks matching every supplied filter.

    - **page** / **limit**: pagination (defaults 1 / 10, limit capped at 100).
    - **status**, **priority**: exact match.
    - **search**: case-insensitive substring of title or description.
    - **sort**: `due_date`, `created_at` or `priority` with `:asc` / `:desc`.
    - **due_date_from** / **due_date_to**: inclusive due date range.
    """
    cmd = ListTasksCommand(
        page=page,
        limit=limit,
        status=status,
        priority=priority,
        search=search,
        sort=sort,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
    )
    return TaskListResponse.from_page(use_case.execute(cmd))


@router.get(
    "/search",
    response_model=TaskListResponse,
    response_model_exclude_unset=True,
    summary="Search tasks",
)
def search_tasks(
    q: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    sort: str | None = None,
    due_date_from: str | None = None,
    due_date_to: str | None = None,
    use_case: ListTasksUseCase = Depends(list_tasks_use_case),
) -> TaskListResponse:
    """
    Same as listing, with **q** as the search text.
    """
    cmd = ListTasksCommand(
        page=page,
        limit=limit,
        status=status,
        priority=priority,
        search=q,
        sort=sort,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
    )
    return TaskListResponse.from_page(use_case.execute(cmd))


@router.get(
    "/{task_id}",
    response_model=TaskOut,
    responses=_NOT_FOUND,
    summary="Get a task",
)
def get_task(
    task_id: int,
    use_case: GetTaskUseCase = Depends(get_task_use_case),
) -> TaskOut:
    return TaskOut.model_validate(use_case.execute(task_id))


@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    responses=_BAD_REQUEST,
    summary="Create a task",
)
def create_task(
    payload: Any = Body(default=None),
    use_case: CreateTaskUseCase = Depends(create_task_use_case),
) -> TaskOut:
    """
    Creates a new task.

    - **title**: required, up to 100 characters.
    - **description**: optional, up to 500 characters.
    - **status**: `pending` (default), `in-progress` or `completed`.
    - **priority**: `low`, `medium` (default) or `high`.
    - **due_date**: optional, `YYYY-MM-DD`.
    """
    cmd = validate_create_payload(payload)
    return TaskOut.model_validate(use_case.execute(cmd))


def _update(task_id: int, payload: Any, use_case: UpdateTaskUseCase) -> TaskOut:
    changes = validate_update_payload(payload)
    return TaskOut.model_validate(use_case.execute(task_id, changes))


@router.put(
    "/{task_id}",
    response_model=TaskOut,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Update a task",
)
def update_task(
    task_id: int,
    payload: Any = Body(default=None),
    use_case: UpdateTaskUseCase = Depends(update_task_use_case),
) -> TaskOut:
    """
    Overwrites the fields present in the body. Omitted fields keep their
    stored value, exactly like PATCH.
    """
    return _update(task_id, payload, use_case)


@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
    summary="Partially update a task",
)
def patch_task(
    task_id: int,
    payload: Any = Body(default=None),
    use_case: UpdateTaskUseCase = Depends(update_task_use_case),
) -> TaskOut:
    return _update(task_id, payload, use_case)


@router.delete(
    "/{task_id}",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Delete a task",
)
def delete_task(
    task_id: int,
    use_case: DeleteTaskUseCase = Depends(delete_task_use_case),
) -> MessageResponse:
    if not use_case.execute(DeleteTaskCommand(id=task_id)):
        raise TaskNotFoundError(task_id)
    return MessageResponse(message="Task deleted successfully")
