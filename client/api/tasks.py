"""
Typed async client for the task API.

Wraps ``httpx.AsyncClient``: responses are parsed into domain ``Task``
objects. HTTP error statuses, transport errors and unreadable bodies all
surface as ``TaskApiError``. A list call is superseded by cancelling the
asyncio task running it; that raises ``asyncio.CancelledError``, which is
deliberately not converted into ``TaskApiError`` so callers can tell it
apart from a failure.
"""

import logging
import os
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from core.domain.models.task import Task

logger = logging.getLogger(__name__)

T = TypeVar("T")

NETWORK_ERROR = "NETWORK_ERROR"
BAD_RESPONSE = "BAD_RESPONSE"

_task_adapter = TypeAdapter(Task)
_task_list_adapter = TypeAdapter(list[Task])

_FALLBACK_CODES = {400: "BAD_REQUEST", 404: "NOT_FOUND"}


@dataclass(frozen=True, slots=True)
class ApiFieldError:
    field: str
    message: str


class TaskApiError(Exception):
    def __init__(
        self,
        code: str,
        message: str,
        status_code: int | None = None,
        fields: list[ApiFieldError] | None = None,
    ) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.status_code = status_code
        self.fields = fields or []

    @property
    def is_not_found(self) -> bool:
        return self.code == "NOT_FOUND"

    @property
    def is_validation(self) -> bool:
        return self.code == "BAD_REQUEST"


@dataclass(slots=True)
class TaskListResult:
    tasks: list[Task]
    page: int
    limit: int
    total: int
    message: str | None = None


def _error_from_response(response: httpx.Response) -> TaskApiError:
    try:
        error = response.json()["error"]
        fields = [ApiFieldError(f["field"], f["message"]) for f in error.get("fields") or []]
        return TaskApiError(error["code"], error["message"], response.status_code, fields)
    except (ValueError, KeyError, TypeError):
        code = _FALLBACK_CODES.get(response.status_code, "INTERNAL_ERROR")
        return TaskApiError(code, response.reason_phrase or "Request failed", response.status_code)


def _decode(response: httpx.Response, parse: Callable[[Any], T]) -> T:
    try:
        return parse(response.json())
    except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
        logger.warning(f"Unreadable response from {response.request.url}: {e}")
        raise TaskApiError(
            BAD_RESPONSE, "Unexpected response from the server", response.status_code
        ) from e


def _parse_list(body: Any) -> TaskListResult:
    meta = body.get("meta") or {}
    return TaskListResult(
        tasks=_task_list_adapter.validate_python(body.get("data", [])),
        page=meta.get("page", 1),
        limit=meta.get("limit", 0),
        total=meta.get("total", 0),
        message=body.get("message"),
    )


def _clean_params(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _serialize(payload: dict[str, Any]) -> dict[str, Any]:
    out = {}
    for key, value in payload.items():
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, date):
            value = value.isoformat()
        out[key] = value
    return out


class TaskApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = base_url or os.getenv("TASKS_API_BASE_URL", "http://127.0.0.1:8000")
        if timeout is None:
            timeout = float(os.getenv("TASKS_API_TIMEOUT", "10"))
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            event_hooks={"response": [self._log_response]},
        )

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    async def _log_response(response: httpx.Response) -> None:
        if response.status_code >= 500:
            logger.error(f"Server error {response.status_code} on {response.request.url}")
        elif response.status_code >= 400:
            logger.debug(f"{response.status_code} on {response.request.method} {response.request.url}")

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"Request {method} {url} failed: {e}")
            raise TaskApiError(NETWORK_ERROR, "Could not reach the server") from e
        if response.is_error:
            raise _error_from_response(response)
        return response

    async def _list(self, path: str, params: dict[str, Any]) -> TaskListResult:
        response = await self._request("GET", path, params=_clean_params(params))
        return _decode(response, _parse_list)

    async def list_tasks(
        self,
        *,
        page: int | None = None,
        limit: int | None = None,
        status: str | None = None,
        priority: str | None = None,
        sort: str | None = None,
        search: str | None = None,
        due_date_from: str | None = None,
        due_date_to: str | None = None,
    ) -> TaskListResult:
        return await self._list(
            "/tasks",
            {
                "page": page,
                "limit": limit,
                "status": status,
                "priority": priority,
                "sort": sort,
                "search": search,
                "due_date_from": due_date_from,
                "due_date_to": due_date_to,
            },
        )

    async def search_tasks(self, q: str, **filters: Any) -> TaskListResult:
        return await self._list("/tasks/search", {"q": q, **filters})

    async def get_task(self, task_id: int) -> Task:
        response = await self._request("GET", f"/tasks/{task_id}")
        return _decode(response, _task_adapter.validate_python)

    async def create_task(self, payload: dict[str, Any]) -> Task:
        response = await self._request("POST", "/tasks", json=_serialize(payload))
        return _decode(response, _task_adapter.validate_python)

    async def update_task(self, task_id: int, payload: dict[str, Any]) -> Task:
        response = await self._request("PUT", f"/tasks/{task_id}", json=_serialize(payload))
        return _decode(response, _task_adapter.validate_python)

    async def patch_task(self, task_id: int, payload: dict[str, Any]) -> Task:
        response = await self._request("PATCH", f"/tasks/{task_id}", json=_serialize(payload))
        return _decode(response, _task_adapter.validate_python)

    async def delete_task(self, task_id: int) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")
