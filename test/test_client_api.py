import asyncio
import json

import httpx
import pytest

from backend_fastapi.main import app
from client.api.tasks import (
    BAD_RESPONSE,
    NETWORK_ERROR,
    ApiFieldError,
    TaskApiClient,
    TaskApiError,
)
from core.domain.models.task import TaskPriority, TaskStatus
from fakes import InMemoryTaskRepository, override_use_cases

TASK_JSON = {
    "id": 7,
    "title": "Write tests",
    "description": None,
    "status": "in-progress",
    "priority": "high",
    "due_date": "2025-12-10",
    "created_at": "2024-01-01T00:00:00Z",
    "updated_at": "2024-01-02T00:00:00Z",
}


def _client(handler) -> TaskApiClient:
    return TaskApiClient(base_url="http://tasks.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_tasks_sends_only_given_params_and_parses_page():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"data": [TASK_JSON], "meta": {"page": 2, "limit": 5, "total": 6}})

    async with _client(handler) as api:
        result = await api.list_tasks(page=2, limit=5, status="in-progress", search="")

    assert seen == {"path": "/tasks", "params": {"page": "2", "limit": "5", "status": "in-progress"}}
    assert result.total == 6
    assert result.page == 2
    task = result.tasks[0]
    assert task.id == 7
    assert task.status is TaskStatus.IN_PROGRESS
    assert task.priority is TaskPriority.HIGH
    assert task.due_date.isoformat() == "2025-12-10"


@pytest.mark.asyncio
async def test_search_tasks_uses_q():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/tasks/search"
        assert request.url.params["q"] == "milk"
        return httpx.Response(200, json={"data": [], "meta": {"page": 1, "limit": 10, "total": 0}, "message": "No results found."})

    async with _client(handler) as api:
        result = await api.search_tasks("milk")

    assert result.tasks == []
    assert result.message == "No results found."


@pytest.mark.asyncio
async def test_update_serializes_enums():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "PUT"
        assert json.loads(request.content) == {"status": "completed"}
        return httpx.Response(200, json={**TASK_JSON, "status": "completed"})

    async with _client(handler) as api:
        task = await api.update_task(7, {"status": TaskStatus.COMPLETED})

    assert task.status is TaskStatus.COMPLETED


@pytest.mark.asyncio
async def test_validation_error_carries_fields():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"error": {"code": "BAD_REQUEST", "message": "Validation failed", "fields": [{"field": "title", "message": "Required"}]}},
        )

    async with _client(handler) as api:
        with pytest.raises(TaskApiError) as exc_info:
            await api.create_task({})

    error = exc_info.value
    assert error.is_validation
    assert error.status_code == 400
    assert error.fields == [ApiFieldError("title", "Required")]


@pytest.mark.asyncio
async def test_non_envelope_error_falls_back_on_status():
    async with _client(lambda request: httpx.Response(404, text="nope")) as api:
        with pytest.raises(TaskApiError) as exc_info:
            await api.get_task(1)

    assert exc_info.value.is_not_found


@pytest.mark.asyncio
async def test_unreadable_success_body_becomes_api_error():
    async with _client(lambda request: httpx.Response(200, text="<html>proxy</html>")) as api:
        with pytest.raises(TaskApiError) as exc_info:
            await api.list_tasks()

    assert exc_info.value.code == BAD_RESPONSE
    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
async def test_malformed_task_shape_becomes_api_error():
    async with _client(lambda request: httpx.Response(200, json={"id": "seven"})) as api:
        with pytest.raises(TaskApiError) as exc_info:
            await api.get_task(7)

    assert exc_info.value.code == BAD_RESPONSE


@pytest.mark.asyncio
async def test_transport_failure_becomes_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as api:
        with pytest.raises(TaskApiError) as exc_info:
            await api.delete_task(1)

    assert exc_info.value.code == NETWORK_ERROR


@pytest.mark.asyncio
async def test_cancelled_list_raises_cancelled_not_api_error():
    started = asyncio.Event()

    async def slow_handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(10)
        return httpx.Response(200, json={"data": [], "meta": {}})

    async with _client(slow_handler) as api:
        call = asyncio.create_task(api.list_tasks())
        await started.wait()
        call.cancel()

        with pytest.raises(asyncio.CancelledError):
            await call


@pytest.mark.asyncio
async def test_against_the_real_app():
    override_use_cases(app, InMemoryTaskRepository())
    try:
        api = TaskApiClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))
        async with api:
            created = await api.create_task({"title": "Buy milk", "priority": TaskPriority.HIGH})
            patched = await api.patch_task(created.id, {"status": "completed"})
            listed = await api.list_tasks(status="completed")
            await api.delete_task(created.id)
            with pytest.raises(TaskApiError) as exc_info:
                await api.get_task(created.id)
    finally:
        app.dependency_overrides.clear()

    assert patched.status is TaskStatus.COMPLETED
    assert patched.title == "Buy milk"
    assert patched.created_at == created.created_at
    assert [t.id for t in listed.tasks] == [created.id]
    assert exc_info.value.is_not_found
