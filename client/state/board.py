"""
Client-side state of the task list screen.

``TaskBoard`` owns what a task list view renders: the current page of tasks,
filters, pagination, loading flags and the last error message. It talks to
the API through ``TaskApiClient`` and follows a few rules:

- changing any filter goes back to page 1;
- search text is debounced before it triggers a request, other filters
  trigger immediately;
- each list refresh cancels the previous one still in flight, so a slow
  earlier response can never overwrite a newer result;
- list refreshes keep the loading flag up for a minimum time (no flicker);
- create/update/delete raise ``busy`` until the backend answers;
- toggling completion is applied locally first and reverted on failure.
"""

import asyncio
import logging
import math
import time
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Callable

from client.api.tasks import TaskApiClient, TaskApiError
from core.domain.models.task import Task, TaskStatus

logger = logging.getLogger(__name__)

PAGE_SIZE = 10
SEARCH_DEBOUNCE_SECONDS = 0.3
MIN_LOADING_SECONDS = 0.5

LOAD_FAILED = "Failed to load tasks"
CREATE_FAILED = "Failed to create task"
UPDATE_FAILED = "Failed to update task"
DELETE_FAILED = "Failed to delete task"
TOGGLE_FAILED = "Failed to update task status"


@dataclass(frozen=True, slots=True)
class BoardFilters:
    status: str | None = None
    priority: str | None = None
    search: str | None = None
    sort: str | None = None
    due_date_from: str | None = None
    due_date_to: str | None = None

    def as_params(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v}


_FILTER_NAMES = {f.name for f in fields(BoardFilters)}


class TaskBoard:
    def __init__(
        self,
        api: TaskApiClient,
        *,
        page_size: int = PAGE_SIZE,
        search_debounce: float = SEARCH_DEBOUNCE_SECONDS,
        min_loading: float = MIN_LOADING_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._api = api
        self._page_size = page_size
        self._search_debounce = search_debounce
        self._min_loading = min_loading
        self._clock = clock

        self.tasks: list[Task] = []
        self.filters = BoardFilters()
        self.page = 1
        self.total = 0
        self.total_pages = 1
        self.error: str | None = None
        self.loading = False
        self.search_loading = False
        self.busy = False

        self._refresh_task: asyncio.Task | None = None
        self._search_task: asyncio.Task | None = None

    # ──────────────────────────────────────────────────────────────────────
    # Listing
    # ──────────────────────────────────────────────────────────────────────

    async def refresh(self, *, search: bool = False) -> None:
        """
        Reloads the current page, cancelling any refresh still running.

        Returns quietly when this refresh is itself superseded.
        """
        previous = self._refresh_task
        if previous is not None and not previous.done():
            previous.cancel()
            logger.debug("Superseded an in-flight list request")

        task = asyncio.create_task(self._load(search))
        self._refresh_task = task
        await asyncio.wait({task})
        if not task.cancelled():
            task.result()

    async def _load(self, search: bool) -> None:
        started = self._clock()
        self.loading = not search
        self.search_loading = search
        self.error = None

        try:
            result = await self._api.list_tasks(
                page=self.page, limit=self._page_size, **self.filters.as_params()
            )
        except asyncio.CancelledError:
            # The newer refresh owns the loading flags now.
            raise
        except TaskApiError as e:
            logger.warning(f"Loading tasks failed: {e}")
            self.error = LOAD_FAILED
        else:
            self.tasks = result.tasks
            self.total = result.total
            self.total_pages = max(1, math.ceil(result.total / self._page_size))

        remaining = self._min_loading - (self._clock() - started)
        if remaining > 0:
            await asyncio.sleep(remaining)
        self.loading = False
        self.search_loading = False

    async def set_filters(self, **changes: Any) -> None:
        """Applies non-search filter changes and reloads from page 1 right away."""
        unknown = set(changes) - _FILTER_NAMES
        if unknown:
            raise TypeError(f"Unknown filters: {', '.join(sorted(unknown))}")
        if "search" in changes:
            raise TypeError("Use set_search() for the search text")
        self.filters = replace(self.filters, **{k: v or None for k, v in changes.items()})
        self.page = 1
        await self.refresh()

    def set_search(self, text: str) -> asyncio.Task:
        """
        Records new search text; the request fires once typing pauses for
        the debounce delay. Each call restarts the delay.
        """
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = asyncio.create_task(self._debounced_search(text))
        return self._search_task

    async def _debounced_search(self, text: str) -> None:
        await asyncio.sleep(self._search_debounce)
        search = text or None
        if search == self.filters.search:
            return
        self.filters = replace(self.filters, search=search)
        self.page = 1
        await self.refresh(search=True)

    async def set_page(self, page: int) -> None:
        self.page = max(1, min(page, self.total_pages))
        await self.refresh()

    async def settle(self) -> None:
        """Waits for a pending debounced search and the running refresh."""
        for pending in (self._search_task, self._refresh_task):
            if pending is not None and not pending.done():
                await asyncio.wait({pending})

    # ──────────────────────────────────────────────────────────────────────
    # Writes
    # ──────────────────────────────────────────────────────────────────────

    async def create(self, payload: dict[str, Any]) -> Task | None:
        self.busy = True
        try:
            created = await self._api.create_task(payload)
        except TaskApiError as e:
            logger.warning(f"Creating task failed: {e}")
            self.error = CREATE_FAILED
            return None
        finally:
            self.busy = False
        await self.refresh()
        return created

    async def update(self, task_id: int, payload: dict[str, Any]) -> Task | None:
        self.busy = True
        try:
            updated = await self._api.update_task(task_id, payload)
        except TaskApiError as e:
            logger.warning(f"Updating task {task_id} failed: {e}")
            self.error = UPDATE_FAILED
            return None
        finally:
            self.busy = False
        self.tasks = [updated if t.id == task_id else t for t in self.tasks]
        return updated

    async def delete(self, task_id: int) -> bool:
        self.busy = True
        try:
            await self._api.delete_task(task_id)
        except TaskApiError as e:
            logger.warning(f"Deleting task {task_id} failed: {e}")
            self.error = DELETE_FAILED
            return False
        finally:
            self.busy = False
        await self.refresh()
        return True

    def _set_status(self, task_id: int, status: TaskStatus) -> None:
        self.tasks = [replace(t, status=status) if t.id == task_id else t for t in self.tasks]

    async def toggle_status(self, task_id: int) -> None:
        """Flips completed <-> pending optimistically."""
        current = next((t for t in self.tasks if t.id == task_id), None)
        if current is None:
            return
        previous = current.status
        target = TaskStatus.PENDING if previous is TaskStatus.COMPLETED else TaskStatus.COMPLETED

        self._set_status(task_id, target)
        try:
            await self._api.update_task(task_id, {"status": target})
        except TaskApiError as e:
            logger.warning(f"Toggling task {task_id} failed, reverting: {e}")
            self._set_status(task_id, previous)
            self.error = TOGGLE_FAILED
