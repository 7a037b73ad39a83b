import unittest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

from core.application.create_task import CreateTaskCommand, CreateTaskUseCase
from core.application.delete_task import DeleteTaskCommand, DeleteTaskUseCase
from core.application.get_task import GetTaskUseCase
from core.application.list_tasks import ListTasksCommand, ListTasksUseCase
from core.application.update_task import UpdateTaskUseCase
from core.domain.errors import TaskNotFoundError
from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.models.task_changes import TaskChanges
from core.domain.models.task_query import MAX_PAGE
from fakes import InMemoryTaskRepository


class CoreUseCasesTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryTaskRepository()

    def _create(self, title: str, **kwargs) -> Task:
        return CreateTaskUseCase(self.repo).execute(CreateTaskCommand(title=title, **kwargs))

    def test_create_task_assigns_id_and_equal_timestamps(self) -> None:
        task = self._create(
            "Design architecture",
            description="Hexagonal",
            status=TaskStatus.IN_PROGRESS,
        )

        self.assertIsInstance(task.id, int)
        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)
        self.assertEqual(task.priority, TaskPriority.MEDIUM)
        self.assertEqual(task.created_at, task.updated_at)
        self.assertEqual(self.repo.get(task.id), task)

    def test_create_task_ids_are_unique(self) -> None:
        ids = {self._create(f"Task {n}").id for n in range(5)}

        self.assertEqual(len(ids), 5)

    def test_update_task_only_touches_present_fields(self) -> None:
        original = self._create("Initial", description="d1", due_date=date(2025, 1, 1))
        later = original.created_at + timedelta(seconds=5)

        with patch("core.application.update_task.utcnow", return_value=later):
            updated = UpdateTaskUseCase(self.repo).execute(
                original.id, TaskChanges(status=TaskStatus.COMPLETED)
            )

        self.assertEqual(updated.status, TaskStatus.COMPLETED)
        self.assertEqual(updated.title, "Initial")
        self.assertEqual(updated.description, "d1")
        self.assertEqual(updated.priority, original.priority)
        self.assertEqual(updated.due_date, date(2025, 1, 1))
        self.assertEqual(updated.created_at, original.created_at)
        self.assertEqual(updated.updated_at, later)
        self.assertEqual(self.repo.get(original.id), updated)

    def test_update_task_none_clears_description(self) -> None:
        original = self._create("Initial", description="d1")

        updated = UpdateTaskUseCase(self.repo).execute(original.id, TaskChanges(description=None))

        self.assertIsNone(updated.description)
        self.assertEqual(updated.title, "Initial")

    def test_empty_update_still_refreshes_updated_at(self) -> None:
        original = self._create("Initial")
        later = original.created_at + timedelta(minutes=1)

        with patch("core.application.update_task.utcnow", return_value=later):
            updated = UpdateTaskUseCase(self.repo).execute(original.id, TaskChanges())

        self.assertEqual(updated.updated_at, later)

    def test_updated_at_never_precedes_created_at(self) -> None:
        original = self._create("Initial")
        earlier = original.created_at - timedelta(hours=1)

        with patch("core.application.update_task.utcnow", return_value=earlier):
            updated = UpdateTaskUseCase(self.repo).execute(original.id, TaskChanges(title="x"))

        self.assertGreaterEqual(updated.updated_at, updated.created_at)

    def test_update_missing_task_raises_not_found(self) -> None:
        with self.assertRaises(TaskNotFoundError):
            UpdateTaskUseCase(self.repo).execute(999, TaskChanges(title="x"))

    def test_get_missing_task_raises_not_found(self) -> None:
        with self.assertRaises(TaskNotFoundError):
            GetTaskUseCase(self.repo).execute(42)

    def test_delete_task_removes_record(self) -> None:
        task = self._create("Delete me")

        removed = DeleteTaskUseCase(self.repo).execute(DeleteTaskCommand(id=task.id))

        self.assertTrue(removed)
        self.assertIsNone(self.repo.get(task.id))

    def test_delete_missing_task_returns_false(self) -> None:
        self.assertFalse(DeleteTaskUseCase(self.repo).execute(DeleteTaskCommand(id=12345)))


class ListTasksUseCaseTests(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryTaskRepository()
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        seed = [
            ("Test Task 1", "Description for test task 1", TaskStatus.PENDING, TaskPriority.HIGH),
            ("Test Task 2", "Description for test task 2", TaskStatus.IN_PROGRESS, TaskPriority.MEDIUM),
            ("Test Task 3", "Description for test task 3", TaskStatus.COMPLETED, TaskPriority.LOW),
        ]
        for n, (title, description, status, priority) in enumerate(seed):
            ts = base + timedelta(days=n)
            self.repo.save(
                Task(
                    title=title,
                    description=description,
                    status=status,
                    priority=priority,
                    created_at=ts,
                    updated_at=ts,
                )
            )
        self.use_case = ListTasksUseCase(self.repo)

    def test_defaults_sort_newest_first(self) -> None:
        result = self.use_case.execute()

        self.assertEqual(result.total, 3)
        self.assertEqual(result.page, 1)
        self.assertEqual(result.limit, 10)
        self.assertEqual([t.title for t in result.data], ["Test Task 3", "Test Task 2", "Test Task 1"])

    def test_status_filter(self) -> None:
        result = self.use_case.execute(ListTasksCommand(status="completed"))

        self.assertEqual([t.title for t in result.data], ["Test Task 3"])

    def test_unknown_status_matches_nothing(self) -> None:
        result = self.use_case.execute(ListTasksCommand(status="archived", page="2"))

        self.assertEqual(result.data, [])
        self.assertEqual(result.total, 0)
        self.assertEqual(result.page, 2)

    def test_bad_paging_values_fall_back_to_defaults(self) -> None:
        result = self.use_case.execute(ListTasksCommand(page="abc", limit="-3"))

        self.assertEqual(result.page, 1)
        self.assertEqual(result.limit, 10)

    def test_huge_page_is_clamped(self) -> None:
        result = self.use_case.execute(ListTasksCommand(page=str(10**19), limit="100"))

        self.assertEqual(result.page, MAX_PAGE)
        self.assertEqual(result.data, [])

    def test_limit_is_capped(self) -> None:
        result = self.use_case.execute(ListTasksCommand(limit="500"))

        self.assertEqual(result.limit, 100)

    def test_invalid_sort_uses_default_order(self) -> None:
        result = self.use_case.execute(ListTasksCommand(sort="title:sideways"))

        self.assertEqual(result.data[0].title, "Test Task 3")

    def test_priority_sort_uses_rank(self) -> None:
        result = self.use_case.execute(ListTasksCommand(sort="priority:desc"))

        self.assertEqual(
            [t.priority for t in result.data],
            [TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW],
        )


if __name__ == "__main__":
    unittest.main()
