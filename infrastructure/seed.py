"""
Loads a fixed set of sample tasks into the configured store.

    python -m infrastructure.seed

Existing tasks are removed first, so running it twice leaves the same data.
"""

import logging
from datetime import date

from core.application.create_task import CreateTaskCommand, CreateTaskUseCase
from core.application.delete_task import DeleteTaskCommand, DeleteTaskUseCase
from core.domain.models.task import TaskPriority, TaskStatus
from core.domain.models.task_query import MAX_LIMIT, TaskQuery
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)

P, I, C = TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED
LOW, MED, HIGH = TaskPriority.LOW, TaskPriority.MEDIUM, TaskPriority.HIGH

SAMPLE_TASKS: list[tuple[str, str, TaskStatus, TaskPriority, str | None]] = [
    # Work
    ("Complete project setup", "Set up the monorepo structure", C, HIGH, "2024-10-01"),
    ("Design database schema", "Create SQLite schema for tasks", C, HIGH, "2024-10-05"),
    ("Implement seed script", "Write script to populate database", I, MED, "2025-11-30"),
    ("Set up server endpoints", "Create API routes for tasks", P, HIGH, "2025-12-01"),
    ("Build client UI", "Develop the client components", P, MED, "2025-12-05"),
    ("Add authentication", "Implement user login", P, LOW, None),
    ("Write tests", "Create unit and integration tests", P, MED, "2025-12-10"),
    ("Deploy application", "Set up production deployment", P, LOW, None),
    ("Optimize performance", "Improve app speed", P, LOW, "2025-12-15"),
    ("Document API", "Write API documentation", P, LOW, "2025-12-20"),
    ("Review code", "Conduct code review for pull requests", C, MED, "2024-11-15"),
    ("Update dependencies", "Upgrade packages to latest versions", I, HIGH, "2025-12-25"),
    ("Fix bugs", "Resolve reported issues in the application", P, HIGH, "2026-01-01"),
    ("Plan sprint", "Organize tasks for the next development sprint", C, MED, "2024-12-01"),
    ("Attend meeting", "Join team standup meeting", C, LOW, "2024-12-05"),
    # Chores
    ("Grocery shopping", "Buy weekly groceries for the house", P, MED, "2025-11-28"),
    ("Clean kitchen", "Wash dishes and wipe counters", C, LOW, "2024-11-20"),
    ("Laundry", "Wash and fold clothes", I, LOW, "2025-11-29"),
    ("Vacuum house", "Clean floors throughout the house", P, LOW, "2025-12-02"),
    ("Take out trash", "Empty bins and take to curb", C, LOW, "2024-11-25"),
    ("Mow lawn", "Cut grass in the backyard", P, MED, "2025-12-03"),
    ("Wash car", "Clean exterior and interior of vehicle", P, LOW, None),
    ("Pay bills", "Settle monthly utility and credit card payments", I, HIGH, "2025-12-01"),
    ("Organize closet", "Sort and arrange clothes and items", P, LOW, "2025-12-10"),
    ("Cook dinner", "Prepare meal for the family", C, MED, "2024-11-26"),
    # Personal
    ("Exercise", "Go for a 30-minute run", P, MED, "2025-11-30"),
    ("Read book", "Finish reading current novel", I, LOW, None),
    ("Call family", "Check in with parents and siblings", C, HIGH, "2024-11-22"),
    ("Learn guitar", "Practice chords for 20 minutes", P, LOW, "2025-12-05"),
    ("Plan vacation", "Research and book trip destinations", P, MED, "2026-01-15"),
    ("Dentist appointment", "Schedule and attend dental checkup", P, HIGH, "2025-12-20"),
    ("Update resume", "Revise CV with recent achievements", I, MED, "2025-12-15"),
    ("Volunteer", "Help at local community center", P, LOW, None),
    ("Meditate", "Daily mindfulness practice", C, LOW, "2024-11-27"),
    ("Bake cookies", "Make chocolate chip cookies from scratch", P, LOW, "2025-12-25"),
]


def clear(repository: TaskRepository) -> int:
    deleter = DeleteTaskUseCase(repository)
    removed = 0
    while True:
        page = repository.list(TaskQuery(limit=MAX_LIMIT))
        if page.is_empty:
            return removed
        for task in page.data:
            removed += deleter.execute(DeleteTaskCommand(id=task.id))


def seed(repository: TaskRepository) -> int:
    removed = clear(repository)
    if removed:
        logger.info(f"🧹 Removed {removed} existing tasks")

    creator = CreateTaskUseCase(repository)
    for title, description, status, priority, due in SAMPLE_TASKS:
        creator.execute(
            CreateTaskCommand(
                title=title,
                description=description,
                status=status,
                priority=priority,
                due_date=date.fromisoformat(due) if due else None,
            )
        )
    logger.info(f"🌱 Seeded {len(SAMPLE_TASKS)} tasks")
    return len(SAMPLE_TASKS)


if __name__ == "__main__":
    from dotenv import load_dotenv

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    from infrastructure.container import get_task_repository

    seed(get_task_repository())
