"""
Payload validation for task writes.

Raw request bodies (already JSON-decoded) are checked field by field; every
violation is collected so the caller can report them together. On success
the payload is turned into the typed command or change set consumed by the
use cases.
"""

from datetime import date
from typing import Any

from core.application.create_task import CreateTaskCommand
from core.domain.errors import FieldError, TaskValidationError
from core.domain.models.task import TaskPriority, TaskStatus
from core.domain.models.task_changes import UNSET, TaskChanges

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500

REQUIRED = "Required"
MUST_BE_STRING = "Must be a string"
TITLE_TOO_LONG = f"Must be {TITLE_MAX_LENGTH} characters or less"
DESCRIPTION_TOO_LONG = f"Must be {DESCRIPTION_MAX_LENGTH} characters or less"
INVALID_STATUS = "Must be one of: " + ", ".join(s.value for s in TaskStatus)
INVALID_PRIORITY = "Must be one of: " + ", ".join(p.value for p in TaskPriority)
INVALID_DATE = "Must be a valid date (YYYY-MM-DD)"
NOT_AN_OBJECT = "Must be a JSON object"


def _ensure_object(payload: Any) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise TaskValidationError([FieldError("body", NOT_AN_OBJECT)])
    return payload


def _parse_date(value: Any) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class _Collector:
    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        self.errors: list[FieldError] = []

    def add(self, field: str, message: str) -> None:
        self.errors.append(FieldError(field, message))

    def description(self) -> str | None:
        value = self.payload.get("description")
        if value is None:
            return None
        if not isinstance(value, str):
            self.add("description", MUST_BE_STRING)
        elif len(value) > DESCRIPTION_MAX_LENGTH:
            self.add("description", DESCRIPTION_TOO_LONG)
        # An empty description is stored as no description.
        return value or None

    def status(self) -> TaskStatus | None:
        try:
            return TaskStatus(self.payload["status"])
        except (ValueError, TypeError):
            self.add("status", INVALID_STATUS)
            return None

    def priority(self) -> TaskPriority | None:
        try:
            return TaskPriority(self.payload["priority"])
        except (ValueError, TypeError):
            self.add("priority", INVALID_PRIORITY)
            return None

    def due_date(self) -> date | None:
        value = self.payload.get("due_date")
        if value is None:
            return None
        parsed = _parse_date(value)
        if parsed is None:
            self.add("due_date", INVALID_DATE)
        return parsed

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise TaskValidationError(self.errors)


def validate_create_payload(payload: Any) -> CreateTaskCommand:
    data = _ensure_object(payload)
    check = _Collector(data)

    title = data.get("title")
    if not isinstance(title, str) or title == "":
        check.add("title", REQUIRED)
    elif len(title) > TITLE_MAX_LENGTH:
        check.add("title", TITLE_TOO_LONG)

    description = check.description()
    status = check.status() if data.get("status") is not None else TaskStatus.PENDING
    priority = check.priority() if data.get("priority") is not None else TaskPriority.MEDIUM
    due_date = check.due_date()

    check.raise_if_invalid()
    return CreateTaskCommand(
        title=title,
        description=description,
        status=status,
        priority=priority,
        due_date=due_date,
    )


def validate_update_payload(payload: Any) -> TaskChanges:
    """
    Validates a PUT/PATCH body. Every field is optional; keys missing from the
    body stay ``UNSET`` on the returned changes and are left untouched.
    """
    data = _ensure_object(payload)
    check = _Collector(data)
    changes = TaskChanges()

    if "title" in data:
        title = data["title"]
        if not isinstance(title, str):
            check.add("title", MUST_BE_STRING)
        elif title == "":
            check.add("title", REQUIRED)
        elif len(title) > TITLE_MAX_LENGTH:
            check.add("title", TITLE_TOO_LONG)
        else:
            changes.title = title

    if "description" in data:
        changes.description = check.description()

    if "status" in data:
        changes.status = check.status() or UNSET

    if "priority" in data:
        changes.priority = check.priority() or UNSET

    if "due_date" in data:
        changes.due_date = check.due_date()

    check.raise_if_invalid()
    return changes
