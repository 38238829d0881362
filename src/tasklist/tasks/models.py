"""
Task list data models.

This module defines the core data structures of the task list system:
TaskList, Task and ExitCriteria, plus id helpers and validation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
import re
import uuid

from tasklist.core.constants import (
    DEFAULT_PRIORITY,
    DEFAULT_PROJECT_TAG,
    MAX_DESCRIPTION_LENGTH,
    MAX_PROJECT_TAG_LENGTH,
    MAX_TAG_LENGTH,
    MAX_TAGS_PER_TASK,
    MAX_TITLE_LENGTH,
    PROJECT_TAG_PATTERN,
    TAG_PATTERN,
    UUID_PATTERN,
    TaskPriority,
    TaskStatus,
)
from tasklist.core.exceptions import TaskNotFoundError


# =============================================================================
# ID Generation
# =============================================================================

def generate_id() -> str:
    """Generate a unique id for a list, task or criterion."""
    return str(uuid.uuid4())


def validate_id(value: str) -> bool:
    """Validate an id format."""
    return bool(re.match(UUID_PATTERN, value))


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# Exit Criteria
# =============================================================================

@dataclass
class ExitCriteria:
    """A boolean checklist item gating task completion."""

    description: str
    id: str = field(default_factory=generate_id)
    is_met: bool = False
    met_at: Optional[datetime] = None
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        self.met_at = _parse_datetime(self.met_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "is_met": self.is_met,
            "met_at": _format_datetime(self.met_at),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ExitCriteria":
        return cls(
            id=data["id"],
            description=data["description"],
            is_met=data.get("is_met", False),
            met_at=data.get("met_at"),
            notes=data.get("notes"),
        )


# =============================================================================
# Task
# =============================================================================

@dataclass
class Task:
    """
    A unit of work inside a task list.

    ``dependencies`` holds ids of other tasks in the same list that must be
    completed before this one is ready. It is changed only through
    DependencyManager.set_dependencies and TaskList.remove_task so that the
    graph stays acyclic.
    """

    # Identity
    title: str = ""
    id: str = field(default_factory=generate_id)
    description: str = ""

    # State
    status: TaskStatus = TaskStatus.PENDING
    priority: int = DEFAULT_PRIORITY
    estimated_duration: Optional[int] = None

    # Graph
    dependencies: list[str] = field(default_factory=list)
    exit_criteria: list[ExitCriteria] = field(default_factory=list)

    # Timestamps
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    # Metadata
    tags: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalize task data."""
        if isinstance(self.status, str):
            self.status = TaskStatus(self.status)
        if isinstance(self.priority, TaskPriority):
            self.priority = int(self.priority)
        self.created_at = _parse_datetime(self.created_at)
        self.updated_at = _parse_datetime(self.updated_at)
        self.completed_at = _parse_datetime(self.completed_at)
        self.exit_criteria = [
            ExitCriteria.from_dict(c) if isinstance(c, dict) else c
            for c in self.exit_criteria
        ]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    def get_criterion(self, criteria_id: str) -> Optional[ExitCriteria]:
        for criterion in self.exit_criteria:
            if criterion.id == criteria_id:
                return criterion
        return None

    def touch(self, now: Optional[datetime] = None) -> None:
        """Bump the update timestamp."""
        self.updated_at = now or utcnow()

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate task fields, returning a list of error messages."""
        errors: list[str] = []

        if not self.title or not self.title.strip():
            errors.append("Task title is required")
        elif len(self.title) > MAX_TITLE_LENGTH:
            errors.append(f"Task title exceeds {MAX_TITLE_LENGTH} characters")

        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            errors.append(f"Task description exceeds {MAX_DESCRIPTION_LENGTH} characters")

        if not TaskPriority.MINIMAL <= self.priority <= TaskPriority.CRITICAL:
            errors.append(
                f"Priority must be between {TaskPriority.MINIMAL.value} "
                f"and {TaskPriority.CRITICAL.value}"
            )

        if self.estimated_duration is not None and self.estimated_duration < 0:
            errors.append("Estimated duration cannot be negative")

        if len(self.tags) > MAX_TAGS_PER_TASK:
            errors.append(f"Task cannot have more than {MAX_TAGS_PER_TASK} tags")
        for tag in self.tags:
            if len(tag) > MAX_TAG_LENGTH or not re.match(TAG_PATTERN, tag):
                errors.append(f"Invalid tag: {tag!r}")

        return errors

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert task to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority,
            "estimated_duration": self.estimated_duration,
            "dependencies": list(self.dependencies),
            "exit_criteria": [c.to_dict() for c in self.exit_criteria],
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
            "completed_at": _format_datetime(self.completed_at),
            "tags": list(self.tags),
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create task from dictionary."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            status=data.get("status", TaskStatus.PENDING.value),
            priority=data.get("priority", int(DEFAULT_PRIORITY)),
            estimated_duration=data.get("estimated_duration"),
            dependencies=list(data.get("dependencies", [])),
            exit_criteria=list(data.get("exit_criteria", [])),
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
            completed_at=data.get("completed_at"),
            tags=list(data.get("tags", [])),
            metadata=dict(data.get("metadata", {})),
        )


# =============================================================================
# Task List
# =============================================================================

@dataclass
class TaskList:
    """
    An ordered collection of tasks with a dependency graph over them.

    ``version`` increases by one for every committed mutation and is the
    optimistic concurrency token used by the store.
    """

    title: str = ""
    id: str = field(default_factory=generate_id)
    description: str = ""
    project_tag: str = DEFAULT_PROJECT_TAG
    tasks: list[Task] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    version: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.created_at = _parse_datetime(self.created_at)
        self.updated_at = _parse_datetime(self.updated_at)
        self.tasks = [Task.from_dict(t) if isinstance(t, dict) else t for t in self.tasks]

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    @property
    def total_items(self) -> int:
        return len(self.tasks)

    @property
    def completed_items(self) -> int:
        return sum(1 for t in self.tasks if t.is_completed())

    @property
    def progress(self) -> int:
        """Percentage of completed tasks, rounded."""
        if not self.tasks:
            return 0
        return round(self.completed_items / self.total_items * 100)

    # -------------------------------------------------------------------------
    # Task Access
    # -------------------------------------------------------------------------

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def require_task(self, task_id: str) -> Task:
        """Get a task or raise TaskNotFoundError."""
        task = self.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id, self.id)
        return task

    def task_ids(self) -> list[str]:
        return [t.id for t in self.tasks]

    def add_task(self, task: Task) -> Task:
        """Append a task. New tasks carry no dependencies."""
        self.tasks.append(task)
        return task

    def remove_task(self, task_id: str) -> list[str]:
        """
        Remove a task and strip its id from every other task's dependencies.

        Returns:
            Ids of tasks whose dependency lists were changed.
        """
        task = self.require_task(task_id)
        self.tasks.remove(task)

        affected: list[str] = []
        now = utcnow()
        for other in self.tasks:
            if task_id in other.dependencies:
                other.dependencies = [d for d in other.dependencies if d != task_id]
                other.touch(now)
                affected.append(other.id)
        return affected

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record a committed mutation."""
        self.updated_at = now or utcnow()
        self.version += 1

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate list fields, returning a list of error messages."""
        errors: list[str] = []

        if not self.title or not self.title.strip():
            errors.append("List title is required")
        elif len(self.title) > MAX_TITLE_LENGTH:
            errors.append(f"List title exceeds {MAX_TITLE_LENGTH} characters")

        if len(self.description) > MAX_DESCRIPTION_LENGTH:
            errors.append(f"List description exceeds {MAX_DESCRIPTION_LENGTH} characters")

        if len(self.project_tag) > MAX_PROJECT_TAG_LENGTH or not re.match(
            PROJECT_TAG_PATTERN, self.project_tag
        ):
            errors.append(
                "Project tag must contain only lowercase letters, digits and hyphens"
            )

        return errors

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert list to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "project_tag": self.project_tag,
            "version": self.version,
            "created_at": _format_datetime(self.created_at),
            "updated_at": _format_datetime(self.updated_at),
            "total_items": self.total_items,
            "completed_items": self.completed_items,
            "progress": self.progress,
            "tasks": [t.to_dict() for t in self.tasks],
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TaskList":
        """Create list from dictionary. Derived aggregates are recomputed."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            description=data.get("description", ""),
            project_tag=data.get("project_tag", DEFAULT_PROJECT_TAG),
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
            created_at=data.get("created_at") or utcnow(),
            updated_at=data.get("updated_at") or utcnow(),
            version=data.get("version", 1),
            metadata=dict(data.get("metadata", {})),
        )
