"""
Task list service.

The caller-facing API shared by the REST daemon, the MCP server and the CLI.
Each mutation runs load -> validate -> mutate -> invariant check -> save
while holding that list's lock, so two mutations of the same list never
interleave inside this process, and the store's version check catches
writers outside it.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Generator, Optional, TypeVar
import logging
import threading

from tasklist.core.config import TaskListConfig
from tasklist.core.constants import DEFAULT_PRIORITY, MAX_READY_LIMIT, MAX_TASKS_PER_LIST, TaskStatus
from tasklist.core.exceptions import ListNotFoundError, ValidationError
from tasklist.tasks.analysis import DependencyAnalysis, DependencyAnalyzer
from tasklist.tasks.dependencies import (
    DependencyManager,
    DependencyUpdateResult,
    DependencyValidationResult,
)
from tasklist.tasks.exit_criteria import ExitCriteriaGate
from tasklist.tasks.graph import assert_acyclic
from tasklist.tasks.models import Task, TaskList, utcnow
from tasklist.tasks.readiness import BlockedTask, get_blocked_tasks, get_ready_tasks, next_actions
from tasklist.tasks.status import StatusMachine
from tasklist.tasks.store import TaskListStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ReadyTasksResult:
    """Ready tasks plus a summary of the list."""

    list_id: str
    tasks: list[Task] = field(default_factory=list)
    next_actions: list[str] = field(default_factory=list)
    total_tasks: int = 0
    completed_tasks: int = 0
    blocked_tasks: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "list_id": self.list_id,
            "ready_tasks": [t.to_dict() for t in self.tasks],
            "next_actions": list(self.next_actions),
            "summary": {
                "total_tasks": self.total_tasks,
                "ready_tasks": len(self.tasks),
                "completed_tasks": self.completed_tasks,
                "blocked_tasks": self.blocked_tasks,
            },
        }


@dataclass
class CriteriaUpdateResult:
    """Updated task plus advisory warnings from an exit criteria change."""

    task: Task
    warnings: list[str] = field(default_factory=list)
    progress: int = 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "task": self.task.to_dict(),
            "warnings": list(self.warnings),
            "progress": self.progress,
        }


class TaskListService:
    """
    Operations over persisted task lists.

    Example:
        store = TaskListStore(root)
        service = TaskListService(store)
        task_list = service.create_list("Release")
        a = service.add_task(task_list.id, "Write notes")
    """

    def __init__(
        self,
        store: TaskListStore,
        config: Optional[TaskListConfig] = None,
    ) -> None:
        self._store = store
        self._config = config or TaskListConfig()
        self._dependencies = DependencyManager(self._config.dependencies)
        self._gate = ExitCriteriaGate()
        self._status = StatusMachine(self._gate)
        self._analyzer = DependencyAnalyzer(self._config.dependencies)

        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def store(self) -> TaskListStore:
        return self._store

    @property
    def config(self) -> TaskListConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Locking
    # -------------------------------------------------------------------------

    def _lock_for(self, list_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(list_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[list_id] = lock
            return lock

    def _forget_lock(self, list_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(list_id, None)

    @contextmanager
    def _locked(self, list_id: str) -> Generator[None, None, None]:
        with self._lock_for(list_id):
            yield

    def _mutate(self, list_id: str, operation: Callable[[TaskList], T]) -> T:
        """
        Run one mutation against a freshly loaded list and persist it.

        The operation must call ``task_list.touch()`` (directly or through
        an engine component) if it changed anything; lists whose version is
        unchanged are not written. On any exception nothing is saved.
        """
        with self._locked(list_id):
            try:
                task_list = self._store.load(list_id)
            except ListNotFoundError:
                self._forget_lock(list_id)
                raise
            loaded_version = task_list.version
            result = operation(task_list)
            if task_list.version != loaded_version:
                assert_acyclic(task_list)
                self._store.save(task_list, expected_version=loaded_version)
            return result

    # -------------------------------------------------------------------------
    # Lists
    # -------------------------------------------------------------------------

    def create_list(
        self,
        title: str,
        description: str = "",
        project_tag: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> TaskList:
        """Create and persist an empty task list."""
        task_list = TaskList(
            title=title.strip() if title else "",
            description=description or "",
            metadata=dict(metadata or {}),
        )
        if project_tag:
            task_list.project_tag = project_tag

        errors = task_list.validate()
        if errors:
            raise ValidationError("; ".join(errors), field="list")

        self._store.create(task_list)
        logger.info("Created list %s (%s)", task_list.id, task_list.title)
        return task_list

    def get_list(self, list_id: str) -> TaskList:
        return self._store.load(list_id)

    def list_lists(self, project_tag: Optional[str] = None) -> list[dict[str, Any]]:
        return self._store.list_summaries(project_tag)

    def delete_list(self, list_id: str) -> bool:
        with self._locked(list_id):
            deleted = self._store.delete(list_id)
        self._forget_lock(list_id)
        if deleted:
            logger.info("Deleted list %s", list_id)
        return deleted

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    def add_task(
        self,
        list_id: str,
        title: str,
        description: str = "",
        priority: int = DEFAULT_PRIORITY,
        estimated_duration: Optional[int] = None,
        tags: Optional[list[str]] = None,
        dependencies: Optional[list[str]] = None,
        exit_criteria: Optional[list[str]] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Task:
        """
        Add a task to a list.

        The task is created pending with no dependencies; any requested
        dependencies and exit criteria are then applied through the same
        validation as set_dependencies and set_exit_criteria, and the whole
        addition fails if either is rejected.
        """

        def operation(task_list: TaskList) -> Task:
            if task_list.total_items >= MAX_TASKS_PER_LIST:
                raise ValidationError(
                    f"Task list cannot hold more than {MAX_TASKS_PER_LIST} tasks",
                    field="tasks",
                )

            task = Task(
                title=title.strip() if title else "",
                description=description or "",
                priority=priority,
                estimated_duration=estimated_duration,
                tags=list(dict.fromkeys(tags or [])),
                metadata=dict(metadata or {}),
            )
            errors = task.validate()
            if errors:
                raise ValidationError("; ".join(errors), field="task")

            task_list.add_task(task)
            if exit_criteria:
                self._gate.set_exit_criteria(task, exit_criteria)
            task_list.touch()
            if dependencies:
                self._dependencies.set_dependencies(task_list, task.id, dependencies)
            return task

        task = self._mutate(list_id, operation)
        logger.info("Added task %s to list %s", task.id, list_id)
        return task

    def update_task(
        self,
        list_id: str,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        priority: Optional[int] = None,
        estimated_duration: Optional[int] = None,
        tags: Optional[list[str]] = None,
    ) -> Task:
        """Update a task's descriptive fields."""

        def operation(task_list: TaskList) -> Task:
            task = task_list.require_task(task_id)
            if title is not None:
                task.title = title.strip()
            if description is not None:
                task.description = description
            if priority is not None:
                task.priority = priority
            if estimated_duration is not None:
                task.estimated_duration = estimated_duration
            if tags is not None:
                task.tags = list(dict.fromkeys(tags))

            errors = task.validate()
            if errors:
                raise ValidationError("; ".join(errors), field="task")

            now = utcnow()
            task.touch(now)
            task_list.touch(now)
            return task

        return self._mutate(list_id, operation)

    def remove_task(self, list_id: str, task_id: str) -> list[str]:
        """
        Remove a task, stripping it from other tasks' dependencies.

        Returns:
            Ids of tasks whose dependencies changed.
        """

        def operation(task_list: TaskList) -> list[str]:
            affected = task_list.remove_task(task_id)
            task_list.touch()
            return affected

        affected = self._mutate(list_id, operation)
        logger.info(
            "Removed task %s from list %s (%d dependents updated)",
            task_id,
            list_id,
            len(affected),
        )
        return affected

    # -------------------------------------------------------------------------
    # Dependencies
    # -------------------------------------------------------------------------

    def set_dependencies(
        self,
        list_id: str,
        task_id: str,
        dependency_ids: list[str],
    ) -> DependencyUpdateResult:
        """Replace a task's dependencies. See DependencyManager.set_dependencies."""
        return self._mutate(
            list_id,
            lambda task_list: self._dependencies.set_dependencies(task_list, task_id, dependency_ids),
        )

    def validate_dependencies(
        self,
        list_id: str,
        task_id: str,
        dependency_ids: list[str],
    ) -> DependencyValidationResult:
        task_list = self._store.load(list_id)
        return self._dependencies.validate_dependencies(task_list, task_id, dependency_ids)

    def get_ready_tasks(self, list_id: str, limit: Optional[int] = None) -> ReadyTasksResult:
        """Get ready tasks with next-action suggestions."""
        if limit is None:
            limit = self._config.dependencies.default_ready_limit
        if not 1 <= limit <= MAX_READY_LIMIT:
            raise ValidationError(
                f"Limit must be between 1 and {MAX_READY_LIMIT}", field="limit", value=limit
            )

        task_list = self._store.load(list_id)
        ready = get_ready_tasks(task_list, limit=limit)
        return ReadyTasksResult(
            list_id=list_id,
            tasks=ready,
            next_actions=next_actions(task_list, ready),
            total_tasks=task_list.total_items,
            completed_tasks=task_list.completed_items,
            blocked_tasks=len(get_blocked_tasks(task_list)),
        )

    def get_blocked_tasks(self, list_id: str) -> list[BlockedTask]:
        return get_blocked_tasks(self._store.load(list_id))

    def analyze_dependencies(
        self,
        list_id: str,
        output_format: Optional[str] = None,
    ) -> DependencyAnalysis:
        return self._analyzer.analyze(self._store.load(list_id), output_format)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def set_task_status(self, list_id: str, task_id: str, status: TaskStatus | str) -> Task:
        """Transition a task's status through the state machine."""

        def operation(task_list: TaskList) -> Task:
            task = self._status.transition(task_list.require_task(task_id), status)
            task_list.touch(task.updated_at)
            return task

        return self._mutate(list_id, operation)

    def complete_task(self, list_id: str, task_id: str) -> Task:
        return self.set_task_status(list_id, task_id, TaskStatus.COMPLETED)

    # -------------------------------------------------------------------------
    # Exit Criteria
    # -------------------------------------------------------------------------

    def set_exit_criteria(
        self,
        list_id: str,
        task_id: str,
        descriptions: list[str],
    ) -> CriteriaUpdateResult:
        """Replace a task's exit criteria."""

        def operation(task_list: TaskList) -> CriteriaUpdateResult:
            task = task_list.require_task(task_id)
            warnings = self._gate.set_exit_criteria(task, descriptions)
            task_list.touch(task.updated_at)
            return CriteriaUpdateResult(
                task=task, warnings=warnings, progress=self._gate.progress(task)
            )

        return self._mutate(list_id, operation)

    def update_exit_criterion(
        self,
        list_id: str,
        task_id: str,
        criteria_id: str,
        is_met: Optional[bool] = None,
        notes: Optional[str] = None,
        description: Optional[str] = None,
    ) -> CriteriaUpdateResult:
        """Update one exit criterion's state, notes or description."""

        def operation(task_list: TaskList) -> CriteriaUpdateResult:
            task = task_list.require_task(task_id)
            self._gate.update_criterion(
                task, criteria_id, description=description, is_met=is_met, notes=notes
            )
            task_list.touch(task.updated_at)
            return CriteriaUpdateResult(task=task, progress=self._gate.progress(task))

        return self._mutate(list_id, operation)

    def format_exit_criteria(self, list_id: str, task_id: str) -> str:
        task = self._store.load(list_id).require_task(task_id)
        return self._gate.format_criteria(task)
