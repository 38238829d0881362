"""
Dependency mutation for task lists.

DependencyManager is the only writer of Task.dependencies besides task
removal. Every update is validated completely before anything changes, so
a rejected update leaves the list untouched.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import logging

from tasklist.core.config import DependencyConfig
from tasklist.core.exceptions import (
    CircularDependencyError,
    DependencyLimitExceededError,
    TaskListError,
    ValidationError,
)
from tasklist.tasks.graph import would_create_cycle
from tasklist.tasks.models import Task, TaskList, utcnow

logger = logging.getLogger(__name__)


@dataclass
class DependencyUpdateResult:
    """Outcome of a successful dependency update."""

    task: Task
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"task": self.task.to_dict(), "warnings": list(self.warnings)}


@dataclass
class DependencyValidationResult:
    """Outcome of a dry-run dependency validation."""

    is_valid: bool
    dependencies: list[str] = field(default_factory=list)
    error: Optional[TaskListError] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "dependencies": list(self.dependencies),
            "error": self.error.to_dict() if self.error else None,
            "warnings": list(self.warnings),
        }


def _dedupe(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for item in ids:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class DependencyManager:
    """Validates and applies dependency list replacements."""

    def __init__(self, config: Optional[DependencyConfig] = None) -> None:
        self._config = config or DependencyConfig()

    @property
    def config(self) -> DependencyConfig:
        return self._config

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _check(
        self,
        task_list: TaskList,
        task_id: str,
        dependency_ids: list[str],
    ) -> tuple[Task, list[str]]:
        """Run every check in order, raising on the first failure."""
        task = task_list.require_task(task_id)
        proposed = _dedupe(list(dependency_ids))

        known = set(task_list.task_ids())
        missing = [d for d in proposed if d not in known]
        if missing:
            raise ValidationError(
                f"Dependency tasks not found: {', '.join(missing)}",
                field="dependencies",
                details={"task_id": task_id, "missing": missing},
            )

        if task_id in proposed:
            raise ValidationError(
                "Task cannot depend on itself",
                field="dependencies",
                details={"task_id": task_id},
            )

        limit = self._config.max_dependencies
        if len(proposed) > limit:
            raise DependencyLimitExceededError(task_id, len(proposed), limit)

        has_cycle, cycle = would_create_cycle(task_list, task_id, proposed)
        if has_cycle:
            raise CircularDependencyError(task_id, cycle)

        return task, proposed

    def _completed_warnings(self, task_list: TaskList, dependency_ids: list[str]) -> list[str]:
        if not self._config.warn_on_completed_dependencies:
            return []
        warnings = []
        for dep_id in dependency_ids:
            dep = task_list.get_task(dep_id)
            if dep is not None and dep.is_completed():
                warnings.append(f"Dependency on completed task: {dep.title} ({dep.id})")
        return warnings

    def validate_dependencies(
        self,
        task_list: TaskList,
        task_id: str,
        dependency_ids: list[str],
    ) -> DependencyValidationResult:
        """Run all checks without mutating the list."""
        try:
            _, proposed = self._check(task_list, task_id, dependency_ids)
        except TaskListError as e:
            return DependencyValidationResult(is_valid=False, error=e)
        return DependencyValidationResult(
            is_valid=True,
            dependencies=proposed,
            warnings=self._completed_warnings(task_list, proposed),
        )

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_dependencies(
        self,
        task_list: TaskList,
        task_id: str,
        dependency_ids: list[str],
    ) -> DependencyUpdateResult:
        """
        Replace a task's dependency list.

        Args:
            task_list: List owning the task.
            task_id: Task whose dependencies are replaced.
            dependency_ids: New dependency ids; an empty list clears them.

        Returns:
            The updated task and advisory warnings.

        Raises:
            TaskNotFoundError: If the task does not exist.
            ValidationError: If a dependency id is unknown or self-referential.
            DependencyLimitExceededError: If too many dependencies are given.
            CircularDependencyError: If the update would close a cycle.
        """
        task, proposed = self._check(task_list, task_id, dependency_ids)
        warnings = self._completed_warnings(task_list, proposed)

        now = utcnow()
        task.dependencies = proposed
        task.touch(now)
        task_list.touch(now)

        for warning in warnings:
            logger.warning("Task %s: %s", task_id, warning)
        logger.info(
            "Set %d dependencies on task %s in list %s",
            len(proposed),
            task_id,
            task_list.id,
        )
        return DependencyUpdateResult(task=task, warnings=warnings)
