"""Task list custom exception hierarchy."""

from typing import Any


class TaskListError(Exception):
    """Base exception for all task list errors."""

    retryable: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for transport layers."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class ConfigurationError(TaskListError):
    """Raised when configuration is invalid or missing."""

    pass


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(TaskListError):
    """Raised when input fails validation."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


class DependencyLimitExceededError(ValidationError):
    """Raised when a task would exceed the per-task dependency limit."""

    def __init__(self, task_id: str, count: int, limit: int) -> None:
        super().__init__(
            f"Task cannot have more than {limit} dependencies (got {count})",
            field="dependencies",
            details={"task_id": task_id, "count": count, "limit": limit},
        )
        self.task_id = task_id
        self.count = count
        self.limit = limit


# =============================================================================
# Graph Errors
# =============================================================================


class CircularDependencyError(TaskListError):
    """Raised when a dependency update would close a cycle."""

    def __init__(self, task_id: str, cycle: list[str]) -> None:
        super().__init__(
            f"Circular dependency detected: {' -> '.join(cycle)}",
            details={"task_id": task_id, "cycle": list(cycle)},
        )
        self.task_id = task_id
        self.cycle = list(cycle)


class InvariantViolationError(TaskListError):
    """Raised when a committed graph breaks a structural invariant.

    This signals a defect in the engine, not bad input.
    """

    pass


# =============================================================================
# Lifecycle Errors
# =============================================================================


class StatusTransitionError(TaskListError):
    """Raised when a status change is not in the transition table."""

    def __init__(
        self,
        task_id: str,
        current_status: str,
        target_status: str,
        valid_transitions: list[str],
    ) -> None:
        allowed = ", ".join(valid_transitions) if valid_transitions else "none"
        super().__init__(
            f"Cannot transition task from '{current_status}' to '{target_status}'. "
            f"Valid transitions: {allowed}",
            details={
                "task_id": task_id,
                "current_status": current_status,
                "target_status": target_status,
                "valid_transitions": list(valid_transitions),
            },
        )
        self.task_id = task_id
        self.current_status = current_status
        self.target_status = target_status
        self.valid_transitions = list(valid_transitions)


class ExitCriteriaNotMetError(TaskListError):
    """Raised when completing a task whose exit criteria are not all met."""

    def __init__(self, task_id: str, unmet_criteria: list[str]) -> None:
        super().__init__(
            f"Cannot complete task: {len(unmet_criteria)} exit criteria not met",
            details={"task_id": task_id, "unmet_criteria": list(unmet_criteria)},
        )
        self.task_id = task_id
        self.unmet_criteria = list(unmet_criteria)


# =============================================================================
# Lookup Errors
# =============================================================================


class TaskNotFoundError(TaskListError):
    """Raised when a task id does not resolve within its list."""

    def __init__(self, task_id: str, list_id: str | None = None) -> None:
        details: dict[str, Any] = {"task_id": task_id}
        if list_id:
            details["list_id"] = list_id
        super().__init__(f"Task not found: {task_id}", details)
        self.task_id = task_id
        self.list_id = list_id


class ListNotFoundError(TaskListError):
    """Raised when a list id does not resolve."""

    def __init__(self, list_id: str) -> None:
        super().__init__(f"Task list not found: {list_id}", {"list_id": list_id})
        self.list_id = list_id


# =============================================================================
# Storage Errors
# =============================================================================


class StoreError(TaskListError):
    """Raised when persistence fails."""

    def __init__(
        self, message: str, operation: str | None = None, details: dict[str, Any] | None = None
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.operation = operation


class ConcurrencyError(StoreError):
    """Raised when a save is attempted against a stale list version."""

    retryable = True

    def __init__(self, list_id: str, expected_version: int, actual_version: int) -> None:
        super().__init__(
            f"Task list {list_id} was modified concurrently",
            operation="save",
            details={
                "list_id": list_id,
                "expected_version": expected_version,
                "actual_version": actual_version,
            },
        )
        self.list_id = list_id
        self.expected_version = expected_version
        self.actual_version = actual_version
