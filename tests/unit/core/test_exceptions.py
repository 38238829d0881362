"""Tests for the exception hierarchy."""

from tasklist.core.exceptions import (
    CircularDependencyError,
    ConcurrencyError,
    DependencyLimitExceededError,
    StoreError,
    TaskListError,
    TaskNotFoundError,
    ValidationError,
)


class TestExceptions:
    """Tests for error payloads."""

    def test_to_dict(self) -> None:
        """Errors should serialize their kind and details."""
        error = CircularDependencyError("a", ["a", "c", "b", "a"])

        data = error.to_dict()
        assert data["error"] == "CircularDependencyError"
        assert data["details"]["cycle"] == ["a", "c", "b", "a"]
        assert data["retryable"] is False
        assert "a -> c -> b -> a" in data["message"]

    def test_limit_error_is_validation_error(self) -> None:
        """Limit errors should be catchable as validation errors."""
        error = DependencyLimitExceededError("t", 51, 50)
        assert isinstance(error, ValidationError)
        assert error.details["count"] == 51

    def test_concurrency_error_is_retryable(self) -> None:
        """Only concurrency conflicts should be retryable."""
        error = ConcurrencyError("l", 1, 2)
        assert isinstance(error, StoreError)
        assert error.retryable
        assert error.details["operation"] == "save"

    def test_str_includes_details(self) -> None:
        """String form should include details."""
        error = TaskNotFoundError("t1", "l1")
        assert str(error) == "Task not found: t1 (task_id=t1, list_id=l1)"
        assert isinstance(error, TaskListError)
