"""Core constants, configuration and exceptions."""

from tasklist.core.config import (
    DaemonConfig,
    DependencyConfig,
    StorageConfig,
    TaskListConfig,
)
from tasklist.core.constants import (
    MAX_DEPENDENCIES_PER_TASK,
    VALID_STATUS_TRANSITIONS,
    OutputFormat,
    TaskPriority,
    TaskStatus,
    is_valid_transition,
)
from tasklist.core.exceptions import (
    CircularDependencyError,
    ConcurrencyError,
    ConfigurationError,
    DependencyLimitExceededError,
    ExitCriteriaNotMetError,
    InvariantViolationError,
    ListNotFoundError,
    StatusTransitionError,
    StoreError,
    TaskListError,
    TaskNotFoundError,
    ValidationError,
)

__all__ = [
    # Config
    "DaemonConfig",
    "DependencyConfig",
    "StorageConfig",
    "TaskListConfig",
    # Constants
    "MAX_DEPENDENCIES_PER_TASK",
    "VALID_STATUS_TRANSITIONS",
    "OutputFormat",
    "TaskPriority",
    "TaskStatus",
    "is_valid_transition",
    # Exceptions
    "CircularDependencyError",
    "ConcurrencyError",
    "ConfigurationError",
    "DependencyLimitExceededError",
    "ExitCriteriaNotMetError",
    "InvariantViolationError",
    "ListNotFoundError",
    "StatusTransitionError",
    "StoreError",
    "TaskListError",
    "TaskNotFoundError",
    "ValidationError",
]
