"""Task list system constants, enumerations and default values."""

from enum import Enum
from pathlib import Path
from typing import Final


# =============================================================================
# Task Status Enumeration
# =============================================================================

class TaskStatus(str, Enum):
    """Status of a task in a list."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def terminal_states(cls) -> tuple["TaskStatus", ...]:
        """Return states with no outgoing transitions."""
        return (cls.COMPLETED, cls.CANCELLED)

    def is_terminal(self) -> bool:
        """Check if this status is a terminal state."""
        return self in self.terminal_states()


class TaskPriority(int, Enum):
    """Priority levels for tasks, 1 (lowest) to 5 (highest)."""

    MINIMAL = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4
    CRITICAL = 5


class OutputFormat(str, Enum):
    """Visualization formats for the dependency graph."""

    ASCII = "ascii"
    DOT = "dot"
    MERMAID = "mermaid"
    JSON = "json"


# =============================================================================
# Status Transitions
# =============================================================================

VALID_STATUS_TRANSITIONS: Final[dict[TaskStatus, tuple[TaskStatus, ...]]] = {
    TaskStatus.PENDING: (
        TaskStatus.IN_PROGRESS,
        TaskStatus.BLOCKED,
        TaskStatus.CANCELLED,
    ),
    TaskStatus.IN_PROGRESS: (
        TaskStatus.COMPLETED,
        TaskStatus.BLOCKED,
        TaskStatus.PENDING,
        TaskStatus.CANCELLED,
    ),
    TaskStatus.BLOCKED: (
        TaskStatus.PENDING,
        TaskStatus.IN_PROGRESS,
        TaskStatus.CANCELLED,
    ),
    TaskStatus.COMPLETED: (),
    TaskStatus.CANCELLED: (),
}


def is_valid_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """Check if a status transition is valid."""
    return to_status in VALID_STATUS_TRANSITIONS.get(from_status, ())


# =============================================================================
# Limits
# =============================================================================

MAX_DEPENDENCIES_PER_TASK: Final[int] = 50
MAX_TASKS_PER_LIST: Final[int] = 1000
MAX_TITLE_LENGTH: Final[int] = 1000
MAX_DESCRIPTION_LENGTH: Final[int] = 5000
MAX_PROJECT_TAG_LENGTH: Final[int] = 250
MAX_TAG_LENGTH: Final[int] = 50
MAX_TAGS_PER_TASK: Final[int] = 10
MAX_CRITERIA_DESCRIPTION_LENGTH: Final[int] = 500
MIN_CRITERIA_DESCRIPTION_LENGTH: Final[int] = 5
MAX_CRITERIA_PER_TASK: Final[int] = 20

PROJECT_TAG_PATTERN: Final[str] = r"^[a-z0-9-]+$"
TAG_PATTERN: Final[str] = r"^[a-zA-Z0-9_-]+$"
UUID_PATTERN: Final[str] = (
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"
)

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_PRIORITY: Final[TaskPriority] = TaskPriority.MEDIUM
DEFAULT_PROJECT_TAG: Final[str] = "default"
DEFAULT_READY_LIMIT: Final[int] = 20
MAX_READY_LIMIT: Final[int] = 50
DEFAULT_BOTTLENECK_LIMIT: Final[int] = 5

# Daemon settings
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 7450

# Directory structure
TASKLIST_ROOT_DIR: Final[str] = ".tasklist"
INDEX_DIR: Final[str] = "index"
LISTS_DIR: Final[str] = "lists"
TASKLIST_DB: Final[str] = "tasklists.db"
CONFIG_FILE: Final[str] = "config.json"


def get_tasklist_root(base_path: Path | None = None) -> Path:
    """Get the .tasklist root directory path."""
    if base_path is None:
        base_path = Path.cwd()
    return base_path / TASKLIST_ROOT_DIR
