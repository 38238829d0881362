"""tasklist - Task list manager with a dependency graph engine for AI agents.

Tasks in a list form a directed acyclic graph of dependencies. The engine
keeps that graph acyclic, reports which tasks are ready to start, gates
completion on exit criteria and analyzes the graph's structure.
"""

__version__ = "0.1.0"

from tasklist.core import (
    TaskListConfig,
    TaskListError,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "__version__",
    # Core enums
    "TaskStatus",
    "TaskPriority",
    # Config
    "TaskListConfig",
    # Base exception
    "TaskListError",
]
