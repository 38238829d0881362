"""
Task list engine.

This package holds the task model and the dependency graph engine built on
it.

Public API:
-----------

Models:
    TaskList, Task, ExitCriteria

Graph:
    DependencyGraph - Adjacency view with topological ordering
    find_cycle, would_create_cycle - Iterative cycle detection

Mutation:
    DependencyManager - Validated dependency replacement
    StatusMachine - Status transitions with the completion gate
    ExitCriteriaGate - Exit criteria management

Queries:
    get_ready_tasks, get_blocked_tasks - Readiness classification
    DependencyAnalyzer - Fan-in/out, bottlenecks and critical path
    DependencyRenderer - ASCII, DOT, Mermaid and JSON graph output

Persistence and orchestration:
    TaskListStore - SQLite store with optimistic versioning
    TaskListService - Locked load/mutate/save operations
"""

from tasklist.tasks.analysis import (
    CriticalPath,
    DependencyAnalysis,
    DependencyAnalyzer,
    NodeMetrics,
    compute_critical_path,
)
from tasklist.tasks.dependencies import (
    DependencyManager,
    DependencyUpdateResult,
    DependencyValidationResult,
)
from tasklist.tasks.exit_criteria import ExitCriteriaGate
from tasklist.tasks.graph import DependencyGraph, find_cycle, would_create_cycle
from tasklist.tasks.models import ExitCriteria, Task, TaskList, generate_id
from tasklist.tasks.readiness import BlockedTask, get_blocked_tasks, get_ready_tasks
from tasklist.tasks.renderer import DependencyRenderer, RenderConfig, RenderResult
from tasklist.tasks.service import CriteriaUpdateResult, ReadyTasksResult, TaskListService
from tasklist.tasks.status import StatusMachine
from tasklist.tasks.store import TaskListStore

__all__ = [
    # Models
    "TaskList",
    "Task",
    "ExitCriteria",
    "generate_id",
    # Graph
    "DependencyGraph",
    "find_cycle",
    "would_create_cycle",
    # Mutation
    "DependencyManager",
    "DependencyUpdateResult",
    "DependencyValidationResult",
    "StatusMachine",
    "ExitCriteriaGate",
    # Queries
    "BlockedTask",
    "get_ready_tasks",
    "get_blocked_tasks",
    "CriticalPath",
    "DependencyAnalysis",
    "DependencyAnalyzer",
    "NodeMetrics",
    "compute_critical_path",
    # Rendering
    "DependencyRenderer",
    "RenderConfig",
    "RenderResult",
    # Persistence and orchestration
    "TaskListStore",
    "TaskListService",
    "ReadyTasksResult",
    "CriteriaUpdateResult",
]
