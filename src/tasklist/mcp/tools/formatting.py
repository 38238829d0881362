"""Shared markdown formatting for MCP tool responses."""

from __future__ import annotations

import logging

from tasklist.core.exceptions import (
    CircularDependencyError,
    ConcurrencyError,
    DependencyLimitExceededError,
    ExitCriteriaNotMetError,
    ListNotFoundError,
    StatusTransitionError,
    TaskListError,
    TaskNotFoundError,
)
from tasklist.tasks.models import Task

logger = logging.getLogger(__name__)


def format_error(error: TaskListError) -> str:
    """Render an engine error with a hint on how to recover."""
    logger.debug("Tool call rejected: %s", error)
    lines = [f"Error: {error.message}"]
    guidance = _guidance(error)
    if guidance:
        lines.append("")
        lines.append(guidance)
    return "\n".join(lines)


def _guidance(error: TaskListError) -> str | None:
    if isinstance(error, CircularDependencyError):
        return "Remove one of the dependencies in the cycle and try again."
    if isinstance(error, StatusTransitionError):
        if error.valid_transitions:
            return f"Allowed next statuses: {', '.join(error.valid_transitions)}."
        return "The task is in a terminal status and cannot change."
    if isinstance(error, ExitCriteriaNotMetError):
        return "Mark the remaining exit criteria as met before completing the task."
    if isinstance(error, DependencyLimitExceededError):
        return "Split the task or group its prerequisites."
    if isinstance(error, (TaskNotFoundError, ListNotFoundError)):
        return "Check the id; use get_ready_tasks or analyze_task_dependencies to look up ids."
    if isinstance(error, ConcurrencyError):
        return "The list changed while updating; retry the call."
    return None


def format_task_line(task: Task) -> str:
    """One-line task summary."""
    line = f"- **{task.title}** `{task.id}` [{task.status.value}, priority {task.priority}]"
    if task.estimated_duration is not None:
        line += f" ~{task.estimated_duration}m"
    return line


def format_warnings(warnings: list[str]) -> list[str]:
    if not warnings:
        return []
    return ["", "**Warnings:**"] + [f"- {w}" for w in warnings]
