"""Ready and blocked task classification."""

from dataclasses import dataclass, field
from typing import Any, Optional

from tasklist.core.constants import TaskPriority, TaskStatus
from tasklist.tasks.models import Task, TaskList


@dataclass
class BlockedTask:
    """A non-terminal task waiting on incomplete dependencies."""

    task: Task
    blocked_by: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = self.task.to_dict()
        data["blocked_by"] = list(self.blocked_by)
        return data


def _incomplete_dependencies(task_list: TaskList, task: Task) -> list[str]:
    """Dependency ids that are not completed; unresolved ids count as incomplete."""
    incomplete = []
    for dep_id in task.dependencies:
        dep = task_list.get_task(dep_id)
        if dep is None or not dep.is_completed():
            incomplete.append(dep_id)
    return incomplete


def is_ready(task_list: TaskList, task: Task) -> bool:
    return not task.is_terminal() and not _incomplete_dependencies(task_list, task)


def get_ready_tasks(task_list: TaskList, limit: Optional[int] = None) -> list[Task]:
    """
    Get tasks that can be started now.

    A task is ready when it is not completed or cancelled and every
    dependency is completed. Results are ordered by priority descending,
    then creation time ascending, then list position; ``limit`` applies
    after ordering.
    """
    indexed = [
        (i, t) for i, t in enumerate(task_list.tasks) if is_ready(task_list, t)
    ]
    indexed.sort(key=lambda pair: (-pair[1].priority, pair[1].created_at, pair[0]))
    ready = [t for _, t in indexed]
    if limit is not None:
        ready = ready[: max(limit, 0)]
    return ready


def get_blocked_tasks(task_list: TaskList) -> list[BlockedTask]:
    """Get non-terminal tasks with at least one incomplete dependency, in list order."""
    blocked = []
    for task in task_list.tasks:
        if task.is_terminal():
            continue
        incomplete = _incomplete_dependencies(task_list, task)
        if incomplete:
            blocked.append(BlockedTask(task=task, blocked_by=incomplete))
    return blocked


def next_actions(task_list: TaskList, ready: list[Task]) -> list[str]:
    """Suggest what to do next given the ready set."""
    if not task_list.tasks:
        return ["Add tasks to the list to get started"]
    if task_list.completed_items == task_list.total_items:
        return ["All tasks are completed"]
    if not ready:
        in_progress = [t for t in task_list.tasks if t.status == TaskStatus.IN_PROGRESS]
        if in_progress:
            return [f"Continue work on '{t.title}'" for t in in_progress[:3]]
        return ["No tasks are ready; review blocked tasks and their dependencies"]

    actions = []
    top = ready[0]
    actions.append(f"Start with '{top.title}' (priority {top.priority})")
    urgent = [t for t in ready if t.priority >= TaskPriority.HIGH]
    if len(urgent) > 1:
        actions.append(f"{len(urgent)} high priority tasks are ready")
    with_criteria = [t for t in ready if t.exit_criteria]
    if with_criteria:
        actions.append(
            f"Review exit criteria before starting {len(with_criteria)} ready task(s)"
        )
    return actions
