"""
Task List Tools - Create, inspect and delete lists; manage tasks, statuses
and exit criteria.
"""

from __future__ import annotations

from tasklist.core.constants import TaskStatus
from tasklist.core.exceptions import TaskListError
from tasklist.mcp.tools.formatting import format_error, format_task_line, format_warnings
from tasklist.tasks.service import TaskListService


def execute_create_list(
    service: TaskListService,
    title: str,
    description: str = "",
    project_tag: str | None = None,
) -> str:
    """Create a task list and describe it."""
    try:
        task_list = service.create_list(title, description, project_tag)
    except TaskListError as e:
        return format_error(e)

    return "\n".join([
        f"## Created list: {task_list.title}",
        f"- **ID:** `{task_list.id}`",
        f"- **Project:** {task_list.project_tag}",
    ])


def execute_get_list(
    service: TaskListService,
    list_id: str,
    status: str | None = None,
    priority: int | None = None,
    tag: str | None = None,
) -> str:
    """
    Describe a list and its tasks, optionally filtered.

    Filters combine: a task is shown only when it matches every filter given.
    """
    if status is not None and status not in {s.value for s in TaskStatus}:
        return (
            f"Error: Unknown status: {status}. "
            f"Use one of {', '.join(s.value for s in TaskStatus)}."
        )

    try:
        task_list = service.get_list(list_id)
    except TaskListError as e:
        return format_error(e)

    tasks = [
        t for t in task_list.tasks
        if (status is None or t.status.value == status)
        and (priority is None or t.priority == priority)
        and (tag is None or tag in t.tags)
    ]

    lines = [
        f"## {task_list.title}",
        f"- **ID:** `{task_list.id}`",
        f"- **Project:** {task_list.project_tag}",
        f"- **Progress:** {task_list.completed_items}/{task_list.total_items} "
        f"({task_list.progress}%)",
        "",
    ]
    filtered = status is not None or priority is not None or tag is not None
    if filtered:
        lines.append(f"### Tasks ({len(tasks)} of {len(task_list.tasks)} match)")
    else:
        lines.append(f"### Tasks ({len(tasks)})")
    for task in tasks:
        line = format_task_line(task)
        if task.dependencies:
            line += f" depends on {len(task.dependencies)}"
        lines.append(line)
    if not tasks:
        lines.append("No tasks match." if filtered else "No tasks yet.")
    return "\n".join(lines)


def execute_list_lists(service: TaskListService, project_tag: str | None = None) -> str:
    """Summarize stored lists, newest first."""
    try:
        summaries = service.list_lists(project_tag)
    except TaskListError as e:
        return format_error(e)

    if not summaries:
        return "No task lists found."

    lines = [f"## Task lists ({len(summaries)})"]
    for s in summaries:
        lines.append(
            f"- **{s['title']}** `{s['id']}` [{s['project_tag']}] "
            f"{s['completed_items']}/{s['total_items']} done ({s['progress']}%)"
        )
    return "\n".join(lines)


def execute_delete_list(service: TaskListService, list_id: str) -> str:
    """Delete a list permanently."""
    try:
        deleted = service.delete_list(list_id)
    except TaskListError as e:
        return format_error(e)

    if not deleted:
        return f"Error: Task list not found: {list_id}"
    return f"Deleted list `{list_id}`."


def execute_add_task(
    service: TaskListService,
    list_id: str,
    title: str,
    description: str = "",
    priority: int = 3,
    estimated_duration: int | None = None,
    tags: list[str] | None = None,
    dependencies: list[str] | None = None,
    exit_criteria: list[str] | None = None,
) -> str:
    """Add a task and describe it."""
    try:
        task = service.add_task(
            list_id,
            title=title,
            description=description,
            priority=priority,
            estimated_duration=estimated_duration,
            tags=tags,
            dependencies=dependencies,
            exit_criteria=exit_criteria,
        )
    except TaskListError as e:
        return format_error(e)

    lines = ["## Task added", format_task_line(task)]
    if task.dependencies:
        lines.append(f"- **Depends on:** {', '.join(task.dependencies)}")
    if task.exit_criteria:
        lines.append(f"- **Exit criteria:** {len(task.exit_criteria)}")
    return "\n".join(lines)


def execute_update_task(
    service: TaskListService,
    list_id: str,
    task_id: str,
    title: str | None = None,
    description: str | None = None,
    priority: int | None = None,
    estimated_duration: int | None = None,
    tags: list[str] | None = None,
) -> str:
    """Update a task's descriptive fields; omitted fields are left as they are."""
    try:
        task = service.update_task(
            list_id,
            task_id,
            title=title,
            description=description,
            priority=priority,
            estimated_duration=estimated_duration,
            tags=tags,
        )
    except TaskListError as e:
        return format_error(e)

    return "\n".join(["## Task updated", format_task_line(task)])


def execute_remove_task(service: TaskListService, list_id: str, task_id: str) -> str:
    """Remove a task and report which dependents were updated."""
    try:
        affected = service.remove_task(list_id, task_id)
    except TaskListError as e:
        return format_error(e)

    lines = [f"Removed task `{task_id}`."]
    if affected:
        lines.append(f"Dropped it from the dependencies of {len(affected)} task(s): "
                     + ", ".join(f"`{a}`" for a in affected))
    return "\n".join(lines)


def execute_set_task_status(
    service: TaskListService,
    list_id: str,
    task_id: str,
    status: str,
) -> str:
    """Transition a task's status."""
    try:
        task = service.set_task_status(list_id, task_id, status)
    except TaskListError as e:
        return format_error(e)

    return f"Task **{task.title}** is now `{task.status.value}`."


def execute_complete_task(service: TaskListService, list_id: str, task_id: str) -> str:
    try:
        task = service.complete_task(list_id, task_id)
    except TaskListError as e:
        return format_error(e)

    return f"Completed **{task.title}**."


def execute_set_exit_criteria(
    service: TaskListService,
    list_id: str,
    task_id: str,
    exit_criteria: list[str],
) -> str:
    """Replace a task's exit criteria."""
    try:
        result = service.set_exit_criteria(list_id, task_id, exit_criteria)
    except TaskListError as e:
        return format_error(e)

    lines = [f"## Exit criteria for {result.task.title}"]
    for criterion in result.task.exit_criteria:
        lines.append(f"- [ ] {criterion.description} `{criterion.id}`")
    if not result.task.exit_criteria:
        lines.append("No exit criteria; the task can be completed freely.")
    lines.extend(format_warnings(result.warnings))
    return "\n".join(lines)


def execute_update_exit_criteria(
    service: TaskListService,
    list_id: str,
    task_id: str,
    criteria_id: str,
    is_met: bool | None = None,
    notes: str | None = None,
) -> str:
    """Update one exit criterion and report progress."""
    try:
        result = service.update_exit_criterion(
            list_id, task_id, criteria_id, is_met=is_met, notes=notes
        )
    except TaskListError as e:
        return format_error(e)

    met = sum(1 for c in result.task.exit_criteria if c.is_met)
    lines = [
        f"Updated criterion `{criteria_id}` on **{result.task.title}**.",
        f"Progress: {met}/{len(result.task.exit_criteria)} met ({result.progress}%).",
    ]
    if result.progress == 100:
        lines.append("All exit criteria are met; the task can be completed.")
    return "\n".join(lines)
