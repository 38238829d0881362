"""
Dependency Tools - Set dependencies and inspect the task graph.

These tools let an agent wire tasks together, ask which tasks can be
started now, and get a structural analysis with an optional rendered DAG.
"""

from __future__ import annotations

from tasklist.core.exceptions import TaskListError
from tasklist.mcp.tools.formatting import format_error, format_task_line, format_warnings
from tasklist.tasks.service import TaskListService

ANALYSIS_FORMATS = ("analysis", "dag", "both")


def execute_set_dependencies(
    service: TaskListService,
    list_id: str,
    task_id: str,
    dependency_ids: list[str],
) -> str:
    """Replace a task's dependencies."""
    try:
        result = service.set_dependencies(list_id, task_id, dependency_ids)
    except TaskListError as e:
        return format_error(e)

    if result.task.dependencies:
        lines = [
            f"**{result.task.title}** now depends on {len(result.task.dependencies)} task(s):",
            *[f"- `{d}`" for d in result.task.dependencies],
        ]
    else:
        lines = [f"Cleared dependencies of **{result.task.title}**."]
    lines.extend(format_warnings(result.warnings))
    return "\n".join(lines)


def execute_get_ready_tasks(service: TaskListService, list_id: str, limit: int = 20) -> str:
    """List tasks that can be started now."""
    try:
        result = service.get_ready_tasks(list_id, limit)
    except TaskListError as e:
        return format_error(e)

    lines = [
        f"## Ready tasks ({len(result.tasks)})",
        f"Completed {result.completed_tasks}/{result.total_tasks}, "
        f"{result.blocked_tasks} blocked.",
        "",
    ]
    if result.tasks:
        lines.extend(format_task_line(t) for t in result.tasks)
    else:
        lines.append("No tasks are ready.")

    if result.next_actions:
        lines.append("")
        lines.append("### Next actions")
        lines.extend(f"- {a}" for a in result.next_actions)
    return "\n".join(lines)


def execute_get_blocked_tasks(service: TaskListService, list_id: str) -> str:
    """List tasks waiting on incomplete dependencies."""
    try:
        task_list = service.get_list(list_id)
        blocked = service.get_blocked_tasks(list_id)
    except TaskListError as e:
        return format_error(e)

    if not blocked:
        return "No blocked tasks."

    titles = {t.id: t.title for t in task_list.tasks}
    lines = [f"## Blocked tasks ({len(blocked)})"]
    for entry in blocked:
        lines.append(format_task_line(entry.task))
        waiting = ", ".join(titles.get(d, d) for d in entry.blocked_by)
        lines.append(f"  - waiting on: {waiting}")
    return "\n".join(lines)


def execute_analyze_dependencies(
    service: TaskListService,
    list_id: str,
    format: str = "analysis",
    dag_style: str = "ascii",
) -> str:
    """
    Analyze a list's dependency structure.

    Args:
        service: Task list service
        list_id: List to analyze
        format: 'analysis' for the report, 'dag' for the rendered graph, 'both'
        dag_style: Graph format when rendering (ascii, dot, mermaid)
    """
    if format not in ANALYSIS_FORMATS:
        return f"Error: Unknown format: {format}. Use one of {', '.join(ANALYSIS_FORMATS)}."

    render = dag_style if format in ("dag", "both") else None
    try:
        task_list = service.get_list(list_id)
        analysis = service.analyze_dependencies(list_id, render)
    except TaskListError as e:
        return format_error(e)

    if format == "dag":
        return analysis.visualization or ""

    titles = {t.id: t.title for t in task_list.tasks}
    lines = [
        f"## Dependency analysis: {task_list.title}",
        f"- **Total tasks:** {analysis.total_tasks}",
        f"- **Completed:** {analysis.completed_tasks}",
        f"- **Ready:** {len(analysis.ready_tasks)}",
        f"- **Blocked:** {len(analysis.blocked_tasks)}",
        f"- **With dependencies:** {analysis.tasks_with_dependencies}",
        "",
    ]

    path = analysis.critical_path
    if path.task_ids:
        chain = " -> ".join(titles[t] for t in path.task_ids)
        lines.append(f"### Critical path ({path.total_duration} minutes)")
        lines.append(chain)
        lines.append("")

    if analysis.bottlenecks:
        lines.append("### Bottlenecks")
        for b in analysis.bottlenecks:
            lines.append(f"- **{titles[b.task_id]}** blocks {b.fan_out} task(s)")
        lines.append("")

    if analysis.recommendations:
        lines.append("### Recommendations")
        lines.extend(f"- {r}" for r in analysis.recommendations)

    if format == "both" and analysis.visualization:
        lines.append("")
        lines.append("### Graph")
        lines.append("```")
        lines.append(analysis.visualization)
        lines.append("```")

    return "\n".join(lines)
