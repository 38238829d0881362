"""CLI commands for tasks, statuses and exit criteria."""

from typing import Annotated, Optional

import typer
from rich.markup import escape

from tasklist.cli.utils import console, open_service, print_json
from tasklist.core.constants import DEFAULT_PRIORITY

task_app = typer.Typer(help="Manage tasks", no_args_is_help=True)


@task_app.command("add")
def task_add(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    title: Annotated[str, typer.Argument(help="Task title")],
    description: Annotated[str, typer.Option("--description", "-d", help="Task description")] = "",
    priority: Annotated[
        int, typer.Option("--priority", "-p", min=1, max=5, help="Priority 1-5")
    ] = int(DEFAULT_PRIORITY),
    duration: Annotated[
        Optional[int], typer.Option("--duration", min=0, help="Estimated minutes")
    ] = None,
    tags: Annotated[Optional[list[str]], typer.Option("--tag", help="Tag (repeatable)")] = None,
    depends_on: Annotated[
        Optional[list[str]], typer.Option("--depends-on", help="Dependency task ID (repeatable)")
    ] = None,
    criteria: Annotated[
        Optional[list[str]], typer.Option("--criterion", help="Exit criterion (repeatable)")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Add a task to a list."""
    with open_service(ctx) as service:
        task = service.add_task(
            list_id,
            title=title,
            description=description,
            priority=priority,
            estimated_duration=duration,
            tags=tags,
            dependencies=depends_on,
            exit_criteria=criteria,
        )

    if json_output:
        print_json(task.to_dict())
        return
    console.print(f"[green]Added task[/green] {escape(task.title)}")
    console.print(f"  ID: {task.id}")


@task_app.command("remove")
def task_remove(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    task_id: Annotated[str, typer.Argument(help="Task ID")],
) -> None:
    """Remove a task; dependents lose the dependency."""
    with open_service(ctx) as service:
        affected = service.remove_task(list_id, task_id)

    console.print(f"[green]Removed task[/green] {task_id}")
    if affected:
        console.print(f"  Updated dependencies of {len(affected)} task(s)")


@task_app.command("status")
def task_status(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    status: Annotated[
        str, typer.Argument(help="pending, in_progress, blocked, completed or cancelled")
    ],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Change a task's status."""
    with open_service(ctx) as service:
        task = service.set_task_status(list_id, task_id, status)

    if json_output:
        print_json(task.to_dict())
        return
    console.print(f"{escape(task.title)}: [bold]{task.status.value}[/bold]")


@task_app.command("criteria")
def task_criteria(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    criteria: Annotated[
        Optional[list[str]], typer.Argument(help="New criteria; omit to show current")
    ] = None,
) -> None:
    """Show or replace a task's exit criteria."""
    with open_service(ctx) as service:
        if criteria:
            result = service.set_exit_criteria(list_id, task_id, criteria)
            for warning in result.warnings:
                console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")
        text = service.format_exit_criteria(list_id, task_id)

    console.print(escape(text))


@task_app.command("criterion")
def task_criterion(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    criteria_id: Annotated[str, typer.Argument(help="Criterion ID")],
    met: Annotated[
        bool, typer.Option("--met/--unmet", help="Mark the criterion met or unmet")
    ] = True,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Notes or evidence")] = None,
) -> None:
    """Mark one exit criterion met or unmet."""
    with open_service(ctx) as service:
        result = service.update_exit_criterion(
            list_id, task_id, criteria_id, is_met=met, notes=notes
        )

    state = "met" if met else "unmet"
    console.print(f"Criterion {criteria_id} {state} ({result.progress}% of criteria met)")
