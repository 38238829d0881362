"""CLI commands for the dependency graph."""

from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from tasklist.cli.utils import console, open_service, print_json
from tasklist.core.constants import OutputFormat

deps_app = typer.Typer(help="Manage task dependencies", no_args_is_help=True)


@deps_app.command("set")
def deps_set(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    task_id: Annotated[str, typer.Argument(help="Task ID")],
    dependency_ids: Annotated[
        Optional[list[str]], typer.Argument(help="Dependency task IDs; omit to clear")
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Validate only")] = False,
) -> None:
    """Replace a task's dependencies."""
    with open_service(ctx) as service:
        if dry_run:
            check = service.validate_dependencies(list_id, task_id, dependency_ids or [])
            if check.is_valid:
                console.print("[green]Dependencies are valid[/green]")
            else:
                console.print(f"[red]Invalid: {escape(check.error.message)}[/red]")
            for warning in check.warnings:
                console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")
            if not check.is_valid:
                raise typer.Exit(1)
            return

        result = service.set_dependencies(list_id, task_id, dependency_ids or [])

    console.print(
        f"{escape(result.task.title)} now has {len(result.task.dependencies)} dependencies"
    )
    for warning in result.warnings:
        console.print(f"[yellow]Warning: {escape(warning)}[/yellow]")


@deps_app.command("ready")
def deps_ready(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-n", min=1, max=50, help="Maximum tasks")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show tasks that can be started now."""
    with open_service(ctx) as service:
        result = service.get_ready_tasks(list_id, limit)

    if json_output:
        print_json(result.to_dict())
        return
    if not result.tasks:
        console.print("[yellow]No tasks are ready.[/yellow]")
    else:
        table = Table(title=f"Ready Tasks ({len(result.tasks)})")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Priority", justify="right")
        table.add_column("Est. (min)", justify="right")
        for task in result.tasks:
            duration = "" if task.estimated_duration is None else str(task.estimated_duration)
            table.add_row(task.id, escape(task.title), str(task.priority), duration)
        console.print(table)

    for action in result.next_actions:
        console.print(f"- {escape(action)}")


@deps_app.command("blocked")
def deps_blocked(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show tasks waiting on incomplete dependencies."""
    with open_service(ctx) as service:
        blocked = service.get_blocked_tasks(list_id)

    if json_output:
        print_json([b.to_dict() for b in blocked])
        return
    if not blocked:
        console.print("[green]No blocked tasks.[/green]")
        return

    table = Table(title=f"Blocked Tasks ({len(blocked)})")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Blocked by")
    for entry in blocked:
        table.add_row(entry.task.id, escape(entry.task.title), ", ".join(entry.blocked_by))
    console.print(table)


@deps_app.command("analyze")
def deps_analyze(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    output_format: Annotated[
        Optional[OutputFormat], typer.Option("--format", "-f", help="Render the graph")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Analyze critical path, bottlenecks and readiness."""
    with open_service(ctx) as service:
        task_list = service.get_list(list_id)
        analysis = service.analyze_dependencies(
            list_id, output_format.value if output_format else None
        )

    if json_output:
        print_json(analysis.to_dict())
        return

    titles = {t.id: t.title for t in task_list.tasks}
    console.print(f"[bold]Dependency analysis: {escape(task_list.title)}[/bold]")
    console.print(
        f"Tasks: {analysis.total_tasks}  Completed: {analysis.completed_tasks}  "
        f"Ready: {len(analysis.ready_tasks)}  Blocked: {len(analysis.blocked_tasks)}"
    )

    path = analysis.critical_path
    if path.task_ids:
        chain = " -> ".join(titles[t] for t in path.task_ids)
        console.print(f"Critical path ({path.total_duration} min): {escape(chain)}")

    for bottleneck in analysis.bottlenecks:
        console.print(
            f"Bottleneck: {escape(titles[bottleneck.task_id])} "
            f"blocks {bottleneck.fan_out} task(s)"
        )
    for recommendation in analysis.recommendations:
        console.print(f"- {escape(recommendation)}")

    if analysis.visualization:
        console.print()
        console.print(analysis.visualization, markup=False, highlight=False)
