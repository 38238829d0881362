"""CLI commands for task lists."""

from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from tasklist.cli.utils import console, err_console, open_service, print_json

list_app = typer.Typer(help="Manage task lists", no_args_is_help=True)


@list_app.command("create")
def list_create(
    ctx: typer.Context,
    title: Annotated[str, typer.Argument(help="List title")],
    description: Annotated[str, typer.Option("--description", "-d", help="List description")] = "",
    project_tag: Annotated[
        Optional[str], typer.Option("--project", "-p", help="Project tag")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Create a task list."""
    with open_service(ctx) as service:
        task_list = service.create_list(title, description, project_tag)

    if json_output:
        print_json(task_list.to_dict())
        return
    console.print(f"[green]Created list[/green] {escape(task_list.title)}")
    console.print(f"  ID: {task_list.id}")


@list_app.command("ls")
def list_ls(
    ctx: typer.Context,
    project_tag: Annotated[
        Optional[str], typer.Option("--project", "-p", help="Filter by project tag")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List task lists."""
    with open_service(ctx) as service:
        summaries = service.list_lists(project_tag)

    if json_output:
        print_json(summaries)
        return
    if not summaries:
        console.print("[yellow]No task lists found.[/yellow]")
        return

    table = Table(title="Task Lists")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Project")
    table.add_column("Progress", justify="right")

    for s in summaries:
        table.add_row(
            s["id"],
            escape(s["title"]),
            s["project_tag"],
            f"{s['completed_items']}/{s['total_items']} ({s['progress']}%)",
        )
    console.print(table)


@list_app.command("show")
def list_show(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show a task list and its tasks."""
    with open_service(ctx) as service:
        task_list = service.get_list(list_id)

    if json_output:
        print_json(task_list.to_dict())
        return

    console.print(f"[bold]{escape(task_list.title)}[/bold] ({task_list.project_tag})")
    console.print(
        f"Progress: {task_list.completed_items}/{task_list.total_items} ({task_list.progress}%)"
    )
    if not task_list.tasks:
        console.print("[yellow]No tasks.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Priority", justify="right")
    table.add_column("Deps", justify="right")

    for task in task_list.tasks:
        table.add_row(
            task.id,
            escape(task.title),
            task.status.value,
            str(task.priority),
            str(len(task.dependencies)),
        )
    console.print(table)


@list_app.command("delete")
def list_delete(
    ctx: typer.Context,
    list_id: Annotated[str, typer.Argument(help="List ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Delete a task list."""
    if not yes:
        typer.confirm(f"Delete list {list_id}?", abort=True)

    with open_service(ctx) as service:
        deleted = service.delete_list(list_id)

    if not deleted:
        err_console.print(f"[red]Error: Task list not found: {list_id}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted list[/green] {list_id}")
