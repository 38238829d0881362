"""Main CLI entrypoint for tasklist."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import httpx
import typer

from tasklist.cli.dependencies import deps_app
from tasklist.cli.lists import list_app
from tasklist.cli.mcp_commands import mcp_app
from tasklist.cli.tasks import task_app
from tasklist.cli.utils import CliState, console, err_console, get_state
from tasklist.core.config import TaskListConfig
from tasklist.core.constants import get_tasklist_root
from tasklist.core.exceptions import ConfigurationError

# Create main app
app = typer.Typer(
    name="tasklist",
    help="Task lists with a dependency graph engine for AI agents",
    no_args_is_help=True,
)

app.add_typer(list_app, name="list")
app.add_typer(task_app, name="task")
app.add_typer(deps_app, name="deps")
app.add_typer(mcp_app, name="mcp")


@app.callback()
def root_callback(
    ctx: typer.Context,
    root: Annotated[
        Optional[Path],
        typer.Option("--root", "-r", help="Project root holding .tasklist (default: cwd)"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Task lists with a dependency graph engine for AI agents."""
    ctx.obj = CliState(root=root or Path.cwd(), verbose=verbose)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stderr,
        )


@app.command("init")
def init_command(ctx: typer.Context) -> None:
    """Create the .tasklist directory and a default config file."""
    state = get_state(ctx)
    root = get_tasklist_root(state.root)
    config_path = root / "config.json"

    if config_path.exists():
        console.print(f"[yellow]Already initialized:[/yellow] {root}")
        return

    path = TaskListConfig().save(state.root)
    console.print(f"[green]Initialized[/green] {root}")
    console.print(f"  Config: {path}")


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind host")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
) -> None:
    """Run the REST daemon in the foreground."""
    from tasklist.daemon.server import run_server

    state = get_state(ctx)
    try:
        config = TaskListConfig.load(state.root)
    except ConfigurationError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    level = getattr(logging, config.daemon.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=logging.DEBUG if state.verbose else level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    run_server(
        host=host or config.daemon.host,
        port=port or config.daemon.port,
        base_path=state.root,
        log_level=config.daemon.log_level,
    )


@app.command("status")
def status_command(
    ctx: typer.Context,
    host: Annotated[Optional[str], typer.Option("--host", help="Daemon host")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Daemon port")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show daemon status."""
    config = TaskListConfig.load(get_state(ctx).root)
    url = f"http://{host or config.daemon.host}:{port or config.daemon.port}/health"

    try:
        with httpx.Client(timeout=5.0) as client:
            response = client.get(url)
            response.raise_for_status()
            data = response.json()

    except httpx.ConnectError:
        if json_output:
            console.print(json.dumps({"daemon_running": False}))
        else:
            console.print("Daemon: [red]not running[/red]")
        return

    except httpx.HTTPError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if json_output:
        console.print(json.dumps(data, indent=2))
        return
    console.print(f"Daemon: [green]{data.get('status', 'unknown')}[/green]")
    console.print(f"Version: {data.get('version', 'unknown')}")
    console.print(f"Uptime: {data.get('uptime_seconds', 0):.0f}s")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
