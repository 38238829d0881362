"""Shared helpers for CLI commands."""

import json
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generator

import typer
from rich.console import Console

from tasklist.core.exceptions import TaskListError
from tasklist.tasks.service import TaskListService

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Options shared by every command, set by the root callback."""

    root: Path
    verbose: bool = False


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.find_root().obj
    if state is None:
        state = CliState(root=Path.cwd())
    return state


@contextmanager
def open_service(ctx: typer.Context) -> Generator[TaskListService, None, None]:
    """Build a service for the selected root and report engine errors."""
    from tasklist.daemon.server import build_service

    state = get_state(ctx)
    try:
        service = build_service(state.root)
    except TaskListError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    try:
        yield service
    except TaskListError as e:
        err_console.print(f"[red]Error: {e.message}[/red]")
        if state.verbose and e.details:
            err_console.print(f"[dim]{json.dumps(e.details, default=str)}[/dim]")
        raise typer.Exit(1)
    finally:
        service.store.close()


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))
