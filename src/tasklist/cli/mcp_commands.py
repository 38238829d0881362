"""
MCP CLI Commands - Command-line interface for the MCP server.
"""

from __future__ import annotations

import logging
import sys
from typing import Annotated

import typer

from tasklist.cli.utils import err_console, get_state

logger = logging.getLogger(__name__)

mcp_app = typer.Typer(
    name="mcp",
    help="MCP (Model Context Protocol) server for AI agents.",
    no_args_is_help=True,
)

VALID_TRANSPORTS = ("stdio", "sse")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@mcp_app.command("serve")
def serve(
    ctx: typer.Context,
    transport: Annotated[
        str,
        typer.Option(
            "--transport", "-t",
            help="Transport type: 'stdio' (default) or 'sse'",
        ),
    ] = "stdio",
    port: Annotated[
        int,
        typer.Option(
            "--port", "-p",
            help="Port for SSE transport (default 3000)",
        ),
    ] = 3000,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level", "-l",
            help="Logging level: DEBUG, INFO, WARNING, ERROR",
        ),
    ] = "INFO",
) -> None:
    """
    Start the task list MCP server.

    Examples:
        tasklist mcp serve                    # Start with stdio (default)
        tasklist mcp serve --transport sse    # Start with HTTP/SSE
        tasklist mcp serve -t sse -p 8080     # SSE on custom port
    """
    if transport not in VALID_TRANSPORTS:
        err_console.print(f"[red]Error: Invalid transport '{transport}'[/red]")
        err_console.print(f"Valid transports: {', '.join(VALID_TRANSPORTS)}")
        raise typer.Exit(1)

    log_level_upper = log_level.upper()
    if log_level_upper not in VALID_LOG_LEVELS:
        err_console.print(f"[red]Error: Invalid log level '{log_level}'[/red]")
        err_console.print(f"Valid levels: {', '.join(VALID_LOG_LEVELS)}")
        raise typer.Exit(1)

    # stdout carries the stdio protocol, so logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, log_level_upper),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        from tasklist.mcp.server import run_server
        run_server(transport=transport, port=port, base_path=get_state(ctx).root)
    except KeyboardInterrupt:
        logger.info("MCP server stopped by user")
    except Exception as e:
        logger.exception("MCP server error")
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
