"""MCP server exposing task lists to AI agents."""

from tasklist.mcp.server import create_server, run_server

__all__ = ["create_server", "run_server"]
