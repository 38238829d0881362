"""
Unit tests for the task list MCP server.

Tests cover:
- Server creation
- Tool registration
"""

from __future__ import annotations

import pytest

from tasklist.mcp.server import SERVER_NAME, TOOL_NAMES, create_server, run_server


class TestMCPServer:
    """Tests for MCP server creation and configuration."""

    def test_server_has_correct_name(self, service) -> None:
        """Server should carry the configured name."""
        assert create_server(service).name == SERVER_NAME

    @pytest.mark.asyncio
    async def test_all_tools_registered(self, service) -> None:
        """Every tool name should be registered."""
        server = create_server(service)
        tools = await server.list_tools()

        assert sorted(t.name for t in tools) == sorted(TOOL_NAMES)
        assert len(TOOL_NAMES) == 15

    def test_unknown_transport(self) -> None:
        """Unknown transports should be rejected."""
        with pytest.raises(ValueError):
            run_server(transport="websocket")
