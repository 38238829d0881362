"""
Task List MCP Server - Model Context Protocol server for task dependency management.

This server exposes task lists and their dependency graph engine through
MCP, so an agent can plan work as a DAG, ask what is ready, and gate
completion on exit criteria.

Usage:
    tasklist mcp serve              # Start with stdio transport (default)
    tasklist mcp serve --transport sse --port 3000
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from tasklist.mcp.tools.dependencies import (
    execute_analyze_dependencies,
    execute_get_blocked_tasks,
    execute_get_ready_tasks,
    execute_set_dependencies,
)
from tasklist.mcp.tools.lists import (
    execute_add_task,
    execute_complete_task,
    execute_create_list,
    execute_delete_list,
    execute_get_list,
    execute_list_lists,
    execute_remove_task,
    execute_set_exit_criteria,
    execute_set_task_status,
    execute_update_exit_criteria,
    execute_update_task,
)
from tasklist.tasks.service import TaskListService

logger = logging.getLogger(__name__)

SERVER_NAME = "tasklist"
SERVER_DESCRIPTION = (
    "Task lists with dependency tracking. Break work into tasks, declare which "
    "tasks depend on which, then ask for ready tasks and follow the critical path."
)

TOOL_NAMES: tuple[str, ...] = (
    "create_list",
    "get_list",
    "list_all_lists",
    "delete_list",
    "add_task",
    "update_task",
    "remove_task",
    "set_task_dependencies",
    "get_ready_tasks",
    "get_blocked_tasks",
    "analyze_task_dependencies",
    "set_task_status",
    "complete_task",
    "set_task_exit_criteria",
    "update_exit_criteria",
)


def create_server(service: TaskListService) -> FastMCP:
    """
    Create and configure the MCP server.

    Args:
        service: Service instance shared by every tool

    Returns:
        Configured FastMCP server instance with all tools registered
    """
    mcp = FastMCP(
        name=SERVER_NAME,
        instructions=SERVER_DESCRIPTION,
    )

    _register_tools(mcp, service)

    logger.info("Task list MCP server created with %s tools", len(TOOL_NAMES))

    return mcp


def _register_tools(mcp: FastMCP, service: TaskListService) -> None:
    """Register all MCP tools."""

    @mcp.tool()
    async def create_list(
        title: str,
        description: str = "",
        project_tag: str | None = None,
    ) -> str:
        """
        Create a new, empty task list.

        Args:
            title: List title
            description: Optional longer description
            project_tag: Lowercase project tag (letters, digits, hyphens)

        Returns:
            The new list's id and details
        """
        return await asyncio.to_thread(
            execute_create_list, service, title, description, project_tag
        )

    @mcp.tool()
    async def get_list(
        list_id: str,
        status: str | None = None,
        priority: int | None = None,
        tag: str | None = None,
    ) -> str:
        """
        Show a list with its progress and tasks.

        Filters are optional and combine; a task is listed only when it
        matches every filter given.

        Args:
            list_id: List id
            status: Only tasks in this status (pending, in_progress, blocked,
                completed, cancelled)
            priority: Only tasks with this priority (1-5)
            tag: Only tasks carrying this tag

        Examples:
            get_list(list_id)
            get_list(list_id, status="pending", priority=5)
        """
        return await asyncio.to_thread(
            execute_get_list, service, list_id, status, priority, tag
        )

    @mcp.tool()
    async def list_all_lists(project_tag: str | None = None) -> str:
        """
        List all task lists with their progress, most recently updated first.

        Args:
            project_tag: Only lists with this project tag
        """
        return await asyncio.to_thread(execute_list_lists, service, project_tag)

    @mcp.tool()
    async def delete_list(list_id: str) -> str:
        """
        Permanently delete a task list and all of its tasks.

        Args:
            list_id: List id
        """
        return await asyncio.to_thread(execute_delete_list, service, list_id)

    @mcp.tool()
    async def add_task(
        list_id: str,
        title: str,
        description: str = "",
        priority: int = 3,
        estimated_duration: int | None = None,
        tags: list[str] | None = None,
        dependencies: list[str] | None = None,
        exit_criteria: list[str] | None = None,
    ) -> str:
        """
        Add a task to a list.

        Args:
            list_id: Target list id
            title: Task title
            description: Optional details
            priority: 1 (minimal) to 5 (critical), default 3
            estimated_duration: Estimated minutes, used for the critical path
            tags: Optional tags
            dependencies: Ids of tasks in the same list that must complete first
            exit_criteria: Conditions that must all be met before completion

        Returns:
            The created task, or an error if a dependency is invalid or
            would create a cycle
        """
        return await asyncio.to_thread(
            execute_add_task,
            service,
            list_id,
            title,
            description,
            priority,
            estimated_duration,
            tags,
            dependencies,
            exit_criteria,
        )

    @mcp.tool()
    async def update_task(
        list_id: str,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
        priority: int | None = None,
        estimated_duration: int | None = None,
        tags: list[str] | None = None,
    ) -> str:
        """
        Update a task's title, description, priority, duration or tags.

        Omitted fields are left unchanged. Use set_task_dependencies and
        set_task_status for dependencies and status.

        Args:
            list_id: List id
            task_id: Task to update
            title: New title
            description: New description
            priority: New priority, 1 (minimal) to 5 (critical)
            estimated_duration: New estimate in minutes
            tags: Replacement tag list
        """
        return await asyncio.to_thread(
            execute_update_task,
            service,
            list_id,
            task_id,
            title,
            description,
            priority,
            estimated_duration,
            tags,
        )

    @mcp.tool()
    async def remove_task(list_id: str, task_id: str) -> str:
        """
        Remove a task. Other tasks that depended on it lose that dependency.

        Args:
            list_id: List id
            task_id: Task to remove
        """
        return await asyncio.to_thread(execute_remove_task, service, list_id, task_id)

    @mcp.tool()
    async def set_task_dependencies(
        list_id: str,
        task_id: str,
        dependency_ids: list[str],
    ) -> str:
        """
        Replace a task's dependencies. Pass an empty list to clear them.

        The update is rejected if a dependency is unknown, is the task
        itself, exceeds 50 dependencies, or would create a cycle; the error
        names the cycle.

        Args:
            list_id: List id
            task_id: Task whose dependencies are replaced
            dependency_ids: Full new list of prerequisite task ids

        Examples:
            set_task_dependencies(list_id, deploy_id, [build_id, test_id])
            set_task_dependencies(list_id, deploy_id, [])
        """
        return await asyncio.to_thread(
            execute_set_dependencies, service, list_id, task_id, dependency_ids
        )

    @mcp.tool()
    async def get_ready_tasks(list_id: str, limit: int = 20) -> str:
        """
        Get tasks whose dependencies are all completed, highest priority first.

        Call this to decide what to work on next.

        Args:
            list_id: List id
            limit: Maximum tasks to return (1-50, default 20)
        """
        return await asyncio.to_thread(execute_get_ready_tasks, service, list_id, limit)

    @mcp.tool()
    async def get_blocked_tasks(list_id: str) -> str:
        """
        Get tasks waiting on incomplete dependencies, with what blocks each one.

        Args:
            list_id: List id
        """
        return await asyncio.to_thread(execute_get_blocked_tasks, service, list_id)

    @mcp.tool()
    async def analyze_task_dependencies(
        list_id: str,
        format: str = "analysis",
        dag_style: str = "ascii",
    ) -> str:
        """
        Analyze a list's dependency graph: critical path, bottlenecks, readiness.

        Args:
            list_id: List id
            format: 'analysis', 'dag' (rendered graph only) or 'both'
            dag_style: Graph style for 'dag'/'both': ascii, dot or mermaid

        Examples:
            analyze_task_dependencies(list_id)
            analyze_task_dependencies(list_id, format="dag", dag_style="mermaid")
        """
        return await asyncio.to_thread(
            execute_analyze_dependencies, service, list_id, format, dag_style
        )

    @mcp.tool()
    async def set_task_status(list_id: str, task_id: str, status: str) -> str:
        """
        Change a task's status.

        Allowed: pending -> in_progress/blocked/cancelled;
        in_progress -> completed/blocked/pending/cancelled;
        blocked -> pending/in_progress/cancelled. Completed and cancelled are
        final. Completing requires every exit criterion to be met.

        Args:
            list_id: List id
            task_id: Task id
            status: pending, in_progress, blocked, completed or cancelled
        """
        return await asyncio.to_thread(
            execute_set_task_status, service, list_id, task_id, status
        )

    @mcp.tool()
    async def complete_task(list_id: str, task_id: str) -> str:
        """
        Mark an in-progress task completed. Fails unless every exit
        criterion is met.

        Args:
            list_id: List id
            task_id: Task id
        """
        return await asyncio.to_thread(execute_complete_task, service, list_id, task_id)

    @mcp.tool()
    async def set_task_exit_criteria(
        list_id: str,
        task_id: str,
        exit_criteria: list[str],
    ) -> str:
        """
        Replace a task's exit criteria with new, unmet criteria.

        Args:
            list_id: List id
            task_id: Task id
            exit_criteria: Criterion descriptions (1-500 characters each)
        """
        return await asyncio.to_thread(
            execute_set_exit_criteria, service, list_id, task_id, exit_criteria
        )

    @mcp.tool()
    async def update_exit_criteria(
        list_id: str,
        task_id: str,
        criteria_id: str,
        is_met: bool | None = None,
        notes: str | None = None,
    ) -> str:
        """
        Mark an exit criterion as met or unmet, or attach notes.

        Args:
            list_id: List id
            task_id: Task id
            criteria_id: Criterion id
            is_met: True to mark met, False to clear
            notes: Optional evidence or notes
        """
        return await asyncio.to_thread(
            execute_update_exit_criteria,
            service,
            list_id,
            task_id,
            criteria_id,
            is_met,
            notes,
        )


def run_server(
    transport: str = "stdio",
    port: int = 3000,
    base_path: Path | None = None,
) -> None:
    """
    Run the MCP server.

    Args:
        transport: Transport type - 'stdio' or 'sse'
        port: Port for SSE transport (default 3000)
        base_path: Project root holding the .tasklist directory
    """
    from tasklist.daemon.server import build_service

    if transport not in ("stdio", "sse"):
        raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'sse'.")

    service = build_service(base_path)
    mcp = create_server(service)

    logger.info("Starting task list MCP server with %s transport", transport)

    try:
        if transport == "sse":
            mcp.settings.port = port
        mcp.run(transport=transport)
    finally:
        service.store.close()
