"""
MCP Tools - Model-controlled actions for task lists.

Tools are invoked by the AI model to perform actions:
- create_list, get_list, list_all_lists, delete_list: Manage task lists
- add_task, update_task, remove_task: Build task lists
- set_task_dependencies: Wire tasks into a dependency graph
- get_ready_tasks, get_blocked_tasks: Find what can start now
- analyze_task_dependencies: Critical path, bottlenecks and DAG views
- set_task_status, complete_task: Lifecycle
- set_task_exit_criteria, update_exit_criteria: Completion gates
"""

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

__all__ = [
    "execute_create_list",
    "execute_get_list",
    "execute_list_lists",
    "execute_delete_list",
    "execute_add_task",
    "execute_update_task",
    "execute_remove_task",
    "execute_set_dependencies",
    "execute_get_ready_tasks",
    "execute_get_blocked_tasks",
    "execute_analyze_dependencies",
    "execute_set_task_status",
    "execute_complete_task",
    "execute_set_exit_criteria",
    "execute_update_exit_criteria",
]
