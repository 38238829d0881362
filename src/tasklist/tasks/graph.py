"""
Dependency graph view and cycle detection.

A task list's graph has one node per task and one edge from each task to
every task it depends on. Every committed graph is acyclic, so the cycle
detector is only ever asked whether a *proposed* edge set would close a
cycle.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Optional
import logging

from tasklist.core.exceptions import InvariantViolationError
from tasklist.tasks.models import TaskList

logger = logging.getLogger(__name__)

_VISITING = 1
_VISITED = 2


@dataclass
class DependencyGraph:
    """Adjacency view over a task list: task id -> dependency ids."""

    nodes: list[str] = field(default_factory=list)
    edges: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_task_list(
        cls,
        task_list: TaskList,
        overrides: Optional[dict[str, list[str]]] = None,
    ) -> "DependencyGraph":
        """
        Build the graph for a list.

        Args:
            task_list: Source list.
            overrides: Replacement dependency lists keyed by task id, used to
                evaluate a proposed update without mutating the list.

        Dependency ids that do not resolve to a task in the list are dropped.
        """
        overrides = overrides or {}
        nodes = task_list.task_ids()
        known = set(nodes)
        edges: dict[str, list[str]] = {}
        for task in task_list.tasks:
            deps = overrides.get(task.id, task.dependencies)
            edges[task.id] = [d for d in deps if d in known]
        return cls(nodes=nodes, edges=edges)

    def dependencies_of(self, node: str) -> list[str]:
        return self.edges.get(node, [])

    def dependents(self) -> dict[str, list[str]]:
        """Inverted adjacency: task id -> ids of tasks that depend on it."""
        inverted: dict[str, list[str]] = {n: [] for n in self.nodes}
        for node in self.nodes:
            for dep in self.edges.get(node, []):
                inverted[dep].append(node)
        return inverted

    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.edges.values())

    def topological_order(self) -> list[str]:
        """
        Order nodes so every dependency precedes its dependents.

        Uses Kahn's algorithm; ties are broken by list order.

        Raises:
            InvariantViolationError: If the graph contains a cycle.
        """
        position = {n: i for i, n in enumerate(self.nodes)}
        in_degree = {n: len(self.edges.get(n, [])) for n in self.nodes}
        dependents = self.dependents()

        queue = deque(n for n in self.nodes if in_degree[n] == 0)
        order: list[str] = []

        while queue:
            node = queue.popleft()
            order.append(node)
            released = []
            for dependent in dependents[node]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    released.append(dependent)
            queue.extend(sorted(released, key=position.__getitem__))

        if len(order) != len(self.nodes):
            cycle = find_cycle(self) or []
            raise InvariantViolationError(
                "Dependency graph contains a cycle",
                details={"cycle": cycle},
            )
        return order


def find_cycle(
    graph: DependencyGraph,
    start: Optional[Iterable[str]] = None,
) -> Optional[list[str]]:
    """
    Find a cycle with an iterative depth-first search.

    Args:
        graph: Graph to search.
        start: Nodes to try first; the rest of the graph is covered after.

    Returns:
        The cycle as an ordered path whose first and last ids are equal,
        or None if the graph is acyclic.
    """
    state: dict[str, int] = {}
    roots = list(start or []) + graph.nodes

    for root in roots:
        if root not in graph.edges or root in state:
            continue

        path: list[str] = [root]
        stack: list[tuple[str, int]] = [(root, 0)]
        state[root] = _VISITING

        while stack:
            node, index = stack[-1]
            deps = graph.edges.get(node, [])

            if index >= len(deps):
                stack.pop()
                path.pop()
                state[node] = _VISITED
                continue

            stack[-1] = (node, index + 1)
            dep = deps[index]
            dep_state = state.get(dep)

            if dep_state == _VISITING:
                return path[path.index(dep):] + [dep]
            if dep_state is None:
                state[dep] = _VISITING
                path.append(dep)
                stack.append((dep, 0))

    return None


def would_create_cycle(
    task_list: TaskList,
    task_id: str,
    proposed_dependencies: list[str],
) -> tuple[bool, list[str]]:
    """
    Check whether replacing a task's dependencies would close a cycle.

    Pure query; the list is not modified.

    Returns:
        Tuple of (has_cycle, cycle_path).
    """
    graph = DependencyGraph.from_task_list(
        task_list, overrides={task_id: list(proposed_dependencies)}
    )
    cycle = find_cycle(graph, start=[task_id])
    if cycle:
        logger.debug("Proposed dependencies for %s close cycle %s", task_id, cycle)
        return True, cycle
    return False, []


def assert_acyclic(task_list: TaskList) -> None:
    """
    Verify a list's committed graph is acyclic.

    Raises:
        InvariantViolationError: If a cycle is found.
    """
    cycle = find_cycle(DependencyGraph.from_task_list(task_list))
    if cycle:
        logger.critical("Task list %s holds a dependency cycle: %s", task_list.id, cycle)
        raise InvariantViolationError(
            "Committed dependency graph contains a cycle",
            details={"list_id": task_list.id, "cycle": cycle},
        )
