"""
Structural analysis of task dependency graphs.

Computes fan-in/fan-out, dependency depth, bottlenecks and the critical
path of a task list, and assembles them with readiness information into a
single report.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import logging

from tasklist.core.config import DependencyConfig
from tasklist.core.constants import OutputFormat
from tasklist.core.exceptions import ValidationError
from tasklist.tasks.graph import DependencyGraph
from tasklist.tasks.models import TaskList
from tasklist.tasks.readiness import get_blocked_tasks, get_ready_tasks
from tasklist.tasks.renderer import DependencyRenderer, RenderConfig

logger = logging.getLogger(__name__)


@dataclass
class NodeMetrics:
    """Structural metrics for a single task."""

    task_id: str
    fan_in: int = 0
    fan_out: int = 0
    depth: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "fan_in": self.fan_in,
            "fan_out": self.fan_out,
            "depth": self.depth,
        }


@dataclass
class CriticalPath:
    """Longest duration-weighted dependency chain."""

    task_ids: list[str] = field(default_factory=list)
    total_duration: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"task_ids": list(self.task_ids), "total_duration": self.total_duration}


@dataclass
class DependencyAnalysis:
    """Full structural report for a task list."""

    list_id: str
    total_tasks: int = 0
    completed_tasks: int = 0
    ready_tasks: list[str] = field(default_factory=list)
    blocked_tasks: list[str] = field(default_factory=list)
    tasks_with_dependencies: int = 0
    metrics: dict[str, NodeMetrics] = field(default_factory=dict)
    bottlenecks: list[NodeMetrics] = field(default_factory=list)
    critical_path: CriticalPath = field(default_factory=CriticalPath)
    recommendations: list[str] = field(default_factory=list)
    visualization: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "list_id": self.list_id,
            "summary": {
                "total_tasks": self.total_tasks,
                "completed_tasks": self.completed_tasks,
                "ready_tasks": len(self.ready_tasks),
                "blocked_tasks": len(self.blocked_tasks),
                "tasks_with_dependencies": self.tasks_with_dependencies,
            },
            "ready_tasks": list(self.ready_tasks),
            "blocked_tasks": list(self.blocked_tasks),
            "metrics": [m.to_dict() for m in self.metrics.values()],
            "bottlenecks": [b.to_dict() for b in self.bottlenecks],
            "critical_path": self.critical_path.to_dict(),
            "recommendations": list(self.recommendations),
            "visualization": self.visualization,
        }


def compute_metrics(graph: DependencyGraph) -> dict[str, NodeMetrics]:
    """
    Compute fan-in, fan-out and depth for every node.

    Depth is the number of edges on the longest chain of dependencies
    below a task, so tasks with no dependencies have depth 0.
    """
    dependents = graph.dependents()
    metrics = {
        node: NodeMetrics(
            task_id=node,
            fan_in=len(graph.dependencies_of(node)),
            fan_out=len(dependents[node]),
        )
        for node in graph.nodes
    }
    for node in graph.topological_order():
        deps = graph.dependencies_of(node)
        if deps:
            metrics[node].depth = max(metrics[d].depth for d in deps) + 1
    return metrics


def find_bottlenecks(
    graph: DependencyGraph,
    metrics: dict[str, NodeMetrics],
    limit: int,
) -> list[NodeMetrics]:
    """Tasks with dependents, ranked by fan-out descending then list order."""
    candidates = [metrics[n] for n in graph.nodes if metrics[n].fan_out > 0]
    candidates.sort(key=lambda m: -m.fan_out)
    return candidates[:limit]


def compute_critical_path(task_list: TaskList, graph: DependencyGraph) -> CriticalPath:
    """
    Find the longest duration-weighted chain through the graph.

    Each task weighs its estimated duration (missing counts as 0). Chains
    are compared by total duration, then by number of tasks, so between two
    dependencies of equal duration the one with more tasks behind it wins
    even if it is listed later. Only when both duration and task count tie
    does the earliest entry in the task's dependency list win. The chain
    end is chosen the same way, falling back to list order.
    """
    if not graph.nodes:
        return CriticalPath()

    duration = {t.id: t.estimated_duration or 0 for t in task_list.tasks}
    best: dict[str, tuple[int, int]] = {}
    predecessor: dict[str, Optional[str]] = {}

    for node in graph.topological_order():
        chosen: Optional[str] = None
        chosen_score = (0, 0)
        for dep in graph.dependencies_of(node):
            if chosen is None or best[dep] > chosen_score:
                chosen = dep
                chosen_score = best[dep]
        best[node] = (chosen_score[0] + duration[node], chosen_score[1] + 1)
        predecessor[node] = chosen

    end = graph.nodes[0]
    for node in graph.nodes:
        if best[node] > best[end]:
            end = node

    path: list[str] = []
    current: Optional[str] = end
    while current is not None:
        path.append(current)
        current = predecessor[current]
    path.reverse()

    return CriticalPath(task_ids=path, total_duration=best[end][0])


class DependencyAnalyzer:
    """Builds DependencyAnalysis reports for task lists."""

    def __init__(
        self,
        config: Optional[DependencyConfig] = None,
        renderer: Optional[DependencyRenderer] = None,
    ) -> None:
        self._config = config or DependencyConfig()
        self._renderer = renderer or DependencyRenderer()

    def analyze(
        self,
        task_list: TaskList,
        output_format: Optional[str] = None,
    ) -> DependencyAnalysis:
        """
        Analyze a list's dependency structure.

        Args:
            task_list: List to analyze.
            output_format: Optional visualization format (ascii, dot, mermaid, json).

        Returns:
            DependencyAnalysis report.
        """
        graph = DependencyGraph.from_task_list(task_list)
        metrics = compute_metrics(graph)
        ready = get_ready_tasks(task_list)
        blocked = get_blocked_tasks(task_list)

        analysis = DependencyAnalysis(
            list_id=task_list.id,
            total_tasks=task_list.total_items,
            completed_tasks=task_list.completed_items,
            ready_tasks=[t.id for t in ready],
            blocked_tasks=[b.task.id for b in blocked],
            tasks_with_dependencies=sum(1 for t in task_list.tasks if t.dependencies),
            metrics=metrics,
            bottlenecks=find_bottlenecks(graph, metrics, self._config.bottleneck_limit),
            critical_path=compute_critical_path(task_list, graph),
        )
        analysis.recommendations = self._recommend(task_list, analysis)

        if output_format:
            try:
                fmt = OutputFormat(output_format)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown output format: {output_format}",
                    field="format",
                    value=output_format,
                ) from e
            result = self._renderer.render(task_list, RenderConfig(output_format=fmt.value))
            analysis.visualization = result.content

        logger.debug(
            "Analyzed list %s: %d ready, %d blocked, critical path %d",
            task_list.id,
            len(analysis.ready_tasks),
            len(analysis.blocked_tasks),
            analysis.critical_path.total_duration,
        )
        return analysis

    def _recommend(self, task_list: TaskList, analysis: DependencyAnalysis) -> list[str]:
        recommendations = []
        titles = {t.id: t.title for t in task_list.tasks}

        if analysis.total_tasks == 0:
            return ["Add tasks to the list to analyze dependencies"]

        if analysis.ready_tasks:
            recommendations.append(
                f"{len(analysis.ready_tasks)} task(s) are ready; "
                f"start with '{titles[analysis.ready_tasks[0]]}'"
            )
        elif analysis.completed_tasks < analysis.total_tasks:
            recommendations.append(
                "No tasks are ready; finish in-progress work or revisit dependencies"
            )

        for bottleneck in analysis.bottlenecks:
            task = task_list.get_task(bottleneck.task_id)
            if task is not None and not task.is_terminal() and bottleneck.fan_out >= 3:
                recommendations.append(
                    f"'{task.title}' blocks {bottleneck.fan_out} tasks; prioritize it"
                )

        if len(analysis.critical_path.task_ids) > 1:
            recommendations.append(
                f"Critical path spans {len(analysis.critical_path.task_ids)} tasks "
                f"({analysis.critical_path.total_duration} minutes)"
            )

        if analysis.tasks_with_dependencies == 0 and analysis.total_tasks > 1:
            recommendations.append("No dependencies defined; tasks can run in any order")

        return recommendations
