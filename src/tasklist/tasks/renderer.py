"""
Dependency graph renderer.

Renders a task list's dependency graph for display and documentation.

Output Formats:
- ASCII: Plain text sections for terminals and chat replies
- DOT: Graphviz format for static diagrams
- Mermaid: Mermaid syntax for markdown documentation
- JSON: Raw graph data for custom visualization

Edges point from a prerequisite to the task that depends on it. Every task
appears once as a node and every dependency appears exactly once as an edge.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from tasklist.core.constants import OutputFormat, TaskStatus
from tasklist.tasks.models import TaskList
from tasklist.tasks.readiness import get_blocked_tasks, get_ready_tasks


logger = logging.getLogger(__name__)


# Status to node color mapping
STATUS_COLORS = {
    TaskStatus.PENDING: "#f8f9fa",
    TaskStatus.IN_PROGRESS: "#fff3cd",
    TaskStatus.BLOCKED: "#f8d7da",
    TaskStatus.COMPLETED: "#d4edda",
    TaskStatus.CANCELLED: "#e2e3e5",
}

STATUS_ICONS = {
    TaskStatus.PENDING: "[ ]",
    TaskStatus.IN_PROGRESS: "[~]",
    TaskStatus.BLOCKED: "[!]",
    TaskStatus.COMPLETED: "[x]",
    TaskStatus.CANCELLED: "[-]",
}


@dataclass(frozen=True)
class RenderConfig:
    """
    Configuration for graph rendering.

    Attributes:
        output_format: Output format (ascii, dot, mermaid, json)
        color_by_status: Color nodes by task status
        include_durations: Show estimated durations in labels
        max_label_length: Maximum node label length
        layout_direction: Direction for DOT (TB, LR, BT, RL)
    """

    output_format: str = OutputFormat.ASCII.value
    color_by_status: bool = True
    include_durations: bool = False
    max_label_length: int = 40
    layout_direction: str = "TB"


@dataclass
class RenderResult:
    """
    Result of graph rendering.

    Attributes:
        content: Rendered output string
        format: Output format used
        node_count: Number of nodes rendered
        edge_count: Number of edges rendered
        warnings: Any warnings during rendering
    """

    content: str = ""
    format: str = OutputFormat.ASCII.value
    node_count: int = 0
    edge_count: int = 0
    warnings: list[str] = field(default_factory=list)


class DependencyRenderer:
    """
    Renders task dependency graphs.

    Example:
        renderer = DependencyRenderer()
        result = renderer.render(task_list, RenderConfig(output_format="dot"))
        print(result.content)
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self._config = config or RenderConfig()

    @property
    def config(self) -> RenderConfig:
        """Return current configuration."""
        return self._config

    def render(
        self,
        task_list: TaskList,
        config: RenderConfig | None = None,
    ) -> RenderResult:
        """
        Render the list's graph in the configured format.

        Args:
            task_list: List to render
            config: Optional override configuration

        Returns:
            RenderResult with formatted output

        Raises:
            ValueError: If the output format is unknown
        """
        cfg = config or self._config
        output_format = OutputFormat(cfg.output_format)

        nodes, edges, warnings = self._extract_graph_data(task_list, cfg)

        if output_format == OutputFormat.JSON:
            result = self._render_json(nodes, edges)
        elif output_format == OutputFormat.DOT:
            result = self._render_dot(nodes, edges, cfg)
        elif output_format == OutputFormat.MERMAID:
            result = self._render_mermaid(nodes, edges, cfg)
        else:
            result = self._render_ascii(task_list, nodes, edges)

        result.warnings.extend(warnings)
        logger.debug(
            "Rendered list %s as %s (%d nodes, %d edges)",
            task_list.id,
            result.format,
            result.node_count,
            result.edge_count,
        )
        return result

    def _truncate(self, text: str, config: RenderConfig) -> str:
        if len(text) <= config.max_label_length:
            return text
        return text[: max(config.max_label_length - 3, 0)] + "..."

    def _extract_graph_data(
        self,
        task_list: TaskList,
        config: RenderConfig,
    ) -> tuple[list[dict], list[dict], list[str]]:
        """Build node and edge records from the list."""
        nodes = []
        edges = []
        warnings = []
        known = set(task_list.task_ids())

        for task in task_list.tasks:
            label = self._truncate(task.title, config)
            if config.include_durations and task.estimated_duration is not None:
                label = f"{label} ({task.estimated_duration}m)"
            nodes.append({
                "id": task.id,
                "label": label,
                "status": task.status.value,
                "priority": task.priority,
                "color": STATUS_COLORS[task.status] if config.color_by_status else "#ffffff",
            })
            for dep_id in task.dependencies:
                if dep_id not in known:
                    warnings.append(f"Task {task.id} references unknown dependency {dep_id}")
                    continue
                edges.append({"source": dep_id, "target": task.id})

        return nodes, edges, warnings

    def _render_json(self, nodes: list[dict], edges: list[dict]) -> RenderResult:
        """Render as JSON data."""
        data = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "node_count": len(nodes),
            "edge_count": len(edges),
            "nodes": nodes,
            "edges": edges,
        }
        return RenderResult(
            content=json.dumps(data, indent=2),
            format=OutputFormat.JSON.value,
            node_count=len(nodes),
            edge_count=len(edges),
        )

    def _render_dot(
        self,
        nodes: list[dict],
        edges: list[dict],
        config: RenderConfig,
    ) -> RenderResult:
        """Render as Graphviz DOT format."""
        lines = [
            'digraph TaskDAG {',
            f'    rankdir={config.layout_direction};',
            '    node [shape=box, style="rounded,filled"];',
            '',
        ]

        for node in nodes:
            label = node["label"].replace("\\", "\\\\").replace('"', '\\"')
            lines.append(f'    "{node["id"]}" [label="{label}", fillcolor="{node["color"]}"];')

        lines.append('')

        for edge in edges:
            lines.append(f'    "{edge["source"]}" -> "{edge["target"]}";')

        lines.append('}')

        return RenderResult(
            content='\n'.join(lines),
            format=OutputFormat.DOT.value,
            node_count=len(nodes),
            edge_count=len(edges),
        )

    def _render_mermaid(
        self,
        nodes: list[dict],
        edges: list[dict],
        config: RenderConfig,
    ) -> RenderResult:
        """Render as Mermaid diagram syntax."""
        direction = {"TB": "TD", "LR": "LR", "BT": "BT", "RL": "RL"}.get(
            config.layout_direction, "TD"
        )

        # Mermaid ids must be short and identifier-safe, so tasks become T1..Tn.
        aliases = {node["id"]: f"T{i}" for i, node in enumerate(nodes, start=1)}

        lines = [f'graph {direction}']

        for node in nodes:
            label = node["label"].replace('"', "'")
            lines.append(f'    {aliases[node["id"]]}["{label}"]')

        for edge in edges:
            lines.append(f'    {aliases[edge["source"]]} --> {aliases[edge["target"]]}')

        if config.color_by_status:
            for status, color in STATUS_COLORS.items():
                lines.append(f'    classDef {status.value} fill:{color}')
            for node in nodes:
                lines.append(f'    class {aliases[node["id"]]} {node["status"]}')

        return RenderResult(
            content='\n'.join(lines),
            format=OutputFormat.MERMAID.value,
            node_count=len(nodes),
            edge_count=len(edges),
        )

    def _render_ascii(
        self,
        task_list: TaskList,
        nodes: list[dict],
        edges: list[dict],
    ) -> RenderResult:
        """Render as plain text sections."""
        labels = {node["id"]: node["label"] for node in nodes}
        lines = [
            f"Task list: {task_list.title}",
            f"Progress: {task_list.completed_items}/{task_list.total_items} "
            f"({task_list.progress}%)",
            "",
        ]

        ready = get_ready_tasks(task_list)
        lines.append("READY TO START:")
        if ready:
            for task in ready:
                lines.append(f"  {STATUS_ICONS[task.status]} {labels[task.id]} (priority {task.priority})")
        else:
            lines.append("  (none)")
        lines.append("")

        blocked = get_blocked_tasks(task_list)
        lines.append("BLOCKED TASKS:")
        if blocked:
            for entry in blocked:
                waiting = ", ".join(labels.get(d, d) for d in entry.blocked_by)
                lines.append(f"  {STATUS_ICONS[entry.task.status]} {labels[entry.task.id]} <- waiting on: {waiting}")
        else:
            lines.append("  (none)")
        lines.append("")

        completed = [t for t in task_list.tasks if t.is_completed()]
        lines.append("COMPLETED:")
        if completed:
            for task in completed:
                lines.append(f"  {STATUS_ICONS[task.status]} {labels[task.id]}")
        else:
            lines.append("  (none)")
        lines.append("")

        cancelled = [t for t in task_list.tasks if t.status == TaskStatus.CANCELLED]
        lines.append("CANCELLED:")
        if cancelled:
            for task in cancelled:
                lines.append(f"  {STATUS_ICONS[task.status]} {labels[task.id]}")
        else:
            lines.append("  (none)")
        lines.append("")

        lines.append("DEPENDENCY RELATIONSHIPS:")
        if edges:
            for edge in edges:
                lines.append(f"  {labels[edge['source']]} --> {labels[edge['target']]}")
        else:
            lines.append("  (none)")

        return RenderResult(
            content='\n'.join(lines),
            format=OutputFormat.ASCII.value,
            node_count=len(nodes),
            edge_count=len(edges),
        )
