"""
Unit tests for dependency analysis.

Tests cover:
- Fan-in, fan-out and depth metrics
- Bottleneck ranking
- Critical path computation and tie-breaking
- Analyzer report and visualization format handling
"""

import random

import pytest

from tasklist.core.config import DependencyConfig
from tasklist.core.constants import TaskStatus
from tasklist.core.exceptions import ValidationError
from tasklist.tasks.analysis import (
    DependencyAnalyzer,
    compute_critical_path,
    compute_metrics,
    find_bottlenecks,
)
from tasklist.tasks.graph import DependencyGraph


def _graph(task_list):
    return DependencyGraph.from_task_list(task_list)


class TestMetrics:
    """Tests for structural metrics."""

    def test_fan_in_fan_out_depth(self, task_list, add_tasks):
        """Test metrics on a diamond."""
        a, b, c, d = add_tasks(task_list, "A", "B", "C", "D")
        b.dependencies = [a.id]
        c.dependencies = [a.id]
        d.dependencies = [b.id, c.id]

        metrics = compute_metrics(_graph(task_list))

        assert (metrics[a.id].fan_in, metrics[a.id].fan_out, metrics[a.id].depth) == (0, 2, 0)
        assert (metrics[b.id].fan_in, metrics[b.id].fan_out, metrics[b.id].depth) == (1, 1, 1)
        assert (metrics[d.id].fan_in, metrics[d.id].fan_out, metrics[d.id].depth) == (2, 0, 2)

    def test_bottlenecks_ranked_by_fan_out(self, task_list, add_tasks):
        """Test bottlenecks exclude leaves and honor the limit."""
        a, b, c, d, e = add_tasks(task_list, "A", "B", "C", "D", "E")
        c.dependencies = [b.id]
        d.dependencies = [a.id, b.id]
        e.dependencies = [a.id, b.id]

        graph = _graph(task_list)
        metrics = compute_metrics(graph)

        ranked = find_bottlenecks(graph, metrics, limit=5)
        assert [m.task_id for m in ranked] == [b.id, a.id]
        assert [m.task_id for m in find_bottlenecks(graph, metrics, limit=1)] == [b.id]


class TestCriticalPath:
    """Tests for the duration-weighted longest path."""

    def test_chain_durations(self, task_list, add_tasks):
        """Test A(30) -> B(60) -> C(45) gives path [A, B, C] of 135."""
        a, b, c = add_tasks(task_list, "A", "B", "C", A=30, B=60, C=45)
        b.dependencies = [a.id]
        c.dependencies = [b.id]

        path = compute_critical_path(task_list, _graph(task_list))

        assert path.task_ids == [a.id, b.id, c.id]
        assert path.total_duration == 135

    def test_longest_branch_wins(self, task_list, add_tasks):
        """Test the heavier branch of a fork is chosen."""
        a, b, c, d = add_tasks(task_list, "A", "B", "C", "D", A=10, B=5, C=50, D=10)
        b.dependencies = [a.id]
        c.dependencies = [a.id]
        d.dependencies = [b.id, c.id]

        path = compute_critical_path(task_list, _graph(task_list))
        assert path.task_ids == [a.id, c.id, d.id]
        assert path.total_duration == 70

    def test_tie_goes_to_earliest_dependency(self, task_list, add_tasks):
        """Test equal-weight dependencies resolve to the first listed."""
        a, b, c = add_tasks(task_list, "A", "B", "C", A=10, B=10, C=10)
        c.dependencies = [b.id, a.id]

        path = compute_critical_path(task_list, _graph(task_list))
        assert path.task_ids == [b.id, c.id]
        assert path.total_duration == 20

    def test_missing_durations_prefer_longer_chain(self, task_list, add_tasks):
        """Test zero-duration chains still favor more tasks."""
        a, b, c = add_tasks(task_list, "A", "B", "C")
        b.dependencies = [a.id]

        path = compute_critical_path(task_list, _graph(task_list))
        assert path.task_ids == [a.id, b.id]
        assert path.total_duration == 0

    def test_empty_list(self, task_list):
        """Test an empty list has an empty path."""
        path = compute_critical_path(task_list, _graph(task_list))
        assert path.task_ids == []
        assert path.total_duration == 0


class TestDependencyAnalyzer:
    """Tests for the full report."""

    def test_report_contents(self, task_list, add_tasks):
        """Test the report combines readiness, metrics and the critical path."""
        a, b, c = add_tasks(task_list, "A", "B", "C", A=30, B=60, C=45)
        a.status = TaskStatus.COMPLETED
        b.dependencies = [a.id]
        c.dependencies = [b.id]

        analysis = DependencyAnalyzer().analyze(task_list)

        assert analysis.total_tasks == 3
        assert analysis.completed_tasks == 1
        assert analysis.ready_tasks == [b.id]
        assert analysis.blocked_tasks == [c.id]
        assert analysis.tasks_with_dependencies == 2
        assert analysis.critical_path.total_duration == 135
        assert analysis.visualization is None

        data = analysis.to_dict()
        assert data["summary"]["ready_tasks"] == 1
        assert data["critical_path"]["task_ids"] == [a.id, b.id, c.id]
        assert any("ready" in r for r in data["recommendations"])

    def test_bottleneck_limit_from_config(self, task_list, add_tasks):
        """Test the bottleneck count follows configuration."""
        a, b, c = add_tasks(task_list, "A", "B", "C")
        c.dependencies = [a.id, b.id]

        analysis = DependencyAnalyzer(DependencyConfig(bottleneck_limit=1)).analyze(task_list)
        assert len(analysis.bottlenecks) == 1

    def test_visualization_included(self, task_list, add_tasks):
        """Test a format request attaches rendered output."""
        a, b = add_tasks(task_list, "A", "B")
        b.dependencies = [a.id]

        analysis = DependencyAnalyzer().analyze(task_list, output_format="mermaid")
        assert analysis.visualization.startswith("graph TD")

    def test_invalid_format(self, task_list):
        """Test unknown formats raise ValidationError."""
        with pytest.raises(ValidationError):
            DependencyAnalyzer().analyze(task_list, output_format="svg")

    def test_empty_list_recommendation(self, task_list):
        """Test an empty list recommends adding tasks."""
        analysis = DependencyAnalyzer().analyze(task_list)
        assert analysis.recommendations == ["Add tasks to the list to analyze dependencies"]


def _longest_chain(task_list):
    """Longest duration over every dependency chain, by exhaustive search."""
    by_id = {t.id: t for t in task_list.tasks}

    def walk(task_id):
        task = by_id[task_id]
        own = task.estimated_duration or 0
        return own + max((walk(dep) for dep in task.dependencies), default=0)

    return max((walk(t.id) for t in task_list.tasks), default=0)


def _random_dag(task_list, add_tasks, rng, size):
    titles = [f"T{i}" for i in range(size)]
    durations = {t: rng.randint(0, 60) for t in titles}
    tasks = add_tasks(task_list, *titles, **durations)
    for i, task in enumerate(tasks[1:], start=1):
        task.dependencies = [t.id for t in rng.sample(tasks[:i], rng.randint(0, min(i, 3)))]
    return durations


class TestCriticalPathBound:
    """Property tests: the critical path is a real chain and no chain is longer."""

    def test_bounds_on_random_dags(self, task_list, add_tasks):
        """Test max duration <= critical path <= total duration."""
        durations = _random_dag(task_list, add_tasks, random.Random(42), 15)

        path = compute_critical_path(task_list, _graph(task_list))

        assert max(durations.values()) <= path.total_duration <= sum(durations.values())
        for dep, task in zip(path.task_ids, path.task_ids[1:]):
            assert dep in task_list.get_task(task).dependencies

    @pytest.mark.parametrize("seed", range(25))
    def test_matches_exhaustive_search(self, task_list, add_tasks, seed):
        """Test the reported path sums its own durations and is the longest."""
        rng = random.Random(seed)
        _random_dag(task_list, add_tasks, rng, rng.randint(1, 8))

        path = compute_critical_path(task_list, _graph(task_list))

        own = sum(task_list.get_task(t).estimated_duration or 0 for t in path.task_ids)
        assert path.total_duration == own
        assert path.total_duration == _longest_chain(task_list)
        for dep, task in zip(path.task_ids, path.task_ids[1:]):
            assert dep in task_list.get_task(task).dependencies
