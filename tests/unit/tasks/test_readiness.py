"""
Unit tests for ready and blocked task classification.

Tests cover:
- Ready ordering by priority, creation time and list position
- Limits applied after ordering
- Ready/blocked/terminal partition
- Unresolved dependency ids
"""

from tasklist.core.constants import TaskPriority, TaskStatus
from tasklist.tasks.readiness import (
    get_blocked_tasks,
    get_ready_tasks,
    is_ready,
    next_actions,
)


class TestReadyTasks:
    """Tests for get_ready_tasks."""

    def test_orders_by_priority_then_creation(self, task_list, add_tasks):
        """Test higher priority first, then older tasks."""
        low, high_old, high_new, mid = add_tasks(task_list, "low", "high-old", "high-new", "mid")
        low.priority = TaskPriority.LOW
        high_old.priority = TaskPriority.HIGH
        high_new.priority = TaskPriority.HIGH
        mid.priority = TaskPriority.MEDIUM

        ready = get_ready_tasks(task_list)
        assert [t.title for t in ready] == ["high-old", "high-new", "mid", "low"]

    def test_list_position_breaks_full_ties(self, task_list, add_tasks):
        """Test identical priority and creation time keep list order."""
        a, b = add_tasks(task_list, "A", "B")
        b.created_at = a.created_at
        assert [t.id for t in get_ready_tasks(task_list)] == [a.id, b.id]

    def test_limit_applies_after_sorting(self, task_list, add_tasks):
        """Test the limit keeps the top entries."""
        a, b, c = add_tasks(task_list, "A", "B", "C")
        c.priority = TaskPriority.CRITICAL

        assert [t.id for t in get_ready_tasks(task_list, limit=2)] == [c.id, a.id]

    def test_in_progress_task_is_ready(self, task_list, add_tasks):
        """Test in-progress tasks with met dependencies count as ready."""
        (a,) = add_tasks(task_list, "A")
        a.status = TaskStatus.IN_PROGRESS
        assert is_ready(task_list, a)

    def test_unresolved_dependency_blocks(self, task_list, add_tasks):
        """Test an id outside the list counts as incomplete."""
        (a,) = add_tasks(task_list, "A")
        a.dependencies = ["ghost"]

        assert get_ready_tasks(task_list) == []
        assert get_blocked_tasks(task_list)[0].blocked_by == ["ghost"]


class TestPartition:
    """Tests for the ready/blocked/terminal split."""

    def test_every_task_in_exactly_one_group(self, task_list, add_tasks):
        """Test ready, blocked and terminal tasks partition the list."""
        a, b, c, d, e = add_tasks(task_list, "A", "B", "C", "D", "E")
        a.status = TaskStatus.COMPLETED
        b.dependencies = [a.id]
        c.dependencies = [b.id]
        d.status = TaskStatus.CANCELLED
        e.dependencies = [a.id, c.id]

        ready = {t.id for t in get_ready_tasks(task_list)}
        blocked = {entry.task.id for entry in get_blocked_tasks(task_list)}
        terminal = {t.id for t in task_list.tasks if t.is_terminal()}

        assert ready == {b.id}
        assert blocked == {c.id, e.id}
        assert terminal == {a.id, d.id}
        assert ready | blocked | terminal == set(task_list.task_ids())

    def test_blocked_by_lists_only_incomplete(self, task_list, add_tasks):
        """Test completed dependencies are not reported as blockers."""
        a, b, c = add_tasks(task_list, "A", "B", "C")
        a.status = TaskStatus.COMPLETED
        c.dependencies = [a.id, b.id]

        (entry,) = get_blocked_tasks(task_list)
        assert entry.task.id == c.id
        assert entry.blocked_by == [b.id]
        assert entry.to_dict()["blocked_by"] == [b.id]


class TestNextActions:
    """Tests for next action suggestions."""

    def test_empty_list(self, task_list):
        """Test an empty list suggests adding tasks."""
        assert next_actions(task_list, []) == ["Add tasks to the list to get started"]

    def test_all_completed(self, task_list, add_tasks):
        """Test a finished list says so."""
        (a,) = add_tasks(task_list, "A")
        a.status = TaskStatus.COMPLETED
        assert next_actions(task_list, []) == ["All tasks are completed"]

    def test_suggests_top_ready_task(self, task_list, add_tasks):
        """Test the first suggestion names the top ready task."""
        add_tasks(task_list, "A", "B")
        ready = get_ready_tasks(task_list)
        assert next_actions(task_list, ready)[0] == "Start with 'A' (priority 3)"
