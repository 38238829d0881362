"""
Unit tests for task list data models.

Tests cover:
- Task and list creation defaults
- Aggregates (total, completed, progress)
- Task removal cascade
- Validation
- Serialization
"""

import pytest

from tasklist.core.constants import TaskPriority, TaskStatus
from tasklist.core.exceptions import TaskNotFoundError
from tasklist.tasks.models import (
    ExitCriteria,
    Task,
    TaskList,
    generate_id,
    validate_id,
)


class TestIdGeneration:
    """Tests for id helpers."""

    def test_generated_ids_are_valid_and_unique(self):
        """Test ids are UUIDs and do not repeat."""
        ids = {generate_id() for _ in range(100)}
        assert len(ids) == 100
        assert all(validate_id(i) for i in ids)

    def test_rejects_malformed_id(self):
        """Test malformed ids fail validation."""
        assert not validate_id("task_123")


class TestTaskDefaults:
    """Tests for task creation."""

    def test_new_task_is_pending_without_dependencies(self):
        """Test a new task starts pending with no dependencies or criteria."""
        task = Task(title="Write docs")

        assert task.status == TaskStatus.PENDING
        assert task.dependencies == []
        assert task.exit_criteria == []
        assert task.completed_at is None
        assert task.priority == TaskPriority.MEDIUM

    def test_status_string_is_normalized(self):
        """Test string statuses become enums."""
        task = Task(title="x", status="in_progress")
        assert task.status is TaskStatus.IN_PROGRESS

    def test_priority_enum_is_normalized(self):
        """Test priority enums are stored as plain ints."""
        task = Task(title="x", priority=TaskPriority.CRITICAL)
        assert task.priority == 5
        assert type(task.priority) is int


class TestTaskValidation:
    """Tests for Task.validate."""

    def test_valid_task(self):
        """Test a well-formed task has no errors."""
        assert Task(title="Ship it", tags=["release"]).validate() == []

    def test_empty_title(self):
        """Test an empty title is reported."""
        assert "Task title is required" in Task(title="  ").validate()

    def test_priority_out_of_range(self):
        """Test priorities outside 1-5 are reported."""
        errors = Task(title="x", priority=9).validate()
        assert any("Priority" in e for e in errors)

    def test_negative_duration(self):
        """Test negative durations are reported."""
        errors = Task(title="x", estimated_duration=-5).validate()
        assert "Estimated duration cannot be negative" in errors

    def test_invalid_tag(self):
        """Test tags with spaces are reported."""
        errors = Task(title="x", tags=["has space"]).validate()
        assert any("Invalid tag" in e for e in errors)


class TestTaskListAggregates:
    """Tests for derived list counters."""

    def test_empty_list(self):
        """Test an empty list reports zero progress."""
        task_list = TaskList(title="Empty")
        assert task_list.total_items == 0
        assert task_list.completed_items == 0
        assert task_list.progress == 0

    def test_counts_follow_task_statuses(self):
        """Test aggregates are recomputed from tasks."""
        task_list = TaskList(title="L")
        task_list.add_task(Task(title="a", status=TaskStatus.COMPLETED))
        task_list.add_task(Task(title="b"))
        task_list.add_task(Task(title="c", status=TaskStatus.CANCELLED))

        assert task_list.total_items == 3
        assert task_list.completed_items == 1
        assert task_list.progress == 33

        task_list.tasks[1].status = TaskStatus.COMPLETED
        assert task_list.completed_items == 2
        assert task_list.progress == 67

    def test_touch_bumps_version(self):
        """Test touch increments the version."""
        task_list = TaskList(title="L")
        task_list.touch()
        task_list.touch()
        assert task_list.version == 3


class TestTaskRemoval:
    """Tests for TaskList.remove_task."""

    def test_remove_strips_dependency_references(self):
        """Test removing a task drops it from every dependency list."""
        task_list = TaskList(title="L")
        a = task_list.add_task(Task(title="a"))
        b = task_list.add_task(Task(title="b", dependencies=[a.id]))
        c = task_list.add_task(Task(title="c", dependencies=[a.id, b.id]))

        affected = task_list.remove_task(a.id)

        assert task_list.get_task(a.id) is None
        assert b.dependencies == []
        assert c.dependencies == [b.id]
        assert affected == [b.id, c.id]

    def test_remove_unknown_task(self):
        """Test removing an unknown id raises."""
        task_list = TaskList(title="L")
        with pytest.raises(TaskNotFoundError):
            task_list.remove_task("missing")


class TestListValidation:
    """Tests for TaskList.validate."""

    def test_bad_project_tag(self):
        """Test project tags must be lowercase slugs."""
        task_list = TaskList(title="L", project_tag="My Project")
        assert task_list.validate()

    def test_valid_list(self):
        """Test a default list validates."""
        assert TaskList(title="L", project_tag="web-app").validate() == []


class TestSerialization:
    """Tests for to_dict/from_dict."""

    def test_list_round_trip_preserves_graph(self):
        """Test lists survive a dict round trip with dependencies and criteria."""
        task_list = TaskList(title="L", project_tag="proj")
        a = task_list.add_task(Task(title="a", estimated_duration=30))
        b = task_list.add_task(Task(title="b", dependencies=[a.id]))
        b.exit_criteria.append(ExitCriteria(description="Tests pass"))

        restored = TaskList.from_dict(task_list.to_dict())

        assert restored.id == task_list.id
        assert restored.version == task_list.version
        assert restored.task_ids() == [a.id, b.id]
        assert restored.get_task(b.id).dependencies == [a.id]
        assert restored.get_task(b.id).exit_criteria[0].description == "Tests pass"
        assert restored.get_task(a.id).estimated_duration == 30
        assert restored.created_at == task_list.created_at

    def test_aggregates_are_serialized(self):
        """Test derived counters appear in the dictionary form."""
        task_list = TaskList(title="L")
        task_list.add_task(Task(title="a", status=TaskStatus.COMPLETED))
        data = task_list.to_dict()
        assert data["total_items"] == 1
        assert data["completed_items"] == 1
        assert data["progress"] == 100
