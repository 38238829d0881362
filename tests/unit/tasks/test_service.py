"""
Unit tests for TaskListService.

Tests cover:
- List lifecycle
- Adding tasks with dependencies and exit criteria
- Cascade on task removal
- Rejected mutations leave storage untouched
- Ready/blocked queries and analysis through storage
- Serialized concurrent mutations
"""

import threading

import pytest

from tasklist.core.constants import TaskStatus
from tasklist.core.exceptions import (
    CircularDependencyError,
    ExitCriteriaNotMetError,
    ListNotFoundError,
    TaskNotFoundError,
    ValidationError,
)


@pytest.fixture
def list_id(service):
    return service.create_list("Release", project_tag="web").id


class TestLists:
    """Tests for list lifecycle."""

    def test_create_and_get(self, service, list_id):
        """Test a created list is persisted empty at version 1."""
        task_list = service.get_list(list_id)
        assert task_list.title == "Release"
        assert task_list.version == 1
        assert task_list.tasks == []

    def test_invalid_project_tag(self, service):
        """Test invalid lists are refused."""
        with pytest.raises(ValidationError):
            service.create_list("Bad", project_tag="Not Valid")

    def test_list_and_delete(self, service, list_id):
        """Test summaries and deletion."""
        assert [s["id"] for s in service.list_lists()] == [list_id]
        assert service.delete_list(list_id)
        with pytest.raises(ListNotFoundError):
            service.get_list(list_id)


class TestAddTask:
    """Tests for add_task."""

    def test_add_task_persists(self, service, list_id):
        """Test a new task is stored pending and bumps the version."""
        task = service.add_task(list_id, "Write notes", priority=5, tags=["docs"])

        task_list = service.get_list(list_id)
        assert task_list.get_task(task.id).priority == 5
        assert task_list.get_task(task.id).status == TaskStatus.PENDING
        assert task_list.version == 2

    def test_add_with_dependencies_and_criteria(self, service, list_id):
        """Test dependencies and criteria are applied on creation."""
        a = service.add_task(list_id, "A")
        b = service.add_task(list_id, "B", dependencies=[a.id], exit_criteria=["Reviewed"])

        stored = service.get_list(list_id).get_task(b.id)
        assert stored.dependencies == [a.id]
        assert [c.description for c in stored.exit_criteria] == ["Reviewed"]

    def test_invalid_dependency_persists_nothing(self, service, list_id):
        """Test a rejected dependency leaves the list unchanged."""
        with pytest.raises(ValidationError):
            service.add_task(list_id, "A", dependencies=["missing"])

        task_list = service.get_list(list_id)
        assert task_list.tasks == []
        assert task_list.version == 1

    def test_blank_title(self, service, list_id):
        """Test blank titles are refused."""
        with pytest.raises(ValidationError):
            service.add_task(list_id, "   ")

    def test_missing_list(self, service):
        """Test adding to an unknown list raises ListNotFoundError."""
        with pytest.raises(ListNotFoundError):
            service.add_task("missing", "A")


class TestDependencies:
    """Tests for dependency operations through storage."""

    def test_cycle_rejection_is_not_persisted(self, service, list_id):
        """Test a refused cycle leaves the stored graph and version as they were."""
        a = service.add_task(list_id, "A")
        b = service.add_task(list_id, "B", dependencies=[a.id])
        c = service.add_task(list_id, "C", dependencies=[b.id])
        version = service.get_list(list_id).version

        with pytest.raises(CircularDependencyError) as exc_info:
            service.set_dependencies(list_id, a.id, [c.id])

        assert exc_info.value.cycle == [a.id, c.id, b.id, a.id]
        stored = service.get_list(list_id)
        assert stored.get_task(a.id).dependencies == []
        assert stored.version == version

    def test_validate_dependencies_dry_run(self, service, list_id):
        """Test dry runs do not write."""
        a = service.add_task(list_id, "A")
        b = service.add_task(list_id, "B")
        version = service.get_list(list_id).version

        result = service.validate_dependencies(list_id, b.id, [a.id])

        assert result.is_valid
        assert service.get_list(list_id).version == version
        assert service.get_list(list_id).get_task(b.id).dependencies == []

    def test_remove_task_cascades(self, service, list_id):
        """Test removing a task strips it from dependents."""
        a = service.add_task(list_id, "A")
        b = service.add_task(list_id, "B", dependencies=[a.id])

        affected = service.remove_task(list_id, a.id)

        assert affected == [b.id]
        stored = service.get_list(list_id)
        assert stored.task_ids() == [b.id]
        assert stored.get_task(b.id).dependencies == []

    def test_remove_missing_task(self, service, list_id):
        """Test removing an unknown task raises TaskNotFoundError."""
        with pytest.raises(TaskNotFoundError):
            service.remove_task(list_id, "missing")


class TestReadiness:
    """Tests for ready and blocked queries."""

    def test_ready_progression(self, service, list_id):
        """Test completing tasks through the service releases dependents."""
        a = service.add_task(list_id, "A")
        b = service.add_task(list_id, "B", dependencies=[a.id])

        result = service.get_ready_tasks(list_id)
        assert [t.id for t in result.tasks] == [a.id]
        assert result.blocked_tasks == 1

        service.set_task_status(list_id, a.id, TaskStatus.IN_PROGRESS)
        service.complete_task(list_id, a.id)

        assert [t.id for t in service.get_ready_tasks(list_id).tasks] == [b.id]
        assert service.get_blocked_tasks(list_id) == []
        assert service.get_list(list_id).get_task(a.id).completed_at is not None

    @pytest.mark.parametrize("limit", [0, 51])
    def test_limit_bounds(self, service, list_id, limit):
        """Test out-of-range limits are refused."""
        with pytest.raises(ValidationError):
            service.get_ready_tasks(list_id, limit=limit)

    def test_analysis(self, service, list_id):
        """Test analysis runs against the stored list."""
        a = service.add_task(list_id, "A", estimated_duration=30)
        b = service.add_task(list_id, "B", estimated_duration=60, dependencies=[a.id])
        c = service.add_task(list_id, "C", estimated_duration=45, dependencies=[b.id])

        analysis = service.analyze_dependencies(list_id, output_format="dot")

        assert analysis.critical_path.task_ids == [a.id, b.id, c.id]
        assert analysis.critical_path.total_duration == 135
        assert analysis.visualization.startswith("digraph")


class TestExitCriteria:
    """Tests for criteria operations through storage."""

    def test_gate_blocks_completion_until_met(self, service, list_id):
        """Test completion waits for every criterion."""
        task = service.add_task(list_id, "Ship", exit_criteria=["Tests pass", "Docs updated"])
        service.set_task_status(list_id, task.id, "in_progress")
        first, second = service.get_list(list_id).get_task(task.id).exit_criteria

        result = service.update_exit_criterion(list_id, task.id, first.id, is_met=True)
        assert result.progress == 50

        with pytest.raises(ExitCriteriaNotMetError):
            service.complete_task(list_id, task.id)
        assert service.get_list(list_id).get_task(task.id).status == TaskStatus.IN_PROGRESS

        service.update_exit_criterion(list_id, task.id, second.id, is_met=True, notes="done")
        completed = service.complete_task(list_id, task.id)
        assert completed.status == TaskStatus.COMPLETED

    def test_set_exit_criteria(self, service, list_id):
        """Test replacing criteria returns warnings and progress."""
        task = service.add_task(list_id, "Ship")
        result = service.set_exit_criteria(list_id, task.id, ["ok", "Release notes"])

        assert result.progress == 0
        assert result.warnings
        assert "(0/2 met)" in service.format_exit_criteria(list_id, task.id)


class TestConcurrency:
    """Tests for serialized mutations."""

    def test_parallel_adds_all_land(self, service, list_id):
        """Test ten concurrent adds commit ten versions."""
        errors = []

        def worker(i):
            try:
                service.add_task(list_id, f"task-{i}")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        task_list = service.get_list(list_id)
        assert errors == []
        assert task_list.total_items == 10
        assert task_list.version == 11

    def test_unknown_lists_leave_no_locks(self, service, list_id):
        """Test mutations against missing lists do not accumulate locks."""
        service.add_task(list_id, "kept")

        for i in range(200):
            with pytest.raises(ListNotFoundError):
                service.set_dependencies(f"nope-{i}", "task", [])

        assert set(service._locks) == {list_id}

    def test_delete_releases_lock(self, service, list_id):
        """Test deleting a list, or a missing one, drops its lock."""
        service.add_task(list_id, "gone")

        assert service.delete_list(list_id) is True
        assert service.delete_list("missing") is False
        assert service._locks == {}
