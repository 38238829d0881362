"""
Unit tests for the task status state machine.

Tests cover:
- Every edge of the transition table
- Terminal states
- Completion gated by exit criteria
- completed_at stamping
"""

import pytest

from tasklist.core.constants import VALID_STATUS_TRANSITIONS, TaskStatus
from tasklist.core.exceptions import (
    ExitCriteriaNotMetError,
    StatusTransitionError,
    ValidationError,
)
from tasklist.tasks.models import Task


ALL_EDGES = [
    (source, target)
    for source in TaskStatus
    for target in TaskStatus
    if source != target
]


class TestTransitionTable:
    """Tests for allowed and refused edges."""

    @pytest.mark.parametrize("source,target", ALL_EDGES)
    def test_edge(self, machine, source, target):
        """Test each edge is accepted exactly when the table lists it."""
        task = Task(title="t", status=source)
        allowed = target in VALID_STATUS_TRANSITIONS[source]

        if allowed:
            machine.transition(task, target)
            assert task.status == target
        else:
            with pytest.raises(StatusTransitionError) as exc_info:
                machine.transition(task, target)
            assert task.status == source
            assert exc_info.value.current_status == source.value

    @pytest.mark.parametrize("status", [TaskStatus.COMPLETED, TaskStatus.CANCELLED])
    def test_terminal_states_have_no_exits(self, machine, status):
        """Test terminal states refuse every transition."""
        assert machine.valid_targets(status) == []
        assert not machine.can_transition(Task(title="t", status=status), TaskStatus.PENDING)

    def test_pending_cannot_complete_directly(self, machine):
        """Test completion requires passing through in_progress."""
        task = Task(title="t")
        with pytest.raises(StatusTransitionError) as exc_info:
            machine.transition(task, TaskStatus.COMPLETED)
        assert "in_progress" in exc_info.value.valid_transitions

    def test_accepts_string_target(self, machine):
        """Test status strings are accepted."""
        task = Task(title="t")
        machine.transition(task, "in_progress")
        assert task.status is TaskStatus.IN_PROGRESS

    def test_unknown_status(self, machine):
        """Test unknown statuses raise ValidationError."""
        with pytest.raises(ValidationError):
            machine.transition(Task(title="t"), "done")


class TestCompletionGate:
    """Tests for exit criteria gating."""

    def test_completion_without_criteria(self, machine):
        """Test a task with no criteria completes and is stamped."""
        task = Task(title="t", status=TaskStatus.IN_PROGRESS)

        machine.transition(task, TaskStatus.COMPLETED)

        assert task.status == TaskStatus.COMPLETED
        assert task.completed_at is not None

    def test_criteria_gate_completion(self, machine, gate):
        """Test completion fails until every criterion is met."""
        task = Task(title="t", status=TaskStatus.IN_PROGRESS)
        gate.set_exit_criteria(task, ["Tests pass", "Docs updated"])
        first, second = task.exit_criteria

        gate.mark_criterion_met(task, first.id)
        assert gate.progress(task) == 50
        assert not gate.are_all_criteria_met(task)
        assert not machine.can_transition(task, TaskStatus.COMPLETED)

        with pytest.raises(ExitCriteriaNotMetError) as exc_info:
            machine.transition(task, TaskStatus.COMPLETED)
        assert exc_info.value.unmet_criteria == [second.id]
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.completed_at is None

        gate.mark_criterion_met(task, second.id)
        assert gate.are_all_criteria_met(task)

        machine.transition(task, TaskStatus.COMPLETED)
        assert task.status == TaskStatus.COMPLETED

    def test_cancel_ignores_criteria(self, machine, gate):
        """Test cancellation is not gated."""
        task = Task(title="t")
        gate.set_exit_criteria(task, ["Never met"])

        machine.transition(task, TaskStatus.CANCELLED)
        assert task.status == TaskStatus.CANCELLED
        assert task.completed_at is None
