"""Task status state machine."""

from typing import Optional
import logging

from tasklist.core.constants import VALID_STATUS_TRANSITIONS, TaskStatus, is_valid_transition
from tasklist.core.exceptions import ExitCriteriaNotMetError, StatusTransitionError, ValidationError
from tasklist.tasks.exit_criteria import ExitCriteriaGate
from tasklist.tasks.models import Task, utcnow

logger = logging.getLogger(__name__)


class StatusMachine:
    """
    Applies status transitions to tasks.

    Only edges listed in VALID_STATUS_TRANSITIONS are accepted. Moving a task
    to completed additionally requires the exit criteria gate to pass, which
    is what keeps a completed task from ever holding an unmet criterion.
    """

    def __init__(self, gate: Optional[ExitCriteriaGate] = None) -> None:
        self._gate = gate or ExitCriteriaGate()

    @staticmethod
    def valid_targets(status: TaskStatus) -> list[TaskStatus]:
        return list(VALID_STATUS_TRANSITIONS.get(status, ()))

    def can_transition(self, task: Task, target: TaskStatus) -> bool:
        """Check a transition without raising."""
        if not is_valid_transition(task.status, target):
            return False
        if target == TaskStatus.COMPLETED:
            return self._gate.are_all_criteria_met(task)
        return True

    def transition(self, task: Task, target: TaskStatus | str) -> Task:
        """
        Move a task to a new status.

        Args:
            task: Task to update in place.
            target: Requested status.

        Returns:
            The updated task.

        Raises:
            StatusTransitionError: If the edge is not in the transition table.
            ExitCriteriaNotMetError: If completing with unmet exit criteria.
            ValidationError: If the target is not a known status.
        """
        try:
            target = TaskStatus(target)
        except ValueError as e:
            raise ValidationError(f"Unknown status: {target}", field="status", value=str(target)) from e
        current = task.status

        if not is_valid_transition(current, target):
            raise StatusTransitionError(
                task.id,
                current.value,
                target.value,
                [s.value for s in self.valid_targets(current)],
            )

        if target == TaskStatus.COMPLETED and not self._gate.are_all_criteria_met(task):
            raise ExitCriteriaNotMetError(
                task.id, [c.id for c in self._gate.unmet_criteria(task)]
            )

        now = utcnow()
        task.status = target
        task.touch(now)
        if target == TaskStatus.COMPLETED:
            task.completed_at = now

        logger.info("Task %s: %s -> %s", task.id, current.value, target.value)
        return task
