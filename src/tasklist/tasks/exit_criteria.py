"""Exit criteria management and the completion gate."""

from typing import Optional
import logging

from tasklist.core.constants import (
    MAX_CRITERIA_DESCRIPTION_LENGTH,
    MAX_CRITERIA_PER_TASK,
    MIN_CRITERIA_DESCRIPTION_LENGTH,
)
from tasklist.core.exceptions import ValidationError
from tasklist.tasks.models import ExitCriteria, Task, utcnow

logger = logging.getLogger(__name__)


def validate_description(description: str) -> list[str]:
    """
    Validate a criterion description.

    Returns:
        Advisory warnings.

    Raises:
        ValidationError: If the description is empty, too long or contains NUL.
    """
    text = (description or "").strip()
    if not text:
        raise ValidationError("Exit criteria description cannot be empty", field="description")
    if len(text) > MAX_CRITERIA_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Exit criteria description cannot exceed {MAX_CRITERIA_DESCRIPTION_LENGTH} characters",
            field="description",
        )
    if "\x00" in text:
        raise ValidationError(
            "Exit criteria description cannot contain null characters", field="description"
        )

    warnings = []
    if len(text) < MIN_CRITERIA_DESCRIPTION_LENGTH:
        warnings.append(f"Exit criteria description is very short: {text!r}")
    return warnings


class ExitCriteriaGate:
    """Owns a task's exit criteria and decides whether it may complete."""

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def are_all_criteria_met(self, task: Task) -> bool:
        """True when every criterion is met; vacuously true for none."""
        return all(c.is_met for c in task.exit_criteria)

    def unmet_criteria(self, task: Task) -> list[ExitCriteria]:
        return [c for c in task.exit_criteria if not c.is_met]

    def met_criteria(self, task: Task) -> list[ExitCriteria]:
        return [c for c in task.exit_criteria if c.is_met]

    def progress(self, task: Task) -> int:
        """Rounded percentage of met criteria; 100 when there are none."""
        total = len(task.exit_criteria)
        if total == 0:
            return 100
        return round(len(self.met_criteria(task)) / total * 100)

    def format_criteria(self, task: Task) -> str:
        """Render criteria as a markdown checklist."""
        if not task.exit_criteria:
            return "No exit criteria defined"
        lines = [f"Exit criteria ({len(self.met_criteria(task))}/{len(task.exit_criteria)} met):"]
        for criterion in task.exit_criteria:
            mark = "x" if criterion.is_met else " "
            line = f"- [{mark}] {criterion.description}"
            if criterion.notes:
                line += f" ({criterion.notes})"
            lines.append(line)
        return "\n".join(lines)

    def _require_criterion(self, task: Task, criteria_id: str) -> ExitCriteria:
        criterion = task.get_criterion(criteria_id)
        if criterion is None:
            raise ValidationError(
                f"Exit criterion not found: {criteria_id}",
                field="criteria_id",
                details={"task_id": task.id},
            )
        return criterion

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_exit_criteria(self, task: Task, descriptions: list[str]) -> list[str]:
        """
        Replace a task's exit criteria with new, unmet criteria.

        Returns:
            Advisory warnings (short or duplicate descriptions, large sets).

        Raises:
            ValidationError: If a description is invalid or the task is completed.
        """
        if task.is_completed():
            raise ValidationError(
                "Cannot change exit criteria of a completed task",
                field="exit_criteria",
                details={"task_id": task.id},
            )

        warnings: list[str] = []
        cleaned: list[str] = []
        for description in descriptions:
            warnings.extend(validate_description(description))
            cleaned.append(description.strip())

        lowered = [d.lower() for d in cleaned]
        duplicates = sorted({d for d in lowered if lowered.count(d) > 1})
        if duplicates:
            warnings.append(f"Duplicate exit criteria: {', '.join(duplicates)}")
        if len(cleaned) > MAX_CRITERIA_PER_TASK:
            warnings.append(
                f"Task has {len(cleaned)} exit criteria; consider splitting it"
            )

        task.exit_criteria = [ExitCriteria(description=d) for d in cleaned]
        task.touch()
        return warnings

    def mark_criterion_met(
        self,
        task: Task,
        criteria_id: str,
        notes: Optional[str] = None,
    ) -> ExitCriteria:
        """Mark a criterion met. Repeating the call changes nothing but notes."""
        criterion = self._require_criterion(task, criteria_id)
        if not criterion.is_met:
            criterion.is_met = True
            criterion.met_at = utcnow()
            task.touch(criterion.met_at)
            logger.debug("Criterion %s met on task %s", criteria_id, task.id)
        if notes is not None:
            criterion.notes = notes
        return criterion

    def mark_criterion_unmet(self, task: Task, criteria_id: str) -> ExitCriteria:
        """Clear a met criterion. Refused once the task is completed."""
        criterion = self._require_criterion(task, criteria_id)
        if task.is_completed():
            raise ValidationError(
                "Cannot unmark exit criteria of a completed task",
                field="is_met",
                details={"task_id": task.id},
            )
        if criterion.is_met:
            criterion.is_met = False
            criterion.met_at = None
            task.touch()
        return criterion

    def update_criterion(
        self,
        task: Task,
        criteria_id: str,
        description: Optional[str] = None,
        is_met: Optional[bool] = None,
        notes: Optional[str] = None,
    ) -> ExitCriteria:
        """Update a single criterion's description, state or notes."""
        criterion = self._require_criterion(task, criteria_id)

        if description is not None:
            validate_description(description)
            criterion.description = description.strip()
            task.touch()

        if is_met is True:
            self.mark_criterion_met(task, criteria_id)
        elif is_met is False:
            self.mark_criterion_unmet(task, criteria_id)

        if notes is not None:
            criterion.notes = notes
            task.touch()
        return criterion
