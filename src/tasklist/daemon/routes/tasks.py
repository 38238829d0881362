"""Task lifecycle endpoints for the daemon: status and exit criteria."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tasklist.core.constants import TaskStatus
from tasklist.daemon.state import get_service
from tasklist.tasks.service import TaskListService

router = APIRouter(prefix="/lists/{list_id}/tasks/{task_id}", tags=["tasks"])


class SetStatusRequest(BaseModel):
    """Request body for a status transition."""

    status: TaskStatus


class SetExitCriteriaRequest(BaseModel):
    """Request body for replacing exit criteria."""

    exit_criteria: list[str] = Field(default_factory=list)


class UpdateCriterionRequest(BaseModel):
    """Request body for updating one exit criterion."""

    is_met: bool | None = None
    notes: str | None = None
    description: str | None = None


@router.put("/status")
def set_status(
    list_id: str,
    task_id: str,
    request: SetStatusRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Move a task to a new status."""
    return service.set_task_status(list_id, task_id, request.status).to_dict()


@router.put("/exit-criteria")
def set_exit_criteria(
    list_id: str,
    task_id: str,
    request: SetExitCriteriaRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Replace a task's exit criteria."""
    return service.set_exit_criteria(list_id, task_id, request.exit_criteria).to_dict()


@router.patch("/exit-criteria/{criteria_id}")
def update_exit_criterion(
    list_id: str,
    task_id: str,
    criteria_id: str,
    request: UpdateCriterionRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Update one exit criterion."""
    return service.update_exit_criterion(
        list_id,
        task_id,
        criteria_id,
        is_met=request.is_met,
        notes=request.notes,
        description=request.description,
    ).to_dict()
