"""Dependency graph endpoints for the daemon."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from tasklist.core.constants import MAX_READY_LIMIT, OutputFormat
from tasklist.daemon.state import get_service
from tasklist.tasks.service import TaskListService

router = APIRouter(prefix="/lists/{list_id}", tags=["dependencies"])


class SetDependenciesRequest(BaseModel):
    """Request body for replacing a task's dependencies."""

    dependency_ids: list[str] = Field(
        default_factory=list, description="Full replacement list; empty clears"
    )
    dry_run: bool = Field(False, description="Validate without saving")


@router.put("/tasks/{task_id}/dependencies")
def set_dependencies(
    list_id: str,
    task_id: str,
    request: SetDependenciesRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Replace a task's dependency list."""
    if request.dry_run:
        return service.validate_dependencies(list_id, task_id, request.dependency_ids).to_dict()
    return service.set_dependencies(list_id, task_id, request.dependency_ids).to_dict()


@router.get("/ready")
def ready_tasks(
    list_id: str,
    limit: int | None = Query(None, ge=1, le=MAX_READY_LIMIT),
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Get tasks that can be started now."""
    return service.get_ready_tasks(list_id, limit).to_dict()


@router.get("/blocked")
def blocked_tasks(
    list_id: str,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Get tasks waiting on incomplete dependencies."""
    blocked = service.get_blocked_tasks(list_id)
    return {"blocked_tasks": [b.to_dict() for b in blocked], "total": len(blocked)}


@router.get("/analysis")
def analysis(
    list_id: str,
    format: OutputFormat | None = Query(None, description="Visualization format"),
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Analyze the list's dependency structure."""
    output_format = format.value if format else None
    return service.analyze_dependencies(list_id, output_format).to_dict()
