"""List and task CRUD endpoints for the daemon."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from tasklist.core.constants import (
    DEFAULT_PRIORITY,
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    TaskPriority,
)
from tasklist.daemon.state import get_service
from tasklist.tasks.service import TaskListService

router = APIRouter(prefix="/lists", tags=["lists"])


class CreateListRequest(BaseModel):
    """Request body for list creation."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)
    project_tag: str | None = Field(None, description="Lowercase project tag")
    metadata: dict[str, Any] = Field(default_factory=dict)


class AddTaskRequest(BaseModel):
    """Request body for adding a task."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str = Field("", max_length=MAX_DESCRIPTION_LENGTH)
    priority: int = Field(
        int(DEFAULT_PRIORITY), ge=TaskPriority.MINIMAL.value, le=TaskPriority.CRITICAL.value
    )
    estimated_duration: int | None = Field(None, ge=0, description="Minutes")
    tags: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    exit_criteria: list[str] = Field(default_factory=list)


class UpdateTaskRequest(BaseModel):
    """Request body for updating a task's descriptive fields."""

    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    priority: int | None = Field(
        None, ge=TaskPriority.MINIMAL.value, le=TaskPriority.CRITICAL.value
    )
    estimated_duration: int | None = Field(None, ge=0)
    tags: list[str] | None = None


@router.post("", status_code=201)
def create_list(
    request: CreateListRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Create a task list."""
    task_list = service.create_list(
        title=request.title,
        description=request.description,
        project_tag=request.project_tag,
        metadata=request.metadata,
    )
    return task_list.to_dict()


@router.get("")
def list_lists(
    project_tag: str | None = None,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """List stored task lists."""
    summaries = service.list_lists(project_tag)
    return {"lists": summaries, "total": len(summaries)}


@router.get("/{list_id}")
def get_list(list_id: str, service: TaskListService = Depends(get_service)) -> dict[str, Any]:
    """Get a task list with all of its tasks."""
    return service.get_list(list_id).to_dict()


@router.delete("/{list_id}")
def delete_list(list_id: str, service: TaskListService = Depends(get_service)) -> dict[str, Any]:
    """Delete a task list."""
    if not service.delete_list(list_id):
        raise HTTPException(status_code=404, detail=f"Task list not found: {list_id}")
    return {"deleted": True, "list_id": list_id}


@router.post("/{list_id}/tasks", status_code=201)
def add_task(
    list_id: str,
    request: AddTaskRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Add a task to a list."""
    task = service.add_task(
        list_id,
        title=request.title,
        description=request.description,
        priority=request.priority,
        estimated_duration=request.estimated_duration,
        tags=request.tags,
        dependencies=request.dependencies,
        exit_criteria=request.exit_criteria,
    )
    return task.to_dict()


@router.patch("/{list_id}/tasks/{task_id}")
def update_task(
    list_id: str,
    task_id: str,
    request: UpdateTaskRequest,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Update a task's title, description, priority, duration or tags."""
    task = service.update_task(
        list_id,
        task_id,
        title=request.title,
        description=request.description,
        priority=request.priority,
        estimated_duration=request.estimated_duration,
        tags=request.tags,
    )
    return task.to_dict()


@router.delete("/{list_id}/tasks/{task_id}")
def remove_task(
    list_id: str,
    task_id: str,
    service: TaskListService = Depends(get_service),
) -> dict[str, Any]:
    """Remove a task and strip it from other tasks' dependencies."""
    affected = service.remove_task(list_id, task_id)
    return {"removed": task_id, "updated_tasks": affected}
