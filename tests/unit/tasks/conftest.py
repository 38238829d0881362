"""
Shared pytest fixtures for task engine tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from tasklist.core.constants import TaskStatus
from tasklist.tasks import (
    DependencyManager,
    ExitCriteriaGate,
    StatusMachine,
    Task,
    TaskList,
)

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def task_list():
    """Create an empty task list."""
    return TaskList(title="Release")


@pytest.fixture
def manager():
    """Create dependency manager with default limits."""
    return DependencyManager()


@pytest.fixture
def gate():
    """Create exit criteria gate."""
    return ExitCriteriaGate()


@pytest.fixture
def machine(gate):
    """Create status machine."""
    return StatusMachine(gate)


@pytest.fixture
def add_tasks():
    """Factory appending titled tasks with strictly increasing creation times."""

    def _add(task_list: TaskList, *titles: str, **durations: int) -> list[Task]:
        offset = len(task_list.tasks)
        tasks = []
        for i, title in enumerate(titles):
            created = BASE_TIME + timedelta(minutes=offset + i)
            task = Task(
                title=title,
                estimated_duration=durations.get(title),
                created_at=created,
                updated_at=created,
            )
            tasks.append(task_list.add_task(task))
        return tasks

    return _add


@pytest.fixture
def complete():
    """Drive a task to completed through the legal transitions."""

    def _complete(machine: StatusMachine, task: Task) -> Task:
        if task.status != TaskStatus.IN_PROGRESS:
            machine.transition(task, TaskStatus.IN_PROGRESS)
        return machine.transition(task, TaskStatus.COMPLETED)

    return _complete
