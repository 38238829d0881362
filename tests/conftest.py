"""Pytest configuration and fixtures for tasklist tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from tasklist.core.config import TaskListConfig
from tasklist.core.constants import get_tasklist_root
from tasklist.tasks.service import TaskListService
from tasklist.tasks.store import TaskListStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def config() -> TaskListConfig:
    """Create default configuration."""
    return TaskListConfig()


@pytest.fixture
def store(temp_dir: Path) -> Generator[TaskListStore, None, None]:
    """Create an initialized store without YAML mirroring."""
    store = TaskListStore(get_tasklist_root(temp_dir), use_file_storage=False)
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def service(store: TaskListStore, config: TaskListConfig) -> TaskListService:
    """Create a service over the temporary store."""
    return TaskListService(store, config)
