"""FastAPI daemon server for task lists."""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tasklist import __version__
from tasklist.core.config import TaskListConfig
from tasklist.core.constants import DEFAULT_HOST, DEFAULT_PORT, get_tasklist_root
from tasklist.core.exceptions import (
    CircularDependencyError,
    ConcurrencyError,
    ExitCriteriaNotMetError,
    InvariantViolationError,
    ListNotFoundError,
    StatusTransitionError,
    TaskListError,
    TaskNotFoundError,
    ValidationError,
)
from tasklist.daemon.routes import dependencies_router, lists_router, tasks_router
from tasklist.tasks.service import TaskListService
from tasklist.tasks.store import TaskListStore

logger = logging.getLogger(__name__)

# Checked in order; the first matching class decides the status code.
ERROR_STATUS_CODES: tuple[tuple[type[TaskListError], int], ...] = (
    (TaskNotFoundError, 404),
    (ListNotFoundError, 404),
    (CircularDependencyError, 409),
    (StatusTransitionError, 409),
    (ExitCriteriaNotMetError, 409),
    (ConcurrencyError, 409),
    (ValidationError, 400),
    (InvariantViolationError, 500),
)


def status_code_for(error: TaskListError) -> int:
    """Map a task list error to an HTTP status code."""
    for error_type, code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return code
    return 500


def build_service(base_path: Path | None = None, config: TaskListConfig | None = None) -> TaskListService:
    """Construct the store and service for a project root."""
    config = config or TaskListConfig.load(base_path)
    store = TaskListStore(
        get_tasklist_root(base_path),
        use_file_storage=config.storage.mirror_files,
        db_path=config.get_db_path(base_path),
    )
    store.initialize()
    return TaskListService(store, config)


def create_app(service: TaskListService) -> FastAPI:
    """
    Create the daemon application around a service instance.

    Args:
        service: Service every route operates on

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.start_time = datetime.now()
        logger.info("Task list daemon started (pid %s)", os.getpid())
        yield
        service.store.close()
        logger.info("Task list daemon stopped")

    app = FastAPI(
        title="Task List Daemon",
        description="Task list manager with dependency graph engine",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.start_time = None

    @app.exception_handler(TaskListError)
    async def handle_task_list_error(request: Request, exc: TaskListError) -> JSONResponse:
        code = status_code_for(exc)
        if code >= 500:
            logger.critical("Unhandled engine failure on %s: %s", request.url.path, exc)
        else:
            logger.debug("Request to %s rejected: %s", request.url.path, exc)
        return JSONResponse(status_code=code, content=exc.to_dict())

    @app.get("/health")
    async def health() -> JSONResponse:
        """Health check endpoint."""
        start_time = app.state.start_time
        uptime = (datetime.now() - start_time).total_seconds() if start_time else 0.0
        return JSONResponse(
            content={
                "status": "healthy",
                "version": __version__,
                "uptime_seconds": uptime,
            }
        )

    @app.get("/stats")
    def stats() -> JSONResponse:
        """Get store statistics."""
        return JSONResponse(content=service.store.get_stats())

    app.include_router(lists_router)
    app.include_router(dependencies_router)
    app.include_router(tasks_router)
    return app


def run_server(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    base_path: Path | None = None,
    log_level: str = "info",
) -> None:
    """Run the daemon server."""
    import uvicorn

    app = create_app(build_service(base_path))
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=log_level,
    )
