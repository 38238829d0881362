"""API route modules."""
from tasklist.daemon.routes.dependencies import router as dependencies_router
from tasklist.daemon.routes.lists import router as lists_router
from tasklist.daemon.routes.tasks import router as tasks_router

__all__ = ["lists_router", "tasks_router", "dependencies_router"]
