"""Request-scoped access to the daemon's service instance."""

from fastapi import Request

from tasklist.tasks.service import TaskListService


def get_service(request: Request) -> TaskListService:
    """FastAPI dependency returning the service bound in create_app."""
    return request.app.state.service
