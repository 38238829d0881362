"""REST daemon for task lists."""

from tasklist.daemon.server import build_service, create_app, run_server

__all__ = ["build_service", "create_app", "run_server"]
