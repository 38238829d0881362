"""
Task list store for persistence.

Each list is stored as one JSON document in SQLite together with its
version, which the store compares on every save to reject stale writes.
Lists can optionally be mirrored as YAML files for human inspection.
"""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Optional

import yaml

from tasklist.core.constants import INDEX_DIR, LISTS_DIR, TASKLIST_DB
from tasklist.core.exceptions import ConcurrencyError, ListNotFoundError, StoreError
from tasklist.tasks.models import TaskList

logger = logging.getLogger(__name__)


# =============================================================================
# Database Schema
# =============================================================================

TASK_LISTS_TABLE_NAME = "task_lists"

TASK_LISTS_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {TASK_LISTS_TABLE_NAME} (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    project_tag TEXT NOT NULL,
    version INTEGER NOT NULL,
    total_items INTEGER DEFAULT 0,
    completed_items INTEGER DEFAULT 0,
    data_json TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_lists_project ON {TASK_LISTS_TABLE_NAME}(project_tag);
CREATE INDEX IF NOT EXISTS idx_lists_updated ON {TASK_LISTS_TABLE_NAME}(updated_at DESC);
"""


# =============================================================================
# Task List Store Implementation
# =============================================================================

class TaskListStore:
    """
    Persistent storage for task lists.

    Provides load/save with optimistic version checks on a SQLite backend
    and optional YAML file mirroring.
    """

    def __init__(
        self,
        base_path: Path,
        use_file_storage: bool = True,
        db_path: Optional[Path] = None,
    ) -> None:
        """
        Initialize task list store.

        Args:
            base_path: Base path for the .tasklist directory
            use_file_storage: Whether to also write lists as YAML files
            db_path: Override for the SQLite database location
        """
        self._base_path = Path(base_path)
        self._use_file_storage = use_file_storage
        self._db_path = Path(db_path) if db_path else self._base_path / INDEX_DIR / TASKLIST_DB
        self._lists_dir = self._base_path / LISTS_DIR
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        self._initialized = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    # -------------------------------------------------------------------------
    # Initialization
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """Initialize the store."""
        if self._initialized:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        if self._use_file_storage:
            self._lists_dir.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(TASK_LISTS_SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open task list database: {e}", operation="initialize") from e

        self._initialized = True
        logger.debug("Task list store initialized at %s", self._db_path)

    def close(self) -> None:
        """Close the store."""
        if self._conn:
            self._conn.close()
            self._conn = None
        self._initialized = False

    @contextmanager
    def _transaction(self) -> Generator[sqlite3.Cursor, None, None]:
        """Context manager for database transactions."""
        if not self._conn:
            raise StoreError("TaskListStore not initialized")

        with self._lock:
            cursor = self._conn.cursor()
            try:
                yield cursor
                self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cursor.close()

    def _ensure_initialized(self) -> None:
        """Ensure store is initialized."""
        if not self._initialized:
            self.initialize()

    # -------------------------------------------------------------------------
    # CRUD Operations
    # -------------------------------------------------------------------------

    def create(self, task_list: TaskList) -> str:
        """
        Create a new task list.

        Args:
            task_list: List to store

        Returns:
            List ID

        Raises:
            StoreError: If a list with the same id exists
        """
        self._ensure_initialized()

        try:
            with self._transaction() as cursor:
                cursor.execute(
                    f"""
                    INSERT INTO {TASK_LISTS_TABLE_NAME} (
                        id, title, project_tag, version, total_items,
                        completed_items, data_json, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        task_list.id,
                        task_list.title,
                        task_list.project_tag,
                        task_list.version,
                        task_list.total_items,
                        task_list.completed_items,
                        self._serialize(task_list),
                        task_list.created_at.isoformat(),
                        task_list.updated_at.isoformat(),
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise StoreError(
                f"Task list already exists: {task_list.id}", operation="create"
            ) from e

        if self._use_file_storage:
            self._write_list_file(task_list)

        return task_list.id

    def load(self, list_id: str) -> TaskList:
        """
        Load a task list.

        Raises:
            ListNotFoundError: If the list does not exist
        """
        self._ensure_initialized()

        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT data_json FROM {TASK_LISTS_TABLE_NAME} WHERE id = ?",
                (list_id,),
            )
            row = cursor.fetchone()

        if not row:
            raise ListNotFoundError(list_id)
        return TaskList.from_dict(json.loads(row["data_json"]))

    def save(self, task_list: TaskList, expected_version: int) -> None:
        """
        Persist a mutated list atomically.

        The stored version must equal ``expected_version`` (the version the
        caller loaded). Re-saving an identical document that is already
        stored is a no-op.

        Raises:
            ListNotFoundError: If the list does not exist
            ConcurrencyError: If the stored version has moved on
        """
        self._ensure_initialized()
        data_json = self._serialize(task_list)

        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT version, data_json FROM {TASK_LISTS_TABLE_NAME} WHERE id = ?",
                (task_list.id,),
            )
            row = cursor.fetchone()
            if not row:
                raise ListNotFoundError(task_list.id)

            stored_version = row["version"]
            if stored_version == task_list.version and row["data_json"] == data_json:
                return
            if stored_version != expected_version:
                raise ConcurrencyError(task_list.id, expected_version, stored_version)

            cursor.execute(
                f"""
                UPDATE {TASK_LISTS_TABLE_NAME} SET
                    title = ?, project_tag = ?, version = ?, total_items = ?,
                    completed_items = ?, data_json = ?, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    task_list.title,
                    task_list.project_tag,
                    task_list.version,
                    task_list.total_items,
                    task_list.completed_items,
                    data_json,
                    task_list.updated_at.isoformat(),
                    task_list.id,
                    expected_version,
                ),
            )
            if cursor.rowcount == 0:
                cursor.execute(
                    f"SELECT version FROM {TASK_LISTS_TABLE_NAME} WHERE id = ?",
                    (task_list.id,),
                )
                current = cursor.fetchone()
                if not current:
                    raise ListNotFoundError(task_list.id)
                raise ConcurrencyError(task_list.id, expected_version, current["version"])

        if self._use_file_storage:
            self._write_list_file(task_list)
        logger.debug("Saved list %s at version %d", task_list.id, task_list.version)

    def delete(self, list_id: str) -> bool:
        """
        Delete a task list.

        Returns:
            True if deleted, False if not found
        """
        self._ensure_initialized()

        with self._transaction() as cursor:
            cursor.execute(
                f"DELETE FROM {TASK_LISTS_TABLE_NAME} WHERE id = ?",
                (list_id,),
            )
            deleted = cursor.rowcount > 0

        if deleted and self._use_file_storage:
            self._delete_list_file(list_id)
        return deleted

    def exists(self, list_id: str) -> bool:
        self._ensure_initialized()

        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT 1 FROM {TASK_LISTS_TABLE_NAME} WHERE id = ?",
                (list_id,),
            )
            return cursor.fetchone() is not None

    def list_summaries(self, project_tag: Optional[str] = None) -> list[dict[str, Any]]:
        """
        List stored task lists without loading their tasks.

        Args:
            project_tag: Only include lists with this tag
        """
        self._ensure_initialized()

        query = (
            f"SELECT id, title, project_tag, version, total_items, completed_items, "
            f"created_at, updated_at FROM {TASK_LISTS_TABLE_NAME}"
        )
        params: list[Any] = []
        if project_tag:
            query += " WHERE project_tag = ?"
            params.append(project_tag)
        query += " ORDER BY updated_at DESC"

        with self._transaction() as cursor:
            cursor.execute(query, params)
            rows = cursor.fetchall()

        summaries = []
        for row in rows:
            summary = dict(row)
            total = summary["total_items"]
            summary["progress"] = round(summary["completed_items"] / total * 100) if total else 0
            summaries.append(summary)
        return summaries

    def get_stats(self) -> dict[str, Any]:
        """Get store statistics."""
        self._ensure_initialized()

        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT COUNT(*) AS lists, COALESCE(SUM(total_items), 0) AS tasks, "
                f"COALESCE(SUM(completed_items), 0) AS completed FROM {TASK_LISTS_TABLE_NAME}"
            )
            row = cursor.fetchone()

        return {
            "total_lists": row["lists"],
            "total_tasks": row["tasks"],
            "completed_tasks": row["completed"],
            "db_path": str(self._db_path),
        }

    # -------------------------------------------------------------------------
    # File Storage
    # -------------------------------------------------------------------------

    def _serialize(self, task_list: TaskList) -> str:
        return json.dumps(task_list.to_dict(), sort_keys=True)

    def _list_file(self, list_id: str) -> Path:
        return self._lists_dir / f"{list_id}.yaml"

    def _write_list_file(self, task_list: TaskList) -> None:
        """Write the list as a YAML file."""
        path = self._list_file(task_list.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(task_list.to_dict(), f, default_flow_style=False, sort_keys=False)

    def _delete_list_file(self, list_id: str) -> None:
        path = self._list_file(list_id)
        if path.exists():
            path.unlink()
