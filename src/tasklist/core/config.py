"""Task list configuration loading and validation."""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Self

from tasklist.core.constants import (
    CONFIG_FILE,
    DEFAULT_BOTTLENECK_LIMIT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_READY_LIMIT,
    INDEX_DIR,
    MAX_DEPENDENCIES_PER_TASK,
    TASKLIST_DB,
    get_tasklist_root,
)
from tasklist.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class DaemonConfig:
    """REST daemon configuration."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "info"


@dataclass(frozen=True)
class DependencyConfig:
    """Dependency engine configuration."""

    max_dependencies: int = MAX_DEPENDENCIES_PER_TASK
    warn_on_completed_dependencies: bool = True
    bottleneck_limit: int = DEFAULT_BOTTLENECK_LIMIT
    default_ready_limit: int = DEFAULT_READY_LIMIT

    def __post_init__(self) -> None:
        if self.max_dependencies < 1:
            raise ValueError("max_dependencies must be at least 1")
        if self.bottleneck_limit < 1:
            raise ValueError("bottleneck_limit must be at least 1")


@dataclass(frozen=True)
class StorageConfig:
    """Storage paths configuration, relative to the .tasklist root."""

    db_path: str = f"{INDEX_DIR}/{TASKLIST_DB}"
    mirror_files: bool = True


@dataclass(frozen=True)
class TaskListConfig:
    """Complete task list configuration."""

    version: str = "1.0"
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    dependencies: DependencyConfig = field(default_factory=DependencyConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        return cls(
            version=data.get("version", "1.0"),
            daemon=DaemonConfig(**data.get("daemon", {})),
            dependencies=DependencyConfig(**data.get("dependencies", {})),
            storage=StorageConfig(**data.get("storage", {})),
        )

    @classmethod
    def load(cls, base_path: Path | None = None) -> Self:
        """Load configuration from file or use defaults."""
        config_path = get_tasklist_root(base_path) / CONFIG_FILE

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                details={"path": str(config_path)},
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid configuration values: {e}",
                details={"path": str(config_path)},
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return asdict(self)

    def save(self, base_path: Path | None = None) -> Path:
        """Save configuration to file."""
        config_path = get_tasklist_root(base_path) / CONFIG_FILE
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
        return config_path

    def get_db_path(self, base_path: Path | None = None) -> Path:
        """Resolve the SQLite database path."""
        return get_tasklist_root(base_path) / self.storage.db_path
