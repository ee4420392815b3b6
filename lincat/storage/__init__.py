"""
Storage backends
"""
from pathlib import Path

from ..config import StorageConfig
from .base import Storage
from .json_store import JsonFileStorage
from .sqlite_store import SQLiteStorage


def create_storage(config: StorageConfig) -> Storage:
    """Build the backend named by config.backend. Called once at startup."""
    if config.backend == "sqlite":
        return SQLiteStorage(Path(config.sqlite_path))
    if config.backend == "json":
        return JsonFileStorage(Path(config.json_path))
    raise ValueError(f"Unknown storage backend: {config.backend}")


__all__ = [
    "Storage",
    "SQLiteStorage",
    "JsonFileStorage",
    "create_storage",
]
