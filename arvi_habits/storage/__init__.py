# arvi_habits/storage/__init__.py
"""Bundled repository implementations (in-memory and SQLite)."""

from .memory import InMemoryArtifactRepository, InMemoryUserStateRepository
from .schema import SCHEMA_VERSION, init_db
from .sqlite import SQLiteArtifactRepository, SQLiteUserStateRepository

__all__ = [
    "InMemoryArtifactRepository",
    "InMemoryUserStateRepository",
    "SQLiteArtifactRepository",
    "SQLiteUserStateRepository",
    "SCHEMA_VERSION",
    "init_db",
]
