"""Database access for Mindscreen services.

Provides the PostgreSQL connection pool and the append-only repository
base class used by screening persistence.
"""

from .connection import (
    DatabaseConfig,
    ConnectionManager,
)
from .repository import (
    BaseRepository,
    RepositoryError,
    DuplicateError,
)

__all__ = [
    "DatabaseConfig",
    "ConnectionManager",
    "BaseRepository",
    "RepositoryError",
    "DuplicateError",
]
