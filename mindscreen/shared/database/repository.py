"""Base repository pattern for append-only tables.

Screening results are written once and never updated or deleted, so the
base class offers insert and reads only.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .connection import ConnectionManager

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class DuplicateError(RepositoryError):
    """Duplicate entity already exists."""
    pass


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository with common operations.

    Subclasses implement the row/entity mapping while inheriting:
    - Connection management
    - Append-only insert
    - Paged reads
    """

    def __init__(
        self,
        connection_manager: ConnectionManager,
        table_name: str,
    ):
        """Initialize repository.

        Args:
            connection_manager: Database connection manager
            table_name: Name of the database table
        """
        self.connection_manager = connection_manager
        self.table_name = table_name

        logger.info(
            "REPOSITORY_INITIALIZED",
            extra={"table_name": table_name}
        )

    @abstractmethod
    def _row_to_entity(self, row: tuple) -> T:
        """Convert database row to entity."""
        pass

    @abstractmethod
    def _entity_to_params(self, entity: T) -> Dict[str, Any]:
        """Convert entity to a column -> value mapping."""
        pass

    def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find entity by ID.

        Args:
            entity_id: Entity identifier

        Returns:
            Entity if found, None otherwise
        """
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT * FROM {self.table_name} WHERE id = %s",
                    (entity_id,)
                )
                row = cur.fetchone()

                if row is None:
                    return None

                return self._row_to_entity(row)

    def find_all(
        self,
        limit: int = 100,
        offset: int = 0,
    ) -> List[T]:
        """Find all entities with pagination, newest first."""
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"SELECT * FROM {self.table_name} ORDER BY created_at DESC LIMIT %s OFFSET %s",
                    (limit, offset)
                )
                rows = cur.fetchall()

                return [self._row_to_entity(row) for row in rows]

    def insert(self, entity_id: str, entity: T) -> str:
        """Insert a new row in a single transaction.

        Args:
            entity_id: Identifier for the new row
            entity: Entity to store

        Returns:
            The identifier of the stored row

        Raises:
            DuplicateError: If a row with this id already exists
        """
        params = {"id": entity_id, **self._entity_to_params(entity)}
        columns = list(params.keys())
        values = list(params.values())
        placeholders = ["%s"] * len(values)

        query = f"""
            INSERT INTO {self.table_name} ({", ".join(columns)})
            VALUES ({", ".join(placeholders)})
            ON CONFLICT (id) DO NOTHING
            RETURNING id
        """

        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, values)
                row = cur.fetchone()
                conn.commit()

        if row is None:
            raise DuplicateError(f"{self.table_name} already contains id {entity_id}")

        return row[0]

    def count(self) -> int:
        """Count total entities."""
        with self.connection_manager.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT COUNT(*) FROM {self.table_name}")
                row = cur.fetchone()

                return row[0] if row else 0
