"""
Base CRUD operations for SQLAlchemy models.

Provides generic bulk insert and primary-key read operations that model-specific CRUD
classes inherit and extend. CRUD methods flush but never commit; the
calling service owns the transaction.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Iterable, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from upload_tracker.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create_many(
        self,
        session: AsyncSession,
        rows: Iterable[dict[str, Any]],
    ) -> list[ModelT]:
        """
        Add several records and flush them in one round of INSERTs.

        Args:
            session: Async database session
            rows: One dict of field values per record

        Returns:
            Created model instances, in input order
        """
        instances = [self.model(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        fresh: bool = False,
    ) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: UUID primary key
            fresh: Overwrite an instance already in the session with the row
                as the database has it now

        Returns:
            Model instance if found, None otherwise
        """
        stmt = select(self.model).where(self.model.id == id)
        if fresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
