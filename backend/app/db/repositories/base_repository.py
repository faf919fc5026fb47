"""
Base repository class with common CRUD operations.
Repositories handle database access using async SQLAlchemy sessions.
"""

from typing import Generic, TypeVar, Type, Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            session: Async database session
        """
        self.model = model
        self.session = session

    async def create(self, **kwargs) -> ModelType:
        """
        Create a new record.

        Args:
            **kwargs: Model attributes

        Returns:
            Created model instance with server defaults loaded
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def get(self, id: UUID) -> Optional[ModelType]:
        """
        Get a record by ID.

        Args:
            id: Record ID

        Returns:
            Model instance or None
        """
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_for_tenant(self, id: UUID, tenant_id: str) -> Optional[ModelType]:
        """Get a record by ID only if it belongs to `tenant_id`."""
        result = await self.session.execute(
            select(self.model).where(
                self.model.id == id,
                self.model.tenant_id == tenant_id,
            )
        )
        return result.scalar_one_or_none()

    def _apply_filters(self, query, filters: dict):
        for key, value in filters.items():
            if value is not None and hasattr(self.model, key):
                query = query.where(getattr(self.model, key) == value)
        return query

    async def list(
        self,
        skip: int = 0,
        limit: int = 100,
        **filters,
    ) -> List[ModelType]:
        """
        List records with pagination and filters.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            **filters: Equality filters; None values are ignored

        Returns:
            List of model instances
        """
        query = self._apply_filters(select(self.model), filters)
        if hasattr(self.model, "created_at"):
            query = query.order_by(self.model.created_at.desc())
        query = query.offset(skip).limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, **filters) -> int:
        """Count records matching equality filters."""
        query = self._apply_filters(select(func.count(self.model.id)), filters)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def update(self, instance: ModelType, **kwargs) -> ModelType:
        """
        Update attributes on a loaded instance and flush.

        Args:
            instance: Loaded model instance
            **kwargs: Attributes to update

        Returns:
            The updated instance
        """
        for key, value in kwargs.items():
            setattr(instance, key, value)
        await self.session.flush()
        return instance
