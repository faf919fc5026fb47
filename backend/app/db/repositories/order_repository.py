"""
Order repository for database operations.
"""

from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.db.repositories.base_repository import BaseRepository
from app.models.order import Order, OrderStatusHistory


class OrderRepository(BaseRepository[Order]):
    """Repository for order operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Order, session)

    async def count_by_number_prefix(self, tenant_id: str, prefix: str) -> int:
        """Count a tenant's orders whose number starts with `prefix`."""
        result = await self.session.execute(
            select(func.count(Order.id)).where(
                Order.tenant_id == tenant_id,
                Order.order_number.like(f"{prefix}%"),
            )
        )
        return result.scalar_one()


class OrderStatusHistoryRepository(BaseRepository[OrderStatusHistory]):
    """Repository for order status history operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(OrderStatusHistory, session)

    async def list_by_order(self, order_id: UUID) -> List[OrderStatusHistory]:
        """List status history for an order, oldest first."""
        result = await self.session.execute(
            select(OrderStatusHistory)
            .where(OrderStatusHistory.order_id == order_id)
            .order_by(OrderStatusHistory.changed_at)
        )
        return list(result.scalars().all())
