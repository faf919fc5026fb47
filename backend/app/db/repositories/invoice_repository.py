"""
Invoice and number series repositories for database operations.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, update

from app.db.repositories.base_repository import BaseRepository
from app.models.invoice import Invoice, InvoiceStatus, DocumentType, NumberSeries


class InvoiceRepository(BaseRepository[Invoice]):
    """Repository for invoice operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Invoice, session)

    async def count_by_order(self, order_id: UUID) -> int:
        """Count invoices linked to an order."""
        result = await self.session.execute(
            select(func.count(Invoice.id)).where(Invoice.order_id == order_id)
        )
        return result.scalar_one()

    async def list_by_order(self, order_id: UUID) -> List[Invoice]:
        """List invoices linked to an order."""
        result = await self.session.execute(
            select(Invoice).where(Invoice.order_id == order_id).order_by(Invoice.created_at)
        )
        return list(result.scalars().all())

    async def count_for_year(self, tenant_id: str, document_type: DocumentType, year: int) -> int:
        """Count a tenant's documents of one type issued in `year`."""
        result = await self.session.execute(
            select(func.count(Invoice.id)).where(
                Invoice.tenant_id == tenant_id,
                Invoice.document_type == document_type,
                Invoice.issue_date >= date(year, 1, 1),
                Invoice.issue_date < date(year + 1, 1, 1),
            )
        )
        return result.scalar_one()

    async def mark_overdue(self, today: date) -> int:
        """Flag sent or viewed invoices whose due date has passed."""
        result = await self.session.execute(
            update(Invoice)
            .where(
                Invoice.status.in_([InvoiceStatus.SENT, InvoiceStatus.VIEWED]),
                Invoice.due_date < today,
            )
            .values(status=InvoiceStatus.OVERDUE)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount


class NumberSeriesRepository(BaseRepository[NumberSeries]):
    """Repository for number series operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(NumberSeries, session)

    async def get_default(self, tenant_id: str, document_type: DocumentType) -> Optional[NumberSeries]:
        """Get the active default series for a document type."""
        result = await self.session.execute(
            select(NumberSeries)
            .where(
                NumberSeries.tenant_id == tenant_id,
                NumberSeries.document_type == document_type,
                NumberSeries.is_default == True,
                NumberSeries.is_active == True,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()
