"""
Recurring invoice template repository for database operations.
"""

from datetime import date
from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, or_

from app.db.repositories.base_repository import BaseRepository
from app.models.recurring_invoice import RecurringInvoiceTemplate


class RecurringInvoiceRepository(BaseRepository[RecurringInvoiceTemplate]):
    """Repository for recurring invoice template operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(RecurringInvoiceTemplate, session)

    async def list_due_ids(self, today: date) -> List[UUID]:
        """IDs of active templates, across tenants, due on or before `today` and not past their end date."""
        result = await self.session.execute(
            select(RecurringInvoiceTemplate.id)
            .where(
                RecurringInvoiceTemplate.is_active == True,
                RecurringInvoiceTemplate.next_generation_date <= today,
                or_(
                    RecurringInvoiceTemplate.end_date.is_(None),
                    RecurringInvoiceTemplate.end_date >= today,
                ),
            )
            .order_by(RecurringInvoiceTemplate.next_generation_date)
        )
        return [row[0] for row in result.all()]

    async def deactivate_expired(self, today: date) -> int:
        """Deactivate active templates whose end date has passed."""
        result = await self.session.execute(
            update(RecurringInvoiceTemplate)
            .where(
                RecurringInvoiceTemplate.is_active == True,
                RecurringInvoiceTemplate.end_date.is_not(None),
                RecurringInvoiceTemplate.end_date < today,
            )
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount
