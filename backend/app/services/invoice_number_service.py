"""
Invoice number service.
Consumes numbers from a tenant's number series, resetting the sequence each year.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.db.repositories.invoice_repository import NumberSeriesRepository
from app.models.invoice import DocumentType, NumberSeries
from app.schemas.invoice import GeneratedNumber
from app.utils.clock import utctoday
from app.utils.invoice_numbering import (
    DEFAULT_PADDING,
    DEFAULT_PATTERN,
    build_number_from_pattern,
    default_prefix,
    generate_variable_symbol,
)

logger = logging.getLogger(__name__)


class InvoiceNumberService(BaseService):
    """Service for invoice numbering. Callers own the transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.series_repo = NumberSeriesRepository(session)

    async def _resolve_series(
        self,
        tenant_id: str,
        document_type: DocumentType,
        series_id: Optional[UUID],
        year: int,
    ) -> NumberSeries:
        if series_id is not None:
            series = await self.series_repo.get_for_tenant(series_id, tenant_id)
            if not series:
                raise ValueError("Number series not found")
            if not series.is_active:
                raise ValueError(f"Number series '{series.name}' is inactive")
            return series

        series = await self.series_repo.get_default(tenant_id, document_type)
        if series:
            return series

        prefix = default_prefix(document_type)
        logger.info(f"Creating default {document_type.value} number series for tenant {tenant_id}")
        return await self.series_repo.create(
            tenant_id=tenant_id,
            name=f"Default {document_type.value.lower().replace('_', ' ')}",
            document_type=document_type,
            prefix=prefix,
            pattern=DEFAULT_PATTERN,
            number_padding=DEFAULT_PADDING,
            current_year=year,
            current_number=0,
            is_default=True,
            is_active=True,
        )

    @staticmethod
    def _render(series: NumberSeries, on_date: date, number: int) -> str:
        return build_number_from_pattern(
            series.pattern,
            prefix=series.prefix,
            year=on_date.year,
            month=on_date.month,
            number=number,
            padding=series.number_padding,
            suffix=series.suffix or "",
        )

    async def generate_invoice_number(
        self,
        tenant_id: str,
        document_type: DocumentType,
        series_id: Optional[UUID] = None,
        on_date: Optional[date] = None,
    ) -> GeneratedNumber:
        """
        Consume the next number of a series.

        Uses the given series, or the tenant's default series for the document
        type, creating one if the tenant has none. The change is flushed but
        not committed.
        """
        on_date = on_date or utctoday()
        document_type = DocumentType(document_type)
        series = await self._resolve_series(tenant_id, document_type, series_id, on_date.year)

        if series.current_year != on_date.year:
            next_number = 1
        else:
            next_number = series.current_number + 1
        await self.series_repo.update(series, current_year=on_date.year, current_number=next_number)

        return GeneratedNumber(
            invoice_number=self._render(series, on_date, next_number),
            variable_symbol=generate_variable_symbol(next_number, on_date.year),
            number_series_id=series.id,
            sequence_number=next_number,
        )

    async def preview_next_number(
        self,
        tenant_id: str,
        document_type: DocumentType,
        series_id: Optional[UUID] = None,
        on_date: Optional[date] = None,
    ) -> str:
        """Next number of a series without consuming it."""
        on_date = on_date or utctoday()
        document_type = DocumentType(document_type)
        if series_id is not None:
            series = await self.series_repo.get_for_tenant(series_id, tenant_id)
            if not series:
                raise ValueError("Number series not found")
        else:
            series = await self.series_repo.get_default(tenant_id, document_type)
        if series is None:
            return build_number_from_pattern(
                DEFAULT_PATTERN,
                prefix=default_prefix(document_type),
                year=on_date.year,
                month=on_date.month,
                number=1,
            )
        next_number = 1 if series.current_year != on_date.year else series.current_number + 1
        return self._render(series, on_date, next_number)
