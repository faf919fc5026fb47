"""
Invoice controller.
"""

from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.integrations.notifications.notification_client import NotificationClient
from app.services.invoice_service import InvoiceService
from app.services.tenant_settings_service import TenantSettingsService
from app.models.invoice import DocumentType, InvoiceStatus
from app.schemas.invoice import (
    InvoiceCreate, InvoiceResponse, InvoiceListResponse,
    InvoiceFromOrderRequest, InvoiceCreationResult, OverdueSweepResponse, NextInvoiceNumberResponse,
)


class InvoiceController(BaseController):
    """Controller for invoice operations."""

    def __init__(self, session: AsyncSession, notification_client: Optional[NotificationClient] = None):
        self.settings_service = TenantSettingsService(session)
        self.invoice_service = InvoiceService(session, notification_client=notification_client)

    async def create_invoice(self, tenant_id: str, invoice_data: InvoiceCreate) -> InvoiceResponse:
        """Create an invoice."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.invoice_service.create_invoice(tenant_id, invoice_data, settings=settings)

    async def create_from_order(
        self,
        tenant_id: str,
        order_id: UUID,
        request: InvoiceFromOrderRequest,
    ) -> Optional[InvoiceCreationResult]:
        """Issue an invoice from an order."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.invoice_service.create_invoice_from_order(
            tenant_id,
            order_id,
            document_type=request.document_type,
            send_email=request.send_email,
            settings=settings,
        )

    async def get_invoice(self, tenant_id: str, invoice_id: UUID) -> Optional[InvoiceResponse]:
        """Get invoice by ID."""
        return await self.invoice_service.get_invoice(tenant_id, invoice_id)

    async def list_invoices(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
        status: Optional[InvoiceStatus] = None,
        document_type: Optional[DocumentType] = None,
    ) -> InvoiceListResponse:
        """List invoices with optional filters."""
        invoices, total = await self.invoice_service.list_invoices(
            tenant_id,
            skip=skip,
            limit=limit,
            client_id=client_id,
            order_id=order_id,
            status=status,
            document_type=document_type,
        )
        return InvoiceListResponse(items=invoices, total=total)

    async def mark_overdue(self, today: Optional[date] = None) -> OverdueSweepResponse:
        """Run the overdue sweep."""
        return OverdueSweepResponse(updated=await self.invoice_service.mark_overdue_invoices(today))

    async def preview_next_number(
        self,
        tenant_id: str,
        document_type: DocumentType,
        series_id: Optional[UUID] = None,
    ) -> NextInvoiceNumberResponse:
        """Next invoice number of a series, without consuming it."""
        number = await self.invoice_service.number_service.preview_next_number(
            tenant_id, document_type, series_id=series_id
        )
        return NextInvoiceNumberResponse(document_type=document_type, invoice_number=number)
