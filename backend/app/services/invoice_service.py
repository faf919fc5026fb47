"""
Invoice service with business logic for issuing invoices.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

from app.services.base_service import BaseService
from app.services.invoice_number_service import InvoiceNumberService
from app.core.integrations.notifications.notification_client import NotificationClient
from app.db.repositories.client_repository import ClientRepository
from app.db.repositories.invoice_repository import InvoiceRepository
from app.db.repositories.order_repository import OrderRepository
from app.models.invoice import DocumentType, Invoice, InvoiceStatus
from app.schemas.invoice import (
    InvoiceCreate, InvoiceItem, InvoiceResponse, InvoiceCreationResult,
)
from app.schemas.tenant_settings import TenantSettingsSnapshot
from app.utils.clock import utctoday
from app.utils.invoice_totals import sum_item_totals


def serialize_items(items: List[InvoiceItem]) -> List[Dict[str, Any]]:
    """Line items in their stored JSON form."""
    return [item.model_dump(mode="json") for item in items]


class InvoiceService(BaseService):
    """Service for invoice operations."""

    def __init__(
        self,
        session: AsyncSession,
        number_service: Optional[InvoiceNumberService] = None,
        notification_client: Optional[NotificationClient] = None,
    ):
        self.session = session
        self.invoice_repo = InvoiceRepository(session)
        self.client_repo = ClientRepository(session)
        self.order_repo = OrderRepository(session)
        self.number_service = number_service or InvoiceNumberService(session)
        self.notification_client = notification_client

    async def issue_invoice(
        self,
        tenant_id: str,
        client_id: UUID,
        document_type: DocumentType,
        items: List[Dict[str, Any]],
        issue_date: date,
        due_date: date,
        currency: str,
        order_id: Optional[UUID] = None,
        recurring_template_id: Optional[UUID] = None,
        number_series_id: Optional[UUID] = None,
        notes: Optional[str] = None,
        internal_note: Optional[str] = None,
    ) -> Invoice:
        """
        Number and persist a draft invoice. Flushed, not committed.

        Totals come from the items' stored amounts.
        """
        generated = await self.number_service.generate_invoice_number(
            tenant_id,
            document_type,
            series_id=number_series_id,
            on_date=issue_date,
        )
        subtotal, vat_amount, total_amount = sum_item_totals(items)

        invoice = await self.invoice_repo.create(
            tenant_id=tenant_id,
            invoice_number=generated.invoice_number,
            variable_symbol=generated.variable_symbol,
            document_type=document_type,
            status=InvoiceStatus.DRAFT,
            client_id=client_id,
            order_id=order_id,
            number_series_id=generated.number_series_id,
            recurring_template_id=recurring_template_id,
            issue_date=issue_date,
            due_date=due_date,
            items=list(items),
            subtotal=subtotal,
            vat_amount=vat_amount,
            total_amount=total_amount,
            currency=currency,
            notes=notes,
            internal_note=internal_note,
        )
        logger.info(
            f"Issued {document_type.value} {invoice.invoice_number}",
            extra={"tenant_id": tenant_id, "invoice_id": str(invoice.id)},
        )
        return invoice

    async def create_invoice(
        self,
        tenant_id: str,
        invoice_data: InvoiceCreate,
        settings: Optional[TenantSettingsSnapshot] = None,
    ) -> InvoiceResponse:
        """Create an invoice for a client of the tenant."""
        settings = settings or TenantSettingsSnapshot()
        client = await self.client_repo.get_for_tenant(invoice_data.client_id, tenant_id)
        if not client:
            raise ValueError("Client not found")

        issue_date = invoice_data.issue_date or utctoday()
        if invoice_data.due_date < issue_date:
            raise ValueError("Due date must not be before issue date")

        invoice = await self.issue_invoice(
            tenant_id=tenant_id,
            client_id=client.id,
            document_type=invoice_data.document_type,
            items=serialize_items(invoice_data.items),
            issue_date=issue_date,
            due_date=invoice_data.due_date,
            currency=invoice_data.currency or settings.default_currency,
            order_id=invoice_data.order_id,
            recurring_template_id=invoice_data.recurring_template_id,
            number_series_id=invoice_data.number_series_id,
            notes=invoice_data.notes,
            internal_note=invoice_data.internal_note,
        )
        await self.session.commit()
        return InvoiceResponse.model_validate(invoice)

    async def create_invoice_from_order(
        self,
        tenant_id: str,
        order_id: UUID,
        document_type: DocumentType = DocumentType.PROFORMA,
        send_email: bool = False,
        settings: Optional[TenantSettingsSnapshot] = None,
    ) -> Optional[InvoiceCreationResult]:
        """
        Issue an invoice from an order's line items.

        Returns None if the order does not exist. A failed email does not undo
        the invoice; it is reported in `message`.
        """
        settings = settings or TenantSettingsSnapshot()
        order = await self.order_repo.get_for_tenant(order_id, tenant_id)
        if not order:
            return None
        if not order.items:
            return InvoiceCreationResult(success=False, message="Order has no items to invoice")

        issue_date = utctoday()
        invoice = await self.issue_invoice(
            tenant_id=tenant_id,
            client_id=order.client_id,
            document_type=DocumentType(document_type),
            items=order.items,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=settings.default_days_due),
            currency=order.currency or settings.default_currency,
            order_id=order.id,
            internal_note=f"Created from order {order.order_number}",
        )
        await self.session.commit()
        result = InvoiceCreationResult(
            success=True,
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
        )

        if send_email:
            try:
                sent = self.notification_client is not None and await self.notification_client.send_invoice_email(
                    tenant_id, invoice.id
                )
                if not sent:
                    result.message = "Invoice created, email was not sent"
            except Exception as e:
                logger.error(f"Failed to email invoice {invoice.invoice_number}: {e}")
                # Don't fail the invoice creation if the email fails
                result.message = f"Invoice created, email failed: {e}"

        return result

    async def get_invoice(self, tenant_id: str, invoice_id: UUID) -> Optional[InvoiceResponse]:
        """Get invoice by ID."""
        invoice = await self.invoice_repo.get_for_tenant(invoice_id, tenant_id)
        if not invoice:
            return None
        return InvoiceResponse.model_validate(invoice)

    async def list_invoices(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[UUID] = None,
        order_id: Optional[UUID] = None,
        status: Optional[InvoiceStatus] = None,
        document_type: Optional[DocumentType] = None,
    ) -> Tuple[List[InvoiceResponse], int]:
        """List invoices with optional filters."""
        filters = {
            "tenant_id": tenant_id,
            "client_id": client_id,
            "order_id": order_id,
            "status": status,
            "document_type": document_type,
        }
        invoices = await self.invoice_repo.list(skip=skip, limit=limit, **filters)
        total = await self.invoice_repo.count(**filters)
        return [InvoiceResponse.model_validate(i) for i in invoices], total

    async def count_invoices_for_order(self, order_id: UUID) -> int:
        """Number of invoices already linked to an order."""
        return await self.invoice_repo.count_by_order(order_id)

    async def mark_overdue_invoices(self, today: Optional[date] = None) -> int:
        """Flag sent and viewed invoices past their due date as overdue, across tenants."""
        today = today or utctoday()
        updated = await self.invoice_repo.mark_overdue(today)
        await self.session.commit()
        if updated:
            logger.info(f"Marked {updated} invoice(s) overdue", extra={"run_date": today.isoformat()})
        return updated
