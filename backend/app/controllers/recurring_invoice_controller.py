"""
Recurring invoice controller.
"""

from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.recurring_invoice_service import RecurringInvoiceService
from app.services.tenant_settings_service import TenantSettingsService
from app.schemas.recurring_invoice import (
    RecurringInvoiceCreate, RecurringInvoiceUpdate, RecurringInvoiceResponse,
    RecurringInvoiceListResponse, RecurringRunSummary,
)


class RecurringInvoiceController(BaseController):
    """Controller for recurring invoice operations."""

    def __init__(self, session: AsyncSession):
        self.settings_service = TenantSettingsService(session)
        self.recurring_service = RecurringInvoiceService(session)

    async def create_template(self, tenant_id: str, template_data: RecurringInvoiceCreate) -> RecurringInvoiceResponse:
        """Create a template."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.recurring_service.create_template(tenant_id, template_data, settings=settings)

    async def get_template(self, tenant_id: str, template_id: UUID) -> Optional[RecurringInvoiceResponse]:
        """Get template by ID."""
        return await self.recurring_service.get_template(tenant_id, template_id)

    async def list_templates(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[UUID] = None,
        is_active: Optional[bool] = None,
    ) -> RecurringInvoiceListResponse:
        """List templates with optional filters."""
        templates, total = await self.recurring_service.list_templates(
            tenant_id,
            skip=skip,
            limit=limit,
            client_id=client_id,
            is_active=is_active,
        )
        return RecurringInvoiceListResponse(items=templates, total=total)

    async def update_template(
        self,
        tenant_id: str,
        template_id: UUID,
        template_data: RecurringInvoiceUpdate,
    ) -> Optional[RecurringInvoiceResponse]:
        """Update a template."""
        return await self.recurring_service.update_template(tenant_id, template_id, template_data)

    async def deactivate_template(self, tenant_id: str, template_id: UUID) -> Optional[RecurringInvoiceResponse]:
        """Deactivate a template."""
        return await self.recurring_service.deactivate_template(tenant_id, template_id)

    async def process_due(self, today: Optional[date] = None) -> RecurringRunSummary:
        """Run the scheduler."""
        return await self.recurring_service.process_due_templates(today)
