"""
Recurring invoice service.

`process_due_templates` is the daily scheduler run. Each due template is
handled in its own transaction so one bad template never blocks the rest.
Only one run should execute at a time; the caller schedules it.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

from app.services.base_service import BaseService
from app.services.invoice_service import InvoiceService, serialize_items
from app.core.integrations.observability import record_job_run
from app.db.repositories.client_repository import ClientRepository
from app.db.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from app.models.invoice import DocumentType
from app.schemas.recurring_invoice import (
    RecurringInvoiceCreate, RecurringInvoiceUpdate, RecurringInvoiceResponse,
    RecurringRunSummary, RecurringRunError,
)
from app.schemas.tenant_settings import TenantSettingsSnapshot
from app.utils.clock import utcnow, utctoday
from app.utils.invoice_totals import sum_item_totals
from app.utils.recurring_schedule import calculate_next_date

JOB_NAME = "recurring_invoices"


class RecurringInvoiceService(BaseService):
    """Service for recurring invoice templates and their scheduler."""

    def __init__(self, session: AsyncSession, invoice_service: Optional[InvoiceService] = None):
        self.session = session
        self.template_repo = RecurringInvoiceRepository(session)
        self.client_repo = ClientRepository(session)
        self.invoice_service = invoice_service or InvoiceService(session)

    async def process_due_templates(self, today: Optional[date] = None) -> RecurringRunSummary:
        """
        Generate one invoice for every due template, across all tenants.

        Never raises: failures are rolled back per template and reported in
        the summary's `errors`.
        """
        today = today or utctoday()
        summary = RecurringRunSummary(run_date=today)

        template_ids = await self.template_repo.list_due_ids(today)
        logger.info(f"Processing {len(template_ids)} due recurring invoice template(s)", extra={"run_date": today.isoformat()})

        for template_id in template_ids:
            summary.processed += 1
            try:
                deactivated = await self._generate_for_template(template_id, today)
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                logger.error(f"Failed to process recurring invoice template {template_id}: {e}")
                summary.errors.append(RecurringRunError(template_id=template_id, message=str(e)))
                continue
            summary.created += 1
            if deactivated:
                summary.deactivated += 1

        try:
            summary.deactivated += await self.template_repo.deactivate_expired(today)
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to deactivate expired recurring invoice templates: {e}")

        record_job_run(JOB_NAME, summary.model_dump(mode="json"))
        return summary

    async def _generate_for_template(self, template_id: UUID, today: date) -> bool:
        """
        Issue the template's invoice and advance its schedule. Not committed.

        Returns True if the template reached its end date and was deactivated.
        """
        template = await self.template_repo.get(template_id)
        if template is None:
            raise ValueError("Recurring invoice template not found")

        await self.invoice_service.issue_invoice(
            tenant_id=template.tenant_id,
            client_id=template.client_id,
            document_type=DocumentType(template.document_type),
            items=template.items,
            issue_date=today,
            due_date=today + timedelta(days=template.days_due),
            currency=template.currency,
            recurring_template_id=template.id,
            number_series_id=template.number_series_id,
            notes=template.notes,
            internal_note=f"Generated automatically from recurring invoice: {template.name}",
        )

        next_date = calculate_next_date(
            template.next_generation_date,
            template.frequency,
            template.day_of_month,
        )
        update_dict = {
            "next_generation_date": next_date,
            "last_generated_at": utcnow(),
            "generated_count": template.generated_count + 1,
        }
        deactivated = template.end_date is not None and next_date > template.end_date
        if deactivated:
            update_dict["is_active"] = False
            logger.info(f"Recurring invoice template {template_id} reached its end date, deactivating")
        await self.template_repo.update(template, **update_dict)
        return deactivated

    async def create_template(
        self,
        tenant_id: str,
        template_data: RecurringInvoiceCreate,
        settings: Optional[TenantSettingsSnapshot] = None,
    ) -> RecurringInvoiceResponse:
        """Create a template. The first invoice is due one period after its start date."""
        settings = settings or TenantSettingsSnapshot()
        client = await self.client_repo.get_for_tenant(template_data.client_id, tenant_id)
        if not client:
            raise ValueError("Client not found")

        items = serialize_items(template_data.items)
        subtotal, vat_amount, total_amount = sum_item_totals(items)
        template = await self.template_repo.create(
            tenant_id=tenant_id,
            name=template_data.name,
            description=template_data.description,
            client_id=client.id,
            frequency=template_data.frequency,
            day_of_month=template_data.day_of_month,
            start_date=template_data.start_date,
            end_date=template_data.end_date,
            next_generation_date=calculate_next_date(
                template_data.start_date,
                template_data.frequency,
                template_data.day_of_month,
            ),
            is_active=True,
            document_type=template_data.document_type,
            number_series_id=template_data.number_series_id,
            items=items,
            subtotal=subtotal,
            vat_amount=vat_amount,
            total_amount=total_amount,
            currency=template_data.currency or settings.default_currency,
            days_due=template_data.days_due if template_data.days_due is not None else settings.default_days_due,
            notes=template_data.notes,
            generated_count=0,
        )
        await self.session.commit()
        return RecurringInvoiceResponse.model_validate(template)

    async def get_template(self, tenant_id: str, template_id: UUID) -> Optional[RecurringInvoiceResponse]:
        """Get template by ID."""
        template = await self.template_repo.get_for_tenant(template_id, tenant_id)
        if not template:
            return None
        return RecurringInvoiceResponse.model_validate(template)

    async def list_templates(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        client_id: Optional[UUID] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[RecurringInvoiceResponse], int]:
        """List templates with optional filters."""
        filters = {"tenant_id": tenant_id, "client_id": client_id, "is_active": is_active}
        templates = await self.template_repo.list(skip=skip, limit=limit, **filters)
        total = await self.template_repo.count(**filters)
        return [RecurringInvoiceResponse.model_validate(t) for t in templates], total

    async def update_template(
        self,
        tenant_id: str,
        template_id: UUID,
        template_data: RecurringInvoiceUpdate,
    ) -> Optional[RecurringInvoiceResponse]:
        """Update a template. Totals are recomputed when the items change."""
        template = await self.template_repo.get_for_tenant(template_id, tenant_id)
        if not template:
            return None

        update_dict = template_data.model_dump(exclude_unset=True, exclude={"items"})
        if template_data.items is not None:
            items = serialize_items(template_data.items)
            subtotal, vat_amount, total_amount = sum_item_totals(items)
            update_dict.update(items=items, subtotal=subtotal, vat_amount=vat_amount, total_amount=total_amount)

        end_date = update_dict.get("end_date", template.end_date)
        if end_date is not None and end_date < template.start_date:
            raise ValueError("end_date must not be before start_date")

        await self.template_repo.update(template, **update_dict)
        await self.session.commit()
        return RecurringInvoiceResponse.model_validate(template)

    async def deactivate_template(self, tenant_id: str, template_id: UUID) -> Optional[RecurringInvoiceResponse]:
        """Stop generating invoices from a template. Templates are never deleted."""
        template = await self.template_repo.get_for_tenant(template_id, tenant_id)
        if not template:
            return None
        await self.template_repo.update(template, is_active=False)
        await self.session.commit()
        logger.info(f"Deactivated recurring invoice template {template_id}")
        return RecurringInvoiceResponse.model_validate(template)
