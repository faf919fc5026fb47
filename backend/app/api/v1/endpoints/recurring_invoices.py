"""
Recurring invoice API endpoints.
"""

from datetime import date
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_tenant_id, require_cron_secret
from app.db.session import get_db
from app.controllers.recurring_invoice_controller import RecurringInvoiceController
from app.schemas.recurring_invoice import (
    RecurringInvoiceCreate,
    RecurringInvoiceUpdate,
    RecurringInvoiceResponse,
    RecurringInvoiceListResponse,
    RecurringRunSummary,
)

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Recurring invoice not found",
    )


@router.post("", response_model=RecurringInvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_recurring_invoice(
    template_data: RecurringInvoiceCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> RecurringInvoiceResponse:
    """Create a recurring invoice template."""
    controller = RecurringInvoiceController(db)
    try:
        return await controller.create_template(tenant_id, template_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("", response_model=RecurringInvoiceListResponse)
async def list_recurring_invoices(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    client_id: Optional[UUID] = Query(None),
    is_active: Optional[bool] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> RecurringInvoiceListResponse:
    """List recurring invoice templates."""
    controller = RecurringInvoiceController(db)
    return await controller.list_templates(
        tenant_id,
        skip=skip,
        limit=limit,
        client_id=client_id,
        is_active=is_active,
    )


@router.post("/process", response_model=RecurringRunSummary, dependencies=[Depends(require_cron_secret)])
async def process_recurring_invoices(
    today: Optional[date] = Query(None, description="Run date, defaults to today (UTC)"),
    db: AsyncSession = Depends(get_db),
) -> RecurringRunSummary:
    """Generate invoices for all due templates. Called daily by the scheduler."""
    controller = RecurringInvoiceController(db)
    return await controller.process_due(today)


@router.get("/{template_id}", response_model=RecurringInvoiceResponse)
async def get_recurring_invoice(
    template_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> RecurringInvoiceResponse:
    """Get a recurring invoice template."""
    controller = RecurringInvoiceController(db)
    template = await controller.get_template(tenant_id, template_id)
    if not template:
        raise _not_found()
    return template


@router.put("/{template_id}", response_model=RecurringInvoiceResponse)
async def update_recurring_invoice(
    template_id: UUID,
    template_data: RecurringInvoiceUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> RecurringInvoiceResponse:
    """Update a recurring invoice template."""
    controller = RecurringInvoiceController(db)
    try:
        template = await controller.update_template(tenant_id, template_id, template_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    if not template:
        raise _not_found()
    return template


@router.post("/{template_id}/deactivate", response_model=RecurringInvoiceResponse)
async def deactivate_recurring_invoice(
    template_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> RecurringInvoiceResponse:
    """Stop generating invoices from a template."""
    controller = RecurringInvoiceController(db)
    template = await controller.deactivate_template(tenant_id, template_id)
    if not template:
        raise _not_found()
    return template
