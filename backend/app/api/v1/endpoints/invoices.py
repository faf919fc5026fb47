"""
Invoice API endpoints.
"""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_tenant_id, require_cron_secret
from app.db.session import get_db
from app.deps.di_container import get_container
from app.controllers.invoice_controller import InvoiceController
from app.models.invoice import DocumentType, InvoiceStatus
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceResponse,
    InvoiceListResponse,
    InvoiceFromOrderRequest,
    InvoiceCreationResult,
    OverdueSweepResponse,
    NextInvoiceNumberResponse,
)

router = APIRouter()


def _controller(db: AsyncSession) -> InvoiceController:
    return InvoiceController(db, notification_client=get_container().notification_client())


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> InvoiceResponse:
    """Create an invoice."""
    controller = _controller(db)
    try:
        return await controller.create_invoice(tenant_id, invoice_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    client_id: Optional[UUID] = Query(None),
    order_id: Optional[UUID] = Query(None),
    status_filter: Optional[InvoiceStatus] = Query(None, alias="status"),
    document_type: Optional[DocumentType] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> InvoiceListResponse:
    """List invoices with optional filters."""
    controller = _controller(db)
    return await controller.list_invoices(
        tenant_id,
        skip=skip,
        limit=limit,
        client_id=client_id,
        order_id=order_id,
        status=status_filter,
        document_type=document_type,
    )


@router.post("/mark-overdue", response_model=OverdueSweepResponse, dependencies=[Depends(require_cron_secret)])
async def mark_overdue_invoices(
    db: AsyncSession = Depends(get_db),
) -> OverdueSweepResponse:
    """Flag unpaid invoices past their due date. Called by the scheduler."""
    controller = _controller(db)
    return await controller.mark_overdue()


@router.get("/next-number", response_model=NextInvoiceNumberResponse)
async def preview_next_invoice_number(
    document_type: DocumentType = Query(DocumentType.INVOICE),
    series_id: Optional[UUID] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> NextInvoiceNumberResponse:
    """Show the number the next invoice would get, without consuming it."""
    controller = _controller(db)
    try:
        return await controller.preview_next_number(tenant_id, document_type, series_id=series_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


@router.post("/from-order/{order_id}", response_model=InvoiceCreationResult, status_code=status.HTTP_201_CREATED)
async def create_invoice_from_order(
    order_id: UUID,
    request: InvoiceFromOrderRequest,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> InvoiceCreationResult:
    """Issue an invoice (a proforma by default) from an order's items."""
    controller = _controller(db)
    try:
        result = await controller.create_from_order(tenant_id, order_id, request)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.message,
        )
    return result


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> InvoiceResponse:
    """Get invoice by ID."""
    controller = _controller(db)
    invoice = await controller.get_invoice(tenant_id, invoice_id)
    if not invoice:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invoice not found",
        )
    return invoice
