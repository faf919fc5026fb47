"""
Invoice Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal

from app.models.invoice import DocumentType, InvoiceStatus


class InvoiceItem(BaseModel):
    """Invoice line item with precomputed amounts."""
    description: str = Field(..., min_length=1, max_length=500)
    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    unit_price: Decimal = Field(..., ge=0)
    vat_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    total_without_vat: Decimal = Field(..., ge=0)
    vat_amount: Decimal = Field(default=Decimal("0"), ge=0)


class InvoiceCreate(BaseModel):
    """Data needed to issue an invoice."""
    client_id: UUID
    document_type: DocumentType = DocumentType.INVOICE
    order_id: Optional[UUID] = None
    recurring_template_id: Optional[UUID] = None
    number_series_id: Optional[UUID] = None
    issue_date: Optional[date] = None
    due_date: date
    items: List[InvoiceItem] = Field(..., min_length=1)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = Field(None, max_length=2000)
    internal_note: Optional[str] = Field(None, max_length=2000)


class InvoiceResponse(BaseModel):
    """Response schema for invoice."""
    id: UUID
    invoice_number: str
    variable_symbol: Optional[str] = None
    document_type: DocumentType
    status: InvoiceStatus
    client_id: UUID
    order_id: Optional[UUID] = None
    recurring_template_id: Optional[UUID] = None
    issue_date: date
    due_date: date
    items: List[InvoiceItem]
    subtotal: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    currency: str
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InvoiceListResponse(BaseModel):
    """Schema for invoice list response."""
    items: List[InvoiceResponse]
    total: int


class InvoiceFromOrderRequest(BaseModel):
    """Request to issue an invoice from an order's items."""
    document_type: DocumentType = DocumentType.PROFORMA
    send_email: bool = False


class InvoiceCreationResult(BaseModel):
    """Outcome of issuing an invoice from an order."""
    success: bool
    invoice_id: Optional[UUID] = None
    invoice_number: Optional[str] = None
    message: Optional[str] = None


class GeneratedNumber(BaseModel):
    """A consumed invoice number."""
    invoice_number: str
    variable_symbol: str
    number_series_id: UUID
    sequence_number: int


class OverdueSweepResponse(BaseModel):
    """Result of the overdue invoice sweep."""
    updated: int


class NextInvoiceNumberResponse(BaseModel):
    """The number the next invoice of a type would get. Nothing is consumed."""
    document_type: DocumentType
    invoice_number: str
