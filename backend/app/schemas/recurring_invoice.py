"""
Recurring invoice template schemas.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal

from app.models.invoice import DocumentType
from app.models.recurring_invoice import RecurringFrequency
from app.schemas.common import reject_explicit_nulls
from app.schemas.invoice import InvoiceItem


class RecurringInvoiceBase(BaseModel):
    """Base schema for recurring invoice templates."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    frequency: RecurringFrequency
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    end_date: Optional[date] = None
    document_type: DocumentType = DocumentType.INVOICE
    number_series_id: Optional[UUID] = None
    items: List[InvoiceItem] = Field(..., min_length=1)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    days_due: Optional[int] = Field(None, ge=0, le=365)
    notes: Optional[str] = Field(None, max_length=2000)


class RecurringInvoiceCreate(RecurringInvoiceBase):
    """Create schema. The first invoice is due one period after `start_date`."""
    client_id: UUID
    start_date: date

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RecurringInvoiceUpdate(BaseModel):
    """Update schema (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    frequency: Optional[RecurringFrequency] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    end_date: Optional[date] = None
    number_series_id: Optional[UUID] = None
    items: Optional[List[InvoiceItem]] = Field(None, min_length=1)
    days_due: Optional[int] = Field(None, ge=0, le=365)
    notes: Optional[str] = Field(None, max_length=2000)
    is_active: Optional[bool] = None

    @model_validator(mode="before")
    def check_required_not_null(cls, data):
        return reject_explicit_nulls(data, ("name", "frequency", "items", "days_due", "is_active"))


class RecurringInvoiceResponse(BaseModel):
    """Response schema for recurring invoice templates."""
    id: UUID
    name: str
    description: Optional[str] = None
    client_id: UUID
    frequency: RecurringFrequency
    day_of_month: Optional[int] = None
    start_date: date
    end_date: Optional[date] = None
    next_generation_date: date
    is_active: bool
    document_type: DocumentType
    number_series_id: Optional[UUID] = None
    items: List[InvoiceItem]
    subtotal: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    currency: str
    days_due: int
    notes: Optional[str] = None
    generated_count: int
    last_generated_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RecurringInvoiceListResponse(BaseModel):
    """Schema for recurring invoice list response."""
    items: List[RecurringInvoiceResponse]
    total: int


class RecurringRunError(BaseModel):
    """A template that failed during a run."""
    template_id: UUID
    message: str


class RecurringRunSummary(BaseModel):
    """Summary of one scheduler run. Always returned, even if every template failed."""
    run_date: date
    processed: int = 0
    created: int = 0
    deactivated: int = 0
    errors: List[RecurringRunError] = Field(default_factory=list)
