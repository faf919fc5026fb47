"""
Order Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal

from app.models.order import OrderStatus
from app.schemas.common import SideEffectOutcome, reject_explicit_nulls
from app.schemas.invoice import InvoiceItem


class OrderBase(BaseModel):
    """Base order schema with editable fields."""
    event_name: Optional[str] = Field(None, max_length=255)
    event_date: Optional[date] = None
    venue: Optional[str] = Field(None, max_length=500)
    items: List[InvoiceItem] = Field(default_factory=list)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = Field(None, max_length=2000)


class OrderCreate(OrderBase):
    """Schema for creating an order. Orders always start as `new`."""
    client_id: UUID


class OrderUpdate(BaseModel):
    """Schema for updating an order. Status is changed only via the status endpoint."""
    event_name: Optional[str] = Field(None, max_length=255)
    event_date: Optional[date] = None
    venue: Optional[str] = Field(None, max_length=500)
    items: Optional[List[InvoiceItem]] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="before")
    def check_items_not_null(cls, data):
        return reject_explicit_nulls(data, ("items",))


class OrderResponse(BaseModel):
    """Response schema for order."""
    id: UUID
    order_number: str
    client_id: UUID
    status: OrderStatus
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    venue: Optional[str] = None
    items: List[InvoiceItem]
    total_price: Decimal
    currency: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    """Schema for order list response."""
    items: List[OrderResponse]
    total: int


class OrderStatusUpdate(BaseModel):
    """Request to move an order to another status."""
    status: OrderStatus
    note: Optional[str] = Field(None, max_length=2000)
    changed_by: Optional[str] = Field(None, max_length=255)
    send_calendar: bool = True
    send_email: bool = True


class StatusChangeResult(BaseModel):
    """
    Result of an applied status change.

    `side_effects` lists every side action that was attempted; failures are
    repeated in `warnings` and never undo the status change.
    """
    order: OrderResponse
    previous_status: OrderStatus
    side_effects: List[SideEffectOutcome] = Field(default_factory=list)
    proforma_created: bool = False
    invoice_number: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class OrderWorkflowResponse(BaseModel):
    """Allowed next statuses and progress for an order."""
    status: OrderStatus
    next_statuses: List[OrderStatus]
    progress: int
    is_terminal: bool


class OrderStatusHistoryResponse(BaseModel):
    """Status history entry."""
    id: UUID
    from_status: OrderStatus
    to_status: OrderStatus
    changed_by: Optional[str] = None
    note: Optional[str] = None
    changed_at: datetime

    class Config:
        from_attributes = True
