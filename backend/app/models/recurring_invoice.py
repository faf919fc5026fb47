"""
Recurring invoice template model.
"""

from sqlalchemy import Column, String, Date, DateTime, Boolean, ForeignKey, Integer, Numeric, JSON, Uuid, Enum as SQLEnum, func
import uuid
import enum

from app.db.base import Base
from app.models.invoice import DocumentType


class RecurringFrequency(str, enum.Enum):
    """Recurring invoice frequency enumeration."""
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class RecurringInvoiceTemplate(Base):
    """Billing schedule that spawns one invoice per due date."""

    __tablename__ = "recurring_invoice_templates"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)

    frequency = Column(SQLEnum(RecurringFrequency), nullable=False)
    day_of_month = Column(Integer, nullable=True)  # Anchor for month arithmetic, 1-31
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    next_generation_date = Column(Date, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    document_type = Column(SQLEnum(DocumentType), nullable=False, default=DocumentType.INVOICE)
    number_series_id = Column(Uuid(as_uuid=True), ForeignKey("number_series.id", ondelete="SET NULL"), nullable=True)
    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    vat_amount = Column(Numeric(15, 2), nullable=False, default=0)
    total_amount = Column(Numeric(15, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="CZK")
    days_due = Column(Integer, nullable=False, default=14)
    notes = Column(String(2000), nullable=True)

    generated_count = Column(Integer, nullable=False, default=0)
    last_generated_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
