"""
Invoice and number series models.
"""

from sqlalchemy import Column, String, Date, DateTime, Boolean, ForeignKey, Integer, Numeric, JSON, UniqueConstraint, Uuid, Enum as SQLEnum, func
import uuid
import enum

from app.db.base import Base


class DocumentType(str, enum.Enum):
    """Invoice document type enumeration."""
    INVOICE = "INVOICE"
    PROFORMA = "PROFORMA"
    CREDIT_NOTE = "CREDIT_NOTE"


class InvoiceStatus(str, enum.Enum):
    """Invoice status enumeration."""
    DRAFT = "DRAFT"
    SENT = "SENT"
    VIEWED = "VIEWED"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class NumberSeries(Base):
    """Numbering pattern and counter for one document type of a tenant."""

    __tablename__ = "number_series"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    document_type = Column(SQLEnum(DocumentType), nullable=False, index=True)
    prefix = Column(String(20), nullable=False)
    suffix = Column(String(20), nullable=True)
    pattern = Column(String(100), nullable=False, default="{PREFIX}{YEAR}-{NUMBER:4}")
    number_padding = Column(Integer, nullable=False, default=4)
    current_year = Column(Integer, nullable=False)
    current_number = Column(Integer, nullable=False, default=0)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)


class Invoice(Base):
    """Issued invoice document."""

    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("tenant_id", "invoice_number", name="uq_invoice_tenant_number"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    invoice_number = Column(String(50), nullable=False, index=True)
    variable_symbol = Column(String(10), nullable=True)
    document_type = Column(SQLEnum(DocumentType), nullable=False, default=DocumentType.INVOICE, index=True)
    status = Column(SQLEnum(InvoiceStatus), nullable=False, default=InvoiceStatus.DRAFT, index=True)

    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id", ondelete="SET NULL"), nullable=True, index=True)
    number_series_id = Column(Uuid(as_uuid=True), ForeignKey("number_series.id", ondelete="SET NULL"), nullable=True)
    recurring_template_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("recurring_invoice_templates.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)

    items = Column(JSON, nullable=False, default=list)
    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    vat_amount = Column(Numeric(15, 2), nullable=False, default=0)
    total_amount = Column(Numeric(15, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="CZK")

    notes = Column(String(2000), nullable=True)
    internal_note = Column(String(2000), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
