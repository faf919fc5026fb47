"""
Order (booking) model and its status history.
"""

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Numeric, JSON, UniqueConstraint, Uuid, Enum as SQLEnum, func
from sqlalchemy.orm import relationship
import uuid
import enum

from app.db.base import Base


class OrderStatus(str, enum.Enum):
    """Order status enumeration."""
    NEW = "new"
    REVIEWING = "reviewing"
    AWAITING_INFO = "awaiting_info"
    QUOTE_SENT = "quote_sent"
    CONFIRMED = "confirmed"
    APPROVED = "approved"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Order(Base):
    """Customer booking. Status changes only through the order workflow."""

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="uq_order_tenant_number"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    order_number = Column(String(50), nullable=False, index=True)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)
    status = Column(
        SQLEnum(OrderStatus, values_callable=_enum_values, name="order_status"),
        nullable=False,
        default=OrderStatus.NEW,
        index=True,
    )
    event_name = Column(String(255), nullable=True)
    event_date = Column(Date, nullable=True)
    venue = Column(String(500), nullable=True)
    items = Column(JSON, nullable=False, default=list)  # Invoice-shaped line items
    total_price = Column(Numeric(15, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="CZK")
    notes = Column(String(2000), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True)
    confirmed_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    # Relationships
    status_history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.changed_at",
    )


class OrderStatusHistory(Base):
    """Audit row written for every applied status change."""

    __tablename__ = "order_status_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(SQLEnum(OrderStatus, values_callable=_enum_values, name="order_status"), nullable=False)
    to_status = Column(SQLEnum(OrderStatus, values_callable=_enum_values, name="order_status"), nullable=False)
    changed_by = Column(String(255), nullable=True)
    note = Column(String(2000), nullable=True)
    changed_at = Column(DateTime, nullable=False)

    # Relationships
    order = relationship("Order", back_populates="status_history")
