"""
Client (customer) model.
"""

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid, func
import uuid

from app.db.base import Base


class Client(Base):
    """A tenant's customer. Optionally holds a standing personal referral code."""

    __tablename__ = "clients"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_client_tenant_email"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    organization = Column(String(255), nullable=True)
    notes = Column(String(2000), nullable=True)
    credits_balance = Column(Integer, nullable=False, default=0)
    referral_code = Column(String(20), nullable=True, unique=True, index=True)
    referred_by_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
