"""
Per-tenant settings for invoicing automation and the referral programme.
"""

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Uuid, func
import uuid

from app.db.base import Base


class TenantSettings(Base):
    """Settings row, one per tenant. Missing rows fall back to defaults."""

    __tablename__ = "tenant_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, unique=True, index=True)

    # Invoicing
    invoicing_configured = Column(Boolean, nullable=False, default=False)
    auto_create_proforma = Column(Boolean, nullable=False, default=False)
    default_days_due = Column(Integer, nullable=False, default=14)
    default_currency = Column(String(3), nullable=False, default="CZK")

    # Referrals
    referrals_enabled = Column(Boolean, nullable=False, default=True)
    referral_code_expiry_days = Column(Integer, nullable=True, default=30)  # None = codes never expire
    max_referrals_per_client = Column(Integer, nullable=True)  # None = unlimited
    referrer_reward_type = Column(String(20), nullable=False, default="credits")
    referrer_reward_value = Column(Integer, nullable=False, default=1)  # 0 = no reward
    referred_reward_type = Column(String(20), nullable=False, default="discount")
    referred_reward_value = Column(Integer, nullable=False, default=10)

    updated_at = Column(DateTime, nullable=False, server_default=func.now())
