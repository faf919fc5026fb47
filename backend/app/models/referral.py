"""
Referral invitation model.
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON, Uuid, Enum as SQLEnum, func
import uuid
import enum

from app.db.base import Base


class ReferralStatus(str, enum.Enum):
    """Referral status enumeration. Moves only pending -> used or pending -> expired."""
    PENDING = "pending"
    USED = "used"
    EXPIRED = "expired"


class RewardType(str, enum.Enum):
    """What a referral reward grants."""
    CREDITS = "credits"
    DISCOUNT = "discount"
    CASH = "cash"


class Referral(Base):
    """Single-use invitation code issued by a referring client."""

    __tablename__ = "referrals"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    tenant_id = Column(String(64), nullable=False, index=True)
    code = Column(String(20), nullable=False, unique=True, index=True)
    referrer_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    referred_email = Column(String(255), nullable=True)
    referred_name = Column(String(255), nullable=True)
    referred_client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    status = Column(
        SQLEnum(ReferralStatus, values_callable=lambda e: [m.value for m in e], name="referral_status"),
        nullable=False,
        default=ReferralStatus.PENDING,
        index=True,
    )
    expires_at = Column(DateTime, nullable=True)
    used_at = Column(DateTime, nullable=True)

    # Rewards are fixed when the code is redeemed; the flags record which side received its reward
    referrer_reward = Column(JSON, nullable=True)  # {type, value, description}
    referred_reward = Column(JSON, nullable=True)
    referrer_reward_applied = Column(Boolean, nullable=False, default=False)
    referred_reward_applied = Column(Boolean, nullable=False, default=False)
    rewarded_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
