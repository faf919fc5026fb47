"""
Tenant settings schemas.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional

from app.models.referral import RewardType
from app.schemas.common import reject_explicit_nulls


class TenantSettingsSnapshot(BaseModel):
    """
    Read-only view of a tenant's settings, passed explicitly into operations
    that depend on them.
    """
    is_configured: bool = False
    auto_create_proforma: bool = False
    default_days_due: int = 14
    default_currency: str = "CZK"
    referrals_enabled: bool = True
    referral_code_expiry_days: Optional[int] = 30
    max_referrals_per_client: Optional[int] = None
    referrer_reward_type: RewardType = RewardType.CREDITS
    referrer_reward_value: int = 1
    referred_reward_type: RewardType = RewardType.DISCOUNT
    referred_reward_value: int = 10

    class Config:
        frozen = True


class TenantSettingsUpdate(BaseModel):
    """
    Schema for updating tenant settings (all fields optional).
    Only the expiry and the per-client limit accept null, meaning "none".
    """
    is_configured: Optional[bool] = None
    auto_create_proforma: Optional[bool] = None
    default_days_due: Optional[int] = Field(None, ge=0, le=365)
    default_currency: Optional[str] = Field(None, min_length=3, max_length=3)
    referrals_enabled: Optional[bool] = None
    referral_code_expiry_days: Optional[int] = Field(None, ge=1)
    max_referrals_per_client: Optional[int] = Field(None, ge=1)
    referrer_reward_type: Optional[RewardType] = None
    referrer_reward_value: Optional[int] = Field(None, ge=0)
    referred_reward_type: Optional[RewardType] = None
    referred_reward_value: Optional[int] = Field(None, ge=0)

    @model_validator(mode="before")
    def check_required_not_null(cls, data):
        return reject_explicit_nulls(data, (
            "is_configured", "auto_create_proforma", "default_days_due", "default_currency",
            "referrals_enabled", "referrer_reward_type", "referrer_reward_value",
            "referred_reward_type", "referred_reward_value",
        ))
