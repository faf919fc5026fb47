"""
Referral Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime
from uuid import UUID

from app.models.referral import ReferralStatus, RewardType


class ReferralReward(BaseModel):
    """A reward granted to one side of a redeemed referral."""
    type: RewardType
    value: int
    description: str


class ReferralInviteCreate(BaseModel):
    """Invitation issued by an existing client."""
    referrer_id: UUID
    referred_email: Optional[str] = Field(None, max_length=255)
    referred_name: Optional[str] = Field(None, max_length=255)


class ReferralResponse(BaseModel):
    """Response schema for referral."""
    id: UUID
    code: str
    referrer_id: UUID
    referred_email: Optional[str] = None
    referred_name: Optional[str] = None
    referred_client_id: Optional[UUID] = None
    status: ReferralStatus
    expires_at: Optional[datetime] = None
    used_at: Optional[datetime] = None
    referrer_reward: Optional[ReferralReward] = None
    referred_reward: Optional[ReferralReward] = None
    referrer_reward_applied: bool = False
    referred_reward_applied: bool = False
    rewarded_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ReferralListResponse(BaseModel):
    """Schema for referral list response."""
    items: List[ReferralResponse]
    total: int


class ReferralCodeRequest(BaseModel):
    """A code typed in by a prospective client."""
    code: str = Field(..., min_length=1, max_length=20)


class ReferralRedeemRequest(ReferralCodeRequest):
    """Attribute a new client's signup to a code."""
    referred_client_id: UUID


ValidationFailureReason = Literal["not_found", "expired", "already_used"]


class ReferralValidationResult(BaseModel):
    """
    Result of validating a code.

    `source` tells whether the code is a single-use invitation ("referral") or
    a client's standing personal code ("client_code").
    """
    valid: bool
    code: str
    source: Optional[Literal["referral", "client_code"]] = None
    referral: Optional[ReferralResponse] = None
    referrer_client_id: Optional[UUID] = None
    reason: Optional[ValidationFailureReason] = None
    error: Optional[str] = None


class ReferralRedemptionResult(ReferralValidationResult):
    """A successful redemption and the rewards it granted."""
    referrer_reward: Optional[ReferralReward] = None
    referred_reward: Optional[ReferralReward] = None


class ClientReferralCodeResponse(BaseModel):
    """A client's standing personal referral code."""
    client_id: UUID
    referral_code: str


class ReferralStatsResponse(BaseModel):
    """Referral programme statistics for a tenant."""
    total: int
    pending: int
    used: int
    expired: int
    conversion_rate: float
