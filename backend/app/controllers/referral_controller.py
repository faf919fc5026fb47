"""
Referral controller.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.referral_service import ReferralService
from app.services.tenant_settings_service import TenantSettingsService
from app.models.referral import ReferralStatus
from app.schemas.referral import (
    ReferralInviteCreate, ReferralResponse, ReferralListResponse, ReferralRedeemRequest,
    ReferralValidationResult, ReferralRedemptionResult, ClientReferralCodeResponse, ReferralStatsResponse,
)


class ReferralController(BaseController):
    """Controller for referral operations."""

    def __init__(self, session: AsyncSession):
        self.settings_service = TenantSettingsService(session)
        self.referral_service = ReferralService(session)

    async def create_invitation(self, tenant_id: str, invite_data: ReferralInviteCreate) -> ReferralResponse:
        """Issue an invitation code."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.referral_service.create_invitation(tenant_id, invite_data, settings)

    async def validate_code(self, tenant_id: str, code: str) -> ReferralValidationResult:
        """Validate a code."""
        return await self.referral_service.validate_code(tenant_id, code)

    async def redeem_code(self, tenant_id: str, redeem_data: ReferralRedeemRequest) -> ReferralRedemptionResult:
        """Redeem a code and grant the configured rewards."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.referral_service.redeem_code(tenant_id, redeem_data, settings)

    async def get_client_code(self, tenant_id: str, client_id: UUID) -> Optional[ClientReferralCodeResponse]:
        """Get or issue a client's standing code."""
        return await self.referral_service.get_or_create_client_code(tenant_id, client_id)

    async def list_referrals(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        referrer_id: Optional[UUID] = None,
        status: Optional[ReferralStatus] = None,
    ) -> ReferralListResponse:
        """List referrals with optional filters."""
        referrals, total = await self.referral_service.list_referrals(
            tenant_id,
            skip=skip,
            limit=limit,
            referrer_id=referrer_id,
            status=status,
        )
        return ReferralListResponse(items=referrals, total=total)

    async def get_stats(self, tenant_id: str) -> ReferralStatsResponse:
        """Get referral statistics."""
        return await self.referral_service.get_referral_stats(tenant_id)
