"""
Referral service.

Two kinds of codes exist: single-use invitations stored as referrals, and a
client's standing personal code stored on the client. Invitation status only
moves forward, pending -> used or pending -> expired.
"""

import logging
import random
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings as app_settings
from app.services.base_service import BaseService
from app.db.repositories.client_repository import ClientRepository
from app.db.repositories.referral_repository import ReferralRepository
from app.models.client import Client
from app.models.referral import Referral, ReferralStatus, RewardType
from app.schemas.referral import (
    ReferralInviteCreate, ReferralResponse, ReferralRedeemRequest,
    ReferralValidationResult, ReferralRedemptionResult, ClientReferralCodeResponse, ReferralStatsResponse,
)
from app.schemas.tenant_settings import TenantSettingsSnapshot
from app.utils.clock import utcnow
from app.utils.referral_codes import ReferralCodeGenerator
from app.utils.referral_rewards import build_reward, client_updates_for_reward

logger = logging.getLogger(__name__)


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().upper()


class ReferralService(BaseService):
    """Service for referral operations."""

    def __init__(self, session: AsyncSession, rng: Optional[random.Random] = None):
        self.session = session
        self.referral_repo = ReferralRepository(session)
        self.client_repo = ClientRepository(session)
        self.generator = ReferralCodeGenerator(self.code_exists, rng=rng)

    async def code_exists(self, code: str) -> bool:
        """True if `code` is taken by an invitation or a standing client code."""
        if await self.referral_repo.code_exists(code):
            return True
        return await self.client_repo.referral_code_exists(code)

    async def generate_unique_code(self, prefix: str = "") -> str:
        """Unused code using the configured length and attempt budget."""
        return await self.generator.generate_unique_code(
            prefix=prefix,
            length=app_settings.REFERRAL_CODE_LENGTH,
            max_attempts=app_settings.REFERRAL_CODE_MAX_ATTEMPTS,
        )

    async def generate_personalized_code(self, name: Optional[str]) -> str:
        """Unused code prefixed with letters of `name`."""
        return await self.generator.generate_personalized_code(
            name,
            length=app_settings.REFERRAL_CODE_LENGTH,
            max_attempts=app_settings.REFERRAL_CODE_MAX_ATTEMPTS,
        )

    async def validate_code(
        self,
        tenant_id: str,
        code: str,
        now: Optional[datetime] = None,
    ) -> ReferralValidationResult:
        """
        Check whether a code can be used.

        A pending invitation found past its expiry is stored as expired before
        the result is returned.
        """
        now = now or utcnow()
        normalized = normalize_code(code)

        referral = await self.referral_repo.get_by_code(tenant_id, normalized) if normalized else None
        if referral is not None:
            status = ReferralStatus(referral.status)
            if status == ReferralStatus.PENDING and referral.expires_at is not None and referral.expires_at < now:
                await self.referral_repo.mark_expired(referral.id)
                await self.session.commit()
                logger.info(f"Referral {referral.id} expired", extra={"tenant_id": tenant_id})
                referral = await self.referral_repo.get(referral.id)
                status = ReferralStatus(referral.status)

            if status == ReferralStatus.USED:
                return ReferralValidationResult(
                    valid=False,
                    code=normalized,
                    source="referral",
                    referral=ReferralResponse.model_validate(referral),
                    reason="already_used",
                    error="Referral code has already been used",
                )
            if status == ReferralStatus.EXPIRED:
                return ReferralValidationResult(
                    valid=False,
                    code=normalized,
                    source="referral",
                    referral=ReferralResponse.model_validate(referral),
                    reason="expired",
                    error="Referral code has expired",
                )
            return ReferralValidationResult(
                valid=True,
                code=normalized,
                source="referral",
                referral=ReferralResponse.model_validate(referral),
                referrer_client_id=referral.referrer_id,
            )

        client = await self.client_repo.get_by_referral_code(tenant_id, normalized) if normalized else None
        if client is not None:
            return ReferralValidationResult(
                valid=True,
                code=normalized,
                source="client_code",
                referrer_client_id=client.id,
            )

        return ReferralValidationResult(
            valid=False,
            code=normalized,
            reason="not_found",
            error="Invalid referral code",
        )

    async def create_invitation(
        self,
        tenant_id: str,
        invite_data: ReferralInviteCreate,
        settings: TenantSettingsSnapshot,
    ) -> ReferralResponse:
        """Issue a single-use invitation code on behalf of a client."""
        if not settings.referrals_enabled:
            raise ValueError("Referral programme is disabled")

        referrer = await self.client_repo.get_for_tenant(invite_data.referrer_id, tenant_id)
        if not referrer:
            raise ValueError("Referrer not found")

        if settings.max_referrals_per_client is not None:
            issued = await self.referral_repo.count_by_referrer(referrer.id)
            if issued >= settings.max_referrals_per_client:
                raise ValueError(
                    f"Client has reached the limit of {settings.max_referrals_per_client} referrals"
                )

        now = utcnow()
        expires_at = None
        if settings.referral_code_expiry_days:
            expires_at = now + timedelta(days=settings.referral_code_expiry_days)

        referral = await self.referral_repo.create(
            tenant_id=tenant_id,
            code=await self.generate_personalized_code(referrer.name),
            referrer_id=referrer.id,
            referred_email=invite_data.referred_email,
            referred_name=invite_data.referred_name,
            status=ReferralStatus.PENDING,
            expires_at=expires_at,
            created_at=now,
        )
        await self.session.commit()
        logger.info(f"Issued referral code {referral.code}", extra={"tenant_id": tenant_id})
        return ReferralResponse.model_validate(referral)

    async def redeem_code(
        self,
        tenant_id: str,
        redeem_data: ReferralRedeemRequest,
        settings: Optional[TenantSettingsSnapshot] = None,
    ) -> ReferralRedemptionResult:
        """
        Attribute a new client to the owner of a code and grant both rewards.

        Rewards follow the tenant's settings at redemption time. For
        invitations they are stored on the referral with a flag per side.

        Raises:
            ValueError: if the code is not valid or the client cannot be attributed
        """
        settings = settings or TenantSettingsSnapshot()
        validation = await self.validate_code(tenant_id, redeem_data.code)
        if not validation.valid:
            raise ValueError(validation.error)

        referred = await self.client_repo.get_for_tenant(redeem_data.referred_client_id, tenant_id)
        if not referred:
            raise ValueError("Referred client not found")
        if referred.id == validation.referrer_client_id:
            raise ValueError("A client cannot use their own referral code")
        if referred.referred_by_id is not None:
            raise ValueError("Client has already been referred")
        referrer = await self.client_repo.get(validation.referrer_client_id)

        now = utcnow()
        if validation.source == "referral":
            marked = await self.referral_repo.mark_used(validation.referral.id, referred.id, now)
            if not marked:
                raise ValueError("Referral code has already been used")

        await self.client_repo.update(referred, referred_by_id=referrer.id)

        referrer_reward = build_reward(
            settings.referrer_reward_type, settings.referrer_reward_value, settings.default_currency
        )
        referred_reward = build_reward(
            settings.referred_reward_type, settings.referred_reward_value, settings.default_currency
        )
        if referrer_reward:
            await self._apply_reward(referrer, referrer_reward)
        if referred_reward:
            await self._apply_reward(referred, referred_reward)

        if validation.source == "referral":
            referral = await self.referral_repo.get(validation.referral.id)
            await self.referral_repo.update(
                referral,
                referrer_reward=referrer_reward,
                referred_reward=referred_reward,
                referrer_reward_applied=referrer_reward is not None,
                referred_reward_applied=referred_reward is not None,
                rewarded_at=now if (referrer_reward or referred_reward) else None,
            )
        await self.session.commit()
        logger.info(f"Redeemed referral code {validation.code}", extra={"tenant_id": tenant_id})

        result = ReferralRedemptionResult(
            **validation.model_dump(exclude={"referral"}),
            referrer_reward=referrer_reward,
            referred_reward=referred_reward,
        )
        if validation.source == "referral":
            referral = await self.referral_repo.get(validation.referral.id)
            result.referral = ReferralResponse.model_validate(referral)
        return result

    async def _apply_reward(self, client: Client, reward: Dict[str, Any]) -> None:
        """Hand a reward to a client. Not committed."""
        updates = client_updates_for_reward(client.credits_balance, client.notes, reward)
        if updates:
            await self.client_repo.update(client, **updates)
        if reward["type"] == RewardType.CASH.value:
            logger.info(f"Cash reward of {reward['value']} pending payout for client {client.id}")
        else:
            logger.info(f"Applied referral reward to client {client.id}", extra={"reward": reward["description"]})

    async def get_or_create_client_code(self, tenant_id: str, client_id: UUID) -> Optional[ClientReferralCodeResponse]:
        """A client's standing code, issued on first request."""
        client = await self.client_repo.get_for_tenant(client_id, tenant_id)
        if not client:
            return None
        if not client.referral_code:
            code = await self.generate_personalized_code(client.name)
            await self.client_repo.update(client, referral_code=code)
            await self.session.commit()
            logger.info(f"Issued standing referral code for client {client_id}")
        return ClientReferralCodeResponse(client_id=client.id, referral_code=client.referral_code)

    async def list_referrals(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        referrer_id: Optional[UUID] = None,
        status: Optional[ReferralStatus] = None,
    ) -> Tuple[List[ReferralResponse], int]:
        """List referrals with optional filters."""
        filters = {"tenant_id": tenant_id, "referrer_id": referrer_id, "status": status}
        referrals: List[Referral] = await self.referral_repo.list(skip=skip, limit=limit, **filters)
        total = await self.referral_repo.count(**filters)
        return [ReferralResponse.model_validate(r) for r in referrals], total

    async def get_referral_stats(self, tenant_id: str) -> ReferralStatsResponse:
        """Referral counts per status and the share of codes that were used."""
        counts = await self.referral_repo.count_by_status(tenant_id)
        total = sum(counts.values())
        used = counts[ReferralStatus.USED]
        return ReferralStatsResponse(
            total=total,
            pending=counts[ReferralStatus.PENDING],
            used=used,
            expired=counts[ReferralStatus.EXPIRED],
            conversion_rate=round(used / total * 100, 2) if total else 0.0,
        )
