"""
Tenant settings service.
"""

import logging
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings as app_settings
from app.services.base_service import BaseService
from app.db.repositories.tenant_settings_repository import TenantSettingsRepository
from app.models.referral import RewardType
from app.models.tenant_settings import TenantSettings
from app.schemas.tenant_settings import TenantSettingsSnapshot, TenantSettingsUpdate
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)


class TenantSettingsService(BaseService):
    """Service for tenant settings operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings_repo = TenantSettingsRepository(session)

    def default_settings(self) -> TenantSettingsSnapshot:
        """Settings used by tenants that never saved any."""
        return TenantSettingsSnapshot(
            default_days_due=app_settings.DEFAULT_DAYS_DUE,
            default_currency=app_settings.DEFAULT_CURRENCY,
            referral_code_expiry_days=app_settings.REFERRAL_CODE_EXPIRY_DAYS,
        )

    @staticmethod
    def _to_snapshot(row: TenantSettings) -> TenantSettingsSnapshot:
        return TenantSettingsSnapshot(
            is_configured=row.invoicing_configured,
            auto_create_proforma=row.auto_create_proforma,
            default_days_due=row.default_days_due,
            default_currency=row.default_currency,
            referrals_enabled=row.referrals_enabled,
            referral_code_expiry_days=row.referral_code_expiry_days,
            max_referrals_per_client=row.max_referrals_per_client,
            referrer_reward_type=RewardType(row.referrer_reward_type),
            referrer_reward_value=row.referrer_reward_value,
            referred_reward_type=RewardType(row.referred_reward_type),
            referred_reward_value=row.referred_reward_value,
        )

    async def get_settings(self, tenant_id: str) -> TenantSettingsSnapshot:
        """Stored settings of a tenant, or defaults when none were saved."""
        row = await self.settings_repo.get_by_tenant(tenant_id)
        if row is None:
            return self.default_settings()
        return self._to_snapshot(row)

    async def update_settings(self, tenant_id: str, data: TenantSettingsUpdate) -> TenantSettingsSnapshot:
        """Create or update a tenant's settings."""
        update_dict = data.model_dump(exclude_unset=True, mode="json")
        if "is_configured" in update_dict:
            update_dict["invoicing_configured"] = update_dict.pop("is_configured")

        row = await self.settings_repo.get_by_tenant(tenant_id)
        if row is None:
            defaults = self.default_settings()
            values = {
                "invoicing_configured": defaults.is_configured,
                "auto_create_proforma": defaults.auto_create_proforma,
                "default_days_due": defaults.default_days_due,
                "default_currency": defaults.default_currency,
                "referrals_enabled": defaults.referrals_enabled,
                "referral_code_expiry_days": defaults.referral_code_expiry_days,
                "max_referrals_per_client": defaults.max_referrals_per_client,
                "referrer_reward_type": defaults.referrer_reward_type.value,
                "referrer_reward_value": defaults.referrer_reward_value,
                "referred_reward_type": defaults.referred_reward_type.value,
                "referred_reward_value": defaults.referred_reward_value,
            }
            values.update(update_dict)
            row = await self.settings_repo.create(tenant_id=tenant_id, updated_at=utcnow(), **values)
        else:
            await self.settings_repo.update(row, updated_at=utcnow(), **update_dict)
        await self.session.commit()

        logger.info(f"Updated settings for tenant {tenant_id}", extra={"fields": sorted(update_dict)})
        return self._to_snapshot(row)
