"""
Tenant settings controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.tenant_settings_service import TenantSettingsService
from app.schemas.tenant_settings import TenantSettingsSnapshot, TenantSettingsUpdate


class TenantSettingsController(BaseController):
    """Controller for tenant settings operations."""

    def __init__(self, session: AsyncSession):
        self.settings_service = TenantSettingsService(session)

    async def get_settings(self, tenant_id: str) -> TenantSettingsSnapshot:
        """Get settings, falling back to defaults."""
        return await self.settings_service.get_settings(tenant_id)

    async def update_settings(self, tenant_id: str, data: TenantSettingsUpdate) -> TenantSettingsSnapshot:
        """Create or update settings."""
        return await self.settings_service.update_settings(tenant_id, data)
