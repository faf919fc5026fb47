"""
Tenant settings repository for database operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.repositories.base_repository import BaseRepository
from app.models.tenant_settings import TenantSettings


class TenantSettingsRepository(BaseRepository[TenantSettings]):
    """Repository for tenant settings operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(TenantSettings, session)

    async def get_by_tenant(self, tenant_id: str) -> Optional[TenantSettings]:
        """Get the settings row of a tenant."""
        result = await self.session.execute(
            select(TenantSettings).where(TenantSettings.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()
