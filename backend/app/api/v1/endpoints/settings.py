"""
Tenant settings API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_tenant_id
from app.db.session import get_db
from app.controllers.tenant_settings_controller import TenantSettingsController
from app.schemas.tenant_settings import TenantSettingsSnapshot, TenantSettingsUpdate

router = APIRouter()


@router.get("", response_model=TenantSettingsSnapshot)
async def get_settings(
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> TenantSettingsSnapshot:
    """Get the tenant's settings, or defaults if none were saved."""
    controller = TenantSettingsController(db)
    return await controller.get_settings(tenant_id)


@router.put("", response_model=TenantSettingsSnapshot)
async def update_settings(
    data: TenantSettingsUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> TenantSettingsSnapshot:
    """Update the tenant's settings."""
    controller = TenantSettingsController(db)
    return await controller.update_settings(tenant_id, data)
