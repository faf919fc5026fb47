"""
API v1 router that aggregates all endpoint routers.
Tenant routes resolve their tenant from the X-Tenant-ID header; scheduler
routes are guarded by the cron secret.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    health,
    clients,
    orders,
    invoices,
    recurring_invoices,
    referrals,
    settings,
)

api_router = APIRouter()

# Public routes
api_router.include_router(health.router, tags=["health"])

# Tenant routes
api_router.include_router(clients.router, prefix="/clients", tags=["clients"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(recurring_invoices.router, prefix="/recurring-invoices", tags=["recurring-invoices"])
api_router.include_router(referrals.router, prefix="/referrals", tags=["referrals"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
