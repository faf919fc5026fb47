"""
Order controller.
Loads tenant settings and hands them to the order workflow explicitly.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.core.integrations.notifications.notification_client import NotificationClient
from app.services.invoice_service import InvoiceService
from app.services.order_service import OrderService
from app.services.tenant_settings_service import TenantSettingsService
from app.models.order import OrderStatus
from app.schemas.order import (
    OrderCreate, OrderUpdate, OrderResponse, OrderListResponse, OrderStatusUpdate,
    StatusChangeResult, OrderWorkflowResponse, OrderStatusHistoryResponse,
)


class OrderController(BaseController):
    """Controller for order operations."""

    def __init__(self, session: AsyncSession, notification_client: Optional[NotificationClient] = None):
        self.settings_service = TenantSettingsService(session)
        self.order_service = OrderService(
            session,
            invoice_service=InvoiceService(session, notification_client=notification_client),
            notification_client=notification_client,
        )

    async def create_order(self, tenant_id: str, order_data: OrderCreate) -> OrderResponse:
        """Create a new order."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.order_service.create_order(tenant_id, order_data, settings=settings)

    async def get_order(self, tenant_id: str, order_id: UUID) -> Optional[OrderResponse]:
        """Get order by ID."""
        return await self.order_service.get_order(tenant_id, order_id)

    async def list_orders(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None,
        client_id: Optional[UUID] = None,
    ) -> OrderListResponse:
        """List orders with optional filters."""
        orders, total = await self.order_service.list_orders(
            tenant_id,
            skip=skip,
            limit=limit,
            status=status,
            client_id=client_id,
        )
        return OrderListResponse(items=orders, total=total)

    async def update_order(self, tenant_id: str, order_id: UUID, order_data: OrderUpdate) -> Optional[OrderResponse]:
        """Update an order."""
        return await self.order_service.update_order(tenant_id, order_id, order_data)

    async def change_status(
        self,
        tenant_id: str,
        order_id: UUID,
        status_data: OrderStatusUpdate,
    ) -> Optional[StatusChangeResult]:
        """Apply a status change with the tenant's current settings."""
        settings = await self.settings_service.get_settings(tenant_id)
        return await self.order_service.apply_status_change(tenant_id, order_id, status_data, settings)

    async def get_workflow(self, tenant_id: str, order_id: UUID) -> Optional[OrderWorkflowResponse]:
        """Get allowed next statuses and progress."""
        return await self.order_service.get_workflow(tenant_id, order_id)

    async def get_status_history(self, tenant_id: str, order_id: UUID) -> Optional[List[OrderStatusHistoryResponse]]:
        """Get status history."""
        return await self.order_service.get_status_history(tenant_id, order_id)
