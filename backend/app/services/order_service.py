"""
Order service with business logic for the order workflow.

Status changes are committed before any side effect runs. Side effects
(proforma invoice, participant invites) are best effort: each one that fails
is rolled back on its own, logged, and reported as a warning.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

from app.services.base_service import BaseService
from app.services.invoice_service import InvoiceService, serialize_items
from app.core.integrations.notifications.notification_client import NotificationClient
from app.db.repositories.client_repository import ClientRepository
from app.db.repositories.order_repository import OrderRepository, OrderStatusHistoryRepository
from app.models.invoice import DocumentType
from app.models.order import Order, OrderStatus
from app.schemas.common import SideEffectOutcome
from app.schemas.order import (
    OrderCreate, OrderUpdate, OrderResponse, OrderStatusUpdate,
    StatusChangeResult, OrderWorkflowResponse, OrderStatusHistoryResponse,
)
from app.schemas.tenant_settings import TenantSettingsSnapshot
from app.utils.clock import utcnow
from app.utils.invoice_totals import sum_item_totals
from app.utils.order_status import (
    ensure_valid_transition,
    get_next_statuses,
    get_status_progress,
    is_terminal,
)

PROFORMA_SIDE_EFFECT = "proforma_invoice"
INVITES_SIDE_EFFECT = "participant_invites"

# Lifecycle timestamp stamped when an order enters the status
STATUS_TIMESTAMP_FIELDS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.COMPLETED: "completed_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


class OrderService(BaseService):
    """Service for order operations."""

    def __init__(
        self,
        session: AsyncSession,
        invoice_service: Optional[InvoiceService] = None,
        notification_client: Optional[NotificationClient] = None,
    ):
        self.session = session
        self.order_repo = OrderRepository(session)
        self.history_repo = OrderStatusHistoryRepository(session)
        self.client_repo = ClientRepository(session)
        self.invoice_service = invoice_service or InvoiceService(session)
        self.notification_client = notification_client or NotificationClient()

    async def _next_order_number(self, tenant_id: str) -> str:
        year = utcnow().year
        prefix = f"ORD-{year}-"
        existing = await self.order_repo.count_by_number_prefix(tenant_id, prefix)
        return f"{prefix}{existing + 1:04d}"

    async def create_order(
        self,
        tenant_id: str,
        order_data: OrderCreate,
        settings: Optional[TenantSettingsSnapshot] = None,
    ) -> OrderResponse:
        """Create an order in status `new`."""
        settings = settings or TenantSettingsSnapshot()
        client = await self.client_repo.get_for_tenant(order_data.client_id, tenant_id)
        if not client:
            raise ValueError("Client not found")

        items = serialize_items(order_data.items)
        _, _, total_price = sum_item_totals(items)
        order = await self.order_repo.create(
            tenant_id=tenant_id,
            order_number=await self._next_order_number(tenant_id),
            client_id=client.id,
            status=OrderStatus.NEW,
            event_name=order_data.event_name,
            event_date=order_data.event_date,
            venue=order_data.venue,
            items=items,
            total_price=total_price,
            currency=order_data.currency or settings.default_currency,
            notes=order_data.notes,
        )
        await self.session.commit()
        logger.info(f"Created order {order.order_number}", extra={"tenant_id": tenant_id})
        return OrderResponse.model_validate(order)

    async def get_order(self, tenant_id: str, order_id: UUID) -> Optional[OrderResponse]:
        """Get order by ID."""
        order = await self.order_repo.get_for_tenant(order_id, tenant_id)
        if not order:
            return None
        return OrderResponse.model_validate(order)

    async def list_orders(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
        status: Optional[OrderStatus] = None,
        client_id: Optional[UUID] = None,
    ) -> Tuple[List[OrderResponse], int]:
        """List orders with optional filters."""
        filters = {"tenant_id": tenant_id, "status": status, "client_id": client_id}
        orders = await self.order_repo.list(skip=skip, limit=limit, **filters)
        total = await self.order_repo.count(**filters)
        return [OrderResponse.model_validate(o) for o in orders], total

    async def update_order(
        self,
        tenant_id: str,
        order_id: UUID,
        order_data: OrderUpdate,
    ) -> Optional[OrderResponse]:
        """Update editable order fields. The status is never changed here."""
        order = await self.order_repo.get_for_tenant(order_id, tenant_id)
        if not order:
            return None
        if is_terminal(order.status):
            raise ValueError(f"Cannot edit an order in status '{OrderStatus(order.status).value}'")

        update_dict = order_data.model_dump(exclude_unset=True, exclude={"items"})
        if order_data.items is not None:
            items = serialize_items(order_data.items)
            update_dict["items"] = items
            update_dict["total_price"] = sum_item_totals(items)[2]
        update_dict["updated_at"] = utcnow()

        await self.order_repo.update(order, **update_dict)
        await self.session.commit()
        return OrderResponse.model_validate(order)

    async def get_status_history(self, tenant_id: str, order_id: UUID) -> Optional[List[OrderStatusHistoryResponse]]:
        """Status history of an order, oldest first."""
        order = await self.order_repo.get_for_tenant(order_id, tenant_id)
        if not order:
            return None
        history = await self.history_repo.list_by_order(order.id)
        return [OrderStatusHistoryResponse.model_validate(h) for h in history]

    async def get_workflow(self, tenant_id: str, order_id: UUID) -> Optional[OrderWorkflowResponse]:
        """Allowed next statuses and progress of an order."""
        order = await self.order_repo.get_for_tenant(order_id, tenant_id)
        if not order:
            return None
        return OrderWorkflowResponse(
            status=order.status,
            next_statuses=get_next_statuses(order.status),
            progress=get_status_progress(order.status),
            is_terminal=is_terminal(order.status),
        )

    async def apply_status_change(
        self,
        tenant_id: str,
        order_id: UUID,
        status_data: OrderStatusUpdate,
        settings: TenantSettingsSnapshot,
    ) -> Optional[StatusChangeResult]:
        """
        Move an order to a new status and run the side effects of confirmation.

        Returns None if the order does not exist.

        Raises:
            InvalidStatusTransitionError: if the workflow does not allow the
                move; nothing is written in that case.
        """
        order = await self.order_repo.get_for_tenant(order_id, tenant_id)
        if not order:
            return None

        previous_status = OrderStatus(order.status)
        next_status = OrderStatus(status_data.status)
        ensure_valid_transition(previous_status, next_status)

        now = utcnow()
        update_dict = {"status": next_status, "updated_at": now}
        timestamp_field = STATUS_TIMESTAMP_FIELDS.get(next_status)
        if timestamp_field:
            update_dict[timestamp_field] = now
        await self.order_repo.update(order, **update_dict)
        await self.history_repo.create(
            order_id=order.id,
            from_status=previous_status,
            to_status=next_status,
            changed_by=status_data.changed_by,
            note=status_data.note,
            changed_at=now,
        )
        await self.session.commit()
        logger.info(
            f"Order {order.order_number} moved from {previous_status.value} to {next_status.value}",
            extra={"tenant_id": tenant_id, "order_id": str(order_id)},
        )

        side_effects: List[SideEffectOutcome] = []
        proforma_created = False
        invoice_number = None

        if next_status == OrderStatus.CONFIRMED and previous_status != OrderStatus.CONFIRMED:
            if settings.is_configured and settings.auto_create_proforma:
                outcome, invoice_number = await self._create_proforma(tenant_id, order_id, settings)
                if outcome is not None:
                    side_effects.append(outcome)
                    proforma_created = outcome.success
            else:
                logger.info(f"Automatic proforma disabled, skipping for order {order_id}")

            side_effects.append(await self._send_participant_invites(tenant_id, order_id, status_data))

        warnings = [f"{outcome.name}: {outcome.error}" for outcome in side_effects if not outcome.success]

        # Re-read: a side effect rollback expires loaded instances
        order = await self.order_repo.get(order_id)
        return StatusChangeResult(
            order=OrderResponse.model_validate(order),
            previous_status=previous_status,
            side_effects=side_effects,
            proforma_created=proforma_created,
            invoice_number=invoice_number,
            warnings=warnings,
        )

    async def _create_proforma(
        self,
        tenant_id: str,
        order_id: UUID,
        settings: TenantSettingsSnapshot,
    ) -> Tuple[Optional[SideEffectOutcome], Optional[str]]:
        """Issue a proforma unless the order already has an invoice. Never raises."""
        try:
            if await self.invoice_service.count_invoices_for_order(order_id) > 0:
                logger.info(f"Order {order_id} already has an invoice, skipping proforma")
                return None, None

            result = await self.invoice_service.create_invoice_from_order(
                tenant_id,
                order_id,
                document_type=DocumentType.PROFORMA,
                send_email=False,
                settings=settings,
            )
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to create proforma for order {order_id}: {e}")
            # Don't fail the status change if invoicing fails
            return SideEffectOutcome(name=PROFORMA_SIDE_EFFECT, success=False, error=str(e)), None

        if result is None or not result.success:
            error = result.message if result is not None else "Order not found"
            logger.error(f"Failed to create proforma for order {order_id}: {error}")
            return SideEffectOutcome(name=PROFORMA_SIDE_EFFECT, success=False, error=error), None

        logger.info(f"Created proforma {result.invoice_number} for order {order_id}")
        return SideEffectOutcome(name=PROFORMA_SIDE_EFFECT, success=True), result.invoice_number

    async def _send_participant_invites(
        self,
        tenant_id: str,
        order_id: UUID,
        status_data: OrderStatusUpdate,
    ) -> SideEffectOutcome:
        """Invite participants of a confirmed order. Never raises."""
        try:
            result = await self.notification_client.send_participant_invites(
                tenant_id,
                order_id,
                send_calendar=status_data.send_calendar,
                send_email=status_data.send_email,
            )
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Failed to send participant invites for order {order_id}: {e}")
            # Don't fail the status change if notifications fail
            return SideEffectOutcome(name=INVITES_SIDE_EFFECT, success=False, error=str(e))

        if result.errors:
            return SideEffectOutcome(name=INVITES_SIDE_EFFECT, success=False, error="; ".join(result.errors))
        return SideEffectOutcome(name=INVITES_SIDE_EFFECT, success=True)
