"""
Order API endpoints.
"""

from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.middleware import get_tenant_id
from app.db.session import get_db
from app.deps.di_container import get_container
from app.controllers.order_controller import OrderController
from app.models.order import OrderStatus
from app.schemas.order import (
    OrderCreate,
    OrderUpdate,
    OrderResponse,
    OrderListResponse,
    OrderStatusUpdate,
    StatusChangeResult,
    OrderWorkflowResponse,
    OrderStatusHistoryResponse,
)

router = APIRouter()


def _controller(db: AsyncSession) -> OrderController:
    return OrderController(db, notification_client=get_container().notification_client())


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Order not found",
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Create a new order in status `new`."""
    controller = _controller(db)
    try:
        return await controller.create_order(tenant_id, order_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("", response_model=OrderListResponse)
async def list_orders(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    client_id: Optional[UUID] = Query(None),
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> OrderListResponse:
    """List orders with optional filters."""
    controller = _controller(db)
    return await controller.list_orders(
        tenant_id,
        skip=skip,
        limit=limit,
        status=status_filter,
        client_id=client_id,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Get order by ID."""
    controller = _controller(db)
    order = await controller.get_order(tenant_id, order_id)
    if not order:
        raise _not_found()
    return order


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: UUID,
    order_data: OrderUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> OrderResponse:
    """Update order details. Use the status endpoint to change status."""
    controller = _controller(db)
    try:
        order = await controller.update_order(tenant_id, order_id, order_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    if not order:
        raise _not_found()
    return order


@router.patch("/{order_id}/status", response_model=StatusChangeResult)
async def change_order_status(
    order_id: UUID,
    status_data: OrderStatusUpdate,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> StatusChangeResult:
    """
    Move an order to another status.
    Side effect failures are returned as warnings; the status change stands.
    """
    controller = _controller(db)
    try:
        result = await controller.change_status(tenant_id, order_id, status_data)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    if not result:
        raise _not_found()
    return result


@router.get("/{order_id}/workflow", response_model=OrderWorkflowResponse)
async def get_order_workflow(
    order_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> OrderWorkflowResponse:
    """Get allowed next statuses and progress."""
    controller = _controller(db)
    workflow = await controller.get_workflow(tenant_id, order_id)
    if not workflow:
        raise _not_found()
    return workflow


@router.get("/{order_id}/history", response_model=List[OrderStatusHistoryResponse])
async def get_order_history(
    order_id: UUID,
    tenant_id: str = Depends(get_tenant_id),
    db: AsyncSession = Depends(get_db),
) -> List[OrderStatusHistoryResponse]:
    """Get the status history of an order."""
    controller = _controller(db)
    history = await controller.get_status_history(tenant_id, order_id)
    if history is None:
        raise _not_found()
    return history
