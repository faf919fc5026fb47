"""
Row factories shared by the test modules.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client
from app.models.order import Order, OrderStatus
from app.models.recurring_invoice import RecurringInvoiceTemplate, RecurringFrequency


TENANT_ID = "tenant-test"

ITEM = {
    "description": "Escape game, 2 hours",
    "quantity": "1",
    "unit": "pcs",
    "unit_price": "1000.00",
    "vat_rate": "21",
    "total_without_vat": "1000.00",
    "vat_amount": "210.00",
}


async def create_client(session: AsyncSession, name: str = "Jana Nováková", tenant_id: str = TENANT_ID, **kwargs) -> Client:
    client = Client(tenant_id=tenant_id, name=name, **kwargs)
    session.add(client)
    await session.commit()
    return client


async def create_order(
    session: AsyncSession,
    client: Client,
    status: OrderStatus = OrderStatus.NEW,
    number: str = "ORD-2024-0001",
    items=None,
) -> Order:
    order = Order(
        tenant_id=client.tenant_id,
        order_number=number,
        client_id=client.id,
        status=status,
        items=[dict(ITEM)] if items is None else items,
        total_price=Decimal("1210.00"),
        currency="CZK",
    )
    session.add(order)
    await session.commit()
    return order


async def create_template(
    session: AsyncSession,
    client: Client,
    next_generation_date: date,
    frequency: RecurringFrequency = RecurringFrequency.MONTHLY,
    end_date: date = None,
    day_of_month: int = None,
    name: str = "Monthly rental",
) -> RecurringInvoiceTemplate:
    template = RecurringInvoiceTemplate(
        tenant_id=client.tenant_id,
        name=name,
        client_id=client.id,
        frequency=frequency,
        day_of_month=day_of_month,
        start_date=next_generation_date,
        end_date=end_date,
        next_generation_date=next_generation_date,
        items=[dict(ITEM)],
        subtotal=Decimal("1000.00"),
        vat_amount=Decimal("210.00"),
        total_amount=Decimal("1210.00"),
        currency="CZK",
        days_due=14,
        generated_count=0,
    )
    session.add(template)
    await session.commit()
    return template


async def reload(session: AsyncSession, model, row_id):
    """Fresh copy of a row, overwriting whatever the session has cached."""
    from sqlalchemy import select

    result = await session.execute(
        select(model).where(model.id == row_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()
