"""
Recurring invoice scheduler tests.
"""

import uuid
from datetime import date, timedelta

import pytest
from sqlalchemy import select

from app.models.invoice import DocumentType, Invoice, InvoiceStatus
from app.models.recurring_invoice import RecurringFrequency, RecurringInvoiceTemplate
from app.schemas.invoice import InvoiceItem
from app.schemas.recurring_invoice import RecurringInvoiceCreate, RecurringInvoiceUpdate
from app.services.recurring_invoice_service import RecurringInvoiceService

from factories import ITEM, TENANT_ID, create_client, create_template, reload


TODAY = date(2024, 3, 1)


async def invoices_for(session, template_id):
    result = await session.execute(select(Invoice).where(Invoice.recurring_template_id == template_id))
    return result.scalars().all()


@pytest.mark.asyncio
async def test_weekly_template_generates_invoice_and_advances(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, TODAY, frequency=RecurringFrequency.WEEKLY)
    template_id = template.id

    summary = await RecurringInvoiceService(test_db_session).process_due_templates(TODAY)

    assert summary.processed == 1
    assert summary.created == 1
    assert summary.errors == []

    template = await reload(test_db_session, RecurringInvoiceTemplate, template_id)
    assert template.next_generation_date == date(2024, 3, 8)
    assert template.generated_count == 1
    assert template.last_generated_at is not None
    assert template.is_active is True

    invoices = await invoices_for(test_db_session, template_id)
    assert len(invoices) == 1
    invoice = invoices[0]
    assert invoice.document_type == DocumentType.INVOICE
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.client_id == client.id
    assert invoice.issue_date == TODAY
    assert invoice.due_date == TODAY + timedelta(days=14)
    assert invoice.invoice_number == "FV2024-0001"
    assert str(invoice.subtotal) == "1000.00"
    assert str(invoice.vat_amount) == "210.00"
    assert str(invoice.total_amount) == "1210.00"


@pytest.mark.asyncio
async def test_one_failing_template_does_not_block_the_others(test_db_session):
    client = await create_client(test_db_session)
    ids = []
    for i in range(3):
        template = await create_template(test_db_session, client, TODAY, name=f"Template {i}")
        ids.append(template.id)
    broken = await reload(test_db_session, RecurringInvoiceTemplate, ids[1])
    broken.number_series_id = uuid.uuid4()
    await test_db_session.commit()

    summary = await RecurringInvoiceService(test_db_session).process_due_templates(TODAY)

    assert summary.processed == 3
    assert summary.created == 2
    assert len(summary.errors) == 1
    assert summary.errors[0].template_id == ids[1]
    assert "Number series not found" in summary.errors[0].message

    failed = await reload(test_db_session, RecurringInvoiceTemplate, ids[1])
    assert failed.next_generation_date == TODAY
    assert failed.generated_count == 0
    assert await invoices_for(test_db_session, ids[1]) == []

    numbers = []
    for template_id in (ids[0], ids[2]):
        invoices = await invoices_for(test_db_session, template_id)
        numbers.extend(invoice.invoice_number for invoice in invoices)
    assert sorted(numbers) == ["FV2024-0001", "FV2024-0002"]


@pytest.mark.asyncio
async def test_templates_not_yet_due_are_skipped(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, TODAY + timedelta(days=1))
    template_id = template.id

    summary = await RecurringInvoiceService(test_db_session).process_due_templates(TODAY)

    assert summary.processed == 0
    assert await invoices_for(test_db_session, template_id) == []


@pytest.mark.asyncio
async def test_late_run_keeps_the_schedule(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, date(2024, 1, 31), day_of_month=31)
    template_id = template.id

    await RecurringInvoiceService(test_db_session).process_due_templates(date(2024, 2, 5))

    template = await reload(test_db_session, RecurringInvoiceTemplate, template_id)
    assert template.next_generation_date == date(2024, 2, 29)


@pytest.mark.asyncio
async def test_template_past_end_date_after_advancing_is_deactivated(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, TODAY, end_date=date(2024, 3, 15))
    template_id = template.id

    summary = await RecurringInvoiceService(test_db_session).process_due_templates(TODAY)

    assert summary.created == 1
    assert summary.deactivated == 1
    template = await reload(test_db_session, RecurringInvoiceTemplate, template_id)
    assert template.is_active is False
    assert template.next_generation_date == date(2024, 4, 1)


@pytest.mark.asyncio
async def test_expired_templates_are_deactivated_not_deleted(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(
        test_db_session, client, date(2024, 2, 1), end_date=date(2024, 2, 20)
    )
    template_id = template.id

    summary = await RecurringInvoiceService(test_db_session).process_due_templates(TODAY)

    assert summary.processed == 0
    assert summary.deactivated == 1
    template = await reload(test_db_session, RecurringInvoiceTemplate, template_id)
    assert template.is_active is False


@pytest.mark.asyncio
async def test_run_covers_every_tenant(test_db_session):
    first = await create_client(test_db_session, tenant_id="tenant-a")
    second = await create_client(test_db_session, tenant_id="tenant-b")
    await create_template(test_db_session, first, TODAY)
    await create_template(test_db_session, second, TODAY)

    summary = await RecurringInvoiceService(test_db_session).process_due_templates(TODAY)

    assert summary.created == 2
    tenants = (await test_db_session.execute(select(Invoice.tenant_id))).scalars().all()
    assert sorted(tenants) == ["tenant-a", "tenant-b"]


@pytest.mark.asyncio
async def test_create_template_first_run_is_one_period_after_start(test_db_session):
    client = await create_client(test_db_session)
    service = RecurringInvoiceService(test_db_session)

    template = await service.create_template(
        TENANT_ID,
        RecurringInvoiceCreate(
            name="Venue rental",
            client_id=client.id,
            frequency=RecurringFrequency.QUARTERLY,
            start_date=date(2024, 5, 1),
            items=[InvoiceItem(**ITEM), InvoiceItem(**ITEM)],
        ),
    )

    assert template.start_date == date(2024, 5, 1)
    assert template.next_generation_date == date(2024, 8, 1)
    assert template.is_active is True
    assert str(template.total_amount) == "2420.00"
    assert template.days_due == 14


@pytest.mark.asyncio
async def test_create_template_first_run_respects_day_of_month(test_db_session):
    client = await create_client(test_db_session)
    service = RecurringInvoiceService(test_db_session)

    template = await service.create_template(
        TENANT_ID,
        RecurringInvoiceCreate(
            name="Membership",
            client_id=client.id,
            frequency=RecurringFrequency.MONTHLY,
            day_of_month=31,
            start_date=date(2024, 1, 31),
            items=[InvoiceItem(**ITEM)],
        ),
    )

    assert template.next_generation_date == date(2024, 2, 29)


@pytest.mark.asyncio
async def test_update_template_recomputes_totals(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, TODAY)
    service = RecurringInvoiceService(test_db_session)

    updated = await service.update_template(
        TENANT_ID,
        template.id,
        RecurringInvoiceUpdate(items=[InvoiceItem(**dict(ITEM, total_without_vat="500.00", vat_amount="105.00"))]),
    )

    assert str(updated.subtotal) == "500.00"
    assert str(updated.total_amount) == "605.00"


@pytest.mark.asyncio
async def test_deactivate_template(test_db_session):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, TODAY)
    service = RecurringInvoiceService(test_db_session)

    result = await service.deactivate_template(TENANT_ID, template.id)
    summary = await service.process_due_templates(TODAY)

    assert result.is_active is False
    assert summary.processed == 0
    assert await service.deactivate_template("other-tenant", template.id) is None


@pytest.mark.asyncio
async def test_template_update_rejects_null_required_fields(test_client, test_db_session, tenant_headers):
    client = await create_client(test_db_session)
    template = await create_template(test_db_session, client, TODAY)

    for field in ("name", "frequency", "days_due", "is_active", "items"):
        response = await test_client.put(
            f"/api/v1/recurring-invoices/{template.id}", json={field: None}, headers=tenant_headers
        )
        assert response.status_code == 422, field

    response = await test_client.put(
        f"/api/v1/recurring-invoices/{template.id}", json={"end_date": None, "notes": None}, headers=tenant_headers
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Monthly rental"
