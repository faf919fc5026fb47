"""
Scheduler endpoint tests: cron secret guard and the daily runs.
"""

from datetime import date

import pytest

from app.core.config import settings
from app.models.invoice import Invoice, InvoiceStatus
from app.models.recurring_invoice import RecurringFrequency

from factories import create_client, create_template


@pytest.fixture
def cron_secret(monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", "test-cron-secret")
    return {"Authorization": "Bearer test-cron-secret"}


@pytest.mark.asyncio
async def test_cron_routes_unavailable_without_secret(test_client, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", "")

    response = await test_client.post("/api/v1/recurring-invoices/process")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_cron_routes_reject_wrong_secret(test_client, cron_secret):
    response = await test_client.post(
        "/api/v1/recurring-invoices/process",
        headers={"Authorization": "Bearer wrong"},
    )
    assert response.status_code == 401

    response = await test_client.post("/api/v1/invoices/mark-overdue")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_process_recurring_invoices(test_client, test_db_session, cron_secret):
    client = await create_client(test_db_session)
    template = await create_template(
        test_db_session, client, date(2024, 3, 1), frequency=RecurringFrequency.WEEKLY
    )

    response = await test_client.post(
        "/api/v1/recurring-invoices/process",
        params={"today": "2024-03-01"},
        headers=cron_secret,
    )

    assert response.status_code == 200
    summary = response.json()
    assert summary["run_date"] == "2024-03-01"
    assert summary["processed"] == 1
    assert summary["created"] == 1
    assert summary["errors"] == []

    response = await test_client.get(
        f"/api/v1/recurring-invoices/{template.id}",
        headers={"X-Tenant-ID": client.tenant_id},
    )
    assert response.json()["next_generation_date"] == "2024-03-08"
    assert response.json()["generated_count"] == 1


@pytest.mark.asyncio
async def test_mark_overdue(test_client, test_db_session, cron_secret):
    client = await create_client(test_db_session)
    invoice = Invoice(
        tenant_id=client.tenant_id,
        invoice_number="FV2020-0001",
        client_id=client.id,
        status=InvoiceStatus.SENT,
        issue_date=date(2020, 1, 1),
        due_date=date(2020, 1, 15),
        items=[],
        currency="CZK",
    )
    test_db_session.add(invoice)
    await test_db_session.commit()

    response = await test_client.post("/api/v1/invoices/mark-overdue", headers=cron_secret)

    assert response.status_code == 200
    assert response.json()["updated"] == 1
