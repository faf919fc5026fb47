"""
Notification client tests against a local aiohttp server.
"""

import time
import uuid

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from app.core.integrations.notifications.notification_client import NotificationClient
from app.models.order import OrderStatus
from app.schemas.order import OrderStatusUpdate
from app.schemas.tenant_settings import TenantSettingsSnapshot
from app.services.order_service import OrderService, INVITES_SIDE_EFFECT

from factories import TENANT_ID, create_client, create_order


class NotificationsStub:
    """Records every request and answers with a fixed status."""

    def __init__(self, status=200, payload=None):
        self.status = status
        self.payload = payload or {}
        self.requests = []

    async def handle(self, request):
        self.requests.append((request.method, request.path, request.headers.get("X-Tenant-ID")))
        if self.status >= 400:
            return web.Response(status=self.status, text="boom")
        return web.json_response(self.payload, status=self.status)

    def app(self):
        web_app = web.Application()
        web_app.router.add_route("*", "/{tail:.*}", self.handle)
        return web_app


async def start(stub):
    server = TestServer(stub.app())
    await server.start_server()
    return server


@pytest.mark.asyncio
async def test_failed_invites_are_sent_once():
    stub = NotificationsStub(status=500)
    server = await start(stub)
    client = NotificationClient(base_url=str(server.make_url("")))
    order_id = uuid.uuid4()
    try:
        started = time.monotonic()
        with pytest.raises(aiohttp.ClientResponseError):
            await client.send_participant_invites(TENANT_ID, order_id)
        elapsed = time.monotonic() - started
    finally:
        await client.close()
        await server.close()

    assert stub.requests == [("POST", f"/orders/{order_id}/participant-invites", TENANT_ID)]
    assert elapsed < 1


@pytest.mark.asyncio
async def test_confirming_against_a_failing_service_posts_invites_once(test_db_session):
    stub = NotificationsStub(status=503)
    server = await start(stub)
    notifications = NotificationClient(base_url=str(server.make_url("")))
    customer = await create_client(test_db_session)
    order = await create_order(test_db_session, customer, status=OrderStatus.REVIEWING)
    order_id = order.id
    try:
        result = await OrderService(test_db_session, notification_client=notifications).apply_status_change(
            TENANT_ID,
            order_id,
            OrderStatusUpdate(status=OrderStatus.CONFIRMED),
            TenantSettingsSnapshot(is_configured=False),
        )
    finally:
        await notifications.close()
        await server.close()

    assert len(stub.requests) == 1
    assert result.order.status == OrderStatus.CONFIRMED
    assert [(e.name, e.success) for e in result.side_effects] == [(INVITES_SIDE_EFFECT, False)]
    assert result.warnings[0].startswith(f"{INVITES_SIDE_EFFECT}: ")


@pytest.mark.asyncio
async def test_invites_result_is_parsed():
    stub = NotificationsStub(payload={"participant_count": 2, "calendar_events": ["evt-1"], "emails_sent": 2})
    server = await start(stub)
    client = NotificationClient(base_url=str(server.make_url("")))
    try:
        result = await client.send_participant_invites(TENANT_ID, uuid.uuid4(), send_calendar=True, send_email=False)
    finally:
        await client.close()
        await server.close()

    assert result.participant_count == 2
    assert result.calendar_events == ["evt-1"]
    assert result.errors == []


@pytest.mark.asyncio
async def test_unconfigured_client_makes_no_request():
    client = NotificationClient(base_url="")

    result = await client.send_participant_invites(TENANT_ID, uuid.uuid4())

    assert client.is_configured is False
    assert result.errors == ["Notifications service is not configured"]
    assert await client.send_invoice_email(TENANT_ID, uuid.uuid4()) is False
