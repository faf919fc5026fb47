"""
Notifications service client.
Sends calendar invitations and emails through the platform notifications service.
"""

from typing import Optional
from uuid import UUID
import logging

from app.core.config import settings
from app.core.integrations.http.http_client import HttpClient
from app.schemas.notification import ParticipantInviteResult

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Notifications service is not configured"


class NotificationClient:
    """
    Client for the notifications service.

    When no base URL is configured no request is made; participant invites
    report the gap in `errors` and invoice emails return False.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        http_client: Optional[HttpClient] = None,
    ):
        """
        Initialize notifications client.

        Args:
            base_url: Notifications service URL (defaults to config)
            timeout: Request timeout in seconds (defaults to config)
            http_client: Preconfigured HTTP client, mainly for tests
        """
        self.base_url = base_url if base_url is not None else settings.NOTIFICATIONS_SERVICE_URL
        self.http_client = http_client
        if self.http_client is None and self.base_url:
            self.http_client = HttpClient(
                base_url=self.base_url,
                timeout=timeout or settings.NOTIFICATIONS_TIMEOUT,
            )

    @property
    def is_configured(self) -> bool:
        return self.http_client is not None

    async def send_participant_invites(
        self,
        tenant_id: str,
        order_id: UUID,
        send_calendar: bool = True,
        send_email: bool = True,
    ) -> ParticipantInviteResult:
        """
        Invite an order's participants.

        Raises:
            aiohttp.ClientError: when the service could not be reached
        """
        if not self.is_configured:
            logger.warning(f"Skipping participant invites for order {order_id}: {NOT_CONFIGURED_MESSAGE}")
            return ParticipantInviteResult(errors=[NOT_CONFIGURED_MESSAGE])

        payload = await self.http_client.post(
            f"/orders/{order_id}/participant-invites",
            json={"send_calendar": send_calendar, "send_email": send_email},
            headers={"X-Tenant-ID": tenant_id},
        )
        result = ParticipantInviteResult.model_validate(payload or {})
        logger.info(
            f"Participant invites sent for order {order_id}",
            extra={
                "participants": result.participant_count,
                "calendar_events": len(result.calendar_events),
                "emails_sent": result.emails_sent,
            },
        )
        return result

    async def send_invoice_email(self, tenant_id: str, invoice_id: UUID) -> bool:
        """Email an invoice to its client. Returns False when the service is not configured."""
        if not self.is_configured:
            logger.warning(f"Skipping email for invoice {invoice_id}: {NOT_CONFIGURED_MESSAGE}")
            return False

        await self.http_client.post(
            f"/invoices/{invoice_id}/email",
            headers={"X-Tenant-ID": tenant_id},
        )
        logger.info(f"Invoice email sent for invoice {invoice_id}")
        return True

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.http_client is not None:
            await self.http_client.close()
