"""
Client controller.
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.client_service import ClientService
from app.schemas.client import ClientCreate, ClientResponse, ClientListResponse


class ClientController(BaseController):
    """Controller for client operations."""

    def __init__(self, session: AsyncSession):
        self.client_service = ClientService(session)

    async def create_client(self, tenant_id: str, client_data: ClientCreate) -> ClientResponse:
        """Create a new client."""
        return await self.client_service.create_client(tenant_id, client_data)

    async def get_client(self, tenant_id: str, client_id: UUID) -> Optional[ClientResponse]:
        """Get client by ID."""
        return await self.client_service.get_client(tenant_id, client_id)

    async def list_clients(self, tenant_id: str, skip: int = 0, limit: int = 100) -> ClientListResponse:
        """List clients."""
        clients, total = await self.client_service.list_clients(tenant_id, skip=skip, limit=limit)
        return ClientListResponse(items=clients, total=total)
