"""
Client service with business logic.
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.db.repositories.client_repository import ClientRepository
from app.schemas.client import ClientCreate, ClientResponse


class ClientService(BaseService):
    """Service for client operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.client_repo = ClientRepository(session)

    async def create_client(self, tenant_id: str, client_data: ClientCreate) -> ClientResponse:
        """Create a new client. Emails are unique within a tenant."""
        if client_data.email:
            existing = await self.client_repo.get_by_email(tenant_id, client_data.email)
            if existing:
                raise ValueError(f"Client with email '{client_data.email}' already exists")

        client = await self.client_repo.create(tenant_id=tenant_id, **client_data.model_dump())
        await self.session.commit()
        return ClientResponse.model_validate(client)

    async def get_client(self, tenant_id: str, client_id: UUID) -> Optional[ClientResponse]:
        """Get client by ID."""
        client = await self.client_repo.get_for_tenant(client_id, tenant_id)
        if not client:
            return None
        return ClientResponse.model_validate(client)

    async def list_clients(
        self,
        tenant_id: str,
        skip: int = 0,
        limit: int = 100,
    ) -> Tuple[List[ClientResponse], int]:
        """List clients of a tenant."""
        clients = await self.client_repo.list(skip=skip, limit=limit, tenant_id=tenant_id)
        total = await self.client_repo.count(tenant_id=tenant_id)
        return [ClientResponse.model_validate(c) for c in clients], total
