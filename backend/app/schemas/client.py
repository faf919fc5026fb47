"""
Client Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class ClientBase(BaseModel):
    """Base client schema with common fields."""
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    organization: Optional[str] = Field(None, max_length=255)


class ClientCreate(ClientBase):
    """Schema for creating a client."""
    pass


class ClientResponse(ClientBase):
    """Schema for client response."""
    id: UUID
    referral_code: Optional[str] = None
    referred_by_id: Optional[UUID] = None
    credits_balance: int = 0
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClientListResponse(BaseModel):
    """Schema for client list response."""
    items: List[ClientResponse]
    total: int
