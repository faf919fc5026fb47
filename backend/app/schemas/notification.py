"""
Schemas for the notifications service contract.
"""

from pydantic import BaseModel, Field
from typing import List


class ParticipantInviteResult(BaseModel):
    """Calendar invitations and emails sent to an order's participants."""
    participant_count: int = 0
    calendar_events: List[str] = Field(default_factory=list)
    emails_sent: int = 0
    errors: List[str] = Field(default_factory=list)
