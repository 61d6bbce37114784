"""
Invitation Use Case DTOs (Data Transfer Objects)

Response classes for the invitation domain.
Provides type safety and clear contracts between layers.
"""

from typing import Optional

from pydantic import BaseModel

from invite_service.app.services.account_store import AuthSession


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInvitationResponse(BaseModel):
    """Response for create invitation use case"""

    invite_id: str
    email: str
    status: str
    invite_url: str


class HandoverResponse(BaseModel):
    """Response for the handover phase (invite link opened)"""

    capability_token: str
    email: str
    role: Optional[str] = None


class CompleteInvitationResponse(BaseModel):
    """Response for the completion phase (registration form submitted)"""

    session: AuthSession
    role: Optional[str] = None
