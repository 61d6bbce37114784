"""
Invitation Entity

Single-use offer of tenant membership tied to an email address.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from invite_service.domain.base import utcnow

from .enums import InvitationStatus


class Invitation(SQLModel, table=True):
    """
    Invitation entity - outstanding offer to join a tenant.

    Business Rules:
    - Created by a tenant owner/admin
    - Token is single-use, cryptographically secure, unique
    - Transitions pending -> consumed exactly once (burn), never back
    - Never deleted by the redemption protocol (kept for audit)
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)
    email: str = Field(max_length=255, nullable=False, index=True)

    # Legacy free-text role name and structured role reference
    role: Optional[str] = Field(default=None, max_length=50)
    role_id: Optional[UUID] = Field(default=None, foreign_key="roles.id")

    token: str = Field(unique=True, index=True, max_length=64)
    status: InvitationStatus = Field(default=InvitationStatus.pending)

    invited_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_invitation_tenant_email", "tenant_id", "email"),
        Index("idx_invitation_status", "status"),
    )
