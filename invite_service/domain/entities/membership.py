"""
Membership Entity

Links an account to a tenant with a role.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, Relationship, SQLModel

from invite_service.domain.base import utcnow

from .enums import MembershipStatus

DEFAULT_MEMBER_ROLE = "staff"

if TYPE_CHECKING:
    from .tenant import Tenant
    from .user import User


class Membership(SQLModel, table=True):
    """
    Membership entity - tenant-scoped role assignment for an account.

    Business Rules:
    - (user_id, tenant_id) must be unique
    - Re-redemption for the same person refreshes the row (upsert)
    - role is the legacy role name, role_id the structured role
    """

    __tablename__ = "memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    role: str = Field(default=DEFAULT_MEMBER_ROLE, max_length=50)
    role_id: Optional[UUID] = Field(default=None, foreign_key="roles.id")

    email: str = Field(max_length=255)
    name: str = Field(max_length=255)
    status: MembershipStatus = Field(default=MembershipStatus.active)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    user: "User" = Relationship(back_populates="memberships")
    tenant: "Tenant" = Relationship(back_populates="memberships")

    __table_args__ = (
        Index("idx_membership_user_tenant", "user_id", "tenant_id", unique=True),
        Index("idx_membership_status", "status"),
    )
