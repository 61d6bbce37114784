"""
Tenant Entity

Workspace that staff members are invited into.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Relationship, SQLModel

from invite_service.domain.base import utcnow

from .enums import TenantStatus

if TYPE_CHECKING:
    from .membership import Membership


class Tenant(SQLModel, table=True):
    """Tenant entity - suspended tenants cannot send invitations"""

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255)

    status: TenantStatus = Field(default=TenantStatus.active)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="tenant")
