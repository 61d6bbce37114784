"""
User Entity

Account owned by the account store.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Relationship, SQLModel

from invite_service.domain.base import utcnow

from .enums import UserStatus

if TYPE_CHECKING:
    from .membership import Membership


class User(SQLModel, table=True):
    """
    User entity - a person who can belong to multiple tenants.

    Business Rules:
    - Email must be unique across all users
    - Password stored as bcrypt hash (cost from BCRYPT_ROUNDS)
    - Accounts provisioned through an invitation start with a verified email
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    full_name: Optional[str] = Field(default=None, max_length=255)
    user_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    status: UserStatus = Field(default=UserStatus.active)
    email_verified: bool = Field(default=False)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Relationships
    memberships: list["Membership"] = Relationship(back_populates="user")
