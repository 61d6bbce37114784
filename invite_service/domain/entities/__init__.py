"""
Invite Service Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    InvitationStatus,
    MembershipStatus,
    TenantStatus,
    UserStatus,
)

# Export all entities
from .user import User
from .tenant import Tenant
from .role import Role
from .membership import DEFAULT_MEMBER_ROLE, Membership
from .invitation import Invitation
from .session import Session
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserStatus",
    "TenantStatus",
    "MembershipStatus",
    "InvitationStatus",
    # Entities
    "DEFAULT_MEMBER_ROLE",
    "User",
    "Tenant",
    "Role",
    "Membership",
    "Invitation",
    "Session",
    "AuditEvent",
]
