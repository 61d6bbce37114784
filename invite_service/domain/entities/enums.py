"""
Invite Service Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserStatus(str, Enum):
    """Account status"""

    active = "active"
    disabled = "disabled"


class TenantStatus(str, Enum):
    """Tenant status"""

    active = "active"
    suspended = "suspended"


class MembershipStatus(str, Enum):
    """Membership status"""

    active = "active"
    revoked = "revoked"


class InvitationStatus(str, Enum):
    """Invitation status (pending -> consumed, never back)"""

    pending = "pending"
    consumed = "consumed"
