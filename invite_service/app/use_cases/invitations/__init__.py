"""
Invitation Use Cases

Invitation creation and the two-phase redemption protocol.
"""

from .complete_invitation_use_case import CompleteInvitationUseCase
from .create_invitation_use_case import CreateInvitationUseCase
from .dtos import (
    CompleteInvitationResponse,
    CreateInvitationResponse,
    HandoverResponse,
)
from .handover_invitation_use_case import HandoverInvitationUseCase

__all__ = [
    "CreateInvitationUseCase",
    "HandoverInvitationUseCase",
    "CompleteInvitationUseCase",
    "CreateInvitationResponse",
    "HandoverResponse",
    "CompleteInvitationResponse",
]
