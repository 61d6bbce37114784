"""
Capability Token contract

A capability token is a signed, self-contained, time-bounded credential
asserting that its bearer may complete registration for one invitation.
It is never persisted; it can only be revoked by expiry.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from invite_service.libs.result import Result

# Error codes returned by verify()
MALFORMED_TOKEN = "MALFORMED_TOKEN"
INVALID_SIGNATURE = "INVALID_SIGNATURE"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
TOKEN_MINT_FAILED = "TOKEN_MINT_FAILED"


class CapabilityClaims(BaseModel):
    """Identity claims carried from handover to completion"""

    invite_id: str
    email: str
    tenant_id: str
    role: Optional[str] = None
    role_id: Optional[str] = None
    # Filled in by the signer; ignored when minting
    expires_at: Optional[datetime] = None


class ICapabilityTokenSigner(ABC):
    """Mints and verifies capability tokens"""

    @abstractmethod
    def mint(self, claims: CapabilityClaims) -> Result[str]:
        """Sign claims with an absolute expiry and return the compact token"""
        pass

    @abstractmethod
    def verify(self, token: str) -> Result[CapabilityClaims]:
        """
        Check signature and expiry without side effects.

        Errors: MALFORMED_TOKEN, INVALID_SIGNATURE, TOKEN_EXPIRED
        """
        pass
