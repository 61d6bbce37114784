import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

from jose import JWTError, jws, jwt
from jose.exceptions import JWSError
from jose.utils import base64url_decode, base64url_encode
from pydantic import ValidationError

from invite_service.app.services.capability_token import (
    INVALID_SIGNATURE,
    MALFORMED_TOKEN,
    TOKEN_EXPIRED,
    TOKEN_MINT_FAILED,
    CapabilityClaims,
    ICapabilityTokenSigner,
)
from invite_service.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

ALGORITHM = "HS512"
DEFAULT_TTL = timedelta(hours=1)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class JoseCapabilityTokenSigner(ICapabilityTokenSigner):
    """
    HS512 capability token signer backed by python-jose.

    Args:
        secret: Server-held signing key
        ttl: Lifetime of minted tokens (1 hour by default)
        clock: Returns the current aware UTC datetime
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("Capability token signing secret must not be empty")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock or _utc_now

    def mint(self, claims: CapabilityClaims) -> Result[str]:
        expires_at = int((self._clock() + self._ttl).timestamp())
        payload = claims.model_dump(exclude={"expires_at"})
        payload["exp"] = expires_at

        try:
            token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        except (JWTError, TypeError, ValueError) as exc:
            logger.error(f"Capability token minting failed: {exc.__class__.__name__}")
            return Return.err(
                Error(TOKEN_MINT_FAILED, "Could not create capability token")
            )

        return Return.ok(token)

    def verify(self, token: str) -> Result[CapabilityClaims]:
        malformed = Return.err(Error(MALFORMED_TOKEN, "Capability token is malformed"))

        if not token or token.count(".") != 2:
            return malformed

        try:
            header = jws.get_unverified_header(token)
        except JWSError:
            return malformed
        if header.get("alg") != ALGORITHM:
            return malformed

        # Reject non-canonical signature encodings so every character counts
        signature_segment = token.rsplit(".", 1)[1]
        try:
            canonical = base64url_encode(base64url_decode(signature_segment.encode()))
        except (ValueError, TypeError):
            return malformed
        if canonical.decode() != signature_segment:
            return malformed

        # Header and segments parsed, so a failure here is the signature itself
        try:
            raw_payload = jws.verify(token, self._secret, algorithms=[ALGORITHM])
        except JWSError:
            return Return.err(
                Error(INVALID_SIGNATURE, "Capability token signature is invalid")
            )

        try:
            payload = json.loads(raw_payload)
        except ValueError:
            return malformed
        if not isinstance(payload, dict):
            return malformed

        exp = payload.pop("exp", None)
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            return malformed

        try:
            claims = CapabilityClaims(
                **payload, expires_at=datetime.fromtimestamp(exp, UTC)
            )
        except (ValidationError, TypeError, OverflowError, OSError, ValueError):
            return malformed

        if self._clock().timestamp() >= exp:
            return Return.err(Error(TOKEN_EXPIRED, "Capability token has expired"))

        return Return.ok(claims)
