"""JWT signing and verification for the Duo handshake.

Tokens in both directions are HMAC-signed with the shared client secret. The
algorithm is pinned to ``HS512`` and never read from the token header or
caller input, which rules out algorithm confusion attacks.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import jwt

from duo_universal import constants
from duo_universal.models.errors import JwtDecodeError

logger = logging.getLogger(__name__)


class JwtCodec:
    """Signs and verifies JWTs with a shared secret and fixed algorithm.

    Verification tolerates clock drift between the relying party and Duo by
    ``leeway`` seconds in both directions for ``exp``, ``nbf`` and ``iat``.
    """

    algorithm = constants.SIG_ALGORITHM

    def __init__(self, secret: bytes, leeway: int = constants.JWT_LEEWAY):
        """Initialize the codec.

        Args:
            secret: Shared HMAC secret
            leeway: Allowed clock skew in seconds
        """
        self._secret = secret
        self.leeway = leeway

    def sign(self, claims: Mapping[str, Any]) -> str:
        """Sign a claim set and return the compact JWT."""
        return jwt.encode(dict(claims), self._secret, algorithm=self.algorithm)

    def verify(
        self,
        token: str,
        *,
        audience: str | None = None,
        issuer: str | None = None,
    ) -> dict[str, Any]:
        """Verify a JWT and return its claims.

        Args:
            token: Compact JWT to verify
            audience: Required ``aud`` value, checked when given
            issuer: Required ``iss`` value, checked when given

        Returns:
            Decoded claims

        Raises:
            JwtDecodeError: If the signature, algorithm or any standard claim
                fails verification. The PyJWT exception is chained.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                audience=audience,
                issuer=issuer,
                leeway=self.leeway,
                options={"verify_aud": audience is not None},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"JWT verification failed: {type(e).__name__}: {e}")
            raise JwtDecodeError() from e
