"""Token exchange models for the Duo Universal Prompt.

Contains the client assertion claims, the token endpoint request and
response, and the identity token claims returned after a 2FA attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from duo_universal import constants
from duo_universal.primitives.security import (
    generate_random_string,
    get_time_in_seconds,
)


@dataclass(frozen=True)
class ClientAssertionClaims:
    """Claims of the short-lived JWT that authenticates this client to Duo.

    A fresh instance, with a new ``jti``, is created for every outbound call.
    """

    iss: str
    sub: str
    aud: str
    jti: str
    iat: int
    exp: int

    @classmethod
    def create(cls, client_id: str, audience: str) -> ClientAssertionClaims:
        """Create assertion claims for a call to ``audience``."""
        now = get_time_in_seconds()
        return cls(
            iss=client_id,
            sub=client_id,
            aud=audience,
            jti=generate_random_string(constants.JTI_LENGTH),
            iat=now,
            exp=now + constants.JWT_EXPIRATION,
        )

    def to_claims(self) -> dict[str, Any]:
        return {
            "iss": self.iss,
            "sub": self.sub,
            "aud": self.aud,
            "jti": self.jti,
            "iat": self.iat,
            "exp": self.exp,
        }


@dataclass(frozen=True)
class TokenRequest:
    """Duo token endpoint request parameters.

    The client authenticates with a signed assertion (``private_key_jwt``
    style with a shared secret) instead of a client secret in the body.
    """

    # Required fields first
    token_endpoint: str
    code: str
    redirect_uri: str
    client_id: str
    client_assertion: str

    # Optional fields with defaults last
    grant_type: str = constants.GRANT_TYPE
    client_assertion_type: str = constants.CLIENT_ASSERTION_TYPE

    def to_form_data(self) -> dict[str, str]:
        """Convert to form data for application/x-www-form-urlencoded request."""
        return {
            "grant_type": self.grant_type,
            "code": self.code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_assertion_type": self.client_assertion_type,
            "client_assertion": self.client_assertion,
        }


class TokenResponse(BaseModel):
    """Successful Duo token endpoint response.

    All four fields are required; anything else is treated as malformed.
    """

    model_config = ConfigDict(extra="allow")

    id_token: str
    access_token: str
    expires_in: int | str
    token_type: str

    @field_validator("token_type")
    @classmethod
    def validate_token_type(cls, v: str) -> str:
        if v != constants.TOKEN_TYPE:
            raise ValueError(f"Unsupported token_type: {v}")
        return v


class IdTokenClaims(BaseModel):
    """Verified claims of the Duo identity token.

    ``auth_result`` and ``auth_context`` describe the outcome of the 2FA
    attempt (result, factor, device, location, and so on) and are passed
    through as received.
    """

    model_config = ConfigDict(extra="allow")

    # Required
    iss: str
    aud: str | list[str]
    exp: int
    iat: int

    # Optional
    nbf: int | None = None
    sub: str | None = None
    auth_time: int | None = None
    auth_result: dict[str, Any] | None = None
    auth_context: dict[str, Any] | None = None

    # Compared against caller input as received; any type is accepted here
    preferred_username: Any = None
    nonce: Any = None
