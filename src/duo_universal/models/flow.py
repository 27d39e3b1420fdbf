"""Authorization flow models for the Duo Universal Prompt.

Contains the signed request object claims and the authorize URL builder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from duo_universal import constants


@dataclass(frozen=True)
class AuthorizationRequestClaims:
    """Claims of the signed ``request`` object sent to the authorize endpoint."""

    client_id: str
    redirect_uri: str
    state: str
    duo_uname: str
    iss: str
    aud: str
    exp: int
    use_duo_code_attribute: bool = True
    nonce: str | None = None
    response_type: str = constants.RESPONSE_TYPE
    scope: str = constants.SCOPE

    def to_claims(self) -> dict[str, Any]:
        claims: dict[str, Any] = {
            "response_type": self.response_type,
            "scope": self.scope,
            "exp": self.exp,
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "state": self.state,
            "duo_uname": self.duo_uname,
            "iss": self.iss,
            "aud": self.aud,
            "use_duo_code_attribute": self.use_duo_code_attribute,
        }

        if self.nonce:
            claims["nonce"] = self.nonce

        return claims


@dataclass(frozen=True)
class AuthorizationRequest:
    """Query parameters for the Duo authorize endpoint."""

    authorization_endpoint: str
    client_id: str
    request: str  # Signed AuthorizationRequestClaims
    redirect_uri: str
    response_type: str = constants.RESPONSE_TYPE
    scope: str = constants.SCOPE

    def build_authorization_url(self) -> str:
        """Build the complete authorization URL."""
        params = {
            "response_type": self.response_type,
            "client_id": self.client_id,
            "request": self.request,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
        }

        return f"{self.authorization_endpoint}?{urlencode(params)}"
