"""Duo authorization code exchange service.

Exchanges the code Duo returns on redirect for the signed identity token,
then verifies that token and checks that it belongs to this exchange.
"""

from __future__ import annotations

import logging
import platform
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError

from duo_universal import constants
from duo_universal.models.config import ClientConfig
from duo_universal.models.errors import (
    DuoError,
    InvalidUsernameError,
    MalformedResponseError,
    MissingCodeError,
    NonceMismatchError,
    RemoteError,
    UsernameMismatchError,
)
from duo_universal.models.tokens import (
    ClientAssertionClaims,
    IdTokenClaims,
    TokenRequest,
    TokenResponse,
)
from duo_universal.primitives.jwt import JwtCodec
from duo_universal.services.transport import DuoTransport

logger = logging.getLogger(__name__)


def build_user_agent() -> str:
    return (
        f"{constants.USER_AGENT} python/{platform.python_version()} "
        f"httpx/{httpx.__version__}"
    )


class DuoTokenManager:
    """Runs the token exchange that completes a Duo 2FA attempt.

    Each exchange moves through: assertion built, token requested, response
    shape checked, id token verified, claims checked. Any failed step raises
    immediately; partially validated results are never returned.
    """

    def __init__(self, config: ClientConfig, codec: JwtCodec, transport: DuoTransport):
        self._config = config
        self._codec = codec
        self._transport = transport

    @property
    def token_endpoint(self) -> str:
        return self._config.endpoint_url(constants.TOKEN_ENDPOINT)

    async def exchange_code_for_token(
        self, code: str, username: str, nonce: str | None = None
    ) -> dict[str, Any]:
        """Exchange an authorization code for the verified 2FA result.

        Args:
            code: Authorization code from the Duo redirect
            username: Username that started the authentication
            nonce: Nonce sent with the authorization request, if any

        Returns:
            Verified identity token claims

        Raises:
            MissingCodeError: If code is empty
            InvalidUsernameError: If username is empty
            RemoteError: If the request to Duo fails
            MalformedResponseError: If the response or token is missing data
            JwtDecodeError: If the identity token fails verification
            UsernameMismatchError: If the token is for a different user
            NonceMismatchError: If the token nonce doesn't match
        """
        if not code:
            raise MissingCodeError()

        if not username:
            raise InvalidUsernameError()

        try:
            token_request = self._build_token_request(code)
            logger.debug(
                f"Token request: grant_type={token_request.grant_type}, "
                f"client_id={token_request.client_id}"
            )

            body = await self._transport.post_form(
                constants.TOKEN_ENDPOINT,
                token_request.to_form_data(),
                headers={"User-Agent": build_user_agent()},
            )

            token_response = self._parse_token_response(body)
            logger.debug("Token response shape OK, verifying id_token")

            claims = self._verify_id_token(token_response.id_token, username, nonce)

            logger.info(f"Duo 2FA result verified for client {self._config.client_id}")
            return claims

        except DuoError:
            raise
        except Exception as e:
            raise RemoteError(constants.MALFORMED_RESPONSE) from e

    def _build_token_request(self, code: str) -> TokenRequest:
        claims = ClientAssertionClaims.create(
            self._config.client_id, self.token_endpoint
        )
        return TokenRequest(
            token_endpoint=self.token_endpoint,
            code=code,
            redirect_uri=self._config.redirect_url,
            client_id=self._config.client_id,
            client_assertion=self._codec.sign(claims.to_claims()),
        )

    def _parse_token_response(self, body: Any) -> TokenResponse:
        """Validate the token endpoint response shape.

        Raises:
            MalformedResponseError: If a required field is missing or
                ``token_type`` is not ``Bearer``
        """
        if not isinstance(body, Mapping):
            raise MalformedResponseError()

        try:
            return TokenResponse.model_validate(body)
        except ValidationError as e:
            raise MalformedResponseError() from e

    def _verify_id_token(
        self, id_token: str, username: str, nonce: str | None
    ) -> dict[str, Any]:
        """Verify the identity token and its claims.

        Issuer and audience are always bound to the token endpoint and this
        client, so a token minted for another client is rejected.
        """
        payload = self._codec.verify(
            id_token,
            audience=self._config.client_id,
            issuer=self.token_endpoint,
        )

        try:
            claims = IdTokenClaims.model_validate(payload)
        except ValidationError as e:
            raise MalformedResponseError() from e

        if claims.preferred_username is None or claims.preferred_username != username:
            raise UsernameMismatchError()

        if nonce and (claims.nonce is None or claims.nonce != nonce):
            raise NonceMismatchError()

        return payload
