"""Duo authorization flow service.

Builds the signed authorization request that sends a user to the Duo
Universal Prompt. Pure construction: no network calls are made here.
"""

from __future__ import annotations

import logging

from duo_universal import constants
from duo_universal.models.config import ClientConfig
from duo_universal.models.errors import InvalidStateError, InvalidUsernameError
from duo_universal.models.flow import AuthorizationRequest, AuthorizationRequestClaims
from duo_universal.primitives.jwt import JwtCodec
from duo_universal.primitives.security import (
    generate_random_string,
    get_time_in_seconds,
)

logger = logging.getLogger(__name__)


class DuoFlowManager:
    """Generates state values and authorization URLs.

    The caller owns ``state``: it must be persisted (e.g. in a server-side
    session) and compared against the value Duo sends back on redirect.
    """

    def __init__(self, config: ClientConfig, codec: JwtCodec):
        self._config = config
        self._codec = codec

    def generate_state(self) -> str:
        """Generate a random state value of the default length."""
        return generate_random_string(constants.DEFAULT_STATE_LENGTH)

    def create_auth_url(
        self, username: str, state: str, nonce: str | None = None
    ) -> str:
        """Build the URL to redirect the user to for 2FA.

        Args:
            username: Username to authenticate
            state: Caller-generated anti-forgery value, 22-1024 characters
            nonce: Optional value Duo echoes back in the identity token

        Returns:
            Fully formed Duo authorization URL

        Raises:
            InvalidUsernameError: If username is empty
            InvalidStateError: If state is missing or has an invalid length
        """
        if not username:
            raise InvalidUsernameError()

        if (
            not state
            or len(state) < constants.MIN_STATE_LENGTH
            or len(state) > constants.MAX_STATE_LENGTH
        ):
            raise InvalidStateError()

        config = self._config
        claims = AuthorizationRequestClaims(
            client_id=config.client_id,
            redirect_uri=config.redirect_url,
            state=state,
            duo_uname=username,
            iss=config.client_id,
            aud=config.base_url,
            exp=get_time_in_seconds() + constants.JWT_EXPIRATION,
            use_duo_code_attribute=config.use_duo_code_attribute,
            nonce=nonce,
        )

        auth_request = AuthorizationRequest(
            authorization_endpoint=config.endpoint_url(constants.AUTHORIZE_ENDPOINT),
            client_id=config.client_id,
            request=self._codec.sign(claims.to_claims()),
            redirect_uri=config.redirect_url,
        )

        logger.debug(f"Generated authorization URL for client {config.client_id}")
        return auth_request.build_authorization_url()
