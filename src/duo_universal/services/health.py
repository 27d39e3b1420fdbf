"""Duo health check service.

Lets a relying party confirm Duo is reachable, and that its credentials are
accepted, before sending a user to the Universal Prompt.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from duo_universal import constants
from duo_universal.models.config import ClientConfig
from duo_universal.models.errors import DuoError, RemoteError
from duo_universal.models.health import HealthCheckRequest, HealthCheckResponse
from duo_universal.models.tokens import ClientAssertionClaims
from duo_universal.primitives.jwt import JwtCodec
from duo_universal.services.transport import DuoTransport, message_from_result

logger = logging.getLogger(__name__)


class DuoHealthChecker:
    """Calls the Duo health check endpoint with a signed client assertion."""

    def __init__(self, config: ClientConfig, codec: JwtCodec, transport: DuoTransport):
        self._config = config
        self._codec = codec
        self._transport = transport

    async def check(self) -> dict[str, Any]:
        """Run a health check against Duo.

        Returns:
            The decoded response body, unchanged

        Raises:
            RemoteError: If Duo is unreachable or reports anything but ``OK``
        """
        endpoint = constants.HEALTH_CHECK_ENDPOINT

        try:
            audience = self._config.endpoint_url(endpoint)
            claims = ClientAssertionClaims.create(self._config.client_id, audience)
            request = HealthCheckRequest(
                client_id=self._config.client_id,
                client_assertion=self._codec.sign(claims.to_claims()),
            )

            body = await self._transport.post_form(endpoint, request.to_form_data())

            if not isinstance(body, Mapping):
                raise RemoteError(constants.MALFORMED_RESPONSE)

            try:
                response = HealthCheckResponse.model_validate(body)
            except ValidationError as e:
                raise RemoteError(constants.MALFORMED_RESPONSE) from e

            if not response.is_success():
                message = message_from_result(body)
                logger.warning(f"Duo health check failed: {message}")
                raise RemoteError(message)

            logger.debug(f"Duo health check OK for client {self._config.client_id}")
            return body

        except DuoError:
            raise
        except Exception as e:
            raise RemoteError(constants.MALFORMED_RESPONSE) from e
