"""Duo Universal Prompt client.

Coordinates health checks, authorization URL construction, and the
authorization code exchange that completes a Duo two-factor handshake.

Typical use in a web application::

    client = Client(client_id, client_secret, api_host, redirect_url)
    await client.health_check()

    state = client.generate_state()  # store in the user's session
    return redirect(client.create_auth_url(username, state))

    # ... on the redirect back from Duo, after comparing state:
    result = await client.exchange_authorization_code_for_2fa_result(
        duo_code, username
    )
"""

from __future__ import annotations

import logging
from typing import Any

from duo_universal.models.config import ClientConfig
from duo_universal.primitives.jwt import JwtCodec
from duo_universal.services.flow import DuoFlowManager
from duo_universal.services.health import DuoHealthChecker
from duo_universal.services.tokens import DuoTokenManager
from duo_universal.services.transport import DuoTransport

logger = logging.getLogger(__name__)


class Client:
    """Client for the Duo Universal Prompt.

    Credentials are validated once at construction and are read-only
    afterwards, so a single instance can serve concurrent requests.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        api_host: str,
        redirect_url: str,
        use_duo_code_attribute: bool = True,
        *,
        ca_certs: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize the Duo client.

        Args:
            client_id: Duo application client ID (20 characters)
            client_secret: Duo application client secret (40 characters)
            api_host: Duo API hostname, e.g. ``api-123456.duosecurity.com``
            redirect_url: Absolute URL Duo redirects the user back to
            use_duo_code_attribute: Return the code as ``duo_code`` rather
                than ``code`` on redirect
            ca_certs: Optional path to a PEM bundle of trusted CAs
            timeout: HTTP request timeout in seconds

        Raises:
            InvalidClientIdError: If client_id has the wrong length
            InvalidClientSecretError: If client_secret has the wrong length
            InvalidConfigError: If api_host, redirect_url or ca_certs is invalid
        """
        self.config = ClientConfig.from_options(
            client_id=client_id,
            client_secret=client_secret,
            api_host=api_host,
            redirect_url=redirect_url,
            use_duo_code_attribute=use_duo_code_attribute,
        )

        # Initialize service components
        codec = JwtCodec(self.config.secret_bytes)
        self.transport = DuoTransport(
            self.config.base_url, ca_certs=ca_certs, timeout=timeout
        )
        self.health_checker = DuoHealthChecker(self.config, codec, self.transport)
        self.flow_manager = DuoFlowManager(self.config, codec)
        self.token_manager = DuoTokenManager(self.config, codec, self.transport)

        logger.debug(
            f"Initialized Duo client {self.config.client_id} for "
            f"{self.config.base_url}"
        )

    @property
    def client_id(self) -> str:
        return self.config.client_id

    def generate_state(self) -> str:
        """Generate a random state value to round-trip through Duo."""
        return self.flow_manager.generate_state()

    async def health_check(self) -> dict[str, Any]:
        """Check that Duo is available and accepts this client's credentials.

        Returns:
            Duo's response body, e.g. ``{"stat": "OK", "response": {...}}``

        Raises:
            RemoteError: If Duo is unreachable or the check fails
        """
        return await self.health_checker.check()

    def create_auth_url(
        self, username: str, state: str, nonce: str | None = None
    ) -> str:
        """Build the URL to redirect the user to for the Duo prompt.

        Raises:
            InvalidUsernameError: If username is empty
            InvalidStateError: If state is not 22-1024 characters long
        """
        return self.flow_manager.create_auth_url(username, state, nonce=nonce)

    async def exchange_authorization_code_for_2fa_result(
        self, code: str, username: str, nonce: str | None = None
    ) -> dict[str, Any]:
        """Exchange the code from Duo's redirect for the verified 2FA result.

        Returns:
            Verified identity token claims, including ``auth_result`` and
            ``auth_context`` describing the authentication

        Raises:
            DuoError: A subclass describing exactly what failed
        """
        return await self.token_manager.exchange_code_for_token(
            code, username, nonce=nonce
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.transport.close()

    async def __aenter__(self) -> Client:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
