"""HTTPS transport for Duo API calls.

Sends form-encoded POSTs to Duo over TLS only, optionally trusting a caller
supplied CA bundle, and converts every transport failure into a
``RemoteError`` carrying Duo's own error message when one is available.
"""

from __future__ import annotations

import logging
import ssl
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlparse

import httpx

from duo_universal import constants
from duo_universal.models.errors import InvalidConfigError, RemoteError

logger = logging.getLogger(__name__)


def message_from_result(result: Mapping[str, Any]) -> str:
    """Build a human message from a Duo error envelope.

    Duo reports failures either as ``message`` / ``message_detail`` (API
    style) or ``error`` / ``error_description`` (OAuth style).
    """
    message = result.get("message")
    message_detail = result.get("message_detail")
    if message and message_detail:
        return f"{message}: {message_detail}"

    error = result.get("error")
    error_description = result.get("error_description")
    if error and error_description:
        return f"{error}: {error_description}"

    return constants.MALFORMED_RESPONSE


class DuoTransport:
    """Form-encoded HTTPS client bound to a single Duo API host.

    Owns its own ``httpx.AsyncClient`` so several independently configured
    transports can coexist in one process.
    """

    def __init__(
        self,
        base_url: str,
        ca_certs: str | None = None,
        timeout: float = 30.0,
    ):
        """Initialize the transport.

        Args:
            base_url: ``https://`` URL of the Duo API host
            ca_certs: Optional path to a PEM bundle of trusted CAs
            timeout: HTTP request timeout in seconds

        Raises:
            InvalidConfigError: If base_url is not HTTPS or ca_certs can't be loaded
        """
        if urlparse(base_url).scheme != "https":
            raise InvalidConfigError("HTTP disabled. Must use HTTPS")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = httpx.AsyncClient(
            timeout=timeout, verify=self._build_verify(ca_certs)
        )

    @staticmethod
    def _build_verify(ca_certs: str | None) -> ssl.SSLContext | bool:
        if ca_certs is None:
            return True
        try:
            return ssl.create_default_context(cafile=ca_certs)
        except OSError as e:
            raise InvalidConfigError(f"Unable to load CA bundle {ca_certs}: {e}") from e

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    async def post_form(
        self,
        path: str,
        data: Mapping[str, str],
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """POST form data to a Duo endpoint and return the decoded JSON body.

        Args:
            path: Endpoint path, e.g. ``/oauth/v1/token``
            data: Form fields
            headers: Extra request headers

        Returns:
            Decoded JSON response body

        Raises:
            RemoteError: On network errors, non-2xx responses or a non-JSON body
        """
        url = self.url_for(path)
        request_headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }
        if headers:
            request_headers.update(headers)

        logger.debug(f"POST {url}")

        try:
            response = await self._http_client.post(
                url,
                data=dict(data),
                headers=request_headers,
            )
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            message = self._message_from_error_response(e)
            logger.warning(
                f"Duo returned HTTP {e.response.status_code} for {path}: {message}"
            )
            raise RemoteError(message) from e
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error calling Duo {path}: {e}")
            raise RemoteError(str(e) or constants.FAILED_CONNECTION) from e
        except Exception as e:
            raise RemoteError(constants.MALFORMED_RESPONSE) from e

    def _message_from_error_response(self, error: httpx.HTTPStatusError) -> str:
        try:
            body = error.response.json()
        except ValueError:
            body = None

        if isinstance(body, Mapping) and body:
            return message_from_result(body)
        return str(error) or constants.FAILED_CONNECTION

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._http_client.aclose()
