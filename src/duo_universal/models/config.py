"""Client configuration model for the Duo Universal Prompt.

Validates credentials once at construction time so a ``Client`` is never
partially valid.
"""

from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, SecretStr, ValidationError, field_validator

from duo_universal import constants
from duo_universal.models.errors import (
    ConfigError,
    InvalidClientIdError,
    InvalidClientSecretError,
    InvalidConfigError,
)

_FIELD_ERRORS: dict[str, type[ConfigError]] = {
    "client_id": InvalidClientIdError,
    "client_secret": InvalidClientSecretError,
}


class ClientConfig(BaseModel):
    """Immutable Duo application credentials and redirect settings."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr
    api_host: str
    redirect_url: str
    use_duo_code_attribute: bool = True

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v: str) -> str:
        if len(v) != constants.CLIENT_ID_LENGTH:
            raise ValueError(constants.INVALID_CLIENT_ID_ERROR)
        return v

    @field_validator("client_secret")
    @classmethod
    def validate_client_secret(cls, v: SecretStr) -> SecretStr:
        if len(v.get_secret_value()) != constants.CLIENT_SECRET_LENGTH:
            raise ValueError(constants.INVALID_CLIENT_SECRET_ERROR)
        return v

    @field_validator("api_host")
    @classmethod
    def validate_api_host(cls, v: str) -> str:
        """API host must be a bare host[:port], e.g. ``api-123456.duosecurity.com``."""
        if not v or any(c.isspace() for c in v):
            raise ValueError(constants.PARSING_CONFIG_ERROR)
        try:
            parsed = urlparse(f"https://{v}")
            parsed.port  # raises on a malformed port
        except ValueError:
            raise ValueError(constants.PARSING_CONFIG_ERROR)
        if not parsed.hostname or parsed.netloc != v:
            raise ValueError(constants.PARSING_CONFIG_ERROR)
        return v

    @field_validator("redirect_url")
    @classmethod
    def validate_redirect_url(cls, v: str) -> str:
        try:
            parsed = urlparse(v)
        except ValueError:
            raise ValueError(constants.PARSING_CONFIG_ERROR)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(constants.PARSING_CONFIG_ERROR)
        return v

    @classmethod
    def from_options(
        cls,
        client_id: str,
        client_secret: str,
        api_host: str,
        redirect_url: str,
        use_duo_code_attribute: bool = True,
    ) -> ClientConfig:
        """Build a validated config, raising the matching ``ConfigError`` kind.

        Raises:
            InvalidClientIdError: If client_id is not 20 characters
            InvalidClientSecretError: If client_secret is not 40 characters
            InvalidConfigError: If api_host or redirect_url cannot be parsed
        """
        try:
            return cls(
                client_id=client_id,
                client_secret=client_secret,
                api_host=api_host,
                redirect_url=redirect_url,
                use_duo_code_attribute=use_duo_code_attribute,
            )
        except ValidationError as e:
            # Errors are reported in field declaration order
            first = e.errors()[0]
            field = first["loc"][0] if first["loc"] else None
            raise _FIELD_ERRORS.get(field, InvalidConfigError)() from e

    @property
    def base_url(self) -> str:
        return f"https://{self.api_host}"

    @property
    def secret_bytes(self) -> bytes:
        return self.client_secret.get_secret_value().encode("utf-8")

    def endpoint_url(self, path: str) -> str:
        return f"{self.base_url}{path}"
