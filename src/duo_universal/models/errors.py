"""Exception hierarchy for Duo Universal Prompt errors.

Every failure in the 2FA handshake surfaces as a ``DuoError`` subclass so
callers can branch on the kind without inspecting transport internals.
Lower-level exceptions are chained with ``raise ... from`` and exposed
through ``DuoError.inner``.
"""

from __future__ import annotations

from duo_universal import constants


class DuoError(Exception):
    """Base exception for all Duo Universal Prompt errors."""

    default_message = constants.FAILED_CONNECTION

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def inner(self) -> BaseException | None:
        """The wrapped lower-level exception, if any."""
        return self.__cause__


class ConfigError(DuoError):
    """Raised when client credentials or configuration are invalid."""

    default_message = constants.PARSING_CONFIG_ERROR


class InvalidClientIdError(ConfigError):
    default_message = constants.INVALID_CLIENT_ID_ERROR


class InvalidClientSecretError(ConfigError):
    default_message = constants.INVALID_CLIENT_SECRET_ERROR


class InvalidConfigError(ConfigError):
    default_message = constants.PARSING_CONFIG_ERROR


class InputError(DuoError):
    """Raised when caller-supplied arguments to an operation are invalid."""

    pass


class InvalidUsernameError(InputError):
    default_message = constants.USERNAME_ERROR


class InvalidStateError(InputError):
    default_message = constants.DUO_STATE_ERROR


class MissingCodeError(InputError):
    default_message = constants.MISSING_CODE_ERROR


class JwtDecodeError(DuoError):
    """Raised when a JWT fails signature or standard claim verification.

    The underlying PyJWT exception is always available as ``inner``.
    """

    default_message = constants.JWT_DECODE_ERROR


class MalformedResponseError(DuoError):
    """Raised when a Duo response is missing required fields or has the wrong shape."""

    default_message = constants.MALFORMED_RESPONSE


class ClaimMismatchError(DuoError):
    """Raised when a verified identity token does not belong to this exchange."""

    pass


class UsernameMismatchError(ClaimMismatchError):
    default_message = constants.USERNAME_ERROR


class NonceMismatchError(ClaimMismatchError):
    default_message = constants.NONCE_ERROR


class RemoteError(DuoError):
    """Raised on transport failures or when Duo reports an error.

    The message comes from Duo's error envelope when one is present.
    """

    default_message = constants.FAILED_CONNECTION
