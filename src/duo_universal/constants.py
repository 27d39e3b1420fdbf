"""Protocol constants for the Duo Universal Prompt.

Lengths, lifetimes and endpoint paths must match what the Duo service
expects, so treat these as wire-level values rather than tunables.
"""

from __future__ import annotations

VERSION = "1.0.0"

# Credential shape
CLIENT_ID_LENGTH = 20
CLIENT_SECRET_LENGTH = 40

# Random values
DEFAULT_STATE_LENGTH = 36
MIN_STATE_LENGTH = 22
MAX_STATE_LENGTH = 1024
JTI_LENGTH = 36

# JWT lifetimes (seconds)
JWT_EXPIRATION = 300
JWT_LEEWAY = 60

SIG_ALGORITHM = "HS512"
GRANT_TYPE = "authorization_code"
CLIENT_ASSERTION_TYPE = "urn:ietf:params:oauth:client-assertion-type:jwt-bearer"
RESPONSE_TYPE = "code"
SCOPE = "openid"
TOKEN_TYPE = "Bearer"

HEALTH_CHECK_ENDPOINT = "/oauth/v1/health_check"
AUTHORIZE_ENDPOINT = "/oauth/v1/authorize"
TOKEN_ENDPOINT = "/oauth/v1/token"

USER_AGENT = f"duo_universal_python/{VERSION}"

# Error messages
USERNAME_ERROR = "The username is invalid"
NONCE_ERROR = "The nonce is invalid"
JWT_DECODE_ERROR = "Error decoding JWT"
PARSING_CONFIG_ERROR = "Error parsing config"
INVALID_CLIENT_ID_ERROR = "The Client ID is invalid"
INVALID_CLIENT_SECRET_ERROR = "The Client Secret is invalid"
DUO_STATE_ERROR = (
    f"State must be between {MIN_STATE_LENGTH} to {MAX_STATE_LENGTH} characters long"
)
FAILED_CONNECTION = "Unable to connect to Duo"
MALFORMED_RESPONSE = "Result missing expected data"
MISSING_CODE_ERROR = "Missing authorization code"
