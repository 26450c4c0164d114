"""Request signing for private Coinbase Pro endpoints.

Every private call carries four headers. ``CB-ACCESS-SIGN`` is the base64
HMAC-SHA256 of ``timestamp + METHOD + path + body`` keyed with the
base64-decoded API secret. The signature is bound to one timestamp and one
body, so it is computed fresh for every request.
"""

import base64
import binascii
import hashlib
import hmac
import time
from typing import Callable

from pydantic import BaseModel, Field

from cbtrader.api.errors import ClockError, CredentialError
from cbtrader.models import Credentials


class AuthHeaders(BaseModel):
    """The four authentication values for one request."""

    key: str = Field(..., description="API key")
    signature: str = Field(..., description="Base64 HMAC-SHA256 signature")
    timestamp: int = Field(..., ge=0, description="Seconds since the Unix epoch")
    passphrase: str = Field(..., repr=False, description="API passphrase")

    model_config = {"frozen": True}

    def as_headers(self) -> dict[str, str]:
        """Render as HTTP headers."""
        return {
            "CB-ACCESS-KEY": self.key,
            "CB-ACCESS-SIGN": self.signature,
            "CB-ACCESS-TIMESTAMP": str(self.timestamp),
            "CB-ACCESS-PASSPHRASE": self.passphrase,
        }


def current_timestamp(clock: Callable[[], float] = time.time) -> int:
    """Whole seconds since the Unix epoch.

    Args:
        clock: Wall clock returning float seconds since the epoch.

    Raises:
        ClockError: If the clock reads earlier than the epoch.
    """
    now = clock()
    if now < 0:
        raise ClockError(
            f"System clock is set before the Unix epoch ({now:.0f}s); cannot sign requests"
        )
    return int(now)


def decode_secret(credentials: Credentials) -> bytes:
    """Return the raw HMAC key.

    Raises:
        CredentialError: If the configured secret is not valid base64.
    """
    secret = credentials.api_secret.get_secret_value()
    if not secret:
        raise CredentialError("API secret is empty")
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CredentialError(f"API secret is not valid base64: {e}") from None


def sign(
    credentials: Credentials,
    method: str,
    path: str,
    body: str,
    timestamp: int,
) -> AuthHeaders:
    """Sign a single request.

    Args:
        credentials: API credentials.
        method: HTTP method; uppercased before signing.
        path: Request path including any query string, without the host.
        body: Exact body text sent on the wire, or "" when there is none.
        timestamp: Seconds since the epoch sent as CB-ACCESS-TIMESTAMP.

    Returns:
        AuthHeaders for the request.

    Raises:
        ClockError: If timestamp is negative.
        CredentialError: If the secret cannot be decoded.
    """
    if timestamp < 0:
        raise ClockError(f"Timestamp {timestamp} is before the Unix epoch")

    key = decode_secret(credentials)
    message = f"{timestamp}{method.upper()}{path}{body}".encode("utf-8")
    digest = hmac.new(key, message, hashlib.sha256).digest()

    return AuthHeaders(
        key=credentials.api_key,
        signature=base64.b64encode(digest).decode("ascii"),
        timestamp=timestamp,
        passphrase=credentials.passphrase.get_secret_value(),
    )


class RequestSigner:
    """Signs requests with bound credentials and a fresh timestamp each call."""

    def __init__(
        self,
        credentials: Credentials,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the signer.

        Args:
            credentials: API credentials.
            clock: Wall clock, injectable for tests.

        Raises:
            CredentialError: If the secret is not valid base64.
        """
        # Fail before any request is built.
        decode_secret(credentials)
        self._credentials = credentials
        self._clock = clock

    def headers(self, method: str, path: str, body: str = "") -> dict[str, str]:
        """Authentication headers for a request about to be sent now."""
        timestamp = current_timestamp(self._clock)
        return sign(self._credentials, method, path, body, timestamp).as_headers()
