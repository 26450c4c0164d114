"""HTTP transport for the Coinbase Pro REST API.

Builds the exact path and body that go on the wire, signs them when the
endpoint is private, sends the request with ``requests`` and hands the raw
body to the decoder.
"""

import json
import logging
from typing import Any, Optional
from urllib.parse import quote, urlencode

import requests

from cbtrader.api.decoder import ApiError, ApiResponse, decode
from cbtrader.api.errors import ConfigError, DecodeError, TransportError
from cbtrader.api.signer import RequestSigner

logger = logging.getLogger(__name__)

API_URL = "https://api.pro.coinbase.com"
DEFAULT_TIMEOUT = 10.0


def build_path(path: str, params: Optional[dict[str, Any]] = None) -> str:
    """Append percent-encoded query parameters to a path.

    ``None`` values are dropped. Every reserved character is encoded, so
    RFC 3339 offsets such as ``-04:00`` and ``+00:00`` survive intact.
    """
    if not params:
        return path
    pairs = [(key, str(value)) for key, value in params.items() if value is not None]
    if not pairs:
        return path
    return f"{path}?{urlencode(pairs, safe='', quote_via=quote)}"


class Transport:
    """Sends GET/POST requests and decodes the responses."""

    def __init__(
        self,
        base_url: str = API_URL,
        signer: Optional[RequestSigner] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the transport.

        Args:
            base_url: API host, without a trailing slash.
            signer: Signer for private endpoints; public-only when omitted.
            timeout: Per-request timeout in seconds.
            session: HTTP session, injectable for tests.
        """
        self.base_url = base_url.rstrip("/")
        self.signer = signer
        self.timeout = timeout
        self._session = session or requests.Session()

    def get(
        self,
        path: str,
        params: Optional[dict] = None,
        auth: bool = False,
        prefer: Optional[type] = None,
    ) -> ApiResponse:
        """Send a GET request."""
        return self.request("GET", path, params=params, auth=auth, prefer=prefer)

    def post(
        self,
        path: str,
        payload: dict,
        auth: bool = True,
        prefer: Optional[type] = None,
    ) -> ApiResponse:
        """Send a POST request with a JSON body."""
        return self.request("POST", path, payload=payload, auth=auth, prefer=prefer)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        payload: Optional[dict] = None,
        auth: bool = False,
        prefer: Optional[type] = None,
    ) -> ApiResponse:
        """Send a request and decode its response.

        Args:
            method: HTTP method.
            path: Endpoint path without query string.
            params: Query parameters.
            payload: JSON body.
            auth: Whether to sign the request.
            prefer: Preferred list variant for an empty array response.

        Returns:
            The decoded response. Exchange error payloads come back as
            ``ApiError`` rather than being raised.

        Raises:
            ConfigError: If ``auth`` is set but no signer was configured.
            TransportError: On network failure, timeout, or an HTTP error
                status without an exchange error body.
            DecodeError: If a successful response has an unknown shape.
        """
        method = method.upper()
        full_path = build_path(path, params)
        # The signed body must be byte-identical to the transmitted one.
        body = json.dumps(payload) if payload is not None else ""

        headers = {"Accept": "application/json"}
        if body:
            headers["Content-Type"] = "application/json"
        if auth:
            if self.signer is None:
                raise ConfigError(f"{method} {path} requires API credentials")
            headers.update(self.signer.headers(method, full_path, body))

        logger.debug("%s %s", method, full_path)

        try:
            response = self._session.request(
                method,
                self.base_url + full_path,
                data=body.encode("utf-8") if body else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {full_path} failed: {e}") from e

        return self._decode(response, method, full_path, prefer)

    def _decode(
        self,
        response: requests.Response,
        method: str,
        path: str,
        prefer: Optional[type],
    ) -> ApiResponse:
        try:
            decoded = decode(response.content, prefer=prefer)
        except DecodeError:
            if not response.ok:
                raise TransportError(
                    f"{method} {path} returned HTTP {response.status_code}"
                ) from None
            raise

        if not response.ok and not isinstance(decoded, ApiError):
            raise TransportError(f"{method} {path} returned HTTP {response.status_code}")

        logger.debug("%s %s -> %d %s", method, path, response.status_code, type(decoded).__name__)
        return decoded
