"""Tests for the HTTP transport.

**Feature: coinbase-pro-cli**
"""

import base64
import json
from unittest.mock import MagicMock

import pytest
import requests

from cbtrader.api.decoder import ApiError, Candles, Orders
from cbtrader.api.errors import ConfigError, DecodeError, TransportError
from cbtrader.api.signer import RequestSigner, sign
from cbtrader.api.transport import API_URL, Transport, build_path
from cbtrader.models import Credentials, Tick


CREDS = Credentials(
    api_key="test-key",
    api_secret=base64.b64encode(b"secret-bytes").decode(),
    passphrase="test-pass",
)
NOW = 1577836800


def make_response(body, status: int = 200) -> MagicMock:
    response = MagicMock()
    response.content = body if isinstance(body, bytes) else json.dumps(body).encode()
    response.status_code = status
    response.ok = status < 400
    return response


@pytest.fixture
def session():
    """Create a mock requests session."""
    return MagicMock(spec=requests.Session)


def signed_transport(session) -> Transport:
    return Transport(signer=RequestSigner(CREDS, clock=lambda: NOW), session=session)


class TestBuildPath:
    """Tests for query string construction."""

    def test_no_params(self):
        assert build_path("/accounts") == "/accounts"
        assert build_path("/accounts", {}) == "/accounts"

    def test_none_values_dropped(self):
        assert build_path("/orders", {"product_id": None}) == "/orders"

    def test_rfc3339_values_percent_encoded(self):
        path = build_path(
            "/products/BTC-USD/candles",
            {"start": "2020-01-01T00:00:00-04:00", "end": "2020-01-02T01:00:00+00:00", "granularity": 300},
        )
        assert path == (
            "/products/BTC-USD/candles"
            "?start=2020-01-01T00%3A00%3A00-04%3A00"
            "&end=2020-01-02T01%3A00%3A00%2B00%3A00"
            "&granularity=300"
        )


class TestPublicRequests:
    """Tests for unauthenticated requests."""

    def test_get_sends_no_auth_headers(self, session):
        session.request.return_value = make_response([[1577836800, 1, 2, 3, 4, 5]])
        transport = Transport(session=session)

        result = transport.get("/products/BTC-USD/candles", params={"granularity": 60})

        assert isinstance(result, Candles)
        method, url = session.request.call_args.args
        kwargs = session.request.call_args.kwargs
        assert method == "GET"
        assert url == f"{API_URL}/products/BTC-USD/candles?granularity=60"
        assert kwargs["data"] is None
        assert not any(name.startswith("CB-ACCESS") for name in kwargs["headers"])

    def test_timeout_passed_to_session(self, session):
        session.request.return_value = make_response({"message": "NotFound"}, status=404)
        transport = Transport(session=session, timeout=3.5)

        transport.get("/products/NOPE-USD/ticker")

        assert session.request.call_args.kwargs["timeout"] == 3.5

    def test_base_url_trailing_slash(self, session):
        session.request.return_value = make_response([])
        Transport("https://example.test/", session=session).get("/accounts")

        assert session.request.call_args.args[1] == "https://example.test/accounts"


class TestSignedRequests:
    """Tests for authenticated requests."""

    def test_get_signed_over_path_with_query(self, session):
        session.request.return_value = make_response([])
        transport = signed_transport(session)

        result = transport.get("/orders", params={"product_id": "BTC-USD"}, auth=True, prefer=Orders)

        assert result == Orders()
        headers = session.request.call_args.kwargs["headers"]
        expected = sign(CREDS, "GET", "/orders?product_id=BTC-USD", "", NOW)
        assert headers["CB-ACCESS-SIGN"] == expected.signature
        assert headers["CB-ACCESS-TIMESTAMP"] == str(NOW)
        assert headers["CB-ACCESS-KEY"] == "test-key"
        assert headers["CB-ACCESS-PASSPHRASE"] == "test-pass"

    def test_post_signs_transmitted_body(self, session):
        session.request.return_value = make_response({
            "id": "abc",
            "amount": "10.00",
            "currency": "USD",
            "payout_at": "2020-01-08T00:00:00Z",
        })
        transport = signed_transport(session)

        transport.post("/deposits/payment-method", {"amount": "10.00", "currency": "USD"})

        kwargs = session.request.call_args.kwargs
        sent_body = kwargs["data"].decode("utf-8")
        expected = sign(CREDS, "POST", "/deposits/payment-method", sent_body, NOW)
        assert kwargs["headers"]["CB-ACCESS-SIGN"] == expected.signature
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert json.loads(sent_body) == {"amount": "10.00", "currency": "USD"}

    def test_auth_without_signer_fails_before_sending(self, session):
        transport = Transport(session=session)

        with pytest.raises(ConfigError):
            transport.get("/accounts", auth=True)

        session.request.assert_not_called()


class TestFailures:
    """Tests for transport and HTTP-level failures."""

    @pytest.mark.parametrize(
        "exc",
        [requests.ConnectionError("refused"), requests.Timeout("slow")],
    )
    def test_request_exception_becomes_transport_error(self, session, exc):
        session.request.side_effect = exc
        transport = Transport(session=session)

        with pytest.raises(TransportError):
            transport.get("/products/BTC-USD/ticker")

    def test_http_error_with_message_is_api_error(self, session):
        session.request.return_value = make_response({"message": "Invalid API Key"}, status=401)
        transport = signed_transport(session)

        assert transport.get("/accounts", auth=True) == ApiError(message="Invalid API Key")

    def test_http_error_with_html_body_is_transport_error(self, session):
        session.request.return_value = make_response(b"<html>Bad Gateway</html>", status=502)
        transport = Transport(session=session)

        with pytest.raises(TransportError, match="502"):
            transport.get("/products/BTC-USD/ticker")

    def test_http_error_with_non_error_body_is_transport_error(self, session):
        session.request.return_value = make_response([], status=500)
        transport = Transport(session=session)

        with pytest.raises(TransportError):
            transport.get("/products/BTC-USD/candles")

    def test_unknown_shape_on_success_is_decode_error(self, session):
        session.request.return_value = make_response({"unexpected": True})
        transport = Transport(session=session)

        with pytest.raises(DecodeError):
            transport.get("/products/BTC-USD/ticker")

    def test_tick_decoded(self, session):
        session.request.return_value = make_response({
            "trade_id": 1,
            "price": "100.5",
            "size": "0.1",
            "bid": "100.4",
            "ask": "100.6",
            "volume": "1000",
            "time": "2020-01-01T00:00:00Z",
        })
        transport = Transport(session=session)

        assert isinstance(transport.get("/products/BTC-USD/ticker"), Tick)
