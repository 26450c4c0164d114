"""Tests for the Coinbase Pro client endpoint wrappers.

**Feature: coinbase-pro-cli**
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from cbtrader.api.client import CoinbaseProClient
from cbtrader.api.decoder import Accounts, ApiError, Candles, Orders, PaymentMethods
from cbtrader.api.errors import (
    DecodeError,
    ExchangeApiError,
    InvalidGranularityError,
    InvalidRangeError,
)
from cbtrader.api.sequencer import RateLimiter
from cbtrader.models import (
    Account,
    Candle,
    DepositReceipt,
    MarketOrder,
    Order,
    PaymentMethod,
    Tick,
    to_cents,
)


def account(currency: str, balance: float = 1.0) -> Account:
    return Account(id=currency.lower(), currency=currency, balance=balance, available=balance, hold=0)


ORDER = Order(
    id="d0c5340b",
    product_id="BTC-USD",
    side="buy",
    type="market",
    status="pending",
    created_at=datetime(2020, 1, 1, tzinfo=timezone.utc),
    specified_funds=10.0,
)


@pytest.fixture
def transport():
    """Create a mock transport."""
    return MagicMock()


@pytest.fixture
def client(transport):
    return CoinbaseProClient(transport, RateLimiter(0))


class TestMarketData:
    """Tests for public market data calls."""

    def test_get_tick(self, client, transport):
        tick = Tick(
            trade_id=1,
            price=100,
            size=1,
            bid=99,
            ask=101,
            volume=10,
            time=datetime(2020, 1, 1, tzinfo=timezone.utc),
        )
        transport.get.return_value = tick

        assert client.get_tick("ETH-USD") is tick
        transport.get.assert_called_once_with("/products/ETH-USD/ticker")

    def test_get_tick_unknown_product(self, client, transport):
        transport.get.return_value = ApiError(message="NotFound")

        with pytest.raises(ExchangeApiError, match="NotFound"):
            client.get_tick("NOPE-USD")

    def test_get_history_streams_pages(self, client, transport):
        transport.get.side_effect = [
            Candles(candles=[Candle(time=1, low=1, high=2, open=1, close=2, volume=3)]),
            Candles(candles=[Candle(time=2, low=1, high=2, open=1, close=2, volume=3)]),
        ]

        stream = client.get_history(
            "BTC-USD", "2020-01-01T00:00:00-04:00", "2020-01-02T01:00:00-04:00", "300"
        )

        assert [c.time for c in stream] == [1, 2]
        assert transport.get.call_count == 2

    def test_get_history_validates_before_requesting(self, client, transport):
        with pytest.raises(InvalidGranularityError):
            client.get_history("BTC-USD", "2020-01-01T00:00:00Z", "2020-01-02T00:00:00Z", "five")
        with pytest.raises(InvalidRangeError):
            client.get_history("BTC-USD", "2020-01-02T00:00:00Z", "2020-01-01T00:00:00Z", 300)

        transport.get.assert_not_called()


class TestAccountCalls:
    """Tests for private account calls."""

    def test_get_accounts(self, client, transport):
        transport.get.return_value = Accounts(accounts=[account("BTC"), account("USD")])

        assert [a.currency for a in client.get_accounts()] == ["BTC", "USD"]
        transport.get.assert_called_once_with("/accounts", auth=True, prefer=Accounts)

    def test_get_balance_filters_case_insensitively(self, client, transport):
        transport.get.return_value = Accounts(accounts=[account("BTC", 0.5), account("USD", 10)])

        result = client.get_balance("btc")

        assert [a.balance for a in result] == [0.5]

    def test_get_balance_unknown_currency(self, client, transport):
        transport.get.return_value = Accounts(accounts=[account("BTC")])

        with pytest.raises(ExchangeApiError, match="DOGE"):
            client.get_balance("doge")

    def test_get_balance_all(self, client, transport):
        transport.get.return_value = Accounts(accounts=[account("BTC"), account("USD")])
        assert len(client.get_balance()) == 2

    def test_get_payment_methods(self, client, transport):
        method = PaymentMethod(id="bank-1", type="ach_bank_account", name="Bank", currency="USD")
        transport.get.return_value = PaymentMethods(payment_methods=[method])

        assert client.get_payment_methods() == [method]
        transport.get.assert_called_once_with("/payment-methods", auth=True, prefer=PaymentMethods)

    def test_list_orders_with_filter(self, client, transport):
        transport.get.return_value = Orders(orders=[ORDER])

        assert client.list_orders("BTC-USD") == [ORDER]
        transport.get.assert_called_once_with(
            "/orders", params={"product_id": "BTC-USD"}, auth=True, prefer=Orders
        )

    def test_list_orders_without_filter(self, client, transport):
        transport.get.return_value = Orders()

        assert client.list_orders() == []
        assert transport.get.call_args.kwargs["params"] is None

    def test_wrong_shape_is_decode_error(self, client, transport):
        transport.get.return_value = Candles()

        with pytest.raises(DecodeError):
            client.get_accounts()


class TestTrading:
    """Tests for order placement and deposits."""

    def test_place_order_payload(self, client, transport):
        transport.post.return_value = ORDER

        assert client.place_order(10, "btc") is ORDER
        transport.post.assert_called_once_with(
            "/orders",
            {"type": "market", "side": "buy", "product_id": "BTC-USD", "funds": "10.00"},
        )

    def test_place_order_rejected(self, client, transport):
        transport.post.return_value = ApiError(message="Insufficient funds")

        with pytest.raises(ExchangeApiError, match="Insufficient funds"):
            client.place_order(1000000, "BTC")

    def test_place_order_requires_positive_amount(self, client, transport):
        with pytest.raises(ValueError):
            client.place_order(0, "BTC")
        transport.post.assert_not_called()

    def test_make_deposit_payload(self, client, transport):
        receipt = DepositReceipt(
            id="dep-1",
            amount=25.5,
            currency="USD",
            payout_at=datetime(2020, 1, 8, tzinfo=timezone.utc),
        )
        transport.post.return_value = receipt

        assert client.make_deposit(25.5, "bank-1") is receipt
        transport.post.assert_called_once_with(
            "/deposits/payment-method",
            {"amount": "25.50", "currency": "USD", "payment_method_id": "bank-1"},
        )

    def test_make_deposit_requires_positive_amount(self, client, transport):
        with pytest.raises(ValueError):
            client.make_deposit(-5, "bank-1")
        transport.post.assert_not_called()


class TestCentRounding:
    """
    **Feature: coinbase-pro-cli, Property 12: Amounts Sent in Whole Cents**

    *For any* order or deposit amount, the value validated is the value
    sent: rounded to cents, and never below one cent.
    """

    @pytest.mark.parametrize("amount", [0.004, 0.0, -1, "abc", float("nan"), float("inf")])
    def test_market_order_rejects_sub_cent_funds(self, amount):
        with pytest.raises(ValueError):
            MarketOrder(product_id="BTC-USD", funds=amount)

    @pytest.mark.parametrize(
        "amount, expected",
        [(5.255, "5.26"), (0.005, "0.01"), (10, "10.00"), ("7.1", "7.10"), (Decimal("2.499"), "2.50")],
    )
    def test_market_order_payload_uses_rounded_funds(self, amount, expected):
        order = MarketOrder(product_id="BTC-USD", funds=amount)

        assert order.funds == Decimal(expected)
        assert order.to_payload()["funds"] == expected

    def test_place_order_sends_rounded_funds(self, client, transport):
        transport.post.return_value = ORDER

        client.place_order(5.255, "BTC")

        assert transport.post.call_args.args[1]["funds"] == "5.26"

    def test_place_order_rejects_sub_cent(self, client, transport):
        with pytest.raises(ValueError):
            client.place_order(0.004, "BTC")
        transport.post.assert_not_called()

    def test_make_deposit_sends_rounded_amount(self, client, transport):
        transport.post.return_value = DepositReceipt(
            id="dep-2",
            amount=5.26,
            currency="USD",
            payout_at=datetime(2020, 1, 8, tzinfo=timezone.utc),
        )

        client.make_deposit(5.255, "bank-1")

        assert transport.post.call_args.args[1]["amount"] == "5.26"

    @pytest.mark.parametrize("amount", [0.001, 0.004])
    def test_make_deposit_rejects_sub_cent(self, client, transport, amount):
        with pytest.raises(ValueError):
            client.make_deposit(amount, "bank-1")
        transport.post.assert_not_called()

    @pytest.mark.parametrize("amount, expected", [("5.255", "5.26"), (" 12 ", "12.00"), (0.015, "0.02")])
    def test_to_cents(self, amount, expected):
        assert to_cents(amount) == Decimal(expected)
