"""Coinbase Pro client built on the shared transport."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterator, Optional, Union

from cbtrader.api.decoder import (
    Accounts,
    Candles,
    Orders,
    PaymentMethods,
    expect,
)
from cbtrader.api.errors import ExchangeApiError
from cbtrader.api.planner import MAX_CANDLES_PER_REQUEST, parse_granularity, plan
from cbtrader.api.sequencer import RateLimiter, fetch_history
from cbtrader.api.transport import Transport
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

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT = "BTC-USD"
QUOTE_CURRENCY = "USD"


class CoinbaseProClient:
    """Market data, account and trading operations on Coinbase Pro.

    Public calls work without credentials. Private calls need a transport
    configured with a ``RequestSigner``.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        """Initialize the client.

        Args:
            transport: Transport to send requests through.
            limiter: Rate limiter for paginated history fetches.
        """
        self.transport = transport or Transport()
        self.limiter = limiter or RateLimiter()

    def get_tick(self, product_id: str = DEFAULT_PRODUCT) -> Tick:
        """Get the latest tick for a product.

        Raises:
            ExchangeApiError: If the product is unknown.
        """
        response = self.transport.get(f"/products/{product_id}/ticker")
        return expect(response, Tick)

    def get_history(
        self,
        product_id: str,
        start: Union[str, datetime],
        end: Union[str, datetime],
        granularity: Union[int, str],
    ) -> Iterator[Candle]:
        """Stream historical candles for ``[start, end)``.

        Input is validated and the windows are planned before the first
        request, so range and granularity errors are raised here rather than
        on first iteration.

        Args:
            product_id: Product (e.g., BTC-USD).
            start: Range start, RFC 3339.
            end: Range end, RFC 3339.
            granularity: Candle size in seconds.

        Returns:
            A single-use iterator over candles in request order.
        """
        seconds = parse_granularity(granularity)
        windows = plan(start, end, seconds, MAX_CANDLES_PER_REQUEST)
        logger.info(
            "Fetching %s history in %d request(s) at %ds granularity",
            product_id,
            len(windows),
            seconds,
        )
        return fetch_history(self.transport, product_id, windows, seconds, self.limiter)

    def get_accounts(self) -> list[Account]:
        """Get every account of the authenticated profile."""
        response = self.transport.get("/accounts", auth=True, prefer=Accounts)
        return expect(response, Accounts).accounts

    def get_balance(self, currency: Optional[str] = None) -> list[Account]:
        """Get account balances, optionally for a single currency.

        Args:
            currency: Currency code; case-insensitive.

        Raises:
            ExchangeApiError: If no account holds the requested currency.
        """
        accounts = self.get_accounts()
        if currency is None:
            return accounts

        wanted = currency.upper()
        matching = [a for a in accounts if a.currency.upper() == wanted]
        if not matching:
            raise ExchangeApiError(f"No account found for currency {wanted}")
        return matching

    def get_payment_methods(self) -> list[PaymentMethod]:
        """Get linked payment methods (bank accounts, cards)."""
        response = self.transport.get("/payment-methods", auth=True, prefer=PaymentMethods)
        return expect(response, PaymentMethods).payment_methods

    def list_orders(self, product_id: Optional[str] = None) -> list[Order]:
        """List open orders, optionally filtered by product."""
        params = {"product_id": product_id} if product_id else None
        response = self.transport.get("/orders", params=params, auth=True, prefer=Orders)
        return expect(response, Orders).orders

    def place_order(self, amount: Union[float, Decimal], currency: str) -> Order:
        """Buy ``amount`` USD worth of ``currency`` at market.

        The amount is rounded to whole cents before it is checked and sent.

        Raises:
            ValueError: If amount is below one cent after rounding.
            ExchangeApiError: If the exchange rejects the order.
        """
        order = MarketOrder(
            product_id=f"{currency.upper()}-{QUOTE_CURRENCY}",
            side="buy",
            funds=amount,
        )
        logger.info("Placing market buy of %s %s on %s", order.funds, QUOTE_CURRENCY, order.product_id)
        response = self.transport.post("/orders", order.to_payload())
        return expect(response, Order)

    def make_deposit(self, amount: Union[float, Decimal], payment_method_id: str) -> DepositReceipt:
        """Deposit ``amount`` USD from a linked payment method.

        Raises:
            ValueError: If amount is below one cent after rounding.
            ExchangeApiError: If the exchange rejects the deposit.
        """
        cents = to_cents(amount)
        payload = {
            "amount": str(cents),
            "currency": QUOTE_CURRENCY,
            "payment_method_id": payment_method_id,
        }
        logger.info("Depositing %s %s", cents, QUOTE_CURRENCY)
        response = self.transport.post("/deposits/payment-method", payload)
        return expect(response, DepositReceipt)
