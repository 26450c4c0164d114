"""Response decoding for the Coinbase Pro REST API.

Responses carry no type tag, so the variant is chosen from the JSON shape
alone, in a fixed order:

1. An object with a ``message`` field and no field of any other variant
   is an ``ApiError``.
2. An array is tried as ``Candles``, ``Accounts``, ``Orders`` and then
   ``PaymentMethods``; every element has to match. The empty array fits all
   of them and resolves to the caller's preferred list variant, or
   ``Candles`` when there is none.
3. An object is tried as ``Tick``, ``Order``, ``DepositReceipt`` and then
   ``Account``, most specific first.

Anything else raises ``DecodeError``.
"""

import json
from typing import Any, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

from cbtrader.api.errors import DecodeError, ExchangeApiError
from cbtrader.models import Account, Candle, DepositReceipt, Order, PaymentMethod, Tick


class ApiError(BaseModel):
    """Error payload returned by the exchange."""

    message: str = Field(..., description="Error message from the exchange")

    model_config = {"frozen": True}


class Candles(BaseModel):
    """A page of candles, in the order the exchange sent them."""

    candles: list[Candle] = Field(default_factory=list)

    model_config = {"frozen": True}


class Accounts(BaseModel):
    """All accounts of the authenticated profile."""

    accounts: list[Account] = Field(default_factory=list)

    model_config = {"frozen": True}


class Orders(BaseModel):
    """A page of orders."""

    orders: list[Order] = Field(default_factory=list)

    model_config = {"frozen": True}


class PaymentMethods(BaseModel):
    """Linked payment methods."""

    payment_methods: list[PaymentMethod] = Field(default_factory=list)

    model_config = {"frozen": True}


ApiResponse = Union[
    ApiError,
    Tick,
    Candles,
    Account,
    Accounts,
    Order,
    Orders,
    DepositReceipt,
    PaymentMethods,
]

LIST_VARIANTS: tuple[type, ...] = (Candles, Accounts, Orders, PaymentMethods)
OBJECT_VARIANTS: tuple[type[BaseModel], ...] = (Tick, Order, DepositReceipt, Account)

# Fields that mark an object as something other than an error payload.
_VARIANT_FIELDS = frozenset(
    name
    for model in (Tick, Account, Order, DepositReceipt, PaymentMethod)
    for name in model.model_fields
) - {"message"}

T = TypeVar("T")


def _is_error(data: dict) -> bool:
    return isinstance(data.get("message"), str) and not (_VARIANT_FIELDS & data.keys())


def _decode_candles(items: Sequence[Any]) -> Optional[Candles]:
    candles = []
    for row in items:
        if not isinstance(row, list):
            return None
        try:
            candles.append(Candle.from_row(row))
        except ValueError:
            return None
    return Candles(candles=candles)


def _decode_each(items: Sequence[Any], model: type[BaseModel]) -> Optional[list]:
    parsed = []
    for item in items:
        if not isinstance(item, dict):
            return None
        try:
            parsed.append(model.model_validate(item))
        except ValidationError:
            return None
    return parsed


def _decode_list(items: list, prefer: Optional[type]) -> ApiResponse:
    if not items:
        variant = prefer if prefer in LIST_VARIANTS else Candles
        return variant()

    candles = _decode_candles(items)
    if candles is not None:
        return candles

    accounts = _decode_each(items, Account)
    if accounts is not None:
        return Accounts(accounts=accounts)

    orders = _decode_each(items, Order)
    if orders is not None:
        return Orders(orders=orders)

    methods = _decode_each(items, PaymentMethod)
    if methods is not None:
        return PaymentMethods(payment_methods=methods)

    raise DecodeError(f"Unrecognized list response: {_preview(items)}")


def _decode_object(data: dict) -> ApiResponse:
    if _is_error(data):
        return ApiError(message=data["message"])

    for model in OBJECT_VARIANTS:
        try:
            return model.model_validate(data)
        except ValidationError:
            continue

    raise DecodeError(f"Unrecognized object response: {_preview(data)}")


def _preview(data: Any, limit: int = 200) -> str:
    text = json.dumps(data, default=str)
    return text if len(text) <= limit else text[:limit] + "..."


def decode(raw: Union[bytes, str], prefer: Optional[type] = None) -> ApiResponse:
    """Decode a raw response body into exactly one response variant.

    Args:
        raw: Response body.
        prefer: List variant to use for an empty array.

    Returns:
        The matching variant.

    Raises:
        DecodeError: If the body is not JSON or matches no known shape.
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Response is not valid JSON: {e}") from None

    if isinstance(data, list):
        return _decode_list(data, prefer)
    if isinstance(data, dict):
        return _decode_object(data)

    raise DecodeError(f"Unexpected JSON {type(data).__name__} in response")


def expect(response: ApiResponse, variant: type[T]) -> T:
    """Narrow a decoded response to the variant the caller asked for.

    Raises:
        ExchangeApiError: If the exchange returned an error payload.
        DecodeError: If the response is some other variant.
    """
    if isinstance(response, variant):
        return response
    if isinstance(response, ApiError):
        raise ExchangeApiError(response.message)
    raise DecodeError(
        f"Expected {variant.__name__} response, got {type(response).__name__}"
    )
