"""DepositReceipt and PaymentMethod data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DepositReceipt(BaseModel):
    """Confirmation of a deposit from a linked payment method."""

    id: str = Field(..., description="Deposit ID")
    amount: float = Field(..., gt=0, description="Deposited amount")
    currency: str = Field(..., description="Deposit currency")
    payout_at: datetime = Field(..., description="When funds become available")

    model_config = {"frozen": True}


class PaymentMethod(BaseModel):
    """A linked bank account or card."""

    id: str = Field(..., description="Payment method ID")
    type: str = Field(..., description="Payment method type (e.g., ach_bank_account)")
    name: str = Field(..., description="Display name")
    currency: str = Field(..., description="Currency of the payment method")
    primary_buy: Optional[bool] = Field(default=None, description="Default for buys")
    primary_sell: Optional[bool] = Field(default=None, description="Default for sells")
    allow_buy: Optional[bool] = Field(default=None, description="Can be used to buy")
    allow_sell: Optional[bool] = Field(default=None, description="Can be used to sell")
    allow_deposit: Optional[bool] = Field(default=None, description="Can be used to deposit")
    allow_withdraw: Optional[bool] = Field(default=None, description="Can be used to withdraw")

    model_config = {"frozen": True}
