"""Trading commands for cbtrader CLI.

Handles market buys and USD deposits from a linked bank account.
"""

from decimal import Decimal

import click
from rich.panel import Panel

from cbtrader.api.client import QUOTE_CURRENCY
from cbtrader.api.errors import CbTraderError
from cbtrader.cli.common import build_client, console, print_error
from cbtrader.config import load_bank_id, load_config
from cbtrader.models import to_cents


def parse_amount(ctx: click.Context, param: click.Parameter, value: str) -> Decimal:
    """Round a USD amount to cents, rejecting anything under one cent."""
    try:
        return to_cents(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None


@click.command()
@click.argument("currency")
@click.argument("amount", callback=parse_amount)
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
def buy(currency: str, amount: Decimal, yes: bool) -> None:
    """Buy CURRENCY with AMOUNT USD at the current market rate.

    \b
    Examples:
      cbtrader buy BTC 25
      cbtrader buy ETH 5.25 --yes
    """
    currency = currency.upper()
    product_id = f"{currency}-{QUOTE_CURRENCY}"

    try:
        client = build_client(auth=True)
    except CbTraderError as e:
        print_error(str(e), title="Configuration Error")
        raise SystemExit(1)

    console.print(Panel(
        f"[bold]Order Details[/bold]\n\n"
        f"Product: {product_id}\n"
        f"Side:    [green]BUY[/green]\n"
        f"Type:    MARKET\n"
        f"Funds:   ${amount:,.2f}",
        title="[bold cyan]Placing Order[/bold cyan]",
        border_style="cyan",
    ))

    if not yes:
        click.confirm("Place this order?", abort=True)

    try:
        order = client.place_order(amount, currency)
    except CbTraderError as e:
        print_error(f"Failed to place order:\n\n{e}")
        raise SystemExit(1)

    result_text = (
        f"[bold green]Order Placed[/bold green]\n\n"
        f"Order ID: {order.id}\n"
        f"Product:  {order.product_id}\n"
        f"Status:   {order.status}"
    )
    if order.filled_size:
        result_text += f"\nFilled:   {order.filled_size} {currency}"
    if order.fill_fees:
        result_text += f"\nFees:     ${order.fill_fees:,.2f}"

    console.print(Panel(result_text, title="[bold green]Success[/bold green]", border_style="green"))


@click.command()
@click.argument("amount", callback=parse_amount)
@click.option("-y", "--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
def deposit(amount: Decimal, yes: bool) -> None:
    """Deposit AMOUNT USD from your linked bank account.

    The bank is selected with COINBASE_BANK_ID (see
    'cbtrader payment-methods').
    """
    try:
        config = load_config()
        bank_id = load_bank_id(config)
        client = build_client(auth=True, config=config)
    except CbTraderError as e:
        print_error(str(e), title="Configuration Error")
        raise SystemExit(1)

    console.print(f"Depositing [bold]${amount:,.2f}[/bold] {QUOTE_CURRENCY} into Coinbase Pro...")

    if not yes:
        click.confirm("Continue?", abort=True)

    try:
        receipt = client.make_deposit(amount, bank_id)
    except CbTraderError as e:
        print_error(f"Deposit failed:\n\n{e}")
        raise SystemExit(1)

    console.print(Panel(
        f"[green]✓[/green] Deposited ${receipt.amount:,.2f} {receipt.currency}\n\n"
        f"Deposit ID: {receipt.id}\n"
        f"[dim]Funds available at {receipt.payout_at.isoformat()}[/dim]",
        title="[bold green]Deposit Successful[/bold green]",
        border_style="green",
    ))
