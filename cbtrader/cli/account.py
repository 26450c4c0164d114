"""Account commands for cbtrader CLI.

Handles balances, open orders and linked payment methods. All of
these call private endpoints and need API credentials.
"""

from typing import Optional

import click
from rich.table import Table

from cbtrader.api.errors import CbTraderError
from cbtrader.cli.common import build_client, console, print_error


@click.command()
@click.argument("currency", required=False)
def balance(currency: Optional[str]) -> None:
    """Show account balances.

    CURRENCY limits the output to one currency (e.g., BTC).
    Leave it out to see every account.
    """
    try:
        client = build_client(auth=True)
        accounts = client.get_balance(currency)
    except CbTraderError as e:
        print_error(f"Failed to get balance:\n\n{e}")
        raise SystemExit(1)

    table = Table(title="Balances", show_header=True, header_style="bold cyan")
    table.add_column("Currency", style="bold")
    table.add_column("Balance", justify="right")
    table.add_column("Available", justify="right", style="green")
    table.add_column("Hold", justify="right", style="yellow")

    for account in sorted(accounts, key=lambda a: a.currency):
        table.add_row(
            account.currency,
            f"{account.balance:.8f}",
            f"{account.available:.8f}",
            f"{account.hold:.8f}",
        )

    console.print(table)


@click.command()
@click.argument("product_id", required=False)
def orders(product_id: Optional[str]) -> None:
    """List open orders.

    PRODUCT_ID optionally filters orders (e.g., BTC-USD).
    """
    product_id = product_id.upper() if product_id else None

    try:
        client = build_client(auth=True)
        order_list = client.list_orders(product_id)
    except CbTraderError as e:
        print_error(f"Failed to list orders:\n\n{e}")
        raise SystemExit(1)

    if not order_list:
        console.print("[dim]No open orders.[/dim]")
        return

    table = Table(title="Orders", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Product", style="bold")
    table.add_column("Side")
    table.add_column("Type")
    table.add_column("Amount", justify="right")
    table.add_column("Filled", justify="right")
    table.add_column("Status")
    table.add_column("Created", style="dim")

    for order in order_list:
        side_style = "green" if order.side == "buy" else "red"
        if order.size is not None:
            amount = f"{order.size}"
        elif order.funds is not None:
            amount = f"${order.funds:,.2f}"
        else:
            amount = "-"
        filled = f"{order.filled_size}" if order.filled_size is not None else "-"

        table.add_row(
            order.id[:8],
            order.product_id,
            f"[{side_style}]{order.side.upper()}[/{side_style}]",
            order.type,
            amount,
            filled,
            order.status,
            order.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@click.command(name="payment-methods")
def payment_methods() -> None:
    """List linked payment methods (bank accounts).

    The ID column is the value to use for COINBASE_BANK_ID.
    """
    try:
        client = build_client(auth=True)
        methods = client.get_payment_methods()
    except CbTraderError as e:
        print_error(f"Failed to get payment methods:\n\n{e}")
        raise SystemExit(1)

    table = Table(title="Payment Methods", show_header=True, header_style="bold cyan")
    table.add_column("ID")
    table.add_column("Name", style="bold")
    table.add_column("Type", style="dim")
    table.add_column("Currency")
    table.add_column("Deposits", justify="center")

    for method in methods:
        allowed = "[green]✓[/green]" if method.allow_deposit else "[dim]-[/dim]"
        table.add_row(method.id, method.name, method.type, method.currency, allowed)

    console.print(table)
