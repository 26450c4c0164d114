"""Market data commands for cbtrader CLI.

Handles the latest tick for a product and historical candle export.
"""

import sys

import click
from rich.panel import Panel

from cbtrader.api.client import DEFAULT_PRODUCT
from cbtrader.api.errors import CbTraderError
from cbtrader.cli.common import build_client, console, err_console, print_error
from cbtrader.export import write_candles_csv


@click.command()
@click.argument("product_id", default=DEFAULT_PRODUCT)
def tick(product_id: str) -> None:
    """Show the latest tick (price, bid/ask, volume) for a product.

    PRODUCT_ID defaults to BTC-USD.

    \b
    Examples:
      cbtrader tick
      cbtrader tick ETH-USD
    """
    product_id = product_id.upper()

    try:
        client = build_client()
        t = client.get_tick(product_id)
    except CbTraderError as e:
        print_error(f"Failed to get tick for {product_id}:\n\n{e}")
        raise SystemExit(1)

    spread = t.ask - t.bid
    tick_text = (
        f"[bold]{product_id}[/bold]\n\n"
        f"[bold white]Price:[/bold white]  {t.price:,.2f}\n"
        f"[bold white]Size:[/bold white]   {t.size}\n\n"
        f"[dim]Bid:[/dim]    {t.bid:,.2f}\n"
        f"[dim]Ask:[/dim]    {t.ask:,.2f}\n"
        f"[dim]Spread:[/dim] {spread:,.2f}\n"
        f"[dim]Volume:[/dim] {t.volume:,.4f}\n"
        f"[dim]Time:[/dim]   {t.time.isoformat()}\n"
        f"[dim]Trade:[/dim]  #{t.trade_id}"
    )

    console.print(Panel(tick_text, title="[bold cyan]Tick[/bold cyan]", border_style="cyan"))


@click.command()
@click.argument("product_id")
@click.argument("start")
@click.argument("end")
@click.argument("granularity")
def history(product_id: str, start: str, end: str, granularity: str) -> None:
    """Export historical candles as CSV on stdout.

    START and END are RFC 3339 timestamps with a UTC offset.
    GRANULARITY is the candle size in seconds. The exchange accepts
    60, 300, 900, 3600, 21600 and 86400.

    Long ranges are fetched in several requests, one per second.
    Rows are written as soon as each request completes.

    \b
    Examples:
      cbtrader history BTC-USD 2020-01-01T00:00:00-04:00 \\
          2020-01-02T00:00:00-04:00 300 > btc.csv
    """
    product_id = product_id.upper()

    try:
        client = build_client()
        candles = client.get_history(product_id, start, end, granularity)
        count = write_candles_csv(candles, sys.stdout)
    except CbTraderError as e:
        print_error(f"History fetch failed:\n\n{e}")
        raise SystemExit(1)

    err_console.print(f"[dim]Wrote {count} candles for {product_id}[/dim]")
