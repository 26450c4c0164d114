"""Setup command for cbtrader CLI.

Creates the config file and reports which credentials are still missing.
"""

import click
from rich.panel import Panel

from cbtrader.api.errors import ConfigError
from cbtrader.cli.common import console, print_error
from cbtrader.config import (
    CONFIG_PATH,
    ENV_BANK_ID,
    create_template_config,
    load_bank_id,
    load_config,
    missing_credentials,
)


@click.command()
def init() -> None:
    """Create the config file or check an existing one.

    Credentials can live in ~/.config/cbtrader/config.toml or in the
    COINBASE_API_KEY, COINBASE_API_SECRET, COINBASE_PASSPHRASE and
    COINBASE_BANK_ID environment variables.
    """
    if not CONFIG_PATH.exists():
        config_path = create_template_config(CONFIG_PATH)
        console.print(Panel(
            f"[yellow]Configuration file created at:[/yellow]\n"
            f"[cyan]{config_path}[/cyan]\n\n"
            f"Fill in your API key, secret and passphrase,\n"
            f"or export them as environment variables.",
            title="[bold]Configuration Created[/bold]",
            border_style="yellow",
        ))
        return

    try:
        config = load_config(CONFIG_PATH)
    except ConfigError as e:
        print_error(str(e), title="Configuration Error")
        raise SystemExit(1)

    missing = missing_credentials(config)
    if missing:
        console.print(Panel(
            "[red]Missing required credentials:[/red]\n\n"
            + "\n".join(f"  • {name}" for name in missing)
            + f"\n\n[dim]Edit {CONFIG_PATH} or set these environment variables.[/dim]",
            title="[bold red]Configuration Error[/bold red]",
            border_style="red",
        ))
        raise SystemExit(1)

    try:
        load_bank_id(config)
        bank_note = "Deposits enabled."
    except ConfigError:
        bank_note = f"Set {ENV_BANK_ID} to enable deposits."

    console.print(Panel(
        f"[green]✓[/green] API credentials configured\n\n[dim]{bank_note}[/dim]",
        title="[bold green]Configuration OK[/bold green]",
        border_style="green",
    ))
