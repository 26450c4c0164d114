"""Shared helpers for cbtrader CLI commands."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from cbtrader.api.client import CoinbaseProClient
from cbtrader.api.sequencer import RateLimiter
from cbtrader.api.signer import RequestSigner
from cbtrader.api.transport import Transport
from cbtrader.config import load_config, load_credentials, load_settings

console = Console()
err_console = Console(stderr=True)


def print_error(message: str, title: str = "Error") -> None:
    """Show an error panel on stderr."""
    err_console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def build_client(auth: bool = False, config: Optional[dict] = None) -> CoinbaseProClient:
    """Create a client from the config file and environment.

    Args:
        auth: Whether private endpoints will be called. Credentials are
            resolved (and validated) up front so nothing is sent when
            they are missing.
        config: Parsed config; loaded from disk when omitted.

    Raises:
        ConfigError: If the config is unreadable or credentials are missing.
        CredentialError: If the API secret is not valid base64.
    """
    config = load_config() if config is None else config
    settings = load_settings(config)

    signer = RequestSigner(load_credentials(config)) if auth else None
    transport = Transport(settings.api_url, signer=signer, timeout=settings.timeout)
    return CoinbaseProClient(transport, RateLimiter(settings.request_interval))
