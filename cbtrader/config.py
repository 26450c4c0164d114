"""Configuration loading for cbtrader.

Settings come from ``~/.config/cbtrader/config.toml``; credentials can also
be supplied through environment variables, which take precedence over the
file.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from cbtrader.api.errors import ConfigError
from cbtrader.api.sequencer import DEFAULT_REQUEST_INTERVAL
from cbtrader.api.transport import API_URL, DEFAULT_TIMEOUT
from cbtrader.models import Credentials


CONFIG_DIR = Path.home() / ".config" / "cbtrader"
CONFIG_PATH = CONFIG_DIR / "config.toml"

ENV_API_KEY = "COINBASE_API_KEY"
ENV_API_SECRET = "COINBASE_API_SECRET"
ENV_PASSPHRASE = "COINBASE_PASSPHRASE"
ENV_BANK_ID = "COINBASE_BANK_ID"

# (config key under [coinbase], environment variable)
CREDENTIAL_KEYS = (
    ("api_key", ENV_API_KEY),
    ("api_secret", ENV_API_SECRET),
    ("passphrase", ENV_PASSPHRASE),
)


class Settings(BaseModel):
    """Connection settings from the ``[api]`` table."""

    api_url: str = Field(default=API_URL, min_length=1, description="REST API base URL")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Per-request timeout (s)")
    request_interval: float = Field(
        default=DEFAULT_REQUEST_INTERVAL,
        ge=0,
        description="Minimum delay between paginated requests (s)",
    )

    model_config = {"frozen": True}


def load_config(path: Optional[Path] = None) -> dict:
    """Load the TOML config file.

    Returns:
        The parsed config, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but cannot be parsed.
    """
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from None


def create_template_config(path: Optional[Path] = None) -> Path:
    """Write a template config file and return its path."""
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "coinbase": {
            "api_key": "",  # Leave empty to use COINBASE_API_KEY env var
            "api_secret": "",
            "passphrase": "",
            "bank_id": "",
        },
        "api": {
            "url": API_URL,
            "timeout": DEFAULT_TIMEOUT,
            "request_interval": DEFAULT_REQUEST_INTERVAL,
        },
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def load_settings(config: Optional[dict] = None) -> Settings:
    """Build connection settings from the ``[api]`` table.

    Raises:
        ConfigError: If a value is out of range.
    """
    api = (config or {}).get("api", {})
    values = {
        "api_url": api.get("url", API_URL),
        "timeout": api.get("timeout", DEFAULT_TIMEOUT),
        "request_interval": api.get("request_interval", DEFAULT_REQUEST_INTERVAL),
    }
    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid [api] settings: {e}") from None


def _lookup(
    config: dict,
    key: str,
    env_name: str,
    environ: Mapping[str, str],
) -> Optional[str]:
    value = environ.get(env_name) or config.get("coinbase", {}).get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def missing_credentials(
    config: Optional[dict] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> list[str]:
    """Names of the environment variables that still need a value."""
    config = config or {}
    environ = os.environ if environ is None else environ
    return [
        env_name
        for key, env_name in CREDENTIAL_KEYS
        if _lookup(config, key, env_name, environ) is None
    ]


def load_credentials(
    config: Optional[dict] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Credentials:
    """Resolve API credentials.

    Args:
        config: Parsed config file.
        environ: Environment mapping; defaults to ``os.environ``.

    Raises:
        ConfigError: Naming every credential that is missing.
    """
    config = config or {}
    environ = os.environ if environ is None else environ

    missing = missing_credentials(config, environ)
    if missing:
        raise ConfigError(
            "Missing API credentials: "
            + ", ".join(missing)
            + f" (set the environment variables or fill in [coinbase] in {CONFIG_PATH})"
        )

    return Credentials(
        api_key=_lookup(config, "api_key", ENV_API_KEY, environ),
        api_secret=_lookup(config, "api_secret", ENV_API_SECRET, environ),
        passphrase=_lookup(config, "passphrase", ENV_PASSPHRASE, environ),
    )


def load_bank_id(
    config: Optional[dict] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Resolve the payment method ID used for deposits.

    Raises:
        ConfigError: If no bank ID is configured.
    """
    config = config or {}
    environ = os.environ if environ is None else environ

    bank_id = _lookup(config, "bank_id", ENV_BANK_ID, environ)
    if bank_id is None:
        raise ConfigError(
            f"Missing {ENV_BANK_ID}; run 'cbtrader payment-methods' to find your bank's ID"
        )
    return bank_id
