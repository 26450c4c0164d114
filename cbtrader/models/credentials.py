"""Credentials data model."""

from pydantic import BaseModel, Field, SecretStr


class Credentials(BaseModel):
    """API key, base64 HMAC secret and passphrase for private endpoints.

    The secret and passphrase are stored as ``SecretStr`` so they never show
    up in reprs, logs or tracebacks.
    """

    api_key: str = Field(..., min_length=1, description="API key")
    api_secret: SecretStr = Field(..., description="Base64-encoded HMAC secret")
    passphrase: SecretStr = Field(..., description="API passphrase")

    model_config = {"frozen": True}
