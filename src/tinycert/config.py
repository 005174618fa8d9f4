"""
Configuration: typed, validated client settings loaded from environment/.env.

Uses pydantic-settings to:
  - Load from environment variables (TINYCERT__API_KEY, TINYCERT__HOST, ...)
  - Fall back to a .env file in the working directory
  - Validate types and constraints before any network call
  - Keep the API key and passphrase out of reprs and logs (SecretStr)
"""

from __future__ import annotations

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tinycert.adapters.http_transport import DEFAULT_HOST


class TinyCertSettings(BaseSettings):
    """
    Client settings.

    Load order (highest priority first):
      1. Constructor arguments
      2. Environment variables with the TINYCERT__ prefix
      3. .env file
      4. Default values

    `email` and `passphrase` are only needed when the client should
    connect on its own (TinyCertClient used as a context manager).
    """

    model_config = SettingsConfigDict(
        env_prefix="TINYCERT__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr = Field(description="Shared secret used to sign every request")
    email: str | None = Field(default=None, description="Account e-mail address")
    passphrase: SecretStr | None = Field(default=None, description="Account passphrase")
    host: str = Field(default=DEFAULT_HOST, description="API host name")
    timeout_seconds: float = Field(default=30, gt=0, description="Default HTTP timeout")
    log_level: str = Field(default="INFO")

    @field_validator("host")
    @classmethod
    def validate_host(cls, value: str) -> str:
        """Accept a bare host name (optionally with port), not a URL."""
        host = value.strip()
        if not host or "://" in host or "/" in host:
            raise ValueError(f"host must be a bare host name, got {value!r}")
        return host
