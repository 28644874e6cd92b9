"""Client configuration."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .exceptions import ConfigError

DEFAULT_BASE_URL = "https://api.instantdb.com"


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and transport settings for a client.

    Args:
        app_id: InstantDB application id.
        secret: Admin token, sent as a bearer credential.
        base_url: API root.
        timeout: Transport timeout in seconds; None disables it.
    """

    app_id: str
    secret: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Load configuration from environment variables.

        Reads INSTANT_APP_ID (or APP_ID), INSTANT_ADMIN_TOKEN (or SECRET)
        and, optionally, INSTANT_BASE_URL.
        """
        env = os.environ if environ is None else environ
        app_id = env.get("INSTANT_APP_ID") or env.get("APP_ID")
        secret = env.get("INSTANT_ADMIN_TOKEN") or env.get("SECRET")
        if not app_id:
            raise ConfigError("Missing app id: set INSTANT_APP_ID")
        if not secret:
            raise ConfigError("Missing admin token: set INSTANT_ADMIN_TOKEN")
        return cls(
            app_id=app_id,
            secret=secret,
            base_url=env.get("INSTANT_BASE_URL") or DEFAULT_BASE_URL,
        )
