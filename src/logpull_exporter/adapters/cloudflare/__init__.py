"""Cloudflare API adapters."""

from logpull_exporter.adapters.cloudflare.auth import (
    Auth,
    KeyEmailAuth,
    TokenAuth,
    UserServiceKeyAuth,
    auth_from_credentials,
)
from logpull_exporter.adapters.cloudflare.logpull import (
    DEFAULT_BASE_URL,
    LogpullClient,
)
from logpull_exporter.adapters.cloudflare.zones import CloudflareZoneResolver

__all__ = [
    "DEFAULT_BASE_URL",
    "Auth",
    "CloudflareZoneResolver",
    "KeyEmailAuth",
    "LogpullClient",
    "TokenAuth",
    "UserServiceKeyAuth",
    "auth_from_credentials",
]
