"""Exporter configuration loaded from environment variables.

Variables:
    EXPORTER_LISTEN_ADDR             host:port to serve /metrics on (":9299")
    CLOUDFLARE_API_TOKEN             API token auth
    CLOUDFLARE_API_KEY               global API key auth, with CLOUDFLARE_API_EMAIL
    CLOUDFLARE_API_EMAIL             account email for the global API key
    CLOUDFLARE_API_USER_SERVICE_KEY  user service key auth
    CLOUDFLARE_ZONE_NAMES            comma-separated zone names (required)
    CLOUDFLARE_API_BASE_URL          API root URL
    EXPORTER_LOG_PERIOD              window length, e.g. "1m" or "1h30m" ("1m")
    EXPORTER_API_TIMEOUT             HTTP timeout in seconds ("60")
    EXPORTER_LOG_LEVEL               log level name ("INFO")
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

from logpull_exporter.adapters.cloudflare.auth import Auth, auth_from_credentials
from logpull_exporter.adapters.cloudflare.logpull import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
)
from logpull_exporter.core.durations import parse_duration
from logpull_exporter.core.errors import ConfigurationFailure
from logpull_exporter.core.logs import parse_level

DEFAULT_LISTEN_ADDR = ":9299"
DEFAULT_LOG_PERIOD = "1m"
DEFAULT_LOG_LEVEL = "INFO"


def parse_listen_addr(addr: str) -> tuple[str, int]:
    """Split a "host:port" listen address.

    An empty host means all interfaces.

    Raises:
        ConfigurationFailure: If the port is missing or invalid.
    """
    host, sep, port_text = addr.strip().rpartition(":")
    if not sep:
        raise ConfigurationFailure(f"listen address must look like host:port: {addr!r}")
    try:
        port = int(port_text)
    except ValueError:
        raise ConfigurationFailure(f"invalid port in listen address: {addr!r}") from None
    if not 0 < port < 65536:
        raise ConfigurationFailure(f"port out of range in listen address: {addr!r}")
    return host.strip("[]") or "0.0.0.0", port


def _zone_names(raw: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


@dataclass(frozen=True)
class ExporterConfig:
    """Validated exporter settings."""

    auth: Auth
    zone_names: tuple[str, ...]
    listen_host: str = "0.0.0.0"
    listen_port: int = 9299
    log_period: timedelta = timedelta(minutes=1)
    base_url: str = DEFAULT_BASE_URL
    api_timeout: float = DEFAULT_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ExporterConfig":
        """Build a configuration from environment variables.

        Raises:
            ConfigurationFailure: On any missing or invalid setting.
        """

        def get(name: str, default: str = "") -> str:
            return environ.get(name, default).strip()

        auth = auth_from_credentials(
            token=get("CLOUDFLARE_API_TOKEN"),
            key=get("CLOUDFLARE_API_KEY"),
            email=get("CLOUDFLARE_API_EMAIL"),
            user_service_key=get("CLOUDFLARE_API_USER_SERVICE_KEY"),
        )

        zone_names = _zone_names(get("CLOUDFLARE_ZONE_NAMES"))
        if not zone_names:
            raise ConfigurationFailure(
                "a comma-separated list of zone names must be specified "
                "in CLOUDFLARE_ZONE_NAMES"
            )

        host, port = parse_listen_addr(
            get("EXPORTER_LISTEN_ADDR") or DEFAULT_LISTEN_ADDR
        )

        period_text = get("EXPORTER_LOG_PERIOD") or DEFAULT_LOG_PERIOD
        try:
            log_period = parse_duration(period_text)
        except ValueError as e:
            raise ConfigurationFailure(f"EXPORTER_LOG_PERIOD: {e}") from e

        timeout_text = get("EXPORTER_API_TIMEOUT") or str(DEFAULT_TIMEOUT)
        try:
            api_timeout = float(timeout_text)
        except ValueError:
            raise ConfigurationFailure(
                f"EXPORTER_API_TIMEOUT must be a number of seconds: {timeout_text!r}"
            ) from None
        if not math.isfinite(api_timeout) or api_timeout <= 0:
            raise ConfigurationFailure(
                f"EXPORTER_API_TIMEOUT must be positive: {timeout_text!r}"
            )

        log_level = (get("EXPORTER_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
        try:
            parse_level(log_level)
        except ValueError as e:
            raise ConfigurationFailure(f"EXPORTER_LOG_LEVEL: {e}") from e

        return cls(
            auth=auth,
            zone_names=zone_names,
            listen_host=host,
            listen_port=port,
            log_period=log_period,
            base_url=get("CLOUDFLARE_API_BASE_URL") or DEFAULT_BASE_URL,
            api_timeout=api_timeout,
            log_level=log_level,
        )
