"""Cloudflare Logpull exporter.

Pulls access logs for a set of zones, counts them by host and response
status, and exposes the counts as Prometheus metrics.

Example:
    ```python
    from logpull_exporter import LogpullClient, LogpullCollector, TokenAuth

    client = LogpullClient(TokenAuth("..."))
    collector = LogpullCollector(client, ["zone-id"], timedelta(minutes=1), print)
    samples = await collector.collect()
    ```
"""

from logpull_exporter.adapters.cloudflare import (
    CloudflareZoneResolver,
    KeyEmailAuth,
    LogpullClient,
    TokenAuth,
    UserServiceKeyAuth,
    auth_from_credentials,
)
from logpull_exporter.adapters.frameworks.asgi import create_asgi_app
from logpull_exporter.core.aggregator import Aggregator
from logpull_exporter.core.collector import LogpullCollector
from logpull_exporter.core.errors import (
    ConfigurationFailure,
    ExporterError,
    FailureKind,
    RetryableFailure,
    ZoneLookupError,
)
from logpull_exporter.core.logs import get_logger
from logpull_exporter.core.models import LogRecord, MetricSample, TimeWindow

__version__ = "0.1.0"

__all__ = [
    "Aggregator",
    "CloudflareZoneResolver",
    "ConfigurationFailure",
    "ExporterError",
    "FailureKind",
    "KeyEmailAuth",
    "LogRecord",
    "LogpullClient",
    "LogpullCollector",
    "MetricSample",
    "RetryableFailure",
    "TimeWindow",
    "TokenAuth",
    "UserServiceKeyAuth",
    "ZoneLookupError",
    "auth_from_credentials",
    "create_asgi_app",
    "get_logger",
]
