"""Port interfaces for remote adapters.

These protocols define the contracts that remote API adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from logpull_exporter.core.errors import RetryableFailure
from logpull_exporter.core.models import LogRecord, MetricDescriptor, MetricSample

RecordHandler = Callable[[LogRecord], None]
ErrorHandler = Callable[[RetryableFailure], None]


@runtime_checkable
class LogSourcePort(Protocol):
    """Port for pulling log records for one zone and time window.

    Examples: LogpullClient.
    """

    async def pull(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        on_record: RecordHandler,
    ) -> None:
        """Stream the records of one zone to ``on_record``.

        Args:
            zone_id: Zone to pull logs for.
            start: Beginning of the requested window.
            end: End of the requested window.
            on_record: Called once per decoded record, in response order.

        Raises:
            RetryableFailure: If the pull was aborted. Records delivered
                before the failure are not revoked.
        """
        ...


@runtime_checkable
class MetricsSourcePort(Protocol):
    """Port for anything that produces metric samples on demand.

    Adapters serving an exposition endpoint depend on this protocol.
    Examples: LogpullCollector.
    """

    def describe(self) -> list[MetricDescriptor]:
        """Return the descriptors of all metric families produced."""
        ...

    async def collect(self) -> list[MetricSample]:
        """Produce the current samples."""
        ...


@runtime_checkable
class ZoneResolverPort(Protocol):
    """Port for resolving zone names to zone IDs at startup.

    Examples: CloudflareZoneResolver.
    """

    async def resolve(self, names: Sequence[str]) -> list[str]:
        """Resolve zone names to IDs, preserving order.

        Raises:
            ZoneLookupError: If any name cannot be resolved.
        """
        ...
