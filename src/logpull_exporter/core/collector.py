"""Collection cycle orchestration.

A LogpullCollector turns one call to ``collect()`` into one collection cycle:

    compute window -> one task per zone -> join -> metric samples

Every zone task owns a private Aggregator. A failed pull only affects its own
zone: whatever was counted before the failure is still emitted, the failure
is counted and handed to the error handler, and sibling zones carry on.
"""

import asyncio
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import timedelta

from logpull_exporter.core.aggregator import Aggregator
from logpull_exporter.core.durations import format_duration
from logpull_exporter.core.errors import ConfigurationFailure, RetryableFailure
from logpull_exporter.core.logs import get_logger
from logpull_exporter.core.metrics import FailureCounter, counter, gauge
from logpull_exporter.core.models import (
    LogRecord,
    MetricDescriptor,
    MetricSample,
    MetricType,
    TimeWindow,
)
from logpull_exporter.core.ports import ErrorHandler, LogSourcePort
from logpull_exporter.core.window import (
    MAX_WINDOW_RANGE,
    Clock,
    compute_window,
    period_in_range,
    utc_now,
)

HTTP_RESPONSES_METRIC = "cloudflare_logs_http_responses"
ERRORS_TOTAL_METRIC = "cloudflare_logs_errors_total"
API_ERRORS_TOTAL_METRIC = "cloudflare_logs_api_errors_total"

logger = get_logger(__name__)


class _CycleTotals:
    """Record counts handed over by the zone tasks of one cycle.

    The same tuple seen in several zones is summed into a single series.
    """

    def __init__(self) -> None:
        self._counts: Counter[LogRecord] = Counter()

    def emit(self, pairs: Iterable[tuple[LogRecord, int]]) -> None:
        for record, count in pairs:
            self._counts[record] += count

    def items(self) -> list[tuple[LogRecord, int]]:
        return list(self._counts.items())


class LogpullCollector:
    """Pulls and aggregates Logpull records for a fixed set of zones."""

    def __init__(
        self,
        source: LogSourcePort,
        zone_ids: Sequence[str],
        period: timedelta,
        error_handler: ErrorHandler,
        clock: Clock = utc_now,
    ) -> None:
        """Validate configuration and build the metric descriptors.

        Args:
            source: Adapter used to pull log records.
            zone_ids: Zones to collect; must not be empty.
            period: Window length; must be positive and below MAX_WINDOW_RANGE.
            error_handler: Called with every RetryableFailure.
            clock: Returns the current time (aware UTC datetime).

        Raises:
            ConfigurationFailure: If any parameter is invalid.
        """
        if source is None:
            raise ConfigurationFailure("invalid parameter: source must not be None")

        zone_ids = tuple(zone_ids)
        if not zone_ids:
            raise ConfigurationFailure("invalid parameter: zone_ids must not be empty")

        if not period_in_range(period):
            raise ConfigurationFailure(
                "invalid parameter: period out of acceptable range "
                f"(got {format_duration(period)}, "
                f"must be above 0s and below {format_duration(MAX_WINDOW_RANGE)})"
            )

        if not callable(error_handler):
            raise ConfigurationFailure(
                "invalid parameter: error_handler must be callable"
            )

        self._source = source
        self._zone_ids = zone_ids
        self._period = period
        self._error_handler = error_handler
        self._clock = clock
        self._failures = FailureCounter()

        self._responses_desc = MetricDescriptor(
            name=HTTP_RESPONSES_METRIC,
            help="Cloudflare HTTP responses, obtained via Logpull API",
            type=MetricType.GAUGE,
            label_names=(
                "client_request_host",
                "edge_response_status",
                "origin_response_status",
            ),
            const_labels={"period": format_duration(period)},
        )
        self._errors_desc = MetricDescriptor(
            name=ERRORS_TOTAL_METRIC,
            help="The number of errors that have occurred while collecting metrics",
            type=MetricType.COUNTER,
        )
        self._api_errors_desc = MetricDescriptor(
            name=API_ERRORS_TOTAL_METRIC,
            help="The total number of retryable Cloudflare API errors",
            type=MetricType.COUNTER,
            label_names=("operation", "kind"),
        )

    @property
    def zone_ids(self) -> tuple[str, ...]:
        return self._zone_ids

    @property
    def period(self) -> timedelta:
        return self._period

    @property
    def error_count(self) -> int:
        """Retryable failures seen since this collector was created."""
        return self._failures.total

    def describe(self) -> list[MetricDescriptor]:
        """Return the descriptors of every metric family this collector emits."""
        return [self._responses_desc, self._errors_desc, self._api_errors_desc]

    async def collect(self) -> list[MetricSample]:
        """Run one collection cycle and return its samples.

        The window is computed once and shared by every zone. The call returns
        only after all zone tasks have finished. Retryable failures never
        escape; any other exception is re-raised after the join.
        """
        window = compute_window(self._period, self._clock())
        totals = _CycleTotals()
        failures_before = self._failures.total

        results = await asyncio.gather(
            *(self._collect_zone(zone_id, window, totals) for zone_id in self._zone_ids),
            return_exceptions=True,
        )

        samples = self._build_samples(totals)
        logger.debug(
            "cycle complete: window=%s..%s zones=%d samples=%d failures=%d",
            window.start.isoformat(),
            window.end.isoformat(),
            len(self._zone_ids),
            len(samples),
            self._failures.total - failures_before,
        )

        for result in results:
            if isinstance(result, BaseException):
                raise result
        return samples

    async def _collect_zone(
        self, zone_id: str, window: TimeWindow, totals: _CycleTotals
    ) -> None:
        """Pull and aggregate one zone, emitting whatever was counted."""
        aggregator = Aggregator()
        try:
            await self._source.pull(
                zone_id, window.start, window.end, aggregator.increment
            )
        except RetryableFailure as failure:
            self._failures.inc(failure)
            self._error_handler(failure)
        finally:
            totals.emit(aggregator.drain())

    def _build_samples(self, totals: _CycleTotals) -> list[MetricSample]:
        samples = [
            gauge(
                self._responses_desc,
                float(count),
                labels={
                    "client_request_host": record.client_request_host,
                    "edge_response_status": str(record.edge_response_status),
                    "origin_response_status": str(record.origin_response_status),
                },
            )
            for record, count in totals.items()
        ]

        samples.append(counter(self._errors_desc, float(self._failures.total)))
        for (operation, kind), count in sorted(self._failures.breakdown().items()):
            samples.append(
                counter(
                    self._api_errors_desc,
                    float(count),
                    labels={"operation": operation, "kind": kind},
                )
            )
        return samples
