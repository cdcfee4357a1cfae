"""Metric helpers for creating MetricSample objects and counting failures."""

import threading
import time

from logpull_exporter.core.errors import RetryableFailure
from logpull_exporter.core.models import MetricDescriptor, MetricSample


def _labels(
    descriptor: MetricDescriptor, labels: dict[str, str] | None
) -> dict[str, str]:
    """Merge a descriptor's constant labels with per-sample labels."""
    merged = dict(descriptor.const_labels)
    if labels:
        merged.update(labels)
    return merged


def counter(
    descriptor: MetricDescriptor,
    value: float,
    labels: dict[str, str] | None = None,
) -> MetricSample:
    """Create a counter metric sample.

    Args:
        descriptor: Family the sample belongs to.
        value: Current cumulative value.
        labels: Optional dimension labels.

    Returns:
        MetricSample with current timestamp
    """
    return MetricSample(
        name=descriptor.name,
        timestamp=time.time(),
        value=value,
        labels=_labels(descriptor, labels),
    )


def gauge(
    descriptor: MetricDescriptor,
    value: float,
    labels: dict[str, str] | None = None,
) -> MetricSample:
    """Create a gauge metric sample.

    Args:
        descriptor: Family the sample belongs to.
        value: Current gauge value.
        labels: Optional dimension labels.

    Returns:
        MetricSample with current timestamp
    """
    return MetricSample(
        name=descriptor.name,
        timestamp=time.time(),
        value=value,
        labels=_labels(descriptor, labels),
    )


class FailureCounter:
    """Process-lifetime count of retryable failures.

    Counts are cumulative and broken down by (operation, kind). Increments
    are guarded by a lock so the counter can be shared between tasks and
    threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._by_operation: dict[tuple[str, str], int] = {}

    def inc(self, failure: RetryableFailure) -> None:
        """Record one failure."""
        key = (failure.operation, failure.kind.value)
        with self._lock:
            self._total += 1
            self._by_operation[key] = self._by_operation.get(key, 0) + 1

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    def breakdown(self) -> dict[tuple[str, str], int]:
        """Return a snapshot of counts keyed by (operation, kind)."""
        with self._lock:
            return dict(self._by_operation)
