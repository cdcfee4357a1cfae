"""Core domain models for log pulling and metric exposition."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class LogRecord:
    """One decoded Logpull entry, reduced to the fields we aggregate on.

    Instances are immutable and hashable so they can be used directly as
    aggregation keys.

    Attributes:
        client_request_host: Host requested by the client.
        edge_response_status: HTTP status returned by the edge.
        origin_response_status: HTTP status returned by the origin.
    """

    client_request_host: str
    edge_response_status: int
    origin_response_status: int


@dataclass(frozen=True)
class TimeWindow:
    """The [start, end) range requested from the Logpull API for one cycle.

    Attributes:
        start: Beginning of the window (timezone-aware, UTC).
        end: End of the window (timezone-aware, UTC).
    """

    start: datetime
    end: datetime


class MetricType(str, Enum):
    """Prometheus metric family types emitted by the exporter."""

    GAUGE = "gauge"
    COUNTER = "counter"


@dataclass(frozen=True)
class MetricDescriptor:
    """Static description of a metric family.

    Attributes:
        name: Metric name (e.g., cloudflare_logs_errors_total).
        help: Help text shown in the exposition.
        type: Gauge or counter.
        label_names: Variable label names, in exposition order.
        const_labels: Labels attached to every sample of the family.
    """

    name: str
    help: str
    type: MetricType
    label_names: tuple[str, ...] = ()
    const_labels: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class MetricSample:
    """A single metric measurement.

    Attributes:
        name: Metric name (e.g., cloudflare_logs_http_responses).
        timestamp: Unix timestamp in seconds.
        value: The metric value.
        labels: Key-value pairs for metric dimensions.
    """

    name: str
    timestamp: float
    value: float
    labels: dict[str, str] = field(default_factory=dict)
