"""Shared test doubles: a mock Logpull API and an in-memory log source."""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import httpx

from logpull_exporter.core.encoding.ndjson import LOG_FIELDS
from logpull_exporter.core.errors import RetryableFailure
from logpull_exporter.core.models import LogRecord, MetricSample
from logpull_exporter.core.ports import RecordHandler

BASE_URL = "http://cloudflare.test/client/v4"

GOOD_TOKEN = "good-token"
GOOD_KEY = "good-key"
GOOD_USER_SERVICE_KEY = "good-user-service-key"
GOOD_EMAIL = "good@example.org"

GOOD_ZONE_ID = "good-zone-id"
NONEXISTENT_ZONE_ID = "nonexistent-zone-id"
UNAUTHORIZED_ZONE_ID = "unauthorized-zone-id"
LOG_RETENTION_DISABLED_ZONE_ID = "log-retention-disabled-zone-id"

GOOD_END = datetime(2021, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
GOOD_START = GOOD_END - timedelta(minutes=1)
FIXED_NOW = datetime(2021, 1, 1, 12, 1, 0, tzinfo=timezone.utc)
TOO_EARLY_END = datetime(2021, 1, 1, 1, 0, 0, tzinfo=timezone.utc)
TOO_EARLY_START = TOO_EARLY_END - timedelta(minutes=1)
TOO_RECENT_END = datetime(2021, 1, 1, 18, 0, 0, tzinfo=timezone.utc)
TOO_RECENT_START = TOO_RECENT_END - timedelta(minutes=1)

LOG_ENTRY_JSON = (
    b'{"ClientRequestHost": "example.org", '
    b'"EdgeResponseStatus": 200, "OriginResponseStatus": 200}'
)
EXPECTED_RECORD = LogRecord("example.org", 200, 200)

AUTH_ERROR_BODY = (
    b'{"success":false,"errors":[{"code":10000,"message":"Authentication error"}]}'
)

_PATH_RE = re.compile(r"/zones/(.+)/logs/received$")


def _parse_time(value: str | None) -> datetime:
    if not value:
        raise ValueError("missing time")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _authorized(request: httpx.Request) -> bool:
    headers = request.headers
    if headers.get("Authorization") == f"Bearer {GOOD_TOKEN}":
        return True
    if (
        headers.get("X-Auth-Key") == GOOD_KEY
        and headers.get("X-Auth-Email") == GOOD_EMAIL
    ):
        return True
    return headers.get("X-Auth-User-Service-Key") == GOOD_USER_SERVICE_KEY


def logpull_api(body: bytes = LOG_ENTRY_JSON) -> Callable[[httpx.Request], httpx.Response]:
    """Build a MockTransport handler that behaves like the Logpull API.

    Sentinel zone IDs and times trigger the API's documented rejections;
    everything else gets ``body`` with status 200.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        match = _PATH_RE.search(request.url.path)
        if match is None:
            return httpx.Response(404, text=f"called unexpected endpoint: {request.url.path}")

        if not _authorized(request):
            return httpx.Response(401, content=AUTH_ERROR_BODY)

        zone_id = match.group(1)
        if zone_id in (NONEXISTENT_ZONE_ID, UNAUTHORIZED_ZONE_ID):
            return httpx.Response(403, content=AUTH_ERROR_BODY)
        if zone_id == LOG_RETENTION_DISABLED_ZONE_ID:
            return httpx.Response(
                400, text="Retention is not turned on. Please enable log retention"
            )

        params = request.url.params
        try:
            start = _parse_time(params.get("start"))
        except ValueError:
            return httpx.Response(
                400,
                text="bad query: error parsing start time: "
                "must be unix timestamp or rfc3339 string",
            )
        try:
            end = _parse_time(params.get("end"))
        except ValueError:
            return httpx.Response(
                400,
                text="bad query: error parsing end time: "
                "must be unix timestamp or rfc3339 string",
            )

        if end < start:
            return httpx.Response(
                400,
                text="bad query: error parsing time: invalid time range: "
                "start not before end",
            )
        if start == TOO_EARLY_START or end == TOO_EARLY_END:
            return httpx.Response(
                400,
                text="bad query: error parsing time: invalid time range: too early: "
                "logs older than 168h0m0s are not available",
            )
        if start == TOO_RECENT_START or end == TOO_RECENT_END:
            return httpx.Response(
                400,
                text="bad query: error parsing time: invalid time range: too recent: "
                "minimum delay in serving logs is 1m0s",
            )
        if params.get("fields") != ",".join(LOG_FIELDS):
            return httpx.Response(400, text="bad query: unexpected fields")

        return httpx.Response(200, content=body)

    return handler


@dataclass
class ZoneScript:
    """What an in-memory source returns for one zone."""

    records: list[LogRecord] = field(default_factory=list)
    failure: RetryableFailure | None = None


@dataclass
class FakeLogSource:
    """In-memory LogSourcePort: delivers scripted records, then fails if told to."""

    zones: dict[str, ZoneScript] = field(default_factory=dict)
    calls: list[tuple[str, datetime, datetime]] = field(default_factory=list)

    async def pull(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        on_record: RecordHandler,
    ) -> None:
        self.calls.append((zone_id, start, end))
        script = self.zones.get(zone_id, ZoneScript())
        for record in script.records:
            on_record(record)
        if script.failure is not None:
            raise script.failure


def response_samples(samples: Sequence[MetricSample]) -> dict[tuple[str, str, str], float]:
    """Index http response samples by (host, edge status, origin status)."""
    return {
        (
            s.labels["client_request_host"],
            s.labels["edge_response_status"],
            s.labels["origin_response_status"],
        ): s.value
        for s in samples
        if s.name == "cloudflare_logs_http_responses"
    }


def sample_value(samples: Sequence[MetricSample], name: str, **labels: str) -> float | None:
    """Return the value of the first sample matching ``name`` and ``labels``."""
    for s in samples:
        if s.name == name and all(s.labels.get(k) == v for k, v in labels.items()):
            return s.value
    return None
