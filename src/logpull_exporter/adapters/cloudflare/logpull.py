"""Cloudflare Logpull API client.

Requests the logs received for one zone within a time window and streams the
newline-delimited JSON response into LogRecords. There is no retry, backoff or
timeout logic of its own: the timeout configured on the httpx client applies
as-is, and retrying is left to the next collection cycle.
"""

from datetime import datetime

import httpx

from logpull_exporter.adapters.cloudflare.auth import Auth
from logpull_exporter.core.encoding.ndjson import LOG_FIELDS, decode_record
from logpull_exporter.core.errors import FailureKind, RetryableFailure
from logpull_exporter.core.logs import get_logger
from logpull_exporter.core.ports import RecordHandler
from logpull_exporter.core.window import format_rfc3339

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT = 60.0

PULL_OPERATION = "pull_log_entries"

logger = get_logger(__name__)


class LogpullClient:
    """Implementation of LogSourcePort backed by the Cloudflare Logpull API.

    Example:
        ```python
        client = LogpullClient(TokenAuth("..."))
        aggregator = Aggregator()
        await client.pull(zone_id, window.start, window.end, aggregator.increment)
        ```
    """

    def __init__(
        self,
        auth: Auth,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            auth: The single authentication mode used for every request.
            base_url: API root, without a trailing slash.
            http_client: Client to send requests with. When omitted, one is
                created with ``timeout`` and closed by ``aclose()``.
            timeout: Transport timeout in seconds for an owned client.
        """
        self._auth = auth
        self._base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "LogpullClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _failure(
        self,
        kind: FailureKind,
        zone_id: str,
        message: str,
        cause: BaseException | None = None,
    ) -> RetryableFailure:
        return RetryableFailure(
            kind=kind,
            operation=PULL_OPERATION,
            message=f"zone {zone_id}: {message}",
            cause=cause,
        )

    async def pull(
        self,
        zone_id: str,
        start: datetime,
        end: datetime,
        on_record: RecordHandler,
    ) -> None:
        """Stream every log entry of ``zone_id`` between ``start`` and ``end``.

        Each line is decoded and handed to ``on_record`` as soon as it has
        been read. A malformed line aborts the pull; records delivered before
        it stay delivered.

        Raises:
            RetryableFailure: With kind TRANSPORT for network or protocol
                errors, UNEXPECTED_STATUS for a non-200 response (the body is
                kept verbatim in the message), PARSE_ERROR for a malformed line.
        """
        url = f"{self._base_url}/zones/{zone_id}/logs/received"
        params = {
            "start": format_rfc3339(start),
            "end": format_rfc3339(end),
            "fields": ",".join(LOG_FIELDS),
        }
        delivered = 0

        try:
            async with self._client.stream(
                "GET", url, params=params, headers=self._auth.headers()
            ) as response:
                if response.status_code != httpx.codes.OK:
                    body = await response.aread()
                    raise self._failure(
                        FailureKind.UNEXPECTED_STATUS,
                        zone_id,
                        "unexpected api response: "
                        f"{response.status_code} {response.reason_phrase}: "
                        f"{body.decode('utf-8', errors='replace')}",
                    )

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    try:
                        record = decode_record(line)
                    except ValueError as e:
                        raise self._failure(
                            FailureKind.PARSE_ERROR,
                            zone_id,
                            f"json: {e} (after {delivered} records)",
                            cause=e,
                        ) from e
                    on_record(record)
                    delivered += 1
        except httpx.HTTPError as e:
            raise self._failure(
                FailureKind.TRANSPORT,
                zone_id,
                f"performing api request: {type(e).__name__}: {e}",
                cause=e,
            ) from e

        logger.debug("pulled %d records for zone %s", delivered, zone_id)
