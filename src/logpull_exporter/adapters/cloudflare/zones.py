"""Zone name to zone ID resolution via the Cloudflare zones API."""

import asyncio
from collections.abc import Sequence

import httpx

from logpull_exporter.adapters.cloudflare.auth import Auth
from logpull_exporter.adapters.cloudflare.logpull import DEFAULT_BASE_URL
from logpull_exporter.core.errors import ZoneLookupError
from logpull_exporter.core.logs import get_logger

logger = get_logger(__name__)


class CloudflareZoneResolver:
    """Implementation of ZoneResolverPort.

    Lookups happen once at startup; every failure is fatal and raised as
    ZoneLookupError.
    """

    def __init__(
        self,
        auth: Auth,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._auth = auth
        self._client = http_client
        self._base_url = base_url.rstrip("/")

    async def zone_id(self, name: str) -> str:
        """Resolve a single zone name.

        Raises:
            ZoneLookupError: If the request fails or no zone matches.
        """
        try:
            response = await self._client.get(
                f"{self._base_url}/zones",
                params={"name": name},
                headers=self._auth.headers(),
            )
        except httpx.HTTPError as e:
            raise ZoneLookupError(f"zone id lookup for {name!r}: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise ZoneLookupError(
                f"zone id lookup for {name!r}: unexpected api response: "
                f"{response.status_code} {response.reason_phrase}: {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise ZoneLookupError(f"zone id lookup for {name!r}: json: {e}") from e

        if not isinstance(payload, dict) or not payload.get("success", False):
            raise ZoneLookupError(
                f"zone id lookup for {name!r}: api reported failure: {response.text}"
            )

        result = payload.get("result")
        if not isinstance(result, list):
            raise ZoneLookupError(
                f"zone id lookup for {name!r}: unexpected result: {response.text}"
            )
        if not result or not isinstance(result[0], dict) or "id" not in result[0]:
            raise ZoneLookupError(f"zone could not be found: {name!r}")

        zone_id = str(result[0]["id"])
        logger.info("resolved zone %s to %s", name, zone_id)
        return zone_id

    async def resolve(self, names: Sequence[str]) -> list[str]:
        """Resolve several zone names concurrently, preserving their order."""
        return list(await asyncio.gather(*(self.zone_id(name) for name in names)))
