"""Command-line entry point: configure, resolve zones, serve /metrics."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Mapping, Sequence

import httpx
import uvicorn

from logpull_exporter.adapters.cloudflare.logpull import LogpullClient
from logpull_exporter.adapters.cloudflare.zones import CloudflareZoneResolver
from logpull_exporter.adapters.frameworks.asgi import ASGIApp, create_asgi_app
from logpull_exporter.config import DEFAULT_LOG_LEVEL, ExporterConfig, parse_listen_addr
from logpull_exporter.core.collector import LogpullCollector
from logpull_exporter.core.durations import format_duration
from logpull_exporter.core.errors import ConfigurationFailure, RetryableFailure
from logpull_exporter.core.logs import configure_logging, get_logger

logger = get_logger(__name__)


def log_failure(failure: RetryableFailure) -> None:
    """Default error handler: report a failed pull and carry on."""
    logger.warning("collector: %s", failure)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="logpull-exporter",
        description=(
            "Export Cloudflare Logpull HTTP response counts as Prometheus metrics. "
            "Credentials and zones are read from CLOUDFLARE_* environment variables."
        ),
    )
    p.add_argument(
        "--listen-addr",
        default=None,
        help="host:port to serve /metrics on (overrides EXPORTER_LISTEN_ADDR)",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help="DEBUG, INFO, WARNING or ERROR (overrides EXPORTER_LOG_LEVEL)",
    )
    return p


async def resolve_zone_ids(config: ExporterConfig) -> list[str]:
    """Resolve the configured zone names using a short-lived HTTP client."""
    async with httpx.AsyncClient(timeout=config.api_timeout) as client:
        resolver = CloudflareZoneResolver(config.auth, client, config.base_url)
        return await resolver.resolve(config.zone_names)


def build_app(config: ExporterConfig, zone_ids: Sequence[str]) -> ASGIApp:
    """Wire the Logpull client and collector into the ASGI app.

    Raises:
        ConfigurationFailure: If the collector rejects the configuration.
    """
    source = LogpullClient(config.auth, config.base_url, timeout=config.api_timeout)
    collector = LogpullCollector(source, zone_ids, config.log_period, log_failure)
    return create_asgi_app(collector, on_shutdown=source.aclose)


def main(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    args = build_parser().parse_args(argv)
    env = os.environ if environ is None else environ

    # --log-level takes precedence over EXPORTER_LOG_LEVEL.
    try:
        configure_logging(args.log_level or DEFAULT_LOG_LEVEL)
    except ValueError as e:
        print(f"logpull-exporter: {e}", file=sys.stderr)
        return 1

    try:
        config = ExporterConfig.from_env(env)
        if args.log_level is None:
            configure_logging(config.log_level)
        host, port = config.listen_host, config.listen_port
        if args.listen_addr:
            host, port = parse_listen_addr(args.listen_addr)
        zone_ids = asyncio.run(resolve_zone_ids(config))
        app = build_app(config, zone_ids)
    except ConfigurationFailure as e:
        logger.error("%s", e)
        return 1

    logger.info(
        "Collecting %d zone(s) every scrape over a %s window",
        len(zone_ids),
        format_duration(config.log_period),
    )
    logger.info("Listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=logger.getEffectiveLevel())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
