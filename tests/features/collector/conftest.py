"""BDD step definitions for collection cycle features."""

import asyncio
from dataclasses import dataclass, field
from datetime import timedelta

import pytest
from pytest_bdd import given, parsers, then, when

from logpull_exporter.core.collector import (
    ERRORS_TOTAL_METRIC,
    HTTP_RESPONSES_METRIC,
    LogpullCollector,
)
from logpull_exporter.core.durations import parse_duration
from logpull_exporter.core.errors import FailureKind, RetryableFailure
from logpull_exporter.core.models import LogRecord, MetricSample
from tests.helpers import FIXED_NOW, FakeLogSource, ZoneScript, sample_value


@dataclass
class CycleContext:
    """Shared state between steps in a collection cycle scenario."""

    source: FakeLogSource = field(default_factory=FakeLogSource)
    period: timedelta = timedelta(minutes=1)
    failures: list[RetryableFailure] = field(default_factory=list)
    collector: LogpullCollector | None = None
    samples: list[MetricSample] = field(default_factory=list)


@pytest.fixture
def ctx() -> CycleContext:
    """Fresh scenario context for each test."""
    return CycleContext()


def _zone(ctx: CycleContext, zone_id: str) -> ZoneScript:
    return ctx.source.zones.setdefault(zone_id, ZoneScript())


@given(parsers.parse("a collector over a {period} period"))
def step_collector_period(ctx: CycleContext, period: str) -> None:
    ctx.period = parse_duration(period)


@given(
    parsers.re(
        r'zone "(?P<zone_id>[^"]+)" returns (?P<count>\d+) responses? for '
        r'"(?P<host>[^"]+)" with status (?P<edge>\d+)/(?P<origin>\d+)'
    ),
    converters={"count": int, "edge": int, "origin": int},
)
def step_zone_returns(
    ctx: CycleContext, zone_id: str, count: int, host: str, edge: int, origin: int
) -> None:
    _zone(ctx, zone_id).records.extend([LogRecord(host, edge, origin)] * count)


@given(parsers.parse('zone "{zone_id}" fails with "{kind}"'))
def step_zone_fails(ctx: CycleContext, zone_id: str, kind: str) -> None:
    _zone(ctx, zone_id).failure = RetryableFailure(
        FailureKind(kind), "pull_log_entries", f"zone {zone_id}: scripted failure"
    )


@given(parsers.re(r"zones (?P<zone_list>.+) have no traffic"))
def step_zones_idle(ctx: CycleContext, zone_list: str) -> None:
    for zone_id in zone_list.replace(" and ", ", ").split(", "):
        _zone(ctx, zone_id.strip('"'))


@when("a collection cycle runs")
def step_collect(ctx: CycleContext) -> None:
    if ctx.collector is None:
        ctx.collector = LogpullCollector(
            ctx.source,
            list(ctx.source.zones),
            ctx.period,
            ctx.failures.append,
            clock=lambda: FIXED_NOW,
        )
    ctx.samples = asyncio.run(ctx.collector.collect())


@then(parsers.parse('the gauge for "{host}" {edge:d}/{origin:d} is {value:d}'))
def step_gauge_value(
    ctx: CycleContext, host: str, edge: int, origin: int, value: int
) -> None:
    actual = sample_value(
        ctx.samples,
        HTTP_RESPONSES_METRIC,
        client_request_host=host,
        edge_response_status=str(edge),
        origin_response_status=str(origin),
    )
    assert actual == value


@then(parsers.parse("the error counter is {value:d}"))
def step_error_counter(ctx: CycleContext, value: int) -> None:
    assert sample_value(ctx.samples, ERRORS_TOTAL_METRIC) == value


@then(parsers.parse("the error handler received {count:d} failure"))
def step_handler_calls(ctx: CycleContext, count: int) -> None:
    assert len(ctx.failures) == count


@then("every zone was pulled for the window ending 1m before now")
def step_shared_window(ctx: CycleContext) -> None:
    end = FIXED_NOW - timedelta(minutes=1)
    assert {zone for zone, _, _ in ctx.source.calls} == set(ctx.source.zones)
    assert {(start, stop) for _, start, stop in ctx.source.calls} == {
        (end - ctx.period, end)
    }
