"""Time window arithmetic bound by the Logpull API constraints.

The API requires 'end' to be at least one minute earlier than now, and
'start' to be no more than seven days before now. A window of length
``period`` ending one minute ago therefore needs ``period`` to stay below
seven days minus that one minute offset.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from logpull_exporter.core.models import TimeWindow

END_OFFSET = timedelta(minutes=1)
MAX_WINDOW_RANGE = timedelta(days=7) - END_OFFSET

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def compute_window(period: timedelta, now: datetime | None = None) -> TimeWindow:
    """Compute the window for one collection cycle.

    Args:
        period: Length of the window.
        now: Reference time. Defaults to the current UTC time.

    Returns:
        TimeWindow ending one minute before ``now`` and spanning ``period``.
    """
    if now is None:
        now = utc_now()
    end = now - END_OFFSET
    return TimeWindow(start=end - period, end=end)


def period_in_range(period: timedelta) -> bool:
    """Check whether a window length is accepted by the Logpull API."""
    return timedelta(0) < period < MAX_WINDOW_RANGE


def format_rfc3339(moment: datetime) -> str:
    """Format a datetime as RFC 3339 with second precision.

    Naive datetimes are assumed to be UTC. Aware datetimes are converted to
    UTC and rendered with a 'Z' suffix.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
