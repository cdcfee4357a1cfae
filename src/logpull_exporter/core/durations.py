"""Prometheus-style duration formatting and parsing.

Durations are written largest unit first, omitting zero components, using the
units ``y``, ``w``, ``d``, ``h``, ``m``, ``s`` and ``ms`` (e.g. ``1m``,
``1h30m``, ``1d``). A zero duration is written ``0s``.
"""

import re
from datetime import timedelta

_MS_PER_UNIT: list[tuple[str, int]] = [
    ("y", 365 * 24 * 60 * 60 * 1000),
    ("w", 7 * 24 * 60 * 60 * 1000),
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
    ("ms", 1),
]

_DURATION_RE = re.compile(
    r"^(?:(?P<y>\d+)y)?(?:(?P<w>\d+)w)?(?:(?P<d>\d+)d)?(?:(?P<h>\d+)h)?"
    r"(?:(?P<m>\d+)m)?(?:(?P<s>\d+)s)?(?:(?P<ms>\d+)ms)?$"
)


def format_duration(duration: timedelta) -> str:
    """Render a duration in Prometheus format.

    Sub-millisecond precision is truncated.

    Args:
        duration: A non-negative duration.

    Returns:
        Duration string such as "1m" or "1h30m".
    """
    remaining = duration // timedelta(milliseconds=1)
    if remaining <= 0:
        return "0s"

    parts = []
    for unit, unit_ms in _MS_PER_UNIT:
        count, remaining = divmod(remaining, unit_ms)
        if count:
            parts.append(f"{count}{unit}")
    return "".join(parts)


def parse_duration(text: str) -> timedelta:
    """Parse a Prometheus-format duration string.

    Args:
        text: Duration string such as "5m" or "1h30m".

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the string is empty or not a valid duration.
    """
    value = text.strip()
    match = _DURATION_RE.match(value)
    if not value or match is None:
        raise ValueError(f"not a valid duration string: {text!r}")

    total_ms = 0
    for unit, unit_ms in _MS_PER_UNIT:
        count = match.group(unit)
        if count is not None:
            total_ms += int(count) * unit_ms
    return timedelta(milliseconds=total_ms)
