"""NDJSON decoder for Logpull response lines."""

import json
from typing import Any

from logpull_exporter.core.models import LogRecord

# Must stay in lock-step with the attributes of LogRecord: the API only
# returns the fields that are requested here.
LOG_FIELDS: tuple[str, ...] = (
    "ClientRequestHost",
    "EdgeResponseStatus",
    "OriginResponseStatus",
)


def _field(obj: dict[str, Any], name: str, expected: type, default: Any) -> Any:
    """Extract a typed field, treating missing or null values as the default."""
    value = obj.get(name)
    if value is None:
        return default
    # bool is an int subclass but never a valid status code
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ValueError(
            f"field {name!r} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def decode_record(line: str | bytes) -> LogRecord:
    """Decode one line of a Logpull response into a LogRecord.

    Fields absent from the object decode to their zero value, mirroring how
    the API omits empty fields.

    Args:
        line: A single JSON object, without the trailing newline.

    Returns:
        The decoded LogRecord.

    Raises:
        ValueError: If the line is not a JSON object or a field has the
            wrong type. json.JSONDecodeError is a ValueError subclass.
    """
    obj = json.loads(line)
    if not isinstance(obj, dict):
        raise ValueError(f"expected a JSON object, got {type(obj).__name__}")

    return LogRecord(
        client_request_host=_field(obj, "ClientRequestHost", str, ""),
        edge_response_status=_field(obj, "EdgeResponseStatus", int, 0),
        origin_response_status=_field(obj, "OriginResponseStatus", int, 0),
    )
