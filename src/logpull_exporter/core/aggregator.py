"""Per-zone, per-cycle counting of log records."""

from collections import Counter
from collections.abc import Iterator

from logpull_exporter.core.models import LogRecord


class Aggregator:
    """Counts how many times each distinct LogRecord has been observed.

    An Aggregator is owned by exactly one zone task and lives for one cycle:
    it is filled while the response streams in and drained once at the end.
    """

    def __init__(self) -> None:
        self._counts: Counter[LogRecord] = Counter()

    def __len__(self) -> int:
        return len(self._counts)

    def increment(self, record: LogRecord) -> None:
        """Count one more occurrence of ``record``."""
        self._counts[record] += 1

    def drain(self) -> Iterator[tuple[LogRecord, int]]:
        """Hand over all accumulated (record, count) pairs.

        The table is emptied immediately; the returned iterator can be
        consumed once. No ordering is guaranteed.
        """
        counts, self._counts = self._counts, Counter()
        return iter(counts.items())
