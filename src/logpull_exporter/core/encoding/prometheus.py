"""Prometheus text exposition format encoder."""

import math
from collections.abc import Iterable

from logpull_exporter.core.models import MetricDescriptor, MetricSample


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _format_value(value: float) -> str:
    """Format a sample value the way Prometheus clients do."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _format_sample(sample: MetricSample) -> str:
    if not sample.labels:
        return f"{sample.name} {_format_value(sample.value)}"
    labels = ",".join(
        f'{key}="{_escape_label_value(sample.labels[key])}"'
        for key in sorted(sample.labels)
    )
    return f"{sample.name}{{{labels}}} {_format_value(sample.value)}"


def encode_metrics(
    descriptors: Iterable[MetricDescriptor],
    samples: Iterable[MetricSample],
) -> str:
    """Encode metric samples in Prometheus text format.

    Families are written in descriptor order, each with its HELP and TYPE
    header. Families without samples are omitted entirely. Samples whose name
    matches no descriptor are written without headers at the end.

    Args:
        descriptors: Metric families known to the caller.
        samples: Samples to encode.

    Returns:
        Exposition text, one sample per line, ending with a newline.
        Empty string if there are no samples.
    """
    by_name: dict[str, list[MetricSample]] = {}
    for sample in samples:
        by_name.setdefault(sample.name, []).append(sample)

    lines: list[str] = []
    for descriptor in descriptors:
        family = by_name.pop(descriptor.name, [])
        if not family:
            continue
        lines.append(f"# HELP {descriptor.name} {_escape_help(descriptor.help)}")
        lines.append(f"# TYPE {descriptor.name} {descriptor.type.value}")
        lines.extend(_format_sample(s) for s in family)

    for family in by_name.values():
        lines.extend(_format_sample(s) for s in family)

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
