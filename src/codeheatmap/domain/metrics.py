from __future__ import annotations

"""
Metric Definitions and Severity Palettes.

The set of metrics that can drive the heatmap color is closed: every member
of MetricKind has an accessor, ascending tier thresholds and a five-color
palette registered here. Anything outside the enum is rejected with
UnknownMetric instead of falling through to an undefined color.
"""

from enum import Enum
from typing import Callable, Dict, List, Tuple, Union

from codeheatmap.domain.errors import UnknownMetric

TIER_COUNT = 5


class MetricKind(str, Enum):
    """Metrics available for coloring the heatmap."""
    CHANGES = "changes"
    AUTHORS = "authors"


class DirectoryColorBasis(str, Enum):
    """
    Number fed to the color bucket for a directory entry.

    CHILD_MEAN divides the subtree sum by the directory's direct child count,
    which is how earlier heatmaps were colored. SUM buckets the subtree sum.
    """
    CHILD_MEAN = "child_mean"
    SUM = "sum"


# -----------------------------------------------------------------------------
# BUCKETING RULES
# -----------------------------------------------------------------------------

# Inclusive upper bounds of tiers 1-4; anything above the last bound is tier 5
_THRESHOLDS: Dict[MetricKind, Tuple[int, int, int, int]] = {
    MetricKind.CHANGES: (10, 20, 30, 40),
    MetricKind.AUTHORS: (1, 2, 3, 4),
}

# Lightest (none-to-low) to darkest (high)
_PALETTES: Dict[MetricKind, Tuple[str, str, str, str, str]] = {
    MetricKind.CHANGES: ("#c8e6c9", "#81c784", "#ffb74d", "#ff8a65", "#e57373"),
    MetricKind.AUTHORS: ("#bbdefb", "#90caf9", "#ffb74d", "#ff8a65", "#e57373"),
}

_LABELS: Dict[MetricKind, str] = {
    MetricKind.CHANGES: "Change frequency",
    MetricKind.AUTHORS: "Author count",
}

_ALIASES: Dict[str, MetricKind] = {
    "changes": MetricKind.CHANGES,
    "change_count": MetricKind.CHANGES,
    "lines_changed": MetricKind.CHANGES,
    "lineschanged": MetricKind.CHANGES,
    "authors": MetricKind.AUTHORS,
    "author_count": MetricKind.AUTHORS,
    "authorcount": MetricKind.AUTHORS,
}


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_metric(value: Union[str, MetricKind]) -> MetricKind:
    """
    Resolve user input into a MetricKind.

    Args:
        value: A MetricKind, its value, or one of the accepted aliases
               (case-insensitive, surrounding whitespace ignored).

    Returns:
        MetricKind: The matching metric.

    Raises:
        UnknownMetric: If the input names no known metric.
    """
    if isinstance(value, MetricKind):
        return value
    if isinstance(value, str):
        key = value.strip().lower().replace("-", "_")
        if key in _ALIASES:
            return _ALIASES[key]
    raise UnknownMetric(value)


def metric_accessor(metric: MetricKind) -> Callable[[object], int]:
    """
    Return a function reading ``metric`` from a leaf or file record.

    Raises:
        UnknownMetric: If ``metric`` is not a MetricKind.
    """
    _check_metric(metric)
    if metric is MetricKind.CHANGES:
        return lambda item: item.change_count  # type: ignore[attr-defined]
    return lambda item: item.author_count  # type: ignore[attr-defined]


def metric_label(metric: MetricKind) -> str:
    """Human readable name of a metric."""
    _check_metric(metric)
    return _LABELS[metric]


def bucket_tier(value: float, metric: MetricKind) -> int:
    """
    Map a non-negative value to a severity tier in ``1..TIER_COUNT``.

    Thresholds are inclusive, so for changes 10 is tier 1 and 11 is tier 2.

    Raises:
        UnknownMetric: If ``metric`` has no bucketing rule.
        ValueError: If ``value`` is negative.
    """
    _check_metric(metric)
    if value < 0:
        raise ValueError(f"Metric value must be non-negative, got {value}")

    for tier, upper in enumerate(_THRESHOLDS[metric], start=1):
        if value <= upper:
            return tier
    return TIER_COUNT


def bucket_color(value: float, metric: MetricKind) -> str:
    """Return the palette color for ``value`` under ``metric``."""
    tier = bucket_tier(value, metric)
    return _PALETTES[metric][tier - 1]


def legend(metric: MetricKind) -> List[Tuple[str, str]]:
    """
    Describe each tier of a metric as ``(label, color)`` pairs.

    Example for changes: ``[("<= 10", "#c8e6c9"), ..., ("> 40", "#e57373")]``.
    """
    _check_metric(metric)
    bounds = _THRESHOLDS[metric]
    palette = _PALETTES[metric]
    entries = [(f"<= {upper}", palette[i]) for i, upper in enumerate(bounds)]
    entries.append((f"> {bounds[-1]}", palette[-1]))
    return entries


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _check_metric(metric: object) -> None:
    if not isinstance(metric, MetricKind) or metric not in _THRESHOLDS:
        raise UnknownMetric(metric)
