from __future__ import annotations

"""
Domain Error Taxonomy.

All failures raised by the heatmap engine derive from HeatmapError so that
interface layers can catch the family in one place. None of them are fatal
to the process; each is scoped to the current dataset or session.
"""

from typing import Any, Sequence, Tuple


class HeatmapError(Exception):
    """Base class for every error produced by the heatmap engine."""


class MalformedPathError(HeatmapError):
    """
    A file record could not be placed in the tree.

    Raised per record by the tree builder and collected into the build
    report; the offending record is dropped and the build continues.

    Attributes:
        path: The raw path of the rejected record.
        reason: Short human-readable cause.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed path '{path}': {reason}")


class LoadFailure(HeatmapError):
    """
    The dataset could not be fetched or decoded.

    Attributes:
        source: Label of the dataset source that failed.
        reason: Short human-readable cause.
    """

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load dataset from {source}: {reason}")


class EmptyDataset(HeatmapError):
    """The dataset was fetched successfully but contains zero records."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"Dataset from {source} contains no file records")


class UnknownMetric(HeatmapError):
    """The requested metric has no accessor or bucketing rule."""

    def __init__(self, metric: Any) -> None:
        self.metric = metric
        super().__init__(f"Unknown metric: {metric!r}")


class StalePathResolution(HeatmapError):
    """
    A drill path no longer matches the tree and was clamped.

    Never raised; attached to views as a typed report.

    Attributes:
        requested: The path as it was stored.
        resolved: The deepest prefix of it that still exists.
    """

    def __init__(self, requested: Sequence[str], resolved: Sequence[str]) -> None:
        self.requested: Tuple[str, ...] = tuple(requested)
        self.resolved: Tuple[str, ...] = tuple(resolved)
        super().__init__(
            f"Path '{'/'.join(self.requested)}' is stale; "
            f"resolved to '{'/'.join(self.resolved) or '<root>'}'"
        )


class SessionNotReady(HeatmapError):
    """A view or navigation call was made while no dataset is available."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"Session is not ready (state: {state})")
