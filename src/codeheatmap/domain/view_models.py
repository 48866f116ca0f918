from __future__ import annotations

"""
View Domain Data Models.

Defines the ephemeral structures handed to the rendering surface. They are
recomputed on every render and never persisted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from codeheatmap.domain.errors import MalformedPathError, StalePathResolution
from codeheatmap.domain.metrics import MetricKind
from codeheatmap.domain.tree_models import DirectoryNode

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DisplayNode:
    """
    One rectangle of the treemap.

    Attributes:
        name: Child name, used by the renderer to report clicks.
        lines_of_code: True leaf sum of lines, drives rectangle size.
        selected_metric_value: True leaf sum of the selected metric.
        color_value: The number that was bucketed into ``tier``.
        tier: Severity tier, 1 (lightest) to 5 (darkest).
        fill_color: Palette color for ``tier``.
        has_children: True for directories (drillable entries).
    """
    name: str
    lines_of_code: int
    selected_metric_value: int
    color_value: float
    tier: int
    fill_color: str
    has_children: bool


@dataclass(frozen=True)
class HeatmapView:
    """
    Everything the renderer needs to draw one zoom level.

    Attributes:
        metric: Metric driving the colors.
        breadcrumb: Path segments from the root to the focused directory.
        nodes: Direct children of the focused directory.
        stale: Set when the requested path had to be clamped.
    """
    metric: MetricKind
    breadcrumb: Tuple[str, ...] = ()
    nodes: Tuple[DisplayNode, ...] = ()
    stale: Optional[StalePathResolution] = None

    @property
    def total_lines(self) -> int:
        return sum(n.lines_of_code for n in self.nodes)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible projection of the view."""
        return {
            "metric": self.metric.value,
            "breadcrumb": list(self.breadcrumb),
            "nodes": [
                {
                    "name": n.name,
                    "loc": n.lines_of_code,
                    "value": n.selected_metric_value,
                    "color_value": n.color_value,
                    "tier": n.tier,
                    "fill": n.fill_color,
                    "has_children": n.has_children,
                }
                for n in self.nodes
            ],
            "stale": None if self.stale is None else list(self.stale.resolved),
        }


@dataclass(frozen=True)
class TreeBuildReport:
    """
    Outcome of building a tree from flat records.

    Attributes:
        root: The synthetic root directory.
        accepted: Number of records placed in the tree.
        rejected: One error per record that was dropped.
    """
    root: DirectoryNode
    accepted: int = 0
    rejected: List[MalformedPathError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejected
