from __future__ import annotations

"""
View Projection.

Joins the navigator and the aggregator: given the full tree, a metric and a
drill path, produce the breadcrumb and display entries for the renderer.
"""

from typing import Sequence, Tuple, Union

from codeheatmap.core.analysis.aggregator import compute_children
from codeheatmap.core.navigation.navigator import Navigator
from codeheatmap.domain.metrics import DirectoryColorBasis, MetricKind, parse_metric
from codeheatmap.domain.tree_models import DirectoryNode
from codeheatmap.domain.view_models import HeatmapView


def get_view(
        tree: DirectoryNode,
        metric: Union[str, MetricKind],
        path: Sequence[str] = (),
        basis: DirectoryColorBasis = DirectoryColorBasis.CHILD_MEAN,
) -> HeatmapView:
    """
    Build the view of ``tree`` focused at ``path``.

    A path that no longer matches the tree is clamped to its deepest valid
    ancestor; the view then carries a StalePathResolution in ``stale`` and
    its breadcrumb is the clamped path.

    Raises:
        UnknownMetric: If ``metric`` names no known metric.
    """
    metric_kind = parse_metric(metric)
    navigator = Navigator(tree, path)
    return view_from_navigator(navigator, metric_kind, basis)


def view_from_navigator(
        navigator: Navigator,
        metric: MetricKind,
        basis: DirectoryColorBasis = DirectoryColorBasis.CHILD_MEAN,
) -> HeatmapView:
    """Build the view for the navigator's current focus without mutating it."""
    node, depth = navigator.resolve()
    return HeatmapView(
        metric=metric,
        breadcrumb=navigator.current_path[:depth],
        nodes=tuple(compute_children(node, metric, basis)),
        stale=navigator.stale_report(),
    )


def split_view_path(path: str) -> Tuple[str, ...]:
    """Turn ``"src/components"`` into ``("src", "components")``; blank is root."""
    return tuple(segment for segment in path.strip().split("/") if segment)
