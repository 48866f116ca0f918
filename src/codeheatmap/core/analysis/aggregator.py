from __future__ import annotations

"""
Metric Aggregator.

Projects one directory of the repository tree into display entries for the
treemap: each direct child gets its true leaf sums (lines of code and the
selected metric), a color value, and the matching severity tier and color.
Pure functions, cheap enough to call on every render.
"""

from typing import List, Tuple

from codeheatmap.domain.metrics import (
    DirectoryColorBasis,
    MetricKind,
    bucket_color,
    bucket_tier,
    metric_accessor,
)
from codeheatmap.domain.tree_models import DirectoryNode, LeafNode, TreeNode
from codeheatmap.domain.view_models import DisplayNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def compute_children(
        node: TreeNode,
        metric: MetricKind,
        basis: DirectoryColorBasis = DirectoryColorBasis.CHILD_MEAN,
) -> List[DisplayNode]:
    """
    Compute the display entries for the direct children of ``node``.

    Leaf children report their own values. Directory children report sums
    over every leaf in their subtree; their color value depends on
    ``basis`` (see DirectoryColorBasis).

    Args:
        node: Focused node. A leaf yields a single entry describing itself.
        metric: Metric driving ``selected_metric_value`` and the colors.
        basis: Color value policy for directory entries.

    Returns:
        List[DisplayNode]: One entry per child, in sibling order. Empty for
                           a directory without children.

    Raises:
        UnknownMetric: If ``metric`` is not a MetricKind.
    """
    read_metric = metric_accessor(metric)
    basis = DirectoryColorBasis(basis)

    if isinstance(node, LeafNode):
        return [_leaf_entry(node, read_metric(node), metric)]

    entries: List[DisplayNode] = []
    for child in node.children:
        if isinstance(child, LeafNode):
            entries.append(_leaf_entry(child, read_metric(child), metric))
        else:
            entries.append(_directory_entry(child, metric, basis))
    return entries


def subtree_totals(node: TreeNode, metric: MetricKind) -> Tuple[int, int]:
    """
    Sum lines of code and ``metric`` over every leaf under ``node``.

    Iterative depth-first walk, so deep trees cannot hit the recursion limit.

    Returns:
        Tuple[int, int]: ``(lines_of_code, metric_sum)``.
    """
    read_metric = metric_accessor(metric)
    total_loc = 0
    total_metric = 0

    stack: List[TreeNode] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, DirectoryNode):
            stack.extend(current.children)
        else:
            total_loc += current.lines_of_code
            total_metric += read_metric(current)

    return total_loc, total_metric


def directory_color_value(
        node: DirectoryNode,
        metric_sum: int,
        basis: DirectoryColorBasis,
) -> float:
    """
    Return the number bucketed into a directory's color.

    CHILD_MEAN divides by the direct child count (at least 1), not by the
    number of files, so a directory with few large children colors darker
    than one holding the same files spread over many subdirectories.
    """
    if basis is DirectoryColorBasis.SUM:
        return metric_sum
    return metric_sum / max(1, len(node.children))

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _leaf_entry(leaf: LeafNode, value: int, metric: MetricKind) -> DisplayNode:
    return DisplayNode(
        name=leaf.name,
        lines_of_code=leaf.lines_of_code,
        selected_metric_value=value,
        color_value=value,
        tier=bucket_tier(value, metric),
        fill_color=bucket_color(value, metric),
        has_children=False,
    )


def _directory_entry(
        directory: DirectoryNode,
        metric: MetricKind,
        basis: DirectoryColorBasis,
) -> DisplayNode:
    total_loc, total_metric = subtree_totals(directory, metric)
    color_value = directory_color_value(directory, total_metric, basis)
    return DisplayNode(
        name=directory.name,
        lines_of_code=total_loc,
        selected_metric_value=total_metric,
        color_value=color_value,
        tier=bucket_tier(color_value, metric),
        fill_color=bucket_color(color_value, metric),
        has_children=True,
    )
