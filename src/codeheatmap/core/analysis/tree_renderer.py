from __future__ import annotations

"""
Text Renderer.

Terminal rendering surface for heatmap views: a breadcrumb line, one row
per display entry (size, metric value, tier) and the tier legend, plus an
ASCII tree of the aggregated hierarchy for whole-repository overviews.
"""

from typing import Iterator, List, Tuple

from codeheatmap.core.analysis.aggregator import compute_children
from codeheatmap.domain.metrics import (
    DirectoryColorBasis,
    MetricKind,
    legend,
    metric_label,
)
from codeheatmap.domain.tree_models import ROOT_NAME, DirectoryNode, TreeNode
from codeheatmap.domain.view_models import DisplayNode, HeatmapView

_TIER_GLYPHS = ("░", "▒", "▓", "█", "■")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_view_lines(view: HeatmapView) -> List[str]:
    """
    Render one zoom level as text lines.

    Entries are listed in sibling order, directories marked with a trailing
    slash so the reader knows they can be drilled into.
    """
    lines: List[str] = [" / ".join((ROOT_NAME,) + view.breadcrumb)]
    if view.stale is not None:
        lines.append(f"(requested path not found: {'/'.join(view.stale.requested)})")

    if not view.nodes:
        lines.append("  (no files)")
        return lines

    width = max(len(_entry_name(n.name, n.has_children)) for n in view.nodes)
    total = view.total_lines or 1
    label = metric_label(view.metric)

    for node in view.nodes:
        share = 100.0 * node.lines_of_code / total
        lines.append(
            f"  {_TIER_GLYPHS[node.tier - 1]} "
            f"{_entry_name(node.name, node.has_children):<{width}}  "
            f"{node.lines_of_code:>8} loc  {share:5.1f}%  "
            f"{label}: {node.selected_metric_value:<6} "
            f"tier {node.tier} {node.fill_color}"
        )

    lines.append("")
    lines.append(render_legend_line(view.metric))
    return lines


def render_legend_line(metric: MetricKind) -> str:
    """One-line tier legend for ``metric``."""
    parts = [
        f"{_TIER_GLYPHS[i]} {bounds} {color}"
        for i, (bounds, color) in enumerate(legend(metric))
    ]
    return f"Legend ({metric_label(metric)}): " + " | ".join(parts)


def render_tree_structure(
        node: DirectoryNode,
        lines: List[str],
        metric: MetricKind,
        prefix: str = "",
        basis: DirectoryColorBasis = DirectoryColorBasis.CHILD_MEAN,
) -> None:
    """
    Render the aggregated hierarchy below ``node``.

    Uses standard connectors (├──, └──); each entry shows its lines of code
    and selected metric sum. Siblings keep tree order. The walk keeps its
    own stack, so arbitrarily deep trees render without hitting the
    recursion limit.

    Args:
        node: Directory whose children are rendered.
        lines: Accumulator list for output strings.
        metric: Metric shown next to each entry.
        prefix: Indentation prefix of the first level.
        basis: Color value policy for directory entries.
    """
    stack: List[Tuple[str, Iterator[Tuple[int, Tuple[TreeNode, DisplayNode]]], int]] = [
        _tree_frame(node, prefix, metric, basis)
    ]

    while stack:
        level_prefix, siblings, total = stack[-1]
        item = next(siblings, None)
        if item is None:
            stack.pop()
            continue

        i, (child, entry) = item
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        lines.append(
            f"{level_prefix}{connector}{_entry_name(entry.name, entry.has_children)} "
            f"[{entry.lines_of_code} loc, {metric.value}={entry.selected_metric_value}, "
            f"tier {entry.tier}]"
        )

        if isinstance(child, DirectoryNode):
            child_prefix = level_prefix + ("    " if is_last else "│   ")
            stack.append(_tree_frame(child, child_prefix, metric, basis))

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _tree_frame(
        directory: DirectoryNode,
        prefix: str,
        metric: MetricKind,
        basis: DirectoryColorBasis,
) -> Tuple[str, Iterator[Tuple[int, Tuple[TreeNode, DisplayNode]]], int]:
    """One pending directory level: its prefix, numbered entries and count."""
    entries = compute_children(directory, metric, basis)
    return prefix, enumerate(zip(directory.children, entries)), len(entries)


def _entry_name(name: str, has_children: bool) -> str:
    return f"{name}/" if has_children else name
