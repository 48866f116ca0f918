from __future__ import annotations

"""
Unit tests for the Metric Aggregator.

Verifies:
1. Directory entries carry true leaf sums for size and metric.
2. Directory colors use the child mean (or the sum when configured).
3. Leaf entries report their own values.
4. Unknown metrics are rejected.
"""

import pytest

from codeheatmap.core.analysis.aggregator import (
    compute_children,
    directory_color_value,
    subtree_totals,
)
from codeheatmap.core.analysis.tree_builder import build_tree
from codeheatmap.domain.errors import UnknownMetric
from codeheatmap.domain.metrics import DirectoryColorBasis, MetricKind
from codeheatmap.domain.tree_models import DirectoryNode, FileRecord, LeafNode


def test_two_file_directory_example() -> None:
    """a/b.js (10 loc, 3 changes) and a/c.js (20 loc, 40 changes)."""
    tree = build_tree([
        FileRecord("a/b.js", 10, 3, 1),
        FileRecord("a/c.js", 20, 40, 1),
    ])

    (entry,) = compute_children(tree, MetricKind.CHANGES)

    assert entry.name == "a"
    assert entry.lines_of_code == 30
    assert entry.selected_metric_value == 43
    assert entry.color_value == pytest.approx(21.5)
    assert entry.tier == 3
    assert entry.fill_color == "#ffb74d"
    assert entry.has_children is True


def test_root_entries_of_sample(sample_tree: DirectoryNode) -> None:
    entries = {e.name: e for e in compute_children(sample_tree, MetricKind.CHANGES)}

    assert list(entries) == ["src", "docs", "README.md"]

    src = entries["src"]
    assert (src.lines_of_code, src.selected_metric_value) == (930, 120)
    assert src.color_value == pytest.approx(40.0)  # three direct children
    assert src.tier == 4

    readme = entries["README.md"]
    assert readme.has_children is False
    assert (readme.lines_of_code, readme.selected_metric_value, readme.tier) == (40, 3, 1)


def test_authors_metric(sample_tree: DirectoryNode) -> None:
    entries = {e.name: e for e in compute_children(sample_tree, MetricKind.AUTHORS)}

    assert entries["src"].selected_metric_value == 16
    assert entries["src"].tier == 5
    assert entries["docs"].selected_metric_value == 0
    assert entries["docs"].tier == 1


def test_sum_basis_buckets_the_total() -> None:
    tree = build_tree([FileRecord("a/b.js", 10, 3, 1), FileRecord("a/c.js", 20, 40, 1)])

    (entry,) = compute_children(tree, MetricKind.CHANGES, DirectoryColorBasis.SUM)

    assert entry.color_value == 43
    assert entry.tier == 5


def test_basis_accepts_plain_value() -> None:
    tree = build_tree([FileRecord("a/b.js", 10, 3, 1), FileRecord("a/c.js", 20, 40, 1)])
    (entry,) = compute_children(tree, MetricKind.CHANGES, "sum")  # type: ignore[arg-type]
    assert entry.color_value == 43


def test_loc_sum_matches_parent(sample_tree: DirectoryNode) -> None:
    """Children of a directory add up to the directory's own entry."""
    src = sample_tree.child("src")
    children = compute_children(src, MetricKind.CHANGES)  # type: ignore[arg-type]
    parent = next(e for e in compute_children(sample_tree, MetricKind.CHANGES) if e.name == "src")

    assert sum(e.lines_of_code for e in children) == parent.lines_of_code
    assert sum(e.selected_metric_value for e in children) == parent.selected_metric_value


def test_leaf_focus_describes_itself() -> None:
    leaf = LeafNode("solo.py", lines_of_code=12, change_count=25, author_count=2)

    (entry,) = compute_children(leaf, MetricKind.CHANGES)

    assert entry.name == "solo.py"
    assert entry.color_value == 25
    assert entry.tier == 3
    assert entry.has_children is False


def test_empty_directory_has_no_entries() -> None:
    assert compute_children(DirectoryNode("root"), MetricKind.CHANGES) == []


def test_empty_subdirectory_is_zero_valued() -> None:
    root = DirectoryNode("root", children=[DirectoryNode("empty")])

    (entry,) = compute_children(root, MetricKind.CHANGES)

    assert (entry.lines_of_code, entry.selected_metric_value, entry.color_value) == (0, 0, 0)
    assert entry.tier == 1


def test_subtree_totals_deep_chain() -> None:
    """A deep path is summed without recursion."""
    path = "/".join(f"d{i}" for i in range(2000)) + "/leaf.py"
    tree = build_tree([FileRecord(path, 7, 3, 1)])
    assert subtree_totals(tree, MetricKind.CHANGES) == (7, 3)


def test_directory_color_value_divides_by_child_count() -> None:
    node = DirectoryNode("d", children=[LeafNode("a"), LeafNode("b"), DirectoryNode("c"), LeafNode("e")])
    assert directory_color_value(node, 10, DirectoryColorBasis.CHILD_MEAN) == pytest.approx(2.5)
    assert directory_color_value(DirectoryNode("x"), 10, DirectoryColorBasis.CHILD_MEAN) == 10


@pytest.mark.parametrize("bad_metric", ["bugs", None])
def test_unknown_metric(sample_tree: DirectoryNode, bad_metric) -> None:
    with pytest.raises(UnknownMetric):
        compute_children(sample_tree, bad_metric)
