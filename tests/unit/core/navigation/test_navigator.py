from __future__ import annotations

"""
Unit tests for the Drill-Down Navigator.

Verifies:
1. Drilling into directories appends to the path; files are ignored.
2. Drill-up, jump and breadcrumb clicks clamp instead of failing.
3. Stale paths resolve to their deepest surviving ancestor.
"""

from codeheatmap.core.analysis.tree_builder import build_tree
from codeheatmap.core.navigation.navigator import Navigator
from codeheatmap.domain.tree_models import DirectoryNode, FileRecord


def test_starts_at_root(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree)
    assert nav.current_path == ()
    assert nav.depth == 0
    assert nav.resolve_current() is sample_tree


def test_drill_down_into_directory(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree)

    assert nav.drill_down("src") is True
    assert nav.drill_down("components") is True
    assert nav.current_path == ("src", "components")
    assert nav.resolve_current().name == "components"


def test_drill_down_on_file_or_unknown_is_noop(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src"])

    assert nav.drill_down("Home.jsx") is False
    assert nav.drill_down("does-not-exist") is False
    assert nav.current_path == ("src",)


def test_drill_up_at_root_is_noop(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree)
    assert nav.drill_up() is False
    assert nav.current_path == ()


def test_drill_up(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src", "components"])
    assert nav.drill_up() is True
    assert nav.current_path == ("src",)


def test_jump_to_clamps(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src", "components"])

    nav.jump_to(5)
    assert nav.current_path == ("src", "components")
    nav.jump_to(1)
    assert nav.current_path == ("src",)
    nav.jump_to(-3)
    assert nav.current_path == ()


def test_breadcrumb_click_keeps_up_to_index(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src", "components"])

    nav.navigate_to_breadcrumb(0)
    assert nav.current_path == ("src",)

    nav.navigate_to_breadcrumb(-1)
    assert nav.current_path == ()


def test_stale_path_resolves_to_ancestor(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src", "old-dir"])

    node, depth = nav.resolve()

    assert node.name == "src"
    assert depth == 1
    assert nav.breadcrumb == ("src",)
    report = nav.stale_report()
    assert report is not None
    assert report.requested == ("src", "old-dir")
    assert report.resolved == ("src",)


def test_full_path_has_no_stale_report(sample_tree: DirectoryNode) -> None:
    assert Navigator(sample_tree, ["src", "utils"]).stale_report() is None


def test_drill_down_from_stale_path_clamps_first(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src", "old-dir"])

    assert nav.drill_down("utils") is True
    assert nav.current_path == ("src", "utils")
    assert nav.stale_report() is None


def test_reset_switches_tree(sample_tree: DirectoryNode) -> None:
    nav = Navigator(sample_tree, ["src"])
    other = build_tree([FileRecord("lib/x.py", 1, 1, 1)])

    nav.reset(other)

    assert nav.tree is other
    assert nav.current_path == ()
    assert nav.drill_down("lib") is True


def test_path_survives_tree_swap_as_stale(sample_tree: DirectoryNode) -> None:
    """Resolving the stored path against a different tree clamps it."""
    nav = Navigator(sample_tree, ["src", "components"])
    other = build_tree([FileRecord("src/only.py", 1, 1, 1)])

    node, depth = nav.resolve(other)

    assert node.name == "src"
    assert depth == 1
