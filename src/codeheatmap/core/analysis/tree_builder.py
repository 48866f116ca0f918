from __future__ import annotations

"""
Repository Tree Builder.

Converts the flat list of file records produced by the metric collector into
a nested hierarchy of directory and leaf nodes. Records that cannot be placed
(bad segments, file/directory collisions, duplicates) are rejected one by one
without aborting the build: the first record to claim a name wins.
"""

import logging
from typing import Iterable, Iterator, List, Tuple

from codeheatmap.domain.errors import MalformedPathError
from codeheatmap.domain.tree_models import (
    ROOT_NAME,
    DirectoryNode,
    FileRecord,
    LeafNode,
    TreeNode,
)
from codeheatmap.domain.view_models import TreeBuildReport

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"
_RESERVED_SEGMENTS = (".", "..")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(records: Iterable[FileRecord]) -> DirectoryNode:
    """
    Build the repository tree and return its synthetic root.

    Rejected records are logged at WARNING level; use
    build_tree_with_report() to inspect them programmatically.

    Args:
        records: Flat file records, in collector order.

    Returns:
        DirectoryNode: Root directory named "root".
    """
    report = build_tree_with_report(records)
    for err in report.rejected:
        logger.warning(f"Skipping record: {err}")
    return report.root


def build_tree_with_report(records: Iterable[FileRecord]) -> TreeBuildReport:
    """
    Build the repository tree, collecting every rejected record.

    Sibling order follows the first occurrence of each name in ``records``.

    Args:
        records: Flat file records, in collector order.

    Returns:
        TreeBuildReport: Root plus accepted count and rejection errors.
    """
    root = DirectoryNode(name=ROOT_NAME)
    accepted = 0
    rejected: List[MalformedPathError] = []

    for record in records:
        try:
            _insert_record(root, record)
        except MalformedPathError as e:
            rejected.append(e)
            continue
        accepted += 1

    logger.debug(f"Tree built: {accepted} files placed, {len(rejected)} rejected.")
    return TreeBuildReport(root=root, accepted=accepted, rejected=rejected)


def split_path(path: str) -> List[str]:
    """
    Split a slash-delimited path into validated segments.

    Raises:
        MalformedPathError: On an empty path, an empty segment (leading,
            trailing or doubled slash) or a '.'/'..' segment.
    """
    if not path:
        raise MalformedPathError(path, "path is empty")

    segments = path.split(PATH_SEPARATOR)
    for segment in segments:
        if not segment:
            raise MalformedPathError(path, "path contains an empty segment")
        if segment in _RESERVED_SEGMENTS:
            raise MalformedPathError(path, f"segment '{segment}' is not a valid name")
    return segments


def iter_leaves(node: TreeNode) -> Iterator[Tuple[str, LeafNode]]:
    """
    Yield ``(path, leaf)`` for every file under ``node``, depth-first.

    Paths are relative to ``node`` and siblings come out in tree order.
    A leaf passed directly yields itself under its own name.
    """
    if isinstance(node, LeafNode):
        yield node.name, node
        return

    stack: List[Tuple[str, Iterator[TreeNode]]] = [("", iter(node.children))]
    while stack:
        prefix, siblings = stack[-1]
        child = next(siblings, None)
        if child is None:
            stack.pop()
            continue
        child_path = f"{prefix}{child.name}"
        if isinstance(child, DirectoryNode):
            stack.append((child_path + PATH_SEPARATOR, iter(child.children)))
        else:
            yield child_path, child


def flatten_tree(node: TreeNode) -> List[FileRecord]:
    """Convert a tree back into flat file records."""
    return [
        FileRecord(
            path=path,
            lines_of_code=leaf.lines_of_code,
            change_count=leaf.change_count,
            author_count=leaf.author_count,
        )
        for path, leaf in iter_leaves(node)
    ]

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _insert_record(root: DirectoryNode, record: FileRecord) -> None:
    """
    Place one record under ``root``.

    The whole path is checked against the existing tree before any node is
    created, so a rejected record never leaves empty directories behind.
    """
    segments = split_path(record.path)
    *dir_segments, file_name = segments

    # Resolve the existing part of the directory chain
    current = root
    depth = 0
    for segment in dir_segments:
        existing = current.child(segment)
        if existing is None:
            break
        if not isinstance(existing, DirectoryNode):
            raise MalformedPathError(
                record.path, f"'{segment}' is already a file, cannot be a directory"
            )
        current = existing
        depth += 1

    if depth == len(dir_segments):
        existing = current.child(file_name)
        if isinstance(existing, DirectoryNode):
            raise MalformedPathError(
                record.path, f"'{file_name}' is already a directory, cannot be a file"
            )
        if existing is not None:
            raise MalformedPathError(record.path, "duplicate path")

    # Create the missing directory levels and the leaf
    for segment in dir_segments[depth:]:
        new_dir = DirectoryNode(name=segment)
        current.add_child(new_dir)
        current = new_dir

    current.add_child(
        LeafNode(
            name=file_name,
            lines_of_code=record.lines_of_code,
            change_count=record.change_count,
            author_count=record.author_count,
        )
    )
