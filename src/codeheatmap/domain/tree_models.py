from __future__ import annotations

"""
Repository Tree Data Models.

Provides the flat file record consumed from the metric collector and the
recursive node types the tree builder assembles from it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

ROOT_NAME = "root"

# -----------------------------------------------------------------------------
# INPUT RECORDS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileRecord:
    """
    Per-file metrics as produced by the metric collector.

    Attributes:
        path: Slash-delimited path relative to the repository root.
        lines_of_code: Number of lines in the file.
        change_count: Number of commits that touched the file.
        author_count: Number of distinct commit authors.
    """
    path: str
    lines_of_code: int = 0
    change_count: int = 0
    author_count: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.path, str):
            raise ValueError(f"path must be a string, got {self.path!r}")
        for name in ("lines_of_code", "change_count", "author_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LeafNode:
    """A file in the tree, carrying its own metrics."""
    name: str
    lines_of_code: int = 0
    change_count: int = 0
    author_count: int = 0


@dataclass(eq=False)
class DirectoryNode:
    """
    A directory in the tree.

    Children keep first-seen order; a private index gives O(1) lookup by
    name and enforces the unique-name invariant. The tree builder is the
    only writer, the tree is treated as read-only once built.
    """
    name: str
    children: List["TreeNode"] = field(default_factory=list)
    _index: Dict[str, "TreeNode"] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        for child in self.children:
            if child.name in self._index:
                raise ValueError(f"Duplicate child name '{child.name}' in '{self.name}'")
            self._index[child.name] = child

    def child(self, name: str) -> Optional["TreeNode"]:
        """Return the direct child called ``name``, or None."""
        return self._index.get(name)

    def add_child(self, node: "TreeNode") -> "TreeNode":
        """Append ``node`` as the last child. Names must be unique."""
        if node.name in self._index:
            raise ValueError(f"Duplicate child name '{node.name}' in '{self.name}'")
        self.children.append(node)
        self._index[node.name] = node
        return node


TreeNode = Union[DirectoryNode, LeafNode]


def is_directory(node: TreeNode) -> bool:
    """Return True for directory nodes."""
    return isinstance(node, DirectoryNode)
