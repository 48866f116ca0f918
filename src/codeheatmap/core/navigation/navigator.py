from __future__ import annotations

"""
Drill-Down Navigator.

Owns the navigation state of a heatmap session: the sequence of directory
names leading from the root to the focused directory. Every operation is
total. Invalid moves (drilling into a file, going up from the root, jumping
out of range) leave the state unchanged or clamp it, and a path that no
longer matches the tree resolves to its deepest surviving ancestor.
"""

import logging
from typing import Optional, Sequence, Tuple

from codeheatmap.domain.errors import StalePathResolution
from codeheatmap.domain.tree_models import DirectoryNode

logger = logging.getLogger(__name__)


class Navigator:
    """
    Drill path state machine over a read-only repository tree.

    Attributes:
        tree: Root of the tree being navigated.
    """

    def __init__(self, tree: DirectoryNode, path: Sequence[str] = ()) -> None:
        self.tree = tree
        self._path: Tuple[str, ...] = tuple(path)

    # -------------------------------------------------------------------------
    # STATE
    # -------------------------------------------------------------------------

    @property
    def current_path(self) -> Tuple[str, ...]:
        """Segments from the root to the focused directory; root is ()."""
        return self._path

    @property
    def depth(self) -> int:
        return len(self._path)

    @property
    def breadcrumb(self) -> Tuple[str, ...]:
        """The resolvable part of the current path."""
        _, depth = self.resolve()
        return self._path[:depth]

    def reset(self, tree: Optional[DirectoryNode] = None) -> None:
        """Return to the root, optionally switching to a new tree."""
        if tree is not None:
            self.tree = tree
        self._path = ()

    # -------------------------------------------------------------------------
    # TRANSITIONS
    # -------------------------------------------------------------------------

    def drill_down(self, name: str) -> bool:
        """
        Focus the child directory called ``name``.

        Files and unknown names are ignored. A stale path is clamped to its
        resolved depth before the new segment is appended.

        Returns:
            bool: True if the path changed.
        """
        current, depth = self.resolve()
        child = current.child(name)
        if not isinstance(child, DirectoryNode):
            logger.debug(f"Drill-down ignored: '{name}' is not a directory here.")
            return False

        self._path = self._path[:depth] + (name,)
        return True

    def drill_up(self) -> bool:
        """
        Focus the parent directory. No-op at the root.

        Returns:
            bool: True if the path changed.
        """
        if not self._path:
            return False
        self._path = self._path[:-1]
        return True

    def jump_to(self, depth: int) -> None:
        """Keep only the first ``depth`` segments, clamping into ``[0, len]``."""
        depth = max(0, min(int(depth), len(self._path)))
        self._path = self._path[:depth]

    def navigate_to_breadcrumb(self, index: int) -> None:
        """
        Handle a click on breadcrumb entry ``index``.

        Entry 0 is the first path segment, so ``index`` keeps ``index + 1``
        segments; any negative index means the root.
        """
        self.jump_to(index + 1 if index >= 0 else 0)

    # -------------------------------------------------------------------------
    # RESOLUTION
    # -------------------------------------------------------------------------

    def resolve(self, tree: Optional[DirectoryNode] = None) -> Tuple[DirectoryNode, int]:
        """
        Walk the current path and return ``(node, resolved_depth)``.

        Stops at the first segment that is missing or names a file.
        """
        current = tree if tree is not None else self.tree
        depth = 0
        for segment in self._path:
            child = current.child(segment)
            if not isinstance(child, DirectoryNode):
                break
            current = child
            depth += 1
        return current, depth

    def resolve_current(self, tree: Optional[DirectoryNode] = None) -> DirectoryNode:
        """Return the focused directory, or its deepest surviving ancestor."""
        node, _ = self.resolve(tree)
        return node

    def stale_report(self) -> Optional[StalePathResolution]:
        """Describe the mismatch if the current path does not fully resolve."""
        _, depth = self.resolve()
        if depth == len(self._path):
            return None
        return StalePathResolution(self._path, self._path[:depth])
