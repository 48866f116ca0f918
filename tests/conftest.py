from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: sample file records and the tree built from them.
"""

import os
import sys
from typing import List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from codeheatmap.core.analysis.tree_builder import build_tree  # noqa: E402
from codeheatmap.domain.tree_models import DirectoryNode, FileRecord  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_records() -> List[FileRecord]:
    """
    A small front-end project.

    Structure:
    src/
      components/
        Button.jsx     loc 250, changes 38, authors 5
        Card.jsx       loc 180, changes 12, authors 1
      utils/
        api.js         loc 320, changes 45, authors 8
      Home.jsx         loc 180, changes 25, authors 2
    docs/
      api.md           loc 350, changes 8,  authors 0
    README.md          loc 40,  changes 3,  authors 1
    """
    return [
        FileRecord("src/components/Button.jsx", 250, 38, 5),
        FileRecord("src/components/Card.jsx", 180, 12, 1),
        FileRecord("src/utils/api.js", 320, 45, 8),
        FileRecord("src/Home.jsx", 180, 25, 2),
        FileRecord("docs/api.md", 350, 8, 0),
        FileRecord("README.md", 40, 3, 1),
    ]


@pytest.fixture
def sample_tree(sample_records: List[FileRecord]) -> DirectoryNode:
    """The tree built from ``sample_records``."""
    return build_tree(sample_records)
