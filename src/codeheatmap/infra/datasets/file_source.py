from __future__ import annotations

import json
import logging
import os
from typing import List, Optional

from codeheatmap.domain.errors import LoadFailure
from codeheatmap.domain.tree_models import FileRecord
from codeheatmap.infra.datasets.common import parse_records

logger = logging.getLogger(__name__)


class JsonFileSource:
    """Dataset stored as a JSON document on the local filesystem."""

    def __init__(self, path: str, repository: Optional[str] = None) -> None:
        self.path = os.path.abspath(path)
        self.repository = repository

    def describe(self) -> str:
        return f"file '{self.path}'"

    def load(self) -> List[FileRecord]:
        label = self.describe()
        if not os.path.isfile(self.path):
            raise LoadFailure(label, "file does not exist")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except OSError as e:
            raise LoadFailure(label, f"cannot read file: {e}") from e
        except ValueError as e:
            raise LoadFailure(label, f"invalid JSON: {e}") from e

        size_kb = os.path.getsize(self.path) / 1024
        logger.debug(f"Read dataset document {self.path} ({size_kb:.1f} KB)")
        return parse_records(payload, label, self.repository)
