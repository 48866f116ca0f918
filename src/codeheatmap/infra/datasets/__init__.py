from __future__ import annotations

"""
Dataset Source Infrastructure.

Facade over the concrete dataset sources feeding the heatmap session.
"""

from typing import Optional

from codeheatmap.infra.datasets.common import (
    DEFAULT_TIMEOUT,
    DatasetSource,
    InMemorySource,
    load_dataset,
    parse_records,
    select_repository,
)
from codeheatmap.infra.datasets.file_source import JsonFileSource
from codeheatmap.infra.datasets.http_source import HttpDatasetSource


def source_from_location(
        location: str,
        timeout: int = DEFAULT_TIMEOUT,
        repository: Optional[str] = None,
) -> DatasetSource:
    """Pick the HTTP source for http(s) URLs and the file source otherwise."""
    if location.startswith(("http://", "https://")):
        return HttpDatasetSource(location, timeout=timeout, repository=repository)
    return JsonFileSource(location, repository=repository)


__all__ = [
    "DatasetSource",
    "InMemorySource",
    "JsonFileSource",
    "HttpDatasetSource",
    "load_dataset",
    "parse_records",
    "select_repository",
    "source_from_location",
]
