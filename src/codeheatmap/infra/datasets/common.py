from __future__ import annotations

"""
Dataset Source Contract and Decoding.

Shared pieces of the dataset boundary: the DatasetSource protocol, the
decoder turning store documents into FileRecord lists, and load_dataset(),
which classifies the outcome as records, LoadFailure or EmptyDataset.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from codeheatmap.domain.errors import EmptyDataset, LoadFailure
from codeheatmap.domain.tree_models import FileRecord

logger = logging.getLogger(__name__)

USER_AGENT = "CodeHeatmap-Client/1.0.0"
DEFAULT_TIMEOUT = 10

# Accepted spellings per field, first match wins
_PATH_KEYS = ("path", "name")
_LOC_KEYS = ("loc", "lines_of_code", "linesOfCode")
_CHANGES_KEYS = ("changes", "change_count", "changeCount")
_AUTHORS_KEYS = ("authors", "author_count", "authorCount")


@runtime_checkable
class DatasetSource(Protocol):
    """Anything able to produce the flat file list of one repository."""

    def load(self) -> List[FileRecord]:
        """Fetch and decode the records. Raises LoadFailure on any error."""
        ...

    def describe(self) -> str:
        """Short label used in logs and error messages."""
        ...


class InMemorySource:
    """Dataset already held in memory (tests, embedding callers)."""

    def __init__(self, records: Sequence[FileRecord], label: str = "memory") -> None:
        self._records = list(records)
        self._label = label

    def load(self) -> List[FileRecord]:
        return list(self._records)

    def describe(self) -> str:
        return self._label


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_dataset(source: DatasetSource) -> List[FileRecord]:
    """
    Load the records of ``source``.

    Args:
        source: The dataset source to read.

    Returns:
        List[FileRecord]: At least one record.

    Raises:
        LoadFailure: The source failed, including unexpected errors.
        EmptyDataset: The source succeeded but returned no records.
    """
    label = source.describe()
    logger.debug(f"Loading dataset from {label}")

    try:
        records = source.load()
    except LoadFailure:
        raise
    except Exception as e:
        raise LoadFailure(label, f"{type(e).__name__}: {e}") from e

    if not records:
        raise EmptyDataset(label)

    logger.info(f"Loaded {len(records)} file records from {label}")
    return records


def parse_records(
        payload: Any,
        source: str,
        repository: Optional[str] = None,
) -> List[FileRecord]:
    """
    Decode a store document into file records.

    Accepted shapes:
    - a list of record objects;
    - the export document ``{"name": ..., "children": [...]}``;
    - a repository document ``{"name": ..., "files": [...]}``;
    - the store's repository listing, a list of repository documents.

    Entries without a usable path or with invalid metrics are skipped with a
    warning; missing metrics default to zero.

    Args:
        payload: Decoded JSON document.
        source: Label used in logs and errors.
        repository: Name of the repository to pick from a listing. The
                    first repository is used when not given.

    Raises:
        LoadFailure: If the document has none of the accepted shapes, or the
            requested repository is not in the listing.
    """
    if _is_repository_listing(payload):
        payload = select_repository(payload, source, repository)
    entries = _extract_entries(payload)
    if entries is None:
        raise LoadFailure(source, f"unexpected document shape ({type(payload).__name__})")

    records: List[FileRecord] = []
    for i, entry in enumerate(entries):
        record = _parse_entry(entry)
        if record is None:
            logger.warning(f"{source}: skipping unusable entry #{i}: {entry!r}")
            continue
        records.append(record)

    skipped = len(entries) - len(records)
    if skipped:
        logger.warning(f"{source}: {skipped} of {len(entries)} entries skipped")
    return records

def select_repository(
        listing: List[Dict[str, Any]],
        source: str,
        repository: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Pick one repository document out of the store's repository listing.

    Args:
        listing: Repository documents, each carrying a ``files`` list.
        source: Label used in logs and errors.
        repository: Repository name (or id); the first entry when empty.

    Returns:
        Dict[str, Any]: The selected repository document.

    Raises:
        LoadFailure: If no repository carries the requested name.
    """
    if not repository:
        chosen = listing[0]
        logger.info(f"{source}: showing repository '{chosen.get('name')}' (first of {len(listing)})")
        return chosen

    for repo in listing:
        if repository in (repo.get("name"), str(repo.get("id"))):
            return repo

    available = ", ".join(str(repo.get("name")) for repo in listing)
    raise LoadFailure(source, f"repository '{repository}' not found (available: {available})")

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _is_repository_listing(payload: Any) -> bool:
    return (
        isinstance(payload, list)
        and bool(payload)
        and all(isinstance(e, dict) and isinstance(e.get("files"), list) for e in payload)
    )


def _extract_entries(payload: Any) -> Optional[List[Any]]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("children", "files"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return None


def _parse_entry(entry: Any) -> Optional[FileRecord]:
    if not isinstance(entry, dict):
        return None

    path = _first_present(entry, _PATH_KEYS)
    if not isinstance(path, str) or not path.strip():
        return None

    try:
        return FileRecord(
            path=path.strip(),
            lines_of_code=_as_count(_first_present(entry, _LOC_KEYS)),
            change_count=_as_count(_first_present(entry, _CHANGES_KEYS)),
            author_count=_as_count(_first_present(entry, _AUTHORS_KEYS)),
        )
    except ValueError:
        return None


def _first_present(entry: Dict[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        if key in entry and entry[key] is not None:
            return entry[key]
    return None


def _as_count(value: Any) -> int:
    """Missing means zero; numeric strings (collector output) are accepted."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError("boolean is not a count")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"invalid count {value!r}")
