from __future__ import annotations

import logging
from typing import List, Optional

import requests

from codeheatmap.domain.errors import LoadFailure
from codeheatmap.domain.tree_models import FileRecord
from codeheatmap.infra.datasets.common import DEFAULT_TIMEOUT, USER_AGENT, parse_records

logger = logging.getLogger(__name__)


class HttpDatasetSource:
    """Dataset served by the persistence store as a JSON document over HTTP."""

    def __init__(
            self,
            url: str,
            timeout: int = DEFAULT_TIMEOUT,
            repository: Optional[str] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.repository = repository

    def describe(self) -> str:
        return f"url '{self.url}'"

    def load(self) -> List[FileRecord]:
        """Fetch the document; every transport or decoding error is a LoadFailure."""
        label = self.describe()
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        logger.debug(f"Requesting dataset from: {self.url}")

        try:
            response = requests.get(self.url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise LoadFailure(label, f"timed out after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            raise LoadFailure(label, f"HTTP error: {e}") from e
        except requests.exceptions.RequestException as e:
            raise LoadFailure(label, f"communication error: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise LoadFailure(label, f"invalid JSON: {e}") from e

        size_kb = len(response.content) / 1024
        logger.info(f"Network: Dataset document received ({size_kb:.1f} KB).")
        return parse_records(payload, label, self.repository)
