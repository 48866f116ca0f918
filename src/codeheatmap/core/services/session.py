from __future__ import annotations

"""
Heatmap Session Service.

Owns one dataset at a time: the full repository tree built from it, the
navigator over that tree, and the selected metric. Loading is the only
asynchronous step. While it is pending the session is LOADING and refuses
view or navigation calls, and every load is stamped with a generation number
so that a response arriving after a newer request is discarded instead of
overwriting fresher state.
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from codeheatmap.core.analysis.tree_builder import build_tree_with_report
from codeheatmap.core.analysis.view import get_view, view_from_navigator
from codeheatmap.core.navigation.navigator import Navigator
from codeheatmap.domain.errors import (
    EmptyDataset,
    HeatmapError,
    LoadFailure,
    SessionNotReady,
)
from codeheatmap.domain.metrics import DirectoryColorBasis, MetricKind, parse_metric
from codeheatmap.domain.tree_models import ROOT_NAME, DirectoryNode, FileRecord
from codeheatmap.domain.view_models import HeatmapView, TreeBuildReport
from codeheatmap.infra.datasets import DatasetSource, load_dataset

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of the dataset behind a session."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    FAILED = "failed"


LoadCallback = Callable[[int, bool], None]


class HeatmapSession:
    """
    Interaction state of one heatmap viewer.

    Attributes:
        metric: Metric currently driving the colors.
        basis: Color value policy for directory entries.
        state: Current SessionState.
        last_error: The LoadFailure or EmptyDataset of the last failed load.
        build_report: Outcome of the last tree build (rejected records).
    """

    def __init__(
            self,
            metric: Union[str, MetricKind] = MetricKind.CHANGES,
            basis: Union[str, DirectoryColorBasis] = DirectoryColorBasis.CHILD_MEAN,
    ) -> None:
        self.metric: MetricKind = parse_metric(metric)
        self.basis = DirectoryColorBasis(basis)
        self.state = SessionState.IDLE
        self.last_error: Optional[HeatmapError] = None
        self.build_report: Optional[TreeBuildReport] = None

        self._lock = threading.Lock()
        self._generation = 0
        self._navigator = Navigator(DirectoryNode(name=ROOT_NAME))

    # -------------------------------------------------------------------------
    # LOADING
    # -------------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def tree(self) -> DirectoryNode:
        return self._navigator.tree

    def begin_load(self) -> int:
        """Enter LOADING and return the generation stamp of the new request."""
        with self._lock:
            self._generation += 1
            self.state = SessionState.LOADING
            self.last_error = None
            logger.debug(f"Session: load #{self._generation} started.")
            return self._generation

    def complete_load(self, generation: int, records: Sequence[FileRecord]) -> bool:
        """
        Install the dataset fetched by request ``generation``.

        Builds the tree and resets navigation to the root. A response for a
        superseded generation is discarded.

        Returns:
            bool: True if the dataset was installed.
        """
        if not self._is_current(generation):
            self._log_discard(generation)
            return False

        report = build_tree_with_report(records)
        for err in report.rejected:
            logger.warning(f"Skipping record: {err}")

        with self._lock:
            if generation != self._generation:
                self._log_discard(generation)
                return False
            self.build_report = report
            self._navigator.reset(report.root)
            self.state = SessionState.READY if report.accepted else SessionState.EMPTY
            if self.state is SessionState.EMPTY:
                self.last_error = EmptyDataset("loaded records")

        logger.info(
            f"Session: dataset ready ({report.accepted} files, "
            f"{len(report.rejected)} rejected)."
        )
        return True

    def fail_load(self, generation: int, error: HeatmapError) -> bool:
        """
        Record the failure of request ``generation``.

        EmptyDataset moves the session to EMPTY, anything else to FAILED.

        Returns:
            bool: True if the failure was applied (not superseded).
        """
        with self._lock:
            if generation != self._generation:
                self._log_discard(generation)
                return False
            self.last_error = error
            self._navigator.reset(DirectoryNode(name=ROOT_NAME))
            self.build_report = None
            if isinstance(error, EmptyDataset):
                self.state = SessionState.EMPTY
                logger.warning(f"Session: {error}")
            else:
                self.state = SessionState.FAILED
                logger.error(f"Session: {error}")
        return True

    def load(self, source: DatasetSource) -> SessionState:
        """Load ``source`` synchronously and return the resulting state."""
        generation = self.begin_load()
        self._run_load(generation, source)
        return self.state

    def load_in_background(
            self,
            source: DatasetSource,
            on_complete: Optional[LoadCallback] = None,
    ) -> threading.Thread:
        """
        Load ``source`` on a daemon thread.

        ``on_complete(generation, applied)`` is called from the worker thread
        once the response is handled; ``applied`` is False when a newer load
        superseded this one.
        """
        generation = self.begin_load()

        def _worker() -> None:
            applied = self._run_load(generation, source)
            if on_complete is not None:
                on_complete(generation, applied)

        thread = threading.Thread(target=_worker, name=f"heatmap-load-{generation}", daemon=True)
        thread.start()
        return thread

    # -------------------------------------------------------------------------
    # VIEW & NAVIGATION
    # -------------------------------------------------------------------------

    @property
    def current_path(self) -> Tuple[str, ...]:
        return self._navigator.current_path

    def focused_node(self) -> DirectoryNode:
        """The directory currently in focus (deepest valid ancestor if stale)."""
        self._require_ready()
        return self._navigator.resolve_current()

    def select_metric(self, metric: Union[str, MetricKind]) -> None:
        """Switch the coloring metric; the drill path is kept."""
        self.metric = parse_metric(metric)

    def select_basis(self, basis: Union[str, DirectoryColorBasis]) -> None:
        self.basis = DirectoryColorBasis(basis)

    def view(self, metric: Union[str, MetricKind, None] = None) -> HeatmapView:
        """
        Project the focused directory for the renderer.

        Raises:
            SessionNotReady: Unless the session is READY or EMPTY.
            UnknownMetric: If ``metric`` names no known metric.
        """
        metric_kind = self.metric if metric is None else parse_metric(metric)
        if self.state is SessionState.EMPTY:
            return HeatmapView(metric=metric_kind)
        self._require_ready()
        return view_from_navigator(self._navigator, metric_kind, self.basis)

    def get_view(
            self,
            metric: Union[str, MetricKind, None] = None,
            path: Optional[Sequence[str]] = None,
    ) -> HeatmapView:
        """Project an arbitrary path without touching the navigation state."""
        if path is None:
            return self.view(metric)
        metric_kind = self.metric if metric is None else parse_metric(metric)
        if self.state is SessionState.EMPTY:
            return HeatmapView(metric=metric_kind)
        self._require_ready()
        return get_view(self.tree, metric_kind, path, self.basis)

    def drill_down(self, name: str) -> bool:
        self._require_ready()
        return self._navigator.drill_down(name)

    def drill_up(self) -> bool:
        self._require_ready()
        return self._navigator.drill_up()

    def jump_to(self, depth: int) -> None:
        self._require_ready()
        self._navigator.jump_to(depth)

    def navigate_to_breadcrumb(self, index: int) -> None:
        self._require_ready()
        self._navigator.navigate_to_breadcrumb(index)

    def open_path(self, segments: Sequence[str]) -> List[str]:
        """
        Drill down through ``segments`` from the root.

        Returns:
            List[str]: The segments that could not be entered (empty when the
                       whole path was opened).
        """
        self._require_ready()
        self._navigator.reset()
        for i, segment in enumerate(segments):
            if not self._navigator.drill_down(segment):
                return list(segments[i:])
        return []

    # -------------------------------------------------------------------------
    # INTERNAL HELPERS
    # -------------------------------------------------------------------------

    def _run_load(self, generation: int, source: DatasetSource) -> bool:
        try:
            records = load_dataset(source)
            return self.complete_load(generation, records)
        except (LoadFailure, EmptyDataset) as e:
            return self.fail_load(generation, e)
        except Exception as e:
            logger.error(f"Session: load #{generation} crashed: {e}", exc_info=True)
            return self.fail_load(
                generation, LoadFailure(source.describe(), f"{type(e).__name__}: {e}")
            )

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _require_ready(self) -> None:
        if self.state is not SessionState.READY:
            raise SessionNotReady(self.state.value)

    @staticmethod
    def _log_discard(generation: int) -> None:
        logger.info(f"Session: discarding superseded response of load #{generation}.")
