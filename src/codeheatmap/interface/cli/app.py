from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merging
(defaults, saved state, command-line overrides), dataset loading through a
HeatmapSession, navigation to the requested directory and rendering of the
resulting view as text or JSON.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from codeheatmap.core.analysis.tree_renderer import render_tree_structure, render_view_lines
from codeheatmap.core.analysis.view import split_view_path
from codeheatmap.core.services.session import HeatmapSession, SessionState
from codeheatmap.core.services.validator import validate_config
from codeheatmap.domain.config import (
    get_default_app_state,
    get_default_config,
    load_app_state,
    load_config,
    save_config,
)
from codeheatmap.domain.errors import UnknownMetric
from codeheatmap.domain.metrics import parse_metric
from codeheatmap.infra.datasets import DatasetSource, source_from_location
from codeheatmap.infra.fs import normalize_path
from codeheatmap.infra.logging import (
    LoggingConfig,
    configure_logging,
    get_default_log_path,
    get_logger,
    get_recent_logs,
)
from codeheatmap.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_EMPTY = 3
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap from the saved application settings
    app_state = get_default_app_state() if args.use_defaults else load_app_state()
    configure_logging(
        LoggingConfig.from_app_settings(
            app_state.get("app_settings", {}),
            debug=args.debug,
            log_path=get_default_log_path(),
        )
    )

    if args.show_log:
        print(get_recent_logs())
        return EXIT_OK

    # An explicit metric must be valid, never silently replaced
    if args.metric is not None:
        try:
            parse_metric(args.metric)
        except UnknownMetric as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return EXIT_USAGE

    # 3. Configuration hierarchy
    base_conf = get_default_config() if args.use_defaults else load_config()
    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    conf, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return EXIT_OK

    # 4. Dataset source resolution
    source = _resolve_source(conf)
    if source is None:
        print("ERROR: no dataset given (use --dataset FILE or --url URL).", file=sys.stderr)
        return EXIT_USAGE

    # 5. Load, navigate, render
    try:
        session = HeatmapSession(metric=conf["metric"], basis=conf["color_basis"])
        state = session.load(source)

        if state is SessionState.FAILED:
            print(f"ERROR: {session.last_error}", file=sys.stderr)
            return EXIT_FAILURE
        if state is SessionState.EMPTY:
            print(f"Nothing to show: {session.last_error}", file=sys.stderr)
            return EXIT_EMPTY

        missing = session.open_path(split_view_path(conf["path"]))
        if missing:
            logger.warning(f"Path segment '{missing[0]}' not found; showing nearest directory.")

        if conf["json_output"]:
            payload: Dict[str, Any] = session.view().to_dict()
            payload["rejected"] = [
                {"path": e.path, "reason": e.reason}
                for e in (session.build_report.rejected if session.build_report else [])
            ]
            print(json.dumps(payload, ensure_ascii=False, indent=2))
        else:
            _print_human_view(session, conf)

    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Heatmap generation failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.save:
        save_config({k: v for k, v in conf.items() if k not in ("show_tree", "json_output")})

    return EXIT_OK

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge non-None overrides for known keys into ``base``.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = [
        "dataset_path", "dataset_url", "request_timeout", "repository",
        "metric", "path", "color_basis", "show_tree", "json_output",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out


def _resolve_source(conf: Dict[str, Any]) -> Optional[DatasetSource]:
    """The dataset file wins over the URL when both are configured."""
    if conf["dataset_path"]:
        conf["dataset_path"] = normalize_path(conf["dataset_path"], os.getcwd())
        location = conf["dataset_path"]
    elif conf["dataset_url"]:
        location = conf["dataset_url"]
    else:
        return None
    return source_from_location(
        location,
        timeout=conf["request_timeout"],
        repository=conf["repository"] or None,
    )

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_view(session: HeatmapSession, conf: Dict[str, Any]) -> None:
    """Print the focused level, and optionally the full subtree below it."""
    view = session.view()
    for line in render_view_lines(view):
        print(line)

    report = session.build_report
    if report is not None and report.rejected:
        print(f"\n{len(report.rejected)} record(s) skipped:")
        for err in report.rejected:
            print(f"  - {err.path}: {err.reason}")

    if conf["show_tree"]:
        lines: List[str] = []
        render_tree_structure(session.focused_node(), lines, session.metric, basis=session.basis)
        print()
        for line in lines:
            print(line)

