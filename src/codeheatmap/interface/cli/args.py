from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from codeheatmap.domain.metrics import DirectoryColorBasis, MetricKind

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the codeheatmap CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="codeheatmap",
        description=(
            "Show a repository's per-file metrics as a drillable heatmap, "
            "one directory level at a time."
        ),
    )

    # --- Dataset Source ---
    source = p.add_mutually_exclusive_group()
    source.add_argument(
        "-d", "--dataset",
        dest="dataset_path",
        default=None,
        help="JSON file with the repository's file records.",
    )
    source.add_argument(
        "-u", "--url",
        dest="dataset_url",
        default=None,
        help="URL serving the repository's file records as JSON.",
    )
    p.add_argument(
        "-r", "--repo",
        dest="repository",
        default=None,
        help="Repository to show when the dataset lists several (default: the first).",
    )
    p.add_argument(
        "--timeout",
        dest="request_timeout",
        type=int,
        default=None,
        help="HTTP timeout in seconds for --url.",
    )

    # --- View Selection ---
    p.add_argument(
        "-m", "--metric",
        default=None,
        help=f"Coloring metric ({', '.join(m.value for m in MetricKind)}).",
    )
    p.add_argument(
        "-p", "--path",
        default=None,
        help="Directory to focus, e.g. 'src/components'. Defaults to the root.",
    )
    p.add_argument(
        "--basis",
        dest="color_basis",
        default=None,
        choices=[b.value for b in DirectoryColorBasis],
        help="How directory colors are computed from their subtree.",
    )

    # --- Output Format ---
    p.add_argument(
        "--tree",
        dest="show_tree",
        action="store_true",
        help="Print the whole aggregated hierarchy below the focused directory.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the view as JSON.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the saved configuration.",
    )
    p.add_argument(
        "--save",
        action="store_true",
        help="Remember the effective options for the next run.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--show-log",
        action="store_true",
        help="Print the tail of the persistent log file and exit.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Options left unset map to None so they do not mask saved values.
    Choosing one dataset source clears the other.
    """
    overrides: Dict[str, Any] = {
        "dataset_path": args.dataset_path,
        "dataset_url": args.dataset_url,
        "request_timeout": args.request_timeout,
        "repository": args.repository,
        "metric": args.metric,
        "path": args.path,
        "color_basis": args.color_basis,
    }

    if args.dataset_path:
        overrides["dataset_url"] = ""
    elif args.dataset_url:
        overrides["dataset_path"] = ""

    if args.show_tree:
        overrides["show_tree"] = True
    if args.json_output:
        overrides["json_output"] = True

    return overrides
