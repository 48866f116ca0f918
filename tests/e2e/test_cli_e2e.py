from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr) and the JSON view contract. HOME points at a
temporary directory so saved configuration never leaks between runs.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "codeheatmap" / "main.py"


def run_cli(args: List[str], home: Path) -> subprocess.CompletedProcess:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package is resolvable
    without being installed in site-packages.

    Args:
        args: Command line arguments (excluding 'python' and script path).
        home: Directory used as the user's home for this run.

    Returns:
        subprocess.CompletedProcess: returncode, stdout and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(home)
    env["LOCALAPPDATA"] = str(home)

    cmd = [sys.executable, str(ENTRY_POINT)] + args
    return subprocess.run(
        cmd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def dataset_file(tmp_path: Path) -> Path:
    """
    An exported dataset in the collector's document shape.

    Structure:
    a/
      b.js   loc 10, changes 3,  authors 1
      c.js   loc 20, changes 40, authors 1
    README.md loc 5, changes 1,  authors 1
    """
    document = {
        "name": "root",
        "children": [
            {"name": "a/b.js", "loc": 10, "changes": 3, "authors": 1},
            {"name": "a/c.js", "loc": 20, "changes": 40, "authors": 1},
            {"name": "README.md", "loc": 5, "changes": 1, "authors": 1},
            {"name": "bad//path.js", "loc": 1, "changes": 1, "authors": 1},
        ],
    }
    path = tmp_path / "output.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_cli_json_view(tmp_path: Path, dataset_file: Path) -> None:
    """TC-01: Root view as JSON, including the rejected record."""
    result = run_cli(["--use-defaults", "-d", str(dataset_file), "--json"], tmp_path)

    assert result.returncode == 0, f"CLI failed with stderr: {result.stderr}"
    data: Dict[str, Any] = json.loads(result.stdout)

    assert data["metric"] == "changes"
    assert data["breadcrumb"] == []
    nodes = {n["name"]: n for n in data["nodes"]}
    assert list(nodes) == ["a", "README.md"]
    assert nodes["a"]["loc"] == 30
    assert nodes["a"]["value"] == 43
    assert nodes["a"]["color_value"] == 21.5
    assert nodes["a"]["tier"] == 3
    assert nodes["a"]["has_children"] is True
    assert data["rejected"] == [
        {"path": "bad//path.js", "reason": "path contains an empty segment"}
    ]


def test_cli_text_view_with_path(tmp_path: Path, dataset_file: Path) -> None:
    """TC-02: Focusing a directory prints its breadcrumb, files and legend."""
    result = run_cli(
        ["--use-defaults", "-d", str(dataset_file), "-p", "a", "-m", "authors"], tmp_path
    )

    assert result.returncode == 0, result.stderr
    lines = result.stdout.splitlines()
    assert lines[0] == "root / a"
    assert "b.js" in lines[1]
    assert "c.js" in lines[2]
    assert any(line.startswith("Legend (Author count):") for line in lines)
    assert "1 record(s) skipped:" in result.stdout


def test_cli_stale_path_falls_back(tmp_path: Path, dataset_file: Path) -> None:
    """TC-03: A missing directory shows the nearest existing ancestor."""
    result = run_cli(
        ["--use-defaults", "-d", str(dataset_file), "-p", "a/gone", "--json"], tmp_path
    )

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["breadcrumb"] == ["a"]
    assert "not found" in result.stderr


def test_cli_tree_output(tmp_path: Path, dataset_file: Path) -> None:
    """TC-04: --tree appends the aggregated hierarchy."""
    result = run_cli(["--use-defaults", "-d", str(dataset_file), "--tree"], tmp_path)

    assert result.returncode == 0, result.stderr
    assert "├── a/ [30 loc, changes=43, tier 3]" in result.stdout
    assert "│   └── c.js [20 loc, changes=40, tier 4]" in result.stdout


def test_cli_unknown_metric(tmp_path: Path, dataset_file: Path) -> None:
    """TC-05: An unknown metric is a usage error."""
    result = run_cli(["--use-defaults", "-d", str(dataset_file), "-m", "bugs"], tmp_path)

    assert result.returncode == 2
    assert "Unknown metric" in result.stderr


def test_cli_without_dataset(tmp_path: Path) -> None:
    """TC-06: No dataset source configured."""
    result = run_cli(["--use-defaults"], tmp_path)

    assert result.returncode == 2
    assert "no dataset given" in result.stderr


def test_cli_missing_dataset_file(tmp_path: Path) -> None:
    """TC-07: Load failures exit with code 1."""
    result = run_cli(["--use-defaults", "-d", str(tmp_path / "missing.json")], tmp_path)

    assert result.returncode == 1
    assert "does not exist" in result.stderr


def test_cli_empty_dataset(tmp_path: Path) -> None:
    """TC-08: An empty dataset is reported, not treated as a crash."""
    empty = tmp_path / "empty.json"
    empty.write_text("[]", encoding="utf-8")

    result = run_cli(["--use-defaults", "-d", str(empty)], tmp_path)

    assert result.returncode == 3
    assert "Nothing to show" in result.stderr


def test_cli_save_and_reuse_config(tmp_path: Path, dataset_file: Path) -> None:
    """TC-09: --save remembers options for the next run."""
    first = run_cli(["-d", str(dataset_file), "-m", "authors", "--save"], tmp_path)
    assert first.returncode == 0, first.stderr

    second = run_cli(["--dump-config"], tmp_path)
    assert second.returncode == 0
    conf = json.loads(second.stdout)
    assert conf["metric"] == "authors"
    assert conf["dataset_path"] == str(dataset_file)


def test_cli_help_message(tmp_path: Path) -> None:
    """TC-10: Help message smoke test."""
    result = run_cli(["--help"], tmp_path)

    assert result.returncode == 0
    assert "usage: codeheatmap" in result.stdout
    assert "--dataset" in result.stdout


def test_cli_repository_listing(tmp_path: Path) -> None:
    """TC-11: --repo picks one repository out of the store's listing."""
    listing = [
        {"id": "1", "name": "alpha", "files": [{"path": "a.py", "loc": 3, "changes": 1, "authors": 1}]},
        {"id": "2", "name": "beta", "files": [{"path": "lib/b.py", "loc": 7, "changes": 3, "authors": 1}]},
    ]
    path = tmp_path / "repositories.json"
    path.write_text(json.dumps(listing), encoding="utf-8")

    first = run_cli(["--use-defaults", "-d", str(path), "--json"], tmp_path)
    chosen = run_cli(["--use-defaults", "-d", str(path), "--repo", "beta", "--json"], tmp_path)
    missing = run_cli(["--use-defaults", "-d", str(path), "--repo", "gamma"], tmp_path)

    assert first.returncode == 0, first.stderr
    assert [n["name"] for n in json.loads(first.stdout)["nodes"]] == ["a.py"]
    assert chosen.returncode == 0, chosen.stderr
    assert [n["name"] for n in json.loads(chosen.stdout)["nodes"]] == ["lib"]
    assert missing.returncode == 1
    assert "'gamma' not found" in missing.stderr


def test_cli_log_to_file_setting(tmp_path: Path, dataset_file: Path) -> None:
    """TC-12: Saved app settings enable the log file, --show-log prints it."""
    data_dir = tmp_path / ("CodeHeatmap" if os.name == "nt" else ".codeheatmap")
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "config.json").write_text(
        json.dumps({"app_settings": {"log_level": "INFO", "log_to_file": True}}),
        encoding="utf-8",
    )

    result = run_cli(["-d", str(dataset_file)], tmp_path)
    assert result.returncode == 0, result.stderr
    assert (data_dir / "logs" / "codeheatmap.log").exists()

    shown = run_cli(["--show-log"], tmp_path)
    assert shown.returncode == 0
    assert "file records" in shown.stdout
