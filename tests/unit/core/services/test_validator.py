from __future__ import annotations

"""
Unit tests for the Configuration Validation Service.

Verifies:
1. Default injection and pass-through of valid values.
2. Lenient coercion with warnings.
3. Strict mode raising on invalid input.
"""

import pytest

from codeheatmap.core.services.validator import validate_config
from codeheatmap.domain.config import get_default_config
from codeheatmap.domain.errors import UnknownMetric


def test_empty_config_gives_defaults() -> None:
    merged, warnings = validate_config({})
    assert merged == get_default_config()
    assert warnings == []


def test_non_dict_falls_back_to_defaults() -> None:
    merged, warnings = validate_config(["not", "a", "dict"])
    assert merged == get_default_config()
    assert len(warnings) == 1


def test_non_dict_strict_raises() -> None:
    with pytest.raises(TypeError):
        validate_config("nope", strict=True)


def test_valid_values_pass_through() -> None:
    merged, warnings = validate_config({
        "dataset_path": " data.json ",
        "metric": "AUTHORS",
        "color_basis": "Sum",
        "request_timeout": 30,
        "path": "/src/components/",
        "show_tree": True,
    })

    assert warnings == []
    assert merged["dataset_path"] == "data.json"
    assert merged["metric"] == "authors"
    assert merged["color_basis"] == "sum"
    assert merged["request_timeout"] == 30
    assert merged["path"] == "src/components"
    assert merged["show_tree"] is True


def test_metric_alias_is_canonicalized() -> None:
    merged, _ = validate_config({"metric": "lines_changed"})
    assert merged["metric"] == "changes"


def test_lenient_coercion_warns() -> None:
    merged, warnings = validate_config({
        "show_tree": "yes",
        "json_output": 0,
        "request_timeout": "15",
    })

    assert merged["show_tree"] is True
    assert merged["json_output"] is False
    assert merged["request_timeout"] == 15
    assert len(warnings) == 3


@pytest.mark.parametrize(
    "field, bad_value",
    [
        ("metric", "bugs"),
        ("color_basis", "median"),
        ("request_timeout", 0),
        ("request_timeout", True),
        ("dataset_path", 42),
        ("show_tree", "maybe"),
    ],
)
def test_invalid_values_fall_back(field: str, bad_value) -> None:
    merged, warnings = validate_config({field: bad_value})
    assert merged[field] == get_default_config()[field]
    assert warnings


@pytest.mark.parametrize(
    "config, error",
    [
        ({"metric": "bugs"}, UnknownMetric),
        ({"color_basis": "median"}, ValueError),
        ({"request_timeout": -5}, ValueError),
        ({"show_tree": "yes"}, TypeError),
        ({"path": 3}, TypeError),
    ],
)
def test_strict_mode_raises(config, error) -> None:
    with pytest.raises(error):
        validate_config(config, strict=True)
