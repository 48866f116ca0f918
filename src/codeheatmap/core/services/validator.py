from __future__ import annotations

"""
Configuration Validation Service.

Gatekeeper between untrusted configuration (CLI flags, the persisted JSON
file) and the session. Handles type coercion, enumerated choices and default
injection, collecting warnings instead of failing unless strict mode is on.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from codeheatmap.domain.config import get_default_config
from codeheatmap.domain.errors import UnknownMetric
from codeheatmap.domain.metrics import DirectoryColorBasis, parse_metric

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_config(
        config: Any,
        *,
        strict: bool = False,
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Validate and normalize a configuration dictionary.

    Args:
        config: Raw configuration data (usually a dictionary).
        strict: If True, raise on invalid values instead of falling back.

    Returns:
        Tuple[Dict[str, Any], List[str]]: Normalized configuration and warnings.

    Raises:
        TypeError: In strict mode, on a value of the wrong type.
        ValueError: In strict mode, on an out-of-range or unknown choice.
        UnknownMetric: In strict mode, on a metric name with no rule.
    """
    warnings: List[str] = []
    defaults = get_default_config()

    if not isinstance(config, dict):
        msg = f"Invalid config type: expected dict, received {type(config).__name__}."
        if strict:
            raise TypeError(msg)
        warnings.append(f"{msg} Using defaults.")
        logger.warning(msg)
        return defaults, warnings

    merged: Dict[str, Any] = dict(defaults)
    merged.update(config)

    for field in ("dataset_path", "dataset_url", "repository", "path"):
        merged[field] = _as_str(merged.get(field), defaults[field], field, warnings, strict)

    for field in ("show_tree", "json_output"):
        merged[field] = _as_bool(merged.get(field), defaults[field], field, warnings, strict)

    merged["request_timeout"] = _as_positive_int(
        merged.get("request_timeout"), defaults["request_timeout"],
        "request_timeout", warnings, strict
    )

    merged["metric"] = _as_metric(merged.get("metric"), defaults["metric"], warnings, strict)
    merged["color_basis"] = _as_choice(
        merged.get("color_basis"),
        defaults["color_basis"],
        [b.value for b in DirectoryColorBasis],
        "color_basis",
        warnings,
        strict,
    )

    merged["path"] = merged["path"].strip("/")

    return merged, warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: TYPE COERCION
# -----------------------------------------------------------------------------

def _as_str(value: Any, fallback: str, field: str, warnings: List[str], strict: bool) -> str:
    """Validate and sanitize string inputs."""
    if value is None:
        return fallback
    if isinstance(value, str):
        return value.strip()

    msg = f"Invalid field '{field}': expected str, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_bool(value: Any, fallback: bool, field: str, warnings: List[str], strict: bool) -> bool:
    """Coerce various input types into native booleans."""
    if isinstance(value, bool):
        return value
    if value is None:
        return fallback

    if not strict:
        if isinstance(value, (int, float)) and value in (0, 1):
            warnings.append(f"Field '{field}' converted from number {value} to bool.")
            return bool(value)
        if isinstance(value, str):
            s = value.strip().lower()
            if s in ("true", "1", "yes", "y", "on"):
                warnings.append(f"Field '{field}' converted from '{value}' to True.")
                return True
            if s in ("false", "0", "no", "n", "off"):
                warnings.append(f"Field '{field}' converted from '{value}' to False.")
                return False

    msg = f"Invalid field '{field}': expected bool, received {type(value).__name__}."
    if strict:
        raise TypeError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


def _as_positive_int(value: Any, fallback: int, field: str, warnings: List[str], strict: bool) -> int:
    """Accept positive integers, and numeric strings outside strict mode."""
    if value is None:
        return fallback
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    if not strict and isinstance(value, str) and value.strip().isdigit() and int(value) > 0:
        warnings.append(f"Field '{field}' converted from '{value}' to int.")
        return int(value)

    msg = f"Invalid field '{field}': expected positive int, received {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback


# -----------------------------------------------------------------------------
# PRIVATE HELPERS: DOMAIN NORMALIZATION
# -----------------------------------------------------------------------------

def _as_metric(value: Any, fallback: str, warnings: List[str], strict: bool) -> str:
    """Normalize metric aliases to the canonical MetricKind value."""
    if value is None:
        return fallback
    try:
        return parse_metric(value).value
    except UnknownMetric:
        if strict:
            raise
        warnings.append(f"Unknown metric {value!r}. Using '{fallback}'.")
        return fallback


def _as_choice(
        value: Any,
        fallback: str,
        choices: Sequence[str],
        field: str,
        warnings: List[str],
        strict: bool,
) -> str:
    """Restrict a string field to a fixed set of lower-case choices."""
    if value is None:
        return fallback
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()

    msg = f"Invalid field '{field}': {value!r} is not one of {', '.join(choices)}."
    if strict:
        raise ValueError(msg)
    warnings.append(f"{msg} Using fallback.")
    return fallback
