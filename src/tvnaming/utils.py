from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# Boolean true/false string values
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})

_DIGITS_PATTERN = re.compile(r"[0-9]+")


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path, *, expand: bool = True) -> Dict[str, Any]:
    """Read a YAML mapping from ``path``.

    Environment variables in string values are expanded unless ``expand`` is
    false (pattern files keep ``$`` anchors verbatim).
    """
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a YAML mapping at the top level")
    return expand_env(data) if expand else data


def strip_leading_zeros(value: str) -> str:
    """Drop leading zeros from a digit string, keeping a single ``0``."""
    stripped = value.lstrip("0")
    if not stripped and value:
        return "0"
    return stripped


def parse_decimal(value: str) -> int:
    """Convert a captured digit string to ``int``.

    Only plain ASCII digits are accepted; signs, whitespace, underscores and
    roman numerals raise ``ValueError``.
    """
    candidate = strip_leading_zeros(value)
    if not _DIGITS_PATTERN.fullmatch(candidate):
        raise ValueError(f"not a decimal number: {value!r}")
    return int(candidate)


def parse_env_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a boolean from an environment variable string.

    Returns None if value is None or not a recognized boolean string.
    """
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def env_bool(name: str) -> Optional[bool]:
    return parse_env_bool(os.getenv(name))


def env_list(name: str, separator: str = ",") -> Optional[List[str]]:
    """Get a list of strings from an environment variable.

    Returns None if not set, empty list if set but empty.
    """
    raw = os.getenv(name)
    if raw is None:
        return None
    return [part.strip() for part in raw.split(separator) if part.strip()]
