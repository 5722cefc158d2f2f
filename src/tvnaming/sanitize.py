"""Normalization of extracted show names.

``clean_series_name`` is applied to every captured series name. The scene
variants build names suitable for provider search queries and for
punctuation-insensitive comparisons.
"""

from __future__ import annotations

import re

_JOINING_CHARS = re.compile(r"[\\/*]")
_DISALLOWED_CHARS = re.compile(r'[:"<>|?]')
_DASH_RUNS = re.compile(r"-{2,}")

_SCENE_BAD_CHARS = (",", ":", "(", ")", "!", "?", "'")
_PERIOD_RUNS = re.compile(r"\.{2,}")
_COMPARISON_SEPARATORS = re.compile(r"[. -]")


def clean_series_name(name: str) -> str:
    """Canonicalize a series name extracted from a file name."""
    name = name.strip(" .")
    name = _JOINING_CHARS.sub("-", name)
    name = _DISALLOWED_CHARS.sub("", name)
    return _DASH_RUNS.sub("-", name)


def sanitize_scene_name(name: str) -> str:
    for char in _SCENE_BAD_CHARS:
        name = name.replace(char, "")
    name = name.replace("- ", ".")
    name = name.replace(" ", ".")
    name = name.replace("&", "and")
    name = name.replace("/", ".")
    name = _PERIOD_RUNS.sub(".", name)
    if name.endswith("."):
        name = name[:-1]
    return name


def full_sanitize_scene_name(name: str) -> str:
    name = sanitize_scene_name(name)
    name = _COMPARISON_SEPARATORS.sub(" ", name)
    return name.lower().strip()
