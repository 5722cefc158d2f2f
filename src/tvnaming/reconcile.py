"""Merge the parses of a path's three string forms into one result.

A media path is parsed as the full path, the bare file name and the bare
parent-directory name. File names are the best source for episode positions;
directory names usually carry the cleanest series name and release tags.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from .models import ParseResult

# File name wins over directory for these.
PATH_FIELDS: tuple[str, ...] = (
    "air_date",
    "absolute_episode_numbers",
    "season_number",
    "episode_numbers",
)

# Directory wins over file name for these.
DESCRIPTIVE_FIELDS: tuple[str, ...] = (
    "series_name",
    "extra_info",
    "release_group",
    "version",
)

MERGE_FIELDS: frozenset[str] = frozenset(PATH_FIELDS + DESCRIPTIVE_FIELDS)


class InvalidFieldError(KeyError):
    """Raised when a merge is requested for a field outside ``MERGE_FIELDS``."""

    def __init__(self, field: str) -> None:
        super().__init__(field)
        self.field = field

    def __str__(self) -> str:
        return f"'{self.field}' is not a mergeable ParseResult field"


def combine_field(final: ParseResult, primary: ParseResult, fallback: ParseResult, field: str) -> Any:
    """Return the merged value of ``field``.

    The primary value is chosen when non-empty, otherwise the fallback. The
    value already on ``final`` is kept when neither source has one.
    """
    if field not in MERGE_FIELDS:
        raise InvalidFieldError(field)

    chosen = getattr(primary, field) or getattr(fallback, field)
    if chosen:
        return chosen
    return getattr(final, field)


def reconcile_results(full: ParseResult, file: ParseResult, directory: ParseResult) -> ParseResult:
    """Combine the three parses of a path, seeded from the full-path parse."""
    changes: dict[str, Any] = {}
    for field in PATH_FIELDS:
        changes[field] = combine_field(full, file, directory, field)
    for field in DESCRIPTIVE_FIELDS:
        changes[field] = combine_field(full, directory, file, field)
    return dataclasses.replace(full, **changes)
