"""Release-name parsing against a pattern catalog.

Every rule of the catalog is tried against the input; each full match becomes
a scored candidate and the best candidate wins. Scores start at the negated
rule index, so earlier rules win ties, and gain a point for every identifying
field the match produced.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import logging
import os
import re
from typing import Optional

from .catalog import PatternCatalog, PatternRule
from .date_utils import parse_air_date
from .logging_utils import render_fields_block
from .models import ParseResult
from .quality import annotate_quality
from .reconcile import reconcile_results
from .sanitize import clean_series_name, full_sanitize_scene_name
from .utils import parse_decimal

LOGGER = logging.getLogger(__name__)

_FOLDER_YEAR = re.compile(r"[. _-]+\(?(?:19|20)\d{2}\)?$")


class NoMatchError(LookupError):
    """Raised when no catalog rule matches a name.

    ``result`` carries an empty :class:`ParseResult` so callers that only log
    the failure still have a value to work with.
    """

    def __init__(self, name: str, result: Optional[ParseResult] = None) -> None:
        super().__init__(f"Couldn't parse string {name}")
        self.name = name
        self.result = result if result is not None else ParseResult()


class _FieldConversionError(ValueError):
    """A captured field could not be converted; the rule is skipped."""

    def __init__(self, group: str, value: str) -> None:
        super().__init__(f"Error converting {group} '{value}'")
        self.group = group
        self.value = value


def _convert(group: str, value: str) -> int:
    try:
        return parse_decimal(value)
    except ValueError as exc:
        raise _FieldConversionError(group, value) from exc


def series_from_folder(folder: str, file_series: str) -> str:
    """Return ``folder`` as a series name when it names the same show as the file.

    A trailing year such as ``(2005)`` is dropped from the returned name.
    Generic folders (``downloads``, ``tv``) never match and yield ``""``.
    """
    if not folder or not file_series:
        return ""
    without_year = _FOLDER_YEAR.sub("", folder)
    wanted = full_sanitize_scene_name(file_series)
    if wanted not in (full_sanitize_scene_name(folder), full_sanitize_scene_name(without_year)):
        return ""
    return clean_series_name(without_year)


class NameParser:
    """Parses release names and media paths with a fixed pattern catalog.

    The parser holds no mutable state and may be shared between threads.
    """

    def __init__(self, catalog: PatternCatalog, *, anime: bool = False, today: Optional[dt.date] = None) -> None:
        self.catalog = catalog
        self.anime = anime
        self.today = today

    def _build_candidate(self, index: int, rule: PatternRule, name: str, groups: dict[str, str]) -> ParseResult:
        score = -index
        changes: dict[str, object] = {}

        if "series_name" in groups:
            series_name = clean_series_name(groups["series_name"])
            changes["series_name"] = series_name
            if series_name:
                score += 1
        if "series_num" in groups:
            score += 1
        if "season_num" in groups:
            changes["season_number"] = _convert("season_num", groups["season_num"])
            score += 1

        if "ep_num" in groups:
            episode = _convert("ep_num", groups["ep_num"])
            episodes: tuple[int, ...] = (episode,)
            if "extra_ep_num" in groups:
                try:
                    episodes = (episode, _convert("extra_ep_num", groups["extra_ep_num"]))
                except _FieldConversionError as exc:
                    LOGGER.debug("%s in %s; keeping the primary episode only", exc, name)
            changes["episode_numbers"] = episodes

        if "ep_ab_num" in groups:
            absolute: tuple[int, ...] = (_convert("ep_ab_num", groups["ep_ab_num"]),)
            if "extra_ab_ep_num" in groups:
                try:
                    absolute += (_convert("extra_ab_ep_num", groups["extra_ab_ep_num"]),)
                except _FieldConversionError as exc:
                    LOGGER.debug("%s in %s; dropping the secondary absolute episode", exc, name)
            changes["absolute_episode_numbers"] = absolute

        if "air_date" in groups:
            air_date = parse_air_date(groups["air_date"], today=self.today)
            if air_date is None:
                raise _FieldConversionError("air_date", groups["air_date"])
            changes["air_date"] = air_date
            score += 1

        if "extra_info" in groups:
            changes["extra_info"] = groups["extra_info"]
        if "release_group" in groups:
            changes["release_group"] = groups["release_group"]
            score += 1
        if "version" in groups:
            changes["version"] = groups["version"]

        return ParseResult(original_name=name, regex_used=rule.name, score=score, **changes)  # type: ignore[arg-type]

    def parse_string(self, name: str) -> ParseResult:
        """Return the best-scoring interpretation of ``name``.

        Raises:
            NoMatchError: when no rule produces a usable match.
        """
        candidates: list[ParseResult] = []
        for index, rule in enumerate(self.catalog):
            groups = rule.match(name)
            if groups is None:
                continue
            LOGGER.info("Matched %s with regex %s", name, rule.name)
            try:
                candidates.append(self._build_candidate(index, rule, name, groups))
            except _FieldConversionError as exc:
                LOGGER.debug("Skipping regex %s for %s: %s", rule.name, name, exc)

        if not candidates:
            LOGGER.warning("Couldn't match %s with any regex", name)
            raise NoMatchError(name, ParseResult(original_name=name))

        # sorted() is stable, so equal scores keep catalog order
        best = sorted(candidates, key=lambda candidate: candidate.score, reverse=True)[0]
        LOGGER.info("Chose best match with regex %s, score %d", best.regex_used, best.score)
        return best

    def parse(self, name: str) -> ParseResult:
        """Parse a single string and attach its quality tier."""
        try:
            result = self.parse_string(name)
        except NoMatchError as exc:
            exc.result = annotate_quality(exc.result, name, anime=self.anime)
            raise
        return annotate_quality(result, name, anime=self.anime)

    def _parse_or_empty(self, name: str) -> ParseResult:
        try:
            return self.parse_string(name)
        except NoMatchError as exc:
            return exc.result

    def parse_file(self, path: str | os.PathLike[str]) -> ParseResult:
        """Parse a media path, combining its full, file and directory forms.

        Never raises for unmatched input; fields nothing could identify stay
        empty.
        """
        path = os.fspath(path)
        LOGGER.info("Parsing string '%s' for show information", path)
        directory, file_name = os.path.split(path)
        file_stem, _ = os.path.splitext(file_name)
        directory_base = os.path.basename(directory)

        file_result = self._parse_or_empty(file_stem)
        directory_result = self._parse_or_empty(directory_base)
        full_result = self._parse_or_empty(path)

        if not directory_result.series_name:
            folder_series = series_from_folder(directory_base, file_result.series_name)
            if folder_series:
                LOGGER.debug("Using folder %s as the series name for %s", directory_base, path)
                directory_result = dataclasses.replace(directory_result, series_name=folder_series)

        merged = reconcile_results(full_result, file_result, directory_result)
        LOGGER.debug(
            render_fields_block(
                "Path Reconciled",
                {
                    "Path": path,
                    "File Regex": file_result.regex_used or "(none)",
                    "Directory Regex": directory_result.regex_used or "(none)",
                    "Series": merged.series_name,
                    "Season": merged.season_number,
                    "Episodes": merged.episode_numbers,
                },
            )
        )
        return annotate_quality(dataclasses.replace(merged, original_name=path), path, anime=self.anime)
