"""Quality tier detection from release names.

The tier is a coarse classification combining the resolution and the source
markers found in a name. Detection never fails: names without any marker map
to ``Quality.UNKNOWN``.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from enum import Enum
from typing import TYPE_CHECKING

from .logging_utils import render_fields_block

if TYPE_CHECKING:  # pragma: no cover
    from .models import ParseResult

LOGGER = logging.getLogger(__name__)


class Quality(Enum):
    UNKNOWN = "Unknown"
    SDTV = "SD TV"
    SDDVD = "SD DVD"
    HDTV = "HD TV"
    RAWHDTV = "RawHD TV"
    FULLHDTV = "1080p HD TV"
    HDWEBDL = "720p WEB-DL"
    FULLHDWEBDL = "1080p WEB-DL"
    HDBLURAY = "720p BluRay"
    FULLHDBLURAY = "1080p BluRay"
    UHDTV = "4K UHD TV"
    UHDWEBDL = "4K UHD WEB-DL"
    UHDBLURAY = "4K UHD BluRay"

    def __str__(self) -> str:
        return self.value


# Tokens must not be glued to other letters or digits; "." "_" "-" and
# brackets all count as separators in release names.
def _token(body: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![a-z0-9]){body}(?![a-z0-9])", re.IGNORECASE)


# Resolution patterns (order matters - check higher resolutions first)
_RESOLUTION_PATTERNS = [
    (_token(r"2160p"), "2160p"),
    (_token(r"4k"), "2160p"),
    (_token(r"uhd"), "2160p"),
    (_token(r"1080p"), "1080p"),
    (_token(r"1080i"), "1080i"),
    (_token(r"720p"), "720p"),
    (_token(r"1280x720"), "720p"),
    (_token(r"1920x1080"), "1080p"),
    (_token(r"576p"), "480p"),
    (_token(r"480p"), "480p"),
    (_token(r"sd"), "480p"),
]

# Anime releases mark resolution and source with bare tokens
_ANIME_RESOLUTION_PATTERNS = [
    (_token(r"hd"), "720p"),
]

_SOURCE_PATTERNS = [
    (_token(r"blu[\s._-]?ray"), "bluray"),
    (_token(r"b[dr][\s._-]?rip"), "bluray"),
    (_token(r"remux"), "bluray"),
    (_token(r"web[\s._-]?dl"), "webdl"),
    (_token(r"amzn"), "webdl"),
    (_token(r"nf"), "webdl"),
    (_token(r"dsnp"), "webdl"),
    (_token(r"web[\s._-]?rip"), "webdl"),
    (_token(r"web"), "webdl"),
    (_token(r"hdtv"), "hdtv"),
    (_token(r"pdtv"), "hdtv"),
    (_token(r"dsr"), "hdtv"),
    (_token(r"tvrip"), "hdtv"),
    (_token(r"sdtv"), "hdtv"),
    (_token(r"dvd[\s._-]?rip"), "dvd"),
    (_token(r"dvd"), "dvd"),
    (_token(r"xvid"), "hdtv"),
]

_ANIME_SOURCE_PATTERNS = [
    (_token(r"bd"), "bluray"),
]

_MPEG2_PATTERN = _token(r"mpeg[\s._-]?2")

_TIERS = {
    ("2160p", "bluray"): Quality.UHDBLURAY,
    ("2160p", "webdl"): Quality.UHDWEBDL,
    ("2160p", "hdtv"): Quality.UHDTV,
    ("2160p", None): Quality.UHDTV,
    ("1080p", "bluray"): Quality.FULLHDBLURAY,
    ("1080p", "webdl"): Quality.FULLHDWEBDL,
    ("1080p", "hdtv"): Quality.FULLHDTV,
    ("1080p", None): Quality.FULLHDTV,
    ("1080i", "bluray"): Quality.FULLHDBLURAY,
    ("1080i", "webdl"): Quality.FULLHDWEBDL,
    ("1080i", "hdtv"): Quality.RAWHDTV,
    ("1080i", None): Quality.RAWHDTV,
    ("720p", "bluray"): Quality.HDBLURAY,
    ("720p", "webdl"): Quality.HDWEBDL,
    ("720p", "hdtv"): Quality.HDTV,
    ("720p", None): Quality.HDTV,
    ("480p", "bluray"): Quality.SDDVD,
    ("480p", "dvd"): Quality.SDDVD,
    ("480p", "webdl"): Quality.SDTV,
    ("480p", "hdtv"): Quality.SDTV,
    ("480p", None): Quality.SDTV,
    (None, "dvd"): Quality.SDDVD,
    (None, "hdtv"): Quality.SDTV,
    (None, "webdl"): Quality.SDTV,
    (None, "bluray"): Quality.SDDVD,
}


def _first_match(name: str, patterns: list[tuple[re.Pattern[str], str]]) -> str | None:
    for pattern, value in patterns:
        if pattern.search(name):
            return value
    return None


def quality_from_name(name: str, anime: bool = False) -> Quality:
    """Classify ``name`` into a quality tier.

    Examples:
        >>> quality_from_name("Show.Name.S01E02.720p.HDTV.x264-GROUP")
        <Quality.HDTV: 'HD TV'>

        >>> quality_from_name("Show.Name.S01E02.1080p.WEB-DL.DD5.1.H.264-GROUP")
        <Quality.FULLHDWEBDL: '1080p WEB-DL'>

        >>> quality_from_name("Show.Name.S01E02")
        <Quality.UNKNOWN: 'Unknown'>
    """
    resolution = _first_match(name, _RESOLUTION_PATTERNS)
    source = _first_match(name, _SOURCE_PATTERNS)
    if anime:
        resolution = resolution or _first_match(name, _ANIME_RESOLUTION_PATTERNS)
        source = source or _first_match(name, _ANIME_SOURCE_PATTERNS)

    # 1080i broadcast captures are only "raw" when they carry MPEG-2 video
    if resolution == "1080i" and source in (None, "hdtv") and not _MPEG2_PATTERN.search(name):
        resolution = "1080p"

    return _TIERS.get((resolution, source), Quality.UNKNOWN)


def annotate_quality(result: ParseResult, name: str, *, anime: bool = False) -> ParseResult:
    """Return a copy of ``result`` carrying the quality detected in ``name``."""
    quality = quality_from_name(name, anime=anime)
    if quality is Quality.UNKNOWN:
        LOGGER.warning("Couldn't parse quality from '%s'", name)
    else:
        LOGGER.info(render_fields_block("Quality Detected", {"Name": name, "Quality": quality}))
    return dataclasses.replace(result, quality=quality)
