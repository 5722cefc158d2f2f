from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any

from .quality import Quality


@dataclass(frozen=True)
class ParseResult:
    """Structured identification data extracted from a release name.

    Unknown values stay at their empty value: ``""`` for text, ``0`` for the
    season, ``()`` for episode sequences and ``None`` for the air date.

    Attributes:
        original_name: The string that was parsed.
        regex_used: Name of the catalog rule that produced the match.
        series_name: Cleaned series name.
        season_number: Season number, 0 when unknown.
        episode_numbers: Regular episode numbers; multi-episode releases carry two.
        absolute_episode_numbers: Episode numbers counted across all seasons.
        air_date: Air date for date-based releases.
        extra_info: Free text following the episode marker.
        release_group: Release group tag.
        version: Release version tag (e.g. "2" for v2 re-releases).
        quality: Quality tier.
        score: Ranking score of the winning rule.
    """

    original_name: str = ""
    regex_used: str = ""
    series_name: str = ""
    season_number: int = 0
    episode_numbers: tuple[int, ...] = ()
    absolute_episode_numbers: tuple[int, ...] = ()
    air_date: dt.date | None = None
    extra_info: str = ""
    release_group: str = ""
    version: str = ""
    quality: Quality = Quality.UNKNOWN
    score: int = 0

    def first_episode(self) -> int:
        """Return the first regular episode, else the first absolute episode, else 0."""
        if self.episode_numbers:
            return self.episode_numbers[0]
        if self.absolute_episode_numbers:
            return self.absolute_episode_numbers[0]
        return 0

    @property
    def is_empty(self) -> bool:
        return not (
            self.series_name
            or self.season_number
            or self.episode_numbers
            or self.absolute_episode_numbers
            or self.air_date
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "original_name": self.original_name,
            "regex_used": self.regex_used,
            "series_name": self.series_name,
            "season_number": self.season_number,
            "episode_numbers": list(self.episode_numbers),
            "absolute_episode_numbers": list(self.absolute_episode_numbers),
            "air_date": self.air_date.isoformat() if self.air_date else None,
            "extra_info": self.extra_info,
            "release_group": self.release_group,
            "version": self.version,
            "quality": self.quality.name,
            "score": self.score,
        }
