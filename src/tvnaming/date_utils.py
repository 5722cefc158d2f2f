"""Air date inference from captured digit strings.

Release names encode air dates in many layouts (``2010.11.23``,
``2010-11-23``, ``20101123``). The number of digit runs in the capture picks a
layout; components the layout does not provide are taken from a reference
date.
"""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Sequence

# Indexed by the number of digit runs in the capture.
DEFAULT_YMD_LAYOUTS: tuple[str, ...] = ("", "D", "MD", "YMD")

_DIGIT_RUNS = re.compile(r"\d+")


def translate_ymd(
    value: str,
    layouts: Sequence[str] = DEFAULT_YMD_LAYOUTS,
    today: dt.date | None = None,
) -> tuple[int, int, int]:
    """Split ``value`` into (year, month, day) using ``layouts``.

    Returns ``(0, 0, 0)`` when no layout covers the number of digit runs.
    Two-digit years are read as 20xx.
    """
    parts = _DIGIT_RUNS.findall(value)
    if len(parts) == 1 and len(parts[0]) == 8:
        compact = parts[0]
        parts = [compact[:4], compact[4:6], compact[6:]]

    if not parts or len(parts) >= len(layouts) or not layouts[len(parts)]:
        return 0, 0, 0

    reference = today or dt.date.today()
    components = {"Y": reference.year, "M": reference.month, "D": reference.day}
    for code, part in zip(layouts[len(parts)], parts):
        components[code] = int(part)

    year = components["Y"]
    if 0 < year < 100:
        year += 2000
    return year, components["M"], components["D"]


def _rolled_date(year: int, month: int, day: int) -> dt.date:
    # Out-of-range months and days roll over into the following period.
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return dt.date(year, month, 1) + dt.timedelta(days=day - 1)


def parse_air_date(value: str, today: dt.date | None = None) -> dt.date | None:
    """Return the air date encoded in ``value`` or None when it is unusable.

    A year or month of zero is a failed parse. Day values are not checked
    against month lengths; ``2010.11.31`` becomes 2010-12-01.
    """
    year, month, day = translate_ymd(value, today=today)
    if year == 0 or month == 0:
        return None
    try:
        return _rolled_date(year, month, day)
    except (ValueError, OverflowError):
        return None
