"""Media file classification and discovery.

Cheap pre-filters applied before a path is handed to the name parser: a
whitelist of video container and disc image extensions, plus exclusion of
sample clips, extras and macOS resource forks.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from pathlib import Path

from .logging_utils import render_fields_block

LOGGER = logging.getLogger(__name__)

MEDIA_EXTENSIONS = frozenset(
    {
        "avi",
        "mkv",
        "mpg",
        "mpeg",
        "wmv",
        "ogm",
        "mp4",
        "iso",
        "img",
        "divx",
        "m2ts",
        "m4v",
        "ts",
        "flv",
        "f4v",
        "mov",
        "rmvb",
        "vob",
        "dvr-ms",
        "wtv",
        "ogv",
        "3gp",
        "webm",
    }
)

# "sample" as a standalone token, optionally numbered (sample2, SAMPLE01)
SAMPLE_FILENAME_PATTERN = re.compile(r"(?:^|[\W_])sample\d*(?:[\W_]|$)", re.IGNORECASE)
EXTRAS_PATTERN = re.compile(r"extras?$", re.IGNORECASE)
RESOURCE_FORK_PREFIX = "._"


def is_media_extension(extension: str) -> bool:
    """Return True if ``extension`` (with or without the dot) is a known media type."""
    return extension.lstrip(".").lower() in MEDIA_EXTENSIONS


def skip_reason_for_media_file(filename: str) -> str | None:
    """Explain why ``filename`` is not a media file, or return None if it is."""
    if SAMPLE_FILENAME_PATTERN.search(filename):
        return "sample file"
    if filename.startswith(RESOURCE_FORK_PREFIX):
        return "macOS resource fork (._ prefix)"

    stem, extension = os.path.splitext(filename)
    if EXTRAS_PATTERN.search(stem):
        return "extras"
    if not is_media_extension(extension):
        return f"unsupported extension '{extension}'" if extension else "no extension"
    return None


def is_media_file(filename: str) -> bool:
    return skip_reason_for_media_file(filename) is None


def gather_media_files(root: Path) -> Iterator[Path]:
    """Yield media files below ``root`` in sorted order.

    Directories, symlinks and anything rejected by
    :func:`skip_reason_for_media_file` are skipped. A missing root logs a
    warning and yields nothing.
    """
    if not root.exists():
        LOGGER.warning(render_fields_block("Media Directory Missing", {"Path": root}))
        return

    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue

        if path.is_symlink():
            reason: str | None = "symlink"
        else:
            reason = skip_reason_for_media_file(path.name)
        if reason:
            LOGGER.debug(
                render_fields_block(
                    "Skipping File",
                    {
                        "Source": path,
                        "Reason": reason,
                    },
                )
            )
            continue

        yield path
