from __future__ import annotations

import logging
from collections.abc import Mapping, MutableSequence, Sequence
from pathlib import Path
from textwrap import wrap
from typing import Union

DEFAULT_WRAP_WIDTH = 110
DEFAULT_LABEL_WIDTH = 22
DEFAULT_INDENT = "    "

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s\n%(message)s\n"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FieldMapping = Union[Mapping[str, object], Sequence[tuple[str, object]]]


def _coerce_items(fields: FieldMapping) -> list[tuple[str, object]]:
    if isinstance(fields, Mapping):
        return list(fields.items())
    return list(fields)


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple, set)):
        return ", ".join(_stringify(item) for item in value)
    return str(value)


class LogBlockBuilder:
    """Builds an indented ``label: value`` block under an underlined title."""

    def __init__(
        self,
        title: str,
        *,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
        label_width: int = DEFAULT_LABEL_WIDTH,
        indent: str = DEFAULT_INDENT,
        pad_top: bool = True,
    ) -> None:
        self.title = title
        self.wrap_width = wrap_width
        self.label_width = label_width
        self.indent = indent
        self.lines: MutableSequence[str] = []
        if pad_top:
            self.lines.append("")
        self.lines.append(title)
        self.lines.append("-" * len(title))

    def add_fields(self, fields: FieldMapping | None) -> None:
        if not fields:
            return
        items = _coerce_items(fields)
        if not items:
            return

        computed_width = max((len(str(key)) for key, _ in items), default=0)
        label_width = max(min(computed_width, self.label_width), 8)
        value_width = max(self.wrap_width - len(self.indent) - label_width - 4, 32)

        for key, value in items:
            wrapped = wrap(_stringify(value), width=value_width) or [""]
            self.lines.append(f"{self.indent}{str(key):<{label_width}}: {wrapped[0]}")
            for continuation in wrapped[1:]:
                self.lines.append(f"{self.indent}{'':<{label_width}}  {continuation}")

    def render(self) -> str:
        return "\n".join(self.lines).rstrip()


def render_fields_block(title: str, fields: FieldMapping, *, pad_top: bool = True) -> str:
    builder = LogBlockBuilder(title, pad_top=pad_top)
    builder.add_fields(fields)
    return builder.render()


def configure_logging(level: str | int = "INFO", log_file: Path | None = None) -> None:
    """Install console (and optional file) handlers on the root logger.

    Calling it again replaces the handlers installed by a previous call.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_tvnaming_handler", False):
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler._tvnaming_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    root.setLevel(level)
