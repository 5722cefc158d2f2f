from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft7Validator

from .catalog import DEFAULT_PATTERN_SETS, available_pattern_sets, load_catalog
from .parser import NameParser
from .utils import env_bool, env_list, load_yaml_file

ENV_PATTERN_SETS = "TVNAMING_PATTERN_SETS"
ENV_ANIME = "TVNAMING_ANIME"
ENV_VERIFY_PATTERNS = "TVNAMING_VERIFY_PATTERNS"
ENV_LOG_LEVEL = "TVNAMING_LOG_LEVEL"

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "parser": {
            "type": "object",
            "properties": {
                "pattern_sets": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                    "minItems": 1,
                },
                "patterns_file": {"type": ["string", "null"]},
                "verify_patterns": {"type": "boolean"},
                "anime": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {"type": "string"},
                "file": {"type": ["string", "null"]},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


class ConfigError(ValueError):
    """Raised when the configuration file or its values are invalid."""


@dataclass
class ParserSettings:
    pattern_sets: List[str] = field(default_factory=lambda: list(DEFAULT_PATTERN_SETS))
    patterns_file: Optional[Path] = None
    verify_patterns: bool = True
    anime: bool = False


@dataclass
class LoggingSettings:
    level: str = "INFO"
    file: Optional[Path] = None


@dataclass
class AppConfig:
    parser: ParserSettings = field(default_factory=ParserSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


@dataclass(slots=True)
class ValidationIssue:
    """A single configuration problem, located by its dotted path."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _format_jsonschema_path(path: Any) -> str:
    parts: List[str] = []
    for element in path:
        if isinstance(element, int):
            parts.append(f"[{element}]")
        else:
            parts.append(f".{element}" if parts else str(element))
    return "".join(parts) or "<root>"


def validate_config_data(data: Dict[str, Any]) -> List[ValidationIssue]:
    """Validate raw configuration data against the schema and known values.

    Returns:
        The problems found; an empty list means the data is usable.
    """
    validator = Draft7Validator(CONFIG_SCHEMA)
    issues = [
        ValidationIssue(path=_format_jsonschema_path(error.absolute_path), message=error.message)
        for error in sorted(validator.iter_errors(data), key=lambda exc: list(exc.absolute_path))
    ]
    if issues:
        return issues

    level = (data.get("logging") or {}).get("level")
    if level is not None and level.upper() not in _LOG_LEVELS:
        issues.append(
            ValidationIssue(path="logging.level", message=f"'{level}' is not one of {', '.join(_LOG_LEVELS)}")
        )
    return issues


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    return Path(value).expanduser()


def _apply_env_overrides(config: AppConfig) -> None:
    pattern_sets = env_list(ENV_PATTERN_SETS)
    if pattern_sets:
        config.parser.pattern_sets = pattern_sets

    anime = env_bool(ENV_ANIME)
    if anime is not None:
        config.parser.anime = anime

    verify = env_bool(ENV_VERIFY_PATTERNS)
    if verify is not None:
        config.parser.verify_patterns = verify

    level = os.getenv(ENV_LOG_LEVEL)
    if level:
        if level.strip().upper() not in _LOG_LEVELS:
            raise ConfigError(f"{ENV_LOG_LEVEL}='{level}' is not a valid log level")
        config.logging.level = level.strip().upper()


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load configuration from ``path``, falling back to defaults.

    Environment variables override values from the file.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        try:
            data = load_yaml_file(path)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Unable to load configuration {path}: {exc}") from exc

    issues = validate_config_data(data)
    if issues:
        details = "\n  ".join(str(issue) for issue in issues)
        raise ConfigError(f"Invalid configuration{f' {path}' if path else ''}:\n  {details}")

    parser_raw = data.get("parser") or {}
    logging_raw = data.get("logging") or {}
    config = AppConfig(
        parser=ParserSettings(
            pattern_sets=list(parser_raw.get("pattern_sets") or DEFAULT_PATTERN_SETS),
            patterns_file=_optional_path(parser_raw.get("patterns_file")),
            verify_patterns=bool(parser_raw.get("verify_patterns", True)),
            anime=bool(parser_raw.get("anime", False)),
        ),
        logging=LoggingSettings(
            level=str(logging_raw.get("level", "INFO")).upper(),
            file=_optional_path(logging_raw.get("file")),
        ),
    )
    _apply_env_overrides(config)
    return config


def build_parser(config: AppConfig) -> NameParser:
    """Create a :class:`NameParser` from the parser settings.

    Raises:
        ConfigError: when a configured pattern set does not exist.
        CatalogError: when the catalog file is invalid or fails its self-tests.
    """
    settings = config.parser
    known = available_pattern_sets(settings.patterns_file)
    unknown = [name for name in settings.pattern_sets if name not in known]
    if unknown:
        raise ConfigError(
            f"Unknown pattern set(s) {', '.join(unknown)}; available: {', '.join(sorted(known))}"
        )
    catalog = load_catalog(settings.pattern_sets, verify=settings.verify_patterns, path=settings.patterns_file)
    return NameParser(catalog, anime=settings.anime)


__all__ = [
    "AppConfig",
    "ConfigError",
    "LoggingSettings",
    "ParserSettings",
    "build_parser",
    "load_config",
    "validate_config_data",
]
