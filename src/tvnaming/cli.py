"""Command-line front end for the release-name parser."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console

from .catalog import CatalogError, load_catalog
from .config import AppConfig, ConfigError, build_parser, load_config
from .logging_utils import configure_logging, render_fields_block
from .media_files import gather_media_files
from .models import ParseResult
from .parser import NameParser, NoMatchError
from .result_table import ResultTableRenderer

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_MATCH = 1
EXIT_CONFIG_ERROR = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tvnaming",
        description="Extract series, season and episode information from release names.",
    )
    parser.add_argument("--config", type=Path, help="Path to a tvnaming YAML config")
    parser.add_argument(
        "--pattern-set",
        dest="pattern_sets",
        action="append",
        metavar="NAME",
        help="Pattern set to use; repeat to combine sets in priority order",
    )
    parser.add_argument("--anime", action="store_true", default=None, help="Recognise anime quality markers")
    parser.add_argument("--json", action="store_true", help="Print results as JSON instead of a table")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-level", help="Logging level (overrides config)")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser("parse", help="Parse release names")
    parse_cmd.add_argument("names", nargs="+", metavar="NAME")

    parse_file_cmd = subparsers.add_parser("parse-file", help="Parse media paths using file and directory names")
    parse_file_cmd.add_argument("paths", nargs="+", metavar="PATH")

    scan_cmd = subparsers.add_parser("scan", help="Parse every media file below a directory")
    scan_cmd.add_argument("directory", type=Path)

    subparsers.add_parser("check-patterns", help="Load and self-test the configured pattern sets")
    return parser


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config)
    if args.pattern_sets:
        config.parser.pattern_sets = list(args.pattern_sets)
    if args.anime is not None:
        config.parser.anime = args.anime
    if args.verbose:
        config.logging.level = "DEBUG"
    elif args.log_level:
        config.logging.level = args.log_level.upper()
    if args.log_file is not None:
        config.logging.file = args.log_file
    return config


def _emit_results(results: List[ParseResult], *, as_json: bool, title: str) -> None:
    if as_json:
        print(json.dumps([result.to_dict() for result in results], indent=2))
        return
    ResultTableRenderer(Console()).print_results(results, title=title)


def _run_parse(parser: NameParser, names: Sequence[str], *, as_json: bool) -> int:
    results: List[ParseResult] = []
    failed = 0
    for name in names:
        try:
            results.append(parser.parse(name))
        except NoMatchError as exc:
            failed += 1
            results.append(exc.result)
    _emit_results(results, as_json=as_json, title="Parse Results")
    return EXIT_NO_MATCH if failed else EXIT_OK


def _run_parse_files(parser: NameParser, paths: Sequence[str], *, as_json: bool, title: str) -> int:
    results = [parser.parse_file(path) for path in paths]
    _emit_results(results, as_json=as_json, title=title)
    return EXIT_NO_MATCH if any(result.is_empty for result in results) else EXIT_OK


def _run_scan(parser: NameParser, directory: Path, *, as_json: bool) -> int:
    if not directory.is_dir():
        LOGGER.error("Scan directory %s does not exist", directory)
        return EXIT_NO_MATCH
    paths = [str(path) for path in gather_media_files(directory)]
    LOGGER.info(render_fields_block("Scan", {"Directory": directory, "Media Files": len(paths)}))
    return _run_parse_files(parser, paths, as_json=as_json, title=f"Scan: {directory}")


def _run_check_patterns(config: AppConfig, *, as_json: bool) -> int:
    settings = config.parser
    try:
        catalog = load_catalog(settings.pattern_sets, verify=True, path=settings.patterns_file)
    except CatalogError as exc:
        LOGGER.error("Pattern check failed: %s", exc)
        return EXIT_NO_MATCH

    if as_json:
        payload = {
            "catalog": catalog.name,
            "rules": [{"name": rule.name, "tests": len(rule.tests)} for rule in catalog],
        }
        print(json.dumps(payload, indent=2))
    else:
        ResultTableRenderer(Console()).print_catalog(catalog)
    LOGGER.info("All %d rules in %s passed their self-tests", len(catalog), catalog.name)
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = _resolve_config(args)
        configure_logging(config.logging.level, config.logging.file)
    except ValueError as exc:
        print(f"tvnaming: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.command == "check-patterns":
        return _run_check_patterns(config, as_json=args.json)

    try:
        parser = build_parser(config)
    except (ConfigError, CatalogError) as exc:
        LOGGER.error("Unable to build parser: %s", exc)
        return EXIT_CONFIG_ERROR

    if args.command == "parse":
        return _run_parse(parser, args.names, as_json=args.json)
    if args.command == "parse-file":
        return _run_parse_files(parser, args.paths, as_json=args.json, title="Parse Results")
    return _run_scan(parser, args.directory, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
