"""Ordered catalogs of release-name pattern rules.

A catalog is an immutable, ordered sequence of :class:`PatternRule` objects.
Order encodes priority: the parser penalizes later rules, so earlier rules
win whenever scores are otherwise equal. Every rule carries self-tests that
are run when the catalog is built; a rule that fails them is rejected.

The built-in rules live in ``release_patterns.yaml`` grouped into named
pattern sets (``standard``, ``anime``). :func:`load_catalog` concatenates the
requested sets into a fresh catalog, so independently configured catalogs can
coexist in one process.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from copy import deepcopy
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, overload

from jsonschema import Draft7Validator

from .logging_utils import render_fields_block
from .utils import load_yaml_file

LOGGER = logging.getLogger(__name__)

PATTERNS_RESOURCE = "release_patterns.yaml"
DEFAULT_PATTERN_SETS: tuple[str, ...] = ("standard",)
REGEX_FLAGS = re.IGNORECASE | re.VERBOSE

# The closed vocabulary of capture groups the parser understands. Any other
# named group in a rule (e.g. "crc") is ignored.
CAPTURE_GROUPS: tuple[str, ...] = (
    "series_name",
    "series_num",
    "season_num",
    "ep_num",
    "extra_ep_num",
    "ep_ab_num",
    "extra_ab_ep_num",
    "extra_info",
    "release_group",
    "air_date",
    "version",
)

_SELF_TEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["string"],
    "properties": {
        "string": {"type": "string"},
        "match": {"type": "boolean"},
        "groups": {"type": "object", "additionalProperties": {"type": "string"}},
    },
    "additionalProperties": False,
}

_RULE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["name", "regex"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "regex": {"type": "string", "minLength": 1},
        "tests": {"type": "array", "items": _SELF_TEST_SCHEMA},
    },
    "additionalProperties": False,
}

CATALOG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["pattern_sets"],
    "properties": {
        "pattern_sets": {
            "type": "object",
            "minProperties": 1,
            "additionalProperties": {
                "type": "object",
                "required": ["rules"],
                "properties": {
                    "description": {"type": "string"},
                    "rules": {"type": "array", "items": _RULE_SCHEMA},
                },
                "additionalProperties": False,
            },
        },
    },
}


class CatalogError(ValueError):
    """Raised when a pattern catalog cannot be loaded or fails verification."""


@dataclass(frozen=True)
class RuleSelfTest:
    string: str
    should_match: bool = True
    groups: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PatternRule:
    """A named regular expression with its bundled self-tests."""

    name: str
    pattern: re.Pattern[str]
    tests: tuple[RuleSelfTest, ...] = ()

    def match(self, text: str) -> dict[str, str] | None:
        """Fully match ``text`` and return the non-empty vocabulary captures."""
        match = self.pattern.fullmatch(text)
        if match is None:
            return None
        captured = match.groupdict()
        return {name: captured[name] for name in CAPTURE_GROUPS if captured.get(name)}

    def self_test_failures(self) -> list[str]:
        failures: list[str] = []
        for test in self.tests:
            match = self.pattern.fullmatch(test.string)
            if match is None:
                if test.should_match:
                    failures.append(f"{self.name}: '{test.string}' should match but did not")
                continue
            if not test.should_match:
                failures.append(f"{self.name}: '{test.string}' should not match but did")
                continue

            captured = match.groupdict()
            for group, expected in test.groups.items():
                if group not in captured:
                    failures.append(f"{self.name}: pattern has no group '{group}'")
                    continue
                actual = captured[group] or ""
                if actual != expected:
                    failures.append(
                        f"{self.name}: '{test.string}' captured {group}={actual!r}, expected {expected!r}"
                    )
        return failures


def compile_rule(definition: Mapping[str, Any]) -> PatternRule:
    """Build a :class:`PatternRule` from a ``{name, regex, tests}`` mapping."""
    name = str(definition.get("name") or "")
    if not name:
        raise CatalogError("Pattern rules must define a non-empty 'name'")
    regex = definition.get("regex")
    if not isinstance(regex, str) or not regex.strip():
        raise CatalogError(f"Pattern rule '{name}' must define a 'regex' string")
    try:
        pattern = re.compile(regex, REGEX_FLAGS)
    except re.error as exc:
        raise CatalogError(f"Pattern rule '{name}' has an invalid regex: {exc}") from exc

    tests = tuple(
        RuleSelfTest(
            string=str(test["string"]),
            should_match=bool(test.get("match", True)),
            groups={str(key): str(value) for key, value in (test.get("groups") or {}).items()},
        )
        for test in definition.get("tests") or []
    )
    return PatternRule(name=name, pattern=pattern, tests=tests)


class PatternCatalog(Sequence[PatternRule]):
    """Immutable, priority-ordered sequence of pattern rules."""

    def __init__(self, rules: Iterable[PatternRule], *, name: str = "custom", verify: bool = True) -> None:
        self.name = name
        self._rules: tuple[PatternRule, ...] = tuple(rules)

        seen: set[str] = set()
        for rule in self._rules:
            if rule.name in seen:
                raise CatalogError(f"Duplicate pattern rule '{rule.name}' in catalog '{name}'")
            seen.add(rule.name)

        if verify:
            self.verify()

    @classmethod
    def from_definitions(
        cls,
        definitions: Iterable[Mapping[str, Any]],
        *,
        name: str = "custom",
        verify: bool = True,
    ) -> PatternCatalog:
        return cls((compile_rule(definition) for definition in definitions), name=name, verify=verify)

    def verify(self) -> None:
        """Run every rule's self-tests, raising :class:`CatalogError` on any failure."""
        failures = [failure for rule in self._rules for failure in rule.self_test_failures()]
        if failures:
            raise CatalogError(
                f"Pattern catalog '{self.name}' failed {len(failures)} self-test(s):\n  " + "\n  ".join(failures)
            )

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self._rules)

    def rule(self, name: str) -> PatternRule:
        for rule in self._rules:
            if rule.name == name:
                return rule
        raise KeyError(name)

    @overload
    def __getitem__(self, index: int) -> PatternRule: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[PatternRule, ...]: ...

    def __getitem__(self, index: int | slice) -> PatternRule | tuple[PatternRule, ...]:
        return self._rules[index]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[PatternRule]:
        return iter(self._rules)

    def __repr__(self) -> str:
        return f"PatternCatalog(name={self.name!r}, rules={len(self._rules)})"


@dataclass
class PatternSetData:
    """Raw rule definitions of one pattern set."""

    description: str = ""
    rules: list[dict[str, Any]] = field(default_factory=list)


def _format_schema_path(path: Sequence[Any]) -> str:
    if not path:
        return "<root>"
    parts: list[str] = []
    for element in path:
        if isinstance(element, int):
            parts.append(f"[{element}]")
        else:
            parts.append(f".{element}" if parts else str(element))
    return "".join(parts)


def validate_catalog_data(data: Mapping[str, Any]) -> list[str]:
    """Return schema violations for raw catalog data (empty when valid)."""
    validator = Draft7Validator(CATALOG_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda error: list(error.absolute_path))
    return [f"{_format_schema_path(error.absolute_path)}: {error.message}" for error in errors]


@lru_cache
def _load_raw_pattern_data(path: Path | None) -> dict[str, PatternSetData]:
    try:
        if path is None:
            with resources.as_file(resources.files(__package__) / PATTERNS_RESOURCE) as resource_path:
                data = load_yaml_file(resource_path, expand=False)
        else:
            data = load_yaml_file(path, expand=False)
    except (OSError, ValueError) as exc:
        raise CatalogError(f"Unable to read pattern catalog {path or PATTERNS_RESOURCE}: {exc}") from exc

    problems = validate_catalog_data(data)
    if problems:
        raise CatalogError(f"Invalid pattern catalog {path or PATTERNS_RESOURCE}:\n  " + "\n  ".join(problems))

    return {
        str(set_name): PatternSetData(
            description=str(value.get("description", "")),
            rules=list(value["rules"]),
        )
        for set_name, value in data["pattern_sets"].items()
    }


def load_pattern_set_data(path: Path | None = None) -> dict[str, PatternSetData]:
    """Load the raw pattern sets from ``path`` (the built-in file by default).

    Each call returns a private copy of the cached data.
    """
    return deepcopy(_load_raw_pattern_data(path))


def available_pattern_sets(path: Path | None = None) -> list[str]:
    return list(load_pattern_set_data(path))


def load_catalog(
    pattern_sets: Sequence[str] | str = DEFAULT_PATTERN_SETS,
    *,
    verify: bool = True,
    path: Path | None = None,
) -> PatternCatalog:
    """Build a catalog from the named pattern sets, in the given order."""
    if isinstance(pattern_sets, str):
        pattern_sets = [pattern_sets]
    if not pattern_sets:
        raise CatalogError("At least one pattern set must be selected")

    data = load_pattern_set_data(path)
    definitions: list[dict[str, Any]] = []
    for set_name in pattern_sets:
        if set_name not in data:
            available = ", ".join(sorted(data))
            raise CatalogError(f"Unknown pattern set '{set_name}' (available: {available})")
        definitions.extend(data[set_name].rules)

    catalog = PatternCatalog.from_definitions(definitions, name="+".join(pattern_sets), verify=verify)
    LOGGER.debug(
        render_fields_block(
            "Pattern Catalog Loaded",
            {
                "Catalog": catalog.name,
                "Rules": len(catalog),
                "Verified": verify,
            },
        )
    )
    return catalog
