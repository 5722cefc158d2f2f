from __future__ import annotations

import datetime as dt

import pytest

from tvnaming.catalog import load_catalog
from tvnaming.parser import NameParser

FIXED_TODAY = dt.date(2020, 6, 15)


@pytest.fixture
def standard_parser() -> NameParser:
    return NameParser(load_catalog(), today=FIXED_TODAY)


@pytest.fixture
def anime_parser() -> NameParser:
    return NameParser(load_catalog(["anime"]), anime=True, today=FIXED_TODAY)


@pytest.fixture
def clean_env(monkeypatch) -> None:
    for name in (
        "TVNAMING_PATTERN_SETS",
        "TVNAMING_ANIME",
        "TVNAMING_VERIFY_PATTERNS",
        "TVNAMING_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
