from __future__ import annotations

from pathlib import Path

import pytest

from tvnaming.catalog import CatalogError
from tvnaming.config import AppConfig, ConfigError, build_parser, load_config, validate_config_data


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.mark.usefixtures("clean_env")
class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self):
        config = load_config()
        assert config == AppConfig()
        assert config.parser.pattern_sets == ["standard"]
        assert config.parser.verify_patterns is True
        assert config.parser.anime is False
        assert config.logging.level == "INFO"
        assert config.logging.file is None

    def test_values_from_file(self, tmp_path):
        path = _write(
            tmp_path / "tvnaming.yaml",
            """
parser:
  pattern_sets: [anime, standard]
  anime: true
  verify_patterns: false
logging:
  level: debug
  file: logs/tvnaming.log
""",
        )
        config = load_config(path)
        assert config.parser.pattern_sets == ["anime", "standard"]
        assert config.parser.anime is True
        assert config.parser.verify_patterns is False
        assert config.logging.level == "DEBUG"
        assert config.logging.file == Path("logs/tvnaming.log")

    def test_environment_variables_in_file_are_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PATTERN_DIR", str(tmp_path))
        path = _write(tmp_path / "tvnaming.yaml", "parser:\n  patterns_file: ${PATTERN_DIR}/mine.yaml\n")
        assert load_config(path).parser.patterns_file == tmp_path / "mine.yaml"

    def test_empty_file(self, tmp_path):
        assert load_config(_write(tmp_path / "tvnaming.yaml", "")) == AppConfig()

    def test_unknown_key(self, tmp_path):
        path = _write(tmp_path / "tvnaming.yaml", "parser:\n  patterns: [standard]\n")
        with pytest.raises(ConfigError, match="Additional properties are not allowed"):
            load_config(path)

    def test_empty_pattern_sets(self, tmp_path):
        path = _write(tmp_path / "tvnaming.yaml", "parser:\n  pattern_sets: []\n")
        with pytest.raises(ConfigError, match="parser.pattern_sets"):
            load_config(path)

    def test_wrong_type(self, tmp_path):
        path = _write(tmp_path / "tvnaming.yaml", "parser:\n  anime: sometimes\n")
        with pytest.raises(ConfigError, match="parser.anime"):
            load_config(path)

    def test_unknown_log_level(self, tmp_path):
        path = _write(tmp_path / "tvnaming.yaml", "logging:\n  level: loud\n")
        with pytest.raises(ConfigError, match="logging.level"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Unable to load configuration"):
            load_config(tmp_path / "absent.yaml")

    def test_top_level_must_be_mapping(self, tmp_path):
        path = _write(tmp_path / "tvnaming.yaml", "- parser\n")
        with pytest.raises(ConfigError, match="Unable to load configuration"):
            load_config(path)


@pytest.mark.usefixtures("clean_env")
class TestEnvironmentOverrides:
    """Environment variables override file values."""

    def test_pattern_sets(self, monkeypatch):
        monkeypatch.setenv("TVNAMING_PATTERN_SETS", "anime, standard")
        assert load_config().parser.pattern_sets == ["anime", "standard"]

    def test_empty_pattern_sets_are_ignored(self, monkeypatch):
        monkeypatch.setenv("TVNAMING_PATTERN_SETS", " , ")
        assert load_config().parser.pattern_sets == ["standard"]

    def test_booleans(self, monkeypatch, tmp_path):
        path = _write(tmp_path / "tvnaming.yaml", "parser:\n  anime: false\n  verify_patterns: true\n")
        monkeypatch.setenv("TVNAMING_ANIME", "yes")
        monkeypatch.setenv("TVNAMING_VERIFY_PATTERNS", "0")
        config = load_config(path)
        assert config.parser.anime is True
        assert config.parser.verify_patterns is False

    def test_unrecognised_boolean_is_ignored(self, monkeypatch):
        monkeypatch.setenv("TVNAMING_ANIME", "maybe")
        assert load_config().parser.anime is False

    def test_log_level(self, monkeypatch):
        monkeypatch.setenv("TVNAMING_LOG_LEVEL", "warning")
        assert load_config().logging.level == "WARNING"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("TVNAMING_LOG_LEVEL", "chatty")
        with pytest.raises(ConfigError, match="TVNAMING_LOG_LEVEL"):
            load_config()


class TestValidateConfigData:
    def test_valid(self):
        assert validate_config_data({"parser": {"pattern_sets": ["standard"]}, "logging": {"level": "INFO"}}) == []

    def test_issue_paths(self):
        issues = validate_config_data({"parser": {"pattern_sets": ["standard", 3]}})
        assert [issue.path for issue in issues] == ["parser.pattern_sets[1]"]
        assert str(issues[0]).startswith("parser.pattern_sets[1]: ")


@pytest.mark.usefixtures("clean_env")
class TestBuildParser:
    """Tests for build_parser."""

    def test_default_parser(self):
        parser = build_parser(load_config())
        assert parser.catalog.name == "standard"
        assert parser.anime is False

    def test_combined_sets(self):
        config = AppConfig()
        config.parser.pattern_sets = ["anime", "standard"]
        config.parser.anime = True
        parser = build_parser(config)
        assert parser.catalog.name == "anime+standard"
        assert parser.anime is True

    def test_unknown_pattern_set(self):
        config = AppConfig()
        config.parser.pattern_sets = ["standard", "cartoons"]
        with pytest.raises(ConfigError, match="cartoons"):
            build_parser(config)

    def test_custom_patterns_file_failing_self_tests(self, tmp_path):
        patterns = _write(
            tmp_path / "patterns.yaml",
            """
pattern_sets:
  mine:
    rules:
      - name: broken
        regex: '(?P<ep_num>\\d+)'
        tests:
          - string: "abc"
""",
        )
        config = AppConfig()
        config.parser.pattern_sets = ["mine"]
        config.parser.patterns_file = patterns
        with pytest.raises(CatalogError, match="broken"):
            build_parser(config)

        config.parser.verify_patterns = False
        assert build_parser(config).catalog.names == ("broken",)
