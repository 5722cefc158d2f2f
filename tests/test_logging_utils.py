from __future__ import annotations

import logging

import pytest

from tvnaming.logging_utils import (
    LOG_FORMAT,
    LogBlockBuilder,
    _coerce_items,
    _stringify,
    configure_logging,
    render_fields_block,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if getattr(handler, "_tvnaming_handler", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestCoerceItems:
    """Tests for _coerce_items helper function."""

    def test_coerce_items_with_dict(self):
        assert _coerce_items({"key1": "value1", "key2": "value2"}) == [("key1", "value1"), ("key2", "value2")]

    def test_coerce_items_preserves_order_in_sequence(self):
        fields = [("z", 1), ("a", 2), ("m", 3)]
        assert _coerce_items(fields) == [("z", 1), ("a", 2), ("m", 3)]

    def test_coerce_items_with_empty_input(self):
        assert _coerce_items({}) == []
        assert _coerce_items([]) == []


class TestStringify:
    """Tests for _stringify helper function."""

    def test_stringify_with_none(self):
        assert _stringify(None) == ""

    def test_stringify_strips_strings(self):
        assert _stringify("  padded  ") == "padded"

    def test_stringify_with_sequences(self):
        assert _stringify((1, 2)) == "1, 2"
        assert _stringify(["a", None, "b"]) == "a, , b"

    def test_stringify_with_other_values(self):
        assert _stringify(42) == "42"


class TestRenderFieldsBlock:
    """Tests for render_fields_block."""

    def test_block_layout(self):
        block = render_fields_block("Pattern Catalog Loaded", {"Catalog": "standard", "Rules": 13})
        assert block.splitlines() == [
            "",
            "Pattern Catalog Loaded",
            "----------------------",
            "    Catalog : standard",
            "    Rules   : 13",
        ]

    def test_without_top_padding(self):
        block = render_fields_block("Title", [("Key", "value")], pad_top=False)
        assert block.splitlines()[0] == "Title"

    def test_long_values_wrap(self):
        builder = LogBlockBuilder("Title", wrap_width=50, pad_top=False)
        builder.add_fields({"Name": "word " * 20})
        lines = builder.render().splitlines()
        assert len(lines) > 3
        assert lines[3].startswith("    " + " " * 8 + "  ")

    def test_empty_fields(self):
        assert render_fields_block("Title", {}, pad_top=False) == "Title\n-----"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_installs_console_handler(self, restore_root_logger):
        configure_logging("debug")

        handlers = [h for h in restore_root_logger.handlers if getattr(h, "_tvnaming_handler", False)]
        assert len(handlers) == 1
        assert handlers[0].formatter._fmt == LOG_FORMAT
        assert restore_root_logger.level == logging.DEBUG

    def test_repeated_calls_replace_handlers(self, restore_root_logger):
        configure_logging("INFO")
        configure_logging("WARNING")

        handlers = [h for h in restore_root_logger.handlers if getattr(h, "_tvnaming_handler", False)]
        assert len(handlers) == 1
        assert restore_root_logger.level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "nested" / "tvnaming.log"
        configure_logging(logging.INFO, log_file)

        logging.getLogger("tvnaming.test").info("hello from the test")

        assert "hello from the test" in log_file.read_text(encoding="utf-8")

    def test_unknown_level(self, restore_root_logger):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("chatty")
