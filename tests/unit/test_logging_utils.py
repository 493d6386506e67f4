"""Unit tests for the logging helpers."""

import logging

import pytest

from recoder.logging_utils import RecipeContextFilter, configure_logging, sanitize_for_log


def _own_handlers(root_logger):
    return [
        handler
        for handler in root_logger.handlers
        if any(isinstance(log_filter, RecipeContextFilter) for log_filter in handler.filters)
    ]


@pytest.mark.unit
class TestSanitizeForLog:
    """Tests for sanitize_for_log()."""

    def test_escapes_line_breaks(self):
        assert sanitize_for_log("a\nb\r") == "a\\nb\\r"

    def test_accepts_non_strings(self):
        assert sanitize_for_log(42) == "42"


@pytest.mark.unit
class TestRecipeContextFilter:
    """Tests for the recipe context filter."""

    def _record(self):
        return logging.LogRecord("recoder", logging.INFO, __file__, 1, "message", None, None)

    def test_sets_recipe(self):
        record = self._record()
        assert RecipeContextFilter("UTF8/XML").filter(record) is True
        assert record.recipe == "<UTF8/XML> "

    def test_empty_without_recipe(self):
        record = self._record()
        RecipeContextFilter().filter(record)
        assert record.recipe == ""


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_level_name(self):
        root_logger = configure_logging("debug")
        assert root_logger.level == logging.DEBUG
        assert logging.getLogger("recoder").level == logging.DEBUG

    def test_numeric_level(self):
        assert configure_logging(logging.ERROR).level == logging.ERROR

    def test_unknown_level_falls_back_to_warning(self):
        assert configure_logging("CHATTY").level == logging.WARNING

    def test_single_stderr_handler(self):
        root_logger = configure_logging("INFO")
        configure_logging("INFO")
        handlers = _own_handlers(root_logger)
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_log_file_receives_records(self, tmp_path):
        log_file = tmp_path / "recoder.log"
        root_logger = configure_logging("INFO", log_file=str(log_file))
        logging.getLogger("recoder.test").info("hello file")
        for handler in _own_handlers(root_logger):
            handler.flush()
            if isinstance(handler, logging.FileHandler):
                handler.close()
        content = log_file.read_text(encoding="utf-8")
        assert "Logging to file" in content
        assert "hello file" in content

    def test_unwritable_log_file_is_reported(self, tmp_path, capsys):
        missing = tmp_path / "missing" / "recoder.log"
        root_logger = configure_logging("INFO", log_file=str(missing))
        assert len(_own_handlers(root_logger)) == 1
        assert "Could not create log file" in capsys.readouterr().err

    def test_trace_format_includes_recipe(self, tmp_path):
        log_file = tmp_path / "trace.log"
        root_logger = configure_logging("DEBUG", log_file=str(log_file), trace_mode=True, recipe="UTF8/XML")
        logging.getLogger("recoder.test").debug("traced")
        for handler in _own_handlers(root_logger):
            if isinstance(handler, logging.FileHandler):
                handler.close()
        content = log_file.read_text(encoding="utf-8")
        assert "[recoder.test] <UTF8/XML> traced" in content
