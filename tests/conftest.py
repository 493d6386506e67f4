"""Pytest configuration and shared fixtures for the recoder test suite.

This module registers the test markers and Hypothesis profiles and provides
fixtures shared across the suite.
"""

import io
import logging
import os
from pathlib import Path
from typing import Generator

import pytest
from hypothesis import Phase, Verbosity, settings

from recoder.codec_registry import CodecRegistry
from recoder.logging_utils import RecipeContextFilter

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=50)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


class RecordingSink:
    """Text sink that keeps every individual write."""

    def __init__(self) -> None:
        self.writes: list[str] = []
        self.closed = False
        self.flushes = 0

    def write(self, text: str) -> int:
        self.writes.append(text)
        return len(text)

    def flush(self) -> None:
        self.flushes += 1

    def close(self) -> None:
        self.closed = True

    def getvalue(self) -> str:
        return "".join(self.writes)


@pytest.fixture(autouse=True)
def restore_logging() -> Generator[None, None, None]:
    """Undo root logger changes made by CLI entry points."""
    root_logger = logging.getLogger()
    root_level = root_logger.level
    package_level = logging.getLogger("recoder").level
    yield
    for handler in list(root_logger.handlers):
        if any(isinstance(log_filter, RecipeContextFilter) for log_filter in handler.filters):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(root_level)
    logging.getLogger("recoder").setLevel(package_level)


@pytest.fixture
def recording_sink() -> RecordingSink:
    """Provide a sink that records each write separately."""
    return RecordingSink()


@pytest.fixture
def builtin_registry() -> CodecRegistry:
    """Provide a private registry with the built-in codecs and no plugin discovery."""
    return CodecRegistry(include_builtins=True, discover=False)


@pytest.fixture
def empty_registry() -> CodecRegistry:
    """Provide a private registry with no codecs at all."""
    return CodecRegistry(include_builtins=False, discover=False)


@pytest.fixture
def text_stream() -> io.StringIO:
    """Provide a multi-line text stream."""
    return io.StringIO("first line\nsecond line\nthird line\n")


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Run the test inside an empty directory with no recoder configuration in scope."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("RECODER_CONFIG", raising=False)
    yield workdir
