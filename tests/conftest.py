"""Pytest configuration and shared fixtures for the pdfdelta test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path
from typing import Generator

import pytest
from fixtures.generators.pdf_test_fixtures import create_text_pdf_file
from hypothesis import Phase, Verbosity, settings
from utils import cleanup_test_dir, create_test_temp_dir

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
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
    config.addinivalue_line("markers", "pdf: Tests that create or parse real PDF documents")
    config.addinivalue_line("markers", "fuzzing: Property-based tests using Hypothesis")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test files.

    Yields
    ------
    Path
        Temporary directory path that will be cleaned up after test.

    """
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch, tmp_path_factory) -> None:
    """Keep user and repository configuration files out of the tests.

    Config discovery walks up from the working directory and falls back to
    the home directory, so both point at empty directories here.
    """
    isolated = tmp_path_factory.mktemp("config-isolation")
    monkeypatch.delenv("PDFDELTA_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(isolated))
    monkeypatch.setenv("USERPROFILE", str(isolated))
    monkeypatch.chdir(isolated)


@pytest.fixture(autouse=True)
def reset_root_logging() -> Generator[None, None, None]:
    """Restore root logger handlers changed by CLI tests."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def sample_pages() -> dict:
    """Provide baseline and revised page text for comparison tests.

    Returns
    -------
    dict
        ``baseline`` and ``revised`` lists of pages, each a list of lines.

    """
    return {
        "baseline": [["Invoice Total: 100", "Due in 30 days"]],
        "revised": [["Invoice Total: 120", "Due in 30 days"]],
    }


@pytest.fixture
def pdf_pair(temp_dir: Path, sample_pages: dict) -> tuple[Path, Path]:
    """Write the sample baseline and revised documents as PDF files."""
    baseline = create_text_pdf_file(sample_pages["baseline"], temp_dir / "baseline.pdf")
    revised = create_text_pdf_file(sample_pages["revised"], temp_dir / "revised.pdf")
    return baseline, revised
