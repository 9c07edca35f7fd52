#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the redactmd test suite."""

import logging
import os

import pytest
from hypothesis import Phase, Verbosity, settings

from redactmd.options import MarkdownParserOptions
from redactmd.restoration_registry import create_default_registry

# Hypothesis profiles, selected with HYPOTHESIS_PROFILE
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def redact_options() -> MarkdownParserOptions:
    """Parser options for reading a source document with redaction."""
    return MarkdownParserOptions(redact=True)


@pytest.fixture
def placeholder_options() -> MarkdownParserOptions:
    """Parser options for reading a redacted copy."""
    return MarkdownParserOptions(recognize_placeholders=True)


@pytest.fixture
def registry():
    """A fresh registry holding the built-in restoration methods."""
    return create_default_registry()


@pytest.fixture
def sample_source() -> str:
    """A source document with links and images in several block types."""
    return (
        "# Guide to [the site](http://example.com)\n"
        "\n"
        "Read the [manual](http://example.com/manual \"Manual\") first.\n"
        "\n"
        "- item with ![logo](http://example.com/logo.png)\n"
        "- plain item\n"
        "\n"
        "> Quoted [reference](http://example.com/ref)\n"
    )


@pytest.fixture(autouse=True)
def _reset_root_logging():
    """Restore root logger handlers changed by CLI tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
