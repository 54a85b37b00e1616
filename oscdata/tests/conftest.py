"""Shared pytest configuration for the oscdata suites."""

import pytest
from click.testing import CliRunner


def pytest_configure(config):
    """Hide file paths in the terminal report."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def runner():
    return CliRunner()
