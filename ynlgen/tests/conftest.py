"""Unit tests configuration file."""

import os

import pytest

from ynlgen.generator import parse_file

NLCTRL_YAML = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator", "nlctrl.yaml")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def nlctrl_path():
    return NLCTRL_YAML


@pytest.fixture
def nlctrl():
    """The generic netlink control family spec."""
    return parse_file(NLCTRL_YAML)
