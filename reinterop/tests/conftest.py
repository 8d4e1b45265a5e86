"""Unit tests configuration file."""

import os

import pytest

from reinterop.generator import GenerationContext, parse

GENERATOR_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "generator")


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def context():
    return GenerationContext()


@pytest.fixture
def geo(context):
    """Types declared in geo.facts, by name."""
    with open(os.path.join(GENERATOR_DIR, "geo.facts"), encoding="utf-8") as f:
        facts = parse(f.read(), context)
    return {fact.name: fact for fact in facts}
