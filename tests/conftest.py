"""Pytest configuration and fixtures for xmlit tests."""

import pytest

from xmlit import DictLoader, Environment, RenderConfig
from xmlit.environment import terminal

ZOO_SOURCE = """
<zoo name="Lorem Ipsum" openingYear={2013}>
    <cat>{name}</cat>
</zoo>
"""


@pytest.fixture(autouse=True)
def plain_errors(monkeypatch):
    """Keep error messages free of ANSI codes regardless of the terminal."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def env():
    """Create a basic xmlit Environment (compact output)."""
    return Environment()


@pytest.fixture
def pretty_env():
    """Create an Environment that renders pretty output by default."""
    return Environment(config=RenderConfig.pretty())


@pytest.fixture
def pretty():
    return RenderConfig.pretty()


@pytest.fixture
def zoo(env):
    """The zoo template from the README."""
    return env.from_string(ZOO_SOURCE, name="zoo.xml")


@pytest.fixture
def env_with_loader():
    """Create an Environment with a DictLoader holding a small feed."""
    loader = DictLoader(
        {
            "feed.xml": "<rss version={'2.0'}><channel>{..items}</channel></rss>",
            "item.xml": "<item><title>{title}</title><link>{?link}</link></item>",
            "broken.xml": "<item>\n  <title>x</name>\n</item>",
        }
    )
    return Environment(loader=loader)
