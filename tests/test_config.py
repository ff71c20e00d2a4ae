"""Tests for environment-driven configuration."""

import pytest

from epubkit.config import DEFAULT_USER_AGENT, ParserConfig
from epubkit.errors import ConfigError, EpubError

ENV_VARS = (
    "EPUBKIT_HTTP_TIMEOUT",
    "EPUBKIT_USER_AGENT",
    "EPUBKIT_MAX_ARCHIVE_BYTES",
    "EPUBKIT_FOLLOW_REDIRECTS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ParserConfig.from_env()
    assert config == ParserConfig()
    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.http_timeout == 30.0
    assert config.follow_redirects is True


def test_no_size_limit_by_default():
    assert ParserConfig.from_env().max_archive_bytes is None


def test_overrides(monkeypatch):
    monkeypatch.setenv("EPUBKIT_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("EPUBKIT_USER_AGENT", "reader/2")
    monkeypatch.setenv("EPUBKIT_MAX_ARCHIVE_BYTES", "1024")
    monkeypatch.setenv("EPUBKIT_FOLLOW_REDIRECTS", "false")

    config = ParserConfig.from_env()
    assert config.http_timeout == 2.5
    assert config.user_agent == "reader/2"
    assert config.max_archive_bytes == 1024
    assert config.follow_redirects is False


def test_zero_disables_size_limit(monkeypatch):
    monkeypatch.setenv("EPUBKIT_MAX_ARCHIVE_BYTES", "0")
    assert ParserConfig.from_env().max_archive_bytes is None


@pytest.mark.parametrize(
    "name, value",
    [
        ("EPUBKIT_MAX_ARCHIVE_BYTES", "200MB"),
        ("EPUBKIT_MAX_ARCHIVE_BYTES", "-1"),
        ("EPUBKIT_HTTP_TIMEOUT", "soon"),
        ("EPUBKIT_HTTP_TIMEOUT", "0"),
    ],
)
def test_malformed_value_raises_config_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError, match=name.removeprefix("EPUBKIT_").lower()):
        ParserConfig.from_env()


def test_config_error_is_an_epub_error():
    assert issubclass(ConfigError, EpubError)


def test_config_is_frozen():
    config = ParserConfig()
    with pytest.raises(Exception):
        config.user_agent = "changed"
