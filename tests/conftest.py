"""Shared fixtures for chatterbox tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

_SETTINGS_ENV_VARS = (
    "CHATTERBOX_DEFAULT_CONFIG",
    "CHATTERBOX_DEFAULT_CONFIG_FILE",
    "CHATTERBOX_MARKDOWN_FIXES",
    "LOG_LEVEL",
)

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove all chatterbox-related environment variables.

    Patches ``load_dotenv`` so a real ``.env`` file cannot re-inject values
    that the test explicitly removed.
    """
    monkeypatch.setattr("chatterbox.config.load_dotenv", lambda *_a, **_kw: None)
    for key in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture()
def fixtures_dir() -> Path:
    """Directory holding sample Chatterbox sources."""
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def _reset_loggers() -> Generator[None, None, None]:
    """Restore the root and package loggers after each test to prevent handler leaks."""
    loggers = [logging.getLogger(), logging.getLogger("chatterbox")]
    saved = [(logger, logger.handlers[:], logger.level) for logger in loggers]
    yield
    for logger, handlers, level in saved:
        logger.handlers = handlers
        logger.setLevel(level)
