"""
Tests for environment configuration and logging setup.
"""

import json
import logging

import pytest

from pagehistory.config import DEFAULT_PROVISIONAL_TICK, DEFAULT_UNKNOWN_TEXT, ReplayConfig
from pagehistory.logging_config import get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_config_defaults(monkeypatch):
    """Without env vars the defaults apply."""
    monkeypatch.delenv("PAGEHISTORY_UNKNOWN_TEXT", raising=False)
    monkeypatch.delenv("PAGEHISTORY_PROVISIONAL_TICK", raising=False)

    cfg = ReplayConfig.from_env()

    assert cfg.unknown_text == DEFAULT_UNKNOWN_TEXT
    assert cfg.provisional_tick == DEFAULT_PROVISIONAL_TICK


def test_config_from_env(monkeypatch):
    """Env vars override defaults."""
    monkeypatch.setenv("PAGEHISTORY_UNKNOWN_TEXT", "(lost)")
    monkeypatch.setenv("PAGEHISTORY_PROVISIONAL_TICK", "30")

    cfg = ReplayConfig.from_env()

    assert cfg.unknown_text == "(lost)"
    assert cfg.provisional_tick == 30


def test_config_ignores_bad_tick(monkeypatch):
    """Invalid integers fall back to the default."""
    monkeypatch.setenv("PAGEHISTORY_PROVISIONAL_TICK", "soon")

    assert ReplayConfig.from_env().provisional_tick == DEFAULT_PROVISIONAL_TICK

    monkeypatch.setenv("PAGEHISTORY_PROVISIONAL_TICK", "-5")

    assert ReplayConfig.from_env().provisional_tick == DEFAULT_PROVISIONAL_TICK


def test_config_rejects_non_positive_tick():
    """provisional_tick must be positive."""
    with pytest.raises(ValueError):
        ReplayConfig(provisional_tick=0)


def test_setup_logging_text(restore_root_logger, monkeypatch):
    """Text format uses the configured level."""
    monkeypatch.setenv("PAGEHISTORY_LOG_LEVEL", "debug")

    setup_logging(log_format="text")

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1


def test_setup_logging_json(restore_root_logger, capsys):
    """JSON format renders records with trace_id."""
    setup_logging(level="INFO", log_format="json")

    get_logger("pagehistory.test", trace_id="page-1").info("hello")

    record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert record["message"] == "hello"
    assert record["trace_id"] == "page-1"
    assert record["level"] == "INFO"


def test_get_logger_default_trace_id():
    """Loggers without a trace id carry N/A."""
    adapter = get_logger("pagehistory.test")

    assert adapter.extra == {"trace_id": "N/A"}
