"""
Tests for structlog setup.
"""

import json
import logging

import pytest

from app.core import logging as app_logging
from app.core.config import get_settings


@pytest.fixture(autouse=True)
def restore_root_handlers():
    """setup_logging replaces root handlers; put back pytest's own afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_is_idempotent():
    app_logging.setup_logging()
    app_logging.setup_logging()
    assert len(logging.getLogger().handlers) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_production_renders_json(monkeypatch, capsys):
    monkeypatch.setattr(get_settings(), "ENVIRONMENT", "production")
    app_logging.setup_logging()

    logging.getLogger("hotel.test").info("plain stdlib message")
    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["event"] == "plain stdlib message"
    assert record["level"] == "info"
