"""
Settings and logging configuration tests
"""

import logging

from pythonjsonlogger.json import JsonFormatter

from nursery_server.config.logging import LOGGER_NAME, build_logging_config, setup_logging
from nursery_server.config.settings import Settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("NURSERY_PERIOD_LEAD_DAYS", "30")
    monkeypatch.setenv("NURSERY_LOG_JSON", "true")

    cfg = Settings()

    assert cfg.period_lead_days == 30
    assert cfg.log_json is True
    assert cfg.api_prefix == "/api/v1"


def test_text_logging_by_default():
    config = build_logging_config(Settings(log_json=False, log_level="debug"))

    assert config["handlers"]["console"]["formatter"] == "text"
    assert config["loggers"][LOGGER_NAME]["level"] == "DEBUG"


def test_json_logging():
    logger = setup_logging(Settings(log_json=True))

    assert logger.name == LOGGER_NAME
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)
    setup_logging(Settings())
    assert not isinstance(logging.getLogger(LOGGER_NAME).handlers[0].formatter, JsonFormatter)
