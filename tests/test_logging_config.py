"""Tests for loguru setup."""

import json

from loguru import logger

from chakra.logging_config import configure_from_settings, get_logger, setup_logging
from chakra.settings import LoggingSettings


def test_json_log_file(tmp_path):
    """JSON mode writes one object per line with the bound extras."""
    log_file = tmp_path / "logs" / "chakra.log"
    setup_logging(level="INFO", json_format=True, log_file=log_file)
    try:
        get_logger("export").info("wrote report")
        logger.debug("hidden at INFO")
    finally:
        logger.remove()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    assert len(lines) == 1
    payload = json.loads(lines[0])
    assert payload["message"] == "wrote report"
    assert payload["level"] == "INFO"
    assert payload["name"] == "export"


def test_text_log_file(tmp_path):
    log_file = tmp_path / "chakra.log"
    setup_logging(level="DEBUG", log_file=log_file)
    try:
        logger.debug("ray fallback")
    finally:
        logger.remove()
    assert "ray fallback" in log_file.read_text(encoding="utf-8")


def test_configure_from_settings(tmp_path):
    log_file = tmp_path / "settings.log"
    configure_from_settings(LoggingSettings(level="warning", log_file=log_file))
    try:
        logger.info("too quiet")
        logger.warning("loud enough")
    finally:
        logger.remove()
    content = log_file.read_text(encoding="utf-8")
    assert "loud enough" in content
    assert "too quiet" not in content
