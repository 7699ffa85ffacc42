# tests/test_settings.py
"""Tests for settings loading and logging setup."""

from __future__ import annotations

import logging

from chorus_timeline.core.logging_config import PACKAGE_LOGGER, configure_logging
from chorus_timeline.core.settings import Settings


def test_defaults() -> None:
    """Defaults match the documented engine behaviour."""
    config = Settings()

    assert config.view_archived_channels is False
    assert config.strip_post_metadata is True
    assert config.opengraph_embed_type == "opengraph"


def test_environment_overrides(monkeypatch) -> None:
    """Environment variables override defaults."""
    monkeypatch.setenv("VIEW_ARCHIVED_CHANNELS", "true")
    monkeypatch.setenv("STRIP_POST_METADATA", "false")
    monkeypatch.setenv("OPENGRAPH_EMBED_TYPE", "preview")

    config = Settings()

    assert config.view_archived_channels is True
    assert config.strip_post_metadata is False
    assert config.opengraph_embed_type == "preview"


def test_effective_log_level() -> None:
    """Debug mode forces DEBUG; otherwise the configured level is upper-cased."""
    assert Settings(LOG_LEVEL="warning").effective_log_level == "WARNING"
    assert Settings(LOG_LEVEL="warning", DEBUG=True).effective_log_level == "DEBUG"


def test_configure_logging_attaches_one_handler() -> None:
    """Repeated configuration adjusts the level without stacking handlers."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    original_handlers = list(logger.handlers)
    original_level = logger.level
    try:
        configure_logging(Settings(LOG_LEVEL="INFO"))
        configured = configure_logging(Settings(DEBUG=True))

        added = [h for h in configured.handlers if h not in original_handlers]
        assert configured is logger
        assert len(added) == 1
        assert configured.level == logging.DEBUG
    finally:
        logger.handlers = original_handlers
        logger.setLevel(original_level)


def test_configure_logging_reports_app_name(caplog) -> None:
    """The configured application name appears in the setup message."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    original_handlers = list(logger.handlers)
    original_level = logger.level
    caplog.set_level(logging.DEBUG, logger=PACKAGE_LOGGER)
    try:
        configure_logging(Settings(APP_NAME="Timeline Test", DEBUG=True))

        assert "Logging configured for Timeline Test at DEBUG" in caplog.text
    finally:
        logger.handlers = original_handlers
        logger.setLevel(original_level)
