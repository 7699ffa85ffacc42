"""Logging setup for the timeline engine."""

from __future__ import annotations

import logging

from chorus_timeline.core.settings import Settings, settings as default_settings

PACKAGE_LOGGER = "chorus_timeline"


def configure_logging(config: Settings | None = None) -> logging.Logger:
    """Configure the package logger from settings.

    A stream handler is attached only once, so repeated calls just adjust the
    level and format.

    Args:
        config: Settings to read from. Defaults to the module-level settings.

    Returns:
        The configured package logger
    """
    config = config or default_settings
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.effective_log_level)

    formatter = logging.Formatter(config.log_format)
    handler = next(
        (h for h in logger.handlers if getattr(h, "_chorus_timeline", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._chorus_timeline = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    handler.setFormatter(formatter)
    logger.debug("Logging configured for %s at %s", config.app_name, config.effective_log_level)
    return logger
