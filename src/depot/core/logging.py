"""Logging configuration helpers."""

from __future__ import annotations

import logging.config
from typing import Any

from .config import LoggingSettings

CONTAINER_LOGGER = "depot"


def _structured_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment emitting ``key=value`` log lines."""
    return {
        "format": "ts={asctime} level={levelname} logger={name} msg={message!r}",
        "style": "{",
    }


def _plain_formatter() -> dict[str, Any]:
    """Return a dictConfig fragment for human readable logs."""
    return {
        "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
    }


def build_logging_config(settings: LoggingSettings) -> dict[str, Any]:
    """Translate ``settings`` into a :func:`logging.config.dictConfig` mapping.

    The console handler itself does not filter; the root logger and the
    ``depot`` logger each apply their own level, so container events can be
    traced at ``DEBUG`` while the rest of the application stays at ``INFO``.
    """
    root_level = settings.level.upper()
    container_level = (settings.container_level or settings.level).upper()
    formatter = _structured_formatter() if settings.structured else _plain_formatter()

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            },
        },
        "loggers": {
            CONTAINER_LOGGER: {"level": container_level, "propagate": True},
        },
        "root": {"handlers": ["console"], "level": root_level},
    }


def configure_logging(settings: LoggingSettings) -> None:
    """Configure application logging according to provided settings."""
    logging.config.dictConfig(build_logging_config(settings))


__all__ = ["CONTAINER_LOGGER", "build_logging_config", "configure_logging"]
