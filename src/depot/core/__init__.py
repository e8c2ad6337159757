"""Container core: naming, resolution, configuration and logging."""

from .config import (
    AppSettings,
    LoggingSettings,
    clear_settings_cache,
    load_app_settings,
)
from .container import Container, describe_type, service
from .interfaces import (
    ContainerError,
    ContainerInterface,
    InvalidArgumentError,
    NotFoundError,
)
from .logging import configure_logging
from .naming import normalize, underscore

__all__ = [
    "AppSettings",
    "Container",
    "ContainerError",
    "ContainerInterface",
    "InvalidArgumentError",
    "LoggingSettings",
    "NotFoundError",
    "clear_settings_cache",
    "configure_logging",
    "describe_type",
    "load_app_settings",
    "normalize",
    "service",
    "underscore",
]
