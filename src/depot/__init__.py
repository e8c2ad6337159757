"""depot: a small lazy service container."""

from depot.core import (
    AppSettings,
    Container,
    ContainerError,
    ContainerInterface,
    InvalidArgumentError,
    LoggingSettings,
    NotFoundError,
    clear_settings_cache,
    configure_logging,
    load_app_settings,
    normalize,
    service,
    underscore,
)

__version__ = "0.1.0"

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
    "load_app_settings",
    "normalize",
    "service",
    "underscore",
]
