"""Settings models and the environment/dotenv loader."""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle brace-style structured log lines"
    )
    container_level: str | None = Field(
        default=None,
        description="Level for container events; follows the root level when unset",
    )


class AppSettings(BaseModel):
    """Aggregated settings for an application built around a container."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Values copied into the container parameter store",
    )


ENV_PREFIX = "DEPOT_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _coerce(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    if value == "":
        return None
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def _collect_env_values(
    env_file: Path | str | None, include_environment: bool
) -> dict[str, Any]:
    """Load prefixed values from an optional env file and the process environment."""
    file_values: dict[str, Any] = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values: dict[str, Any] = {}
    if include_environment:
        env_values = {
            key: value
            for key, value in os.environ.items()
            if key.startswith(ENV_PREFIX)
        }

    collected: dict[str, Any] = {}
    for key, value in {**file_values, **env_values}.items():
        path = _normalize_key(key)
        if not path:
            continue
        _merge_into_tree(collected, path, _coerce(value))
    return collected


@lru_cache(maxsize=4)
def _load_environment_settings(
    env_file: Path | str | None, include_environment: bool
) -> AppSettings:
    return AppSettings.model_validate(
        _collect_env_values(env_file, include_environment)
    )


def _apply_overrides(
    base: dict[str, Any], overrides: dict[str, Any]
) -> dict[str, Any]:
    """Merge keyword overrides into ``base``, one level deep for mappings."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, BaseModel):
            value = value.model_dump(exclude_unset=True)
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def load_app_settings(
    env_file: Path | str | None = None,
    *,
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load settings, applying the env file, the environment and overrides.

    ``DEPOT_LOGGING__LEVEL=DEBUG`` sets ``settings.logging.level`` and
    ``DEPOT_PARAMETERS__DATABASE_URL=...`` adds a ``database_url`` parameter.
    Keyword overrides are merged on top, so ``parameters={"debug": True}``
    adds to the loaded parameters instead of replacing them. The environment
    is read once per ``(env_file, include_environment)`` pair; call
    :func:`clear_settings_cache` to pick up changes.
    """
    settings = _load_environment_settings(env_file, include_environment)
    if not overrides:
        return settings
    return AppSettings.model_validate(
        _apply_overrides(settings.model_dump(), overrides)
    )


def clear_settings_cache() -> None:
    """Forget previously loaded environment values."""
    _load_environment_settings.cache_clear()


__all__ = [
    "AppSettings",
    "ENV_PREFIX",
    "LoggingSettings",
    "clear_settings_cache",
    "load_app_settings",
]
