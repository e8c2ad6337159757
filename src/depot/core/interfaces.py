"""Protocol interfaces and errors shared by container implementations."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


class ContainerError(RuntimeError):
    """Base class for errors raised by the container."""


class NotFoundError(ContainerError, LookupError):
    """Raised when no registration or accessor can produce a service."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Service {name} not defined")
        self.name = name


class InvalidArgumentError(ContainerError, ValueError):
    """Raised when reading a parameter that was never set."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Parameter {name} not set")
        self.name = name


@runtime_checkable
class ContainerInterface(Protocol):
    """Read-only view of a container as seen by consuming code."""

    def get(self, name: str) -> Any:
        """Return the service registered under ``name``."""
        raise NotImplementedError

    def has(self, name: str) -> bool:
        """Return ``True`` when ``name`` can be resolved."""
        raise NotImplementedError


__all__ = [
    "ContainerError",
    "ContainerInterface",
    "InvalidArgumentError",
    "NotFoundError",
]
