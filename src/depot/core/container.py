"""Service container with lazy, memoised resolution."""

from __future__ import annotations

import functools
import inspect
import logging
import re
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, TypeVar, get_origin, get_type_hints

from .interfaces import InvalidArgumentError, NotFoundError
from .naming import lookup_key, normalize, underscore

LOGGER = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

Factory = Callable[["Container"], Any]

_SERVICE_MARKER = "__depot_service__"
_RESERVED = frozenset(
    {
        "get",
        "get_parameter",
        "get_service_ids",
        "get_return_type",
        "getParameter",
        "getServiceIds",
        "getReturnType",
    }
)
_SNAKE_ACCESSOR = re.compile(r"^get_([A-Za-z0-9]\w*)$")
_PASCAL_ACCESSOR = re.compile(r"^get([A-Z]\w*)$")
_RTYPE_FIELD = re.compile(r":rtype:\s*(\S+)")

# Lower rank wins when several accessors claim the same service.
_RANK_DECORATED = 0
_RANK_SNAKE = 1
_RANK_PASCAL = 2


def service(name: str) -> Callable[[F], F]:
    """Mark a container method as the accessor for service ``name``.

    The method name is then free-form::

        class AppContainer(Container):
            @service("mailer")
            def build_mailer(self) -> Mailer:
                return SmtpMailer(self.get_parameter("smtp_host"))
    """

    def decorator(func: F) -> F:
        setattr(func, _SERVICE_MARKER, name)
        return func

    return decorator


def describe_type(annotation: Any) -> str:
    """Return a readable descriptor for a class or type annotation."""
    if isinstance(annotation, type) and get_origin(annotation) is None:
        if annotation.__module__ == "builtins":
            return annotation.__qualname__
        return f"{annotation.__module__}.{annotation.__qualname__}"
    return str(annotation)


def _is_factory(value: Any) -> bool:
    return (
        inspect.isfunction(value)
        or inspect.ismethod(value)
        or isinstance(value, functools.partial)
    )


def _accessor_rank(attribute: str, member: Any) -> tuple[int, str] | None:
    marked = getattr(member, _SERVICE_MARKER, None)
    if marked is not None:
        return _RANK_DECORATED, normalize(marked)
    match = _SNAKE_ACCESSOR.match(attribute)
    if match:
        return _RANK_SNAKE, normalize(match.group(1))
    match = _PASCAL_ACCESSOR.match(attribute)
    if match:
        return _RANK_PASCAL, normalize(match.group(1))
    return None


def _takes_no_arguments(cls: type, attribute: str, member: Any) -> bool:
    """Return ``True`` when ``member`` can be called without arguments."""
    try:
        parameters = list(inspect.signature(member).parameters.values())
    except (TypeError, ValueError):
        return False
    if not isinstance(inspect.getattr_static(cls, attribute), staticmethod):
        parameters = parameters[1:]
    return all(
        parameter.default is not parameter.empty
        or parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD)
        for parameter in parameters
    )


def _collect_accessors(cls: type) -> dict[str, tuple[str, str]]:
    """Build the ``lookup key -> (PascalCase id, attribute)`` table for ``cls``.

    Only functions callable without arguments qualify, so helpers such as
    ``get_user_by_id(self, user_id)`` are never mistaken for services.
    """
    ranked: dict[str, tuple[int, str, str]] = {}
    for attribute, member in inspect.getmembers(cls, inspect.isfunction):
        if attribute in _RESERVED:
            continue
        claim = _accessor_rank(attribute, member)
        if claim is None or not _takes_no_arguments(cls, attribute, member):
            continue
        rank, identifier = claim
        key = identifier.lower()
        current = ranked.get(key)
        if current is None or rank < current[0]:
            ranked[key] = (rank, identifier, attribute)
    return {
        key: (identifier, attribute)
        for key, (_, identifier, attribute) in ranked.items()
    }


def _declared_return_type(func: Callable[..., Any]) -> str | None:
    """Return the declared return type of ``func`` without calling it."""
    try:
        hints = get_type_hints(func)
    except (NameError, TypeError, AttributeError):
        annotation = inspect.signature(func).return_annotation
        if isinstance(annotation, str) and annotation:
            return annotation
    else:
        declared = hints.get("return")
        if declared is not None and declared is not Any:
            return describe_type(declared)

    doc = inspect.getdoc(func)
    if doc:
        match = _RTYPE_FIELD.search(doc)
        if match:
            return match.group(1)
    return None


class Container:
    """Lazy service container.

    Services are produced on first :meth:`get` and cached for the lifetime
    of the container. A name resolves, in order, from the cache, from a
    factory registered with :meth:`set`, or from an accessor method defined
    on a subclass: ``get_<snake_name>``, ``get<PascalName>`` or any method
    decorated with :func:`service`. Accessors are collected once, when the
    subclass is created.

    Service names are case- and separator-insensitive: ``"http_client"``,
    ``"HTTPClient"`` and ``"HTTP_CLIENT"`` address the same service.

    Parameters are plain configuration values kept apart from services.
    """

    _accessors: ClassVar[dict[str, tuple[str, str]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._accessors = _collect_accessors(cls)

    def __init__(self, parameters: Mapping[str, Any] | None = None) -> None:
        """Initialise empty stores, optionally seeding parameters."""
        self._factories: dict[str, Factory] = {}
        self._factory_ids: dict[str, str] = {}
        self._services: dict[str, Any] = {}
        self._parameters: dict[str, Any] = {}
        for name, value in (parameters or {}).items():
            self.set_parameter(name, value)

    def set(self, name: str, value: Any) -> None:
        """Register a factory function or a ready-made service under ``name``.

        Functions, bound methods and ``functools.partial`` objects are stored
        as factories and called with the container on first access. Anything
        else, classes and callable instances included, is stored as-is.
        """
        key = lookup_key(name)
        if _is_factory(value):
            store = self._factories
            self._factory_ids[key] = normalize(name)
        else:
            store = self._services
        if key in store:
            LOGGER.debug("Replacing registration for service %s", normalize(name))
        store[key] = value

    def get(self, name: str) -> Any:
        """Return the service for ``name``, producing it on first access."""
        key = lookup_key(name)
        if key in self._services:
            return self._services[key]

        factory = self._factories.get(key)
        if factory is not None:
            instance = factory(self)
            source = "factory"
        else:
            accessor = self._accessor(key)
            if accessor is None:
                raise NotFoundError(name)
            instance = accessor()
            source = "accessor"

        self._services[key] = instance
        LOGGER.debug("Initialised service %s via %s", normalize(name), source)
        return instance

    def has(self, name: str) -> bool:
        """Return ``True`` when ``name`` can be resolved, without resolving it."""
        key = lookup_key(name)
        return (
            key in self._services or key in self._factories or key in self._accessors
        )

    def initialized(self, name: str) -> bool:
        """Return ``True`` when the service for ``name`` is already cached."""
        return lookup_key(name) in self._services

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def set_parameter(self, name: str, value: Any) -> None:
        """Store a configuration parameter."""
        self._parameters[name.lower()] = value

    def get_parameter(self, name: str) -> Any:
        """Return a configuration parameter, raising if it was never set."""
        key = name.lower()
        if key not in self._parameters:
            raise InvalidArgumentError(key)
        return self._parameters[key]

    def has_parameter(self, name: str) -> bool:
        """Return ``True`` when a parameter named ``name`` is set."""
        return name.lower() in self._parameters

    def get_service_ids(self) -> list[str]:
        """Return the sorted snake_case ids of all factories and accessors."""
        identifiers = list(self._factory_ids.values())
        identifiers.extend(identifier for identifier, _ in self._accessors.values())
        return sorted({underscore(identifier) for identifier in identifiers})

    def get_return_type(self, name: str) -> str:
        """Describe the type of the service registered under ``name``.

        The declared return type of the accessor method is preferred since
        it may name an interface rather than the concrete implementation.
        Without one, the service is resolved and its runtime type reported.
        """
        entry = self._accessors.get(lookup_key(name))
        if entry is not None:
            declared = _declared_return_type(getattr(type(self), entry[1]))
            if declared is not None:
                return declared

        return describe_type(type(self.get(name)))

    def _accessor(self, key: str) -> Callable[[], Any] | None:
        entry = self._accessors.get(key)
        if entry is None:
            return None
        return getattr(self, entry[1])


__all__ = ["Container", "Factory", "describe_type", "service"]
