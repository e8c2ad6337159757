"""Helpers converting service identifiers between PascalCase and snake_case."""

from __future__ import annotations

import re

__all__ = ["lookup_key", "normalize", "underscore"]

_SEPARATORS = re.compile(r"[_.\s]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def normalize(name: str) -> str:
    """Return the PascalCase lookup key for ``name``.

    Segments separated by ``_``, ``.`` or whitespace get their first letter
    upper-cased; the remaining characters are kept as they are, so
    ``normalize("http_Client")`` yields ``"HttpClient"`` and
    ``normalize("HTTPClient")`` is unchanged.
    """
    return "".join(
        segment[:1].upper() + segment[1:] for segment in _SEPARATORS.split(name)
    )


def underscore(identifier: str) -> str:
    """Return the snake_case display form of ``identifier``."""
    value = identifier.replace(".", "_")
    value = _ACRONYM_BOUNDARY.sub(r"\1_\2", value)
    value = _WORD_BOUNDARY.sub(r"\1_\2", value)
    return value.lower()


def lookup_key(name: str) -> str:
    """Return the case-insensitive store key for ``name``.

    ``"http_client"``, ``"HTTPClient"`` and ``"HTTP_CLIENT"`` all map to
    ``"httpclient"``.
    """
    return normalize(name).lower()
