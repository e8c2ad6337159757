"""Tests for service enumeration and return type introspection."""

from __future__ import annotations

from typing import Any, Protocol

import pytest

from depot.core import Container, NotFoundError, service


class Mailer(Protocol):
    """Interface declared by accessor methods."""

    def send(self, recipient: str) -> None:
        """Deliver a message."""


class SmtpMailer:
    """Concrete mailer."""

    def send(self, recipient: str) -> None:
        return None


class MailContainer(Container):
    """Container mixing annotated, documented and bare accessors."""

    def get_mailer(self) -> Mailer:
        return SmtpMailer()

    def get_undeclared(self):  # type: ignore[no-untyped-def]
        return SmtpMailer()

    def get_archive(self):  # type: ignore[no-untyped-def]
        """Return the message archive.

        :rtype: archive.Archive
        """
        return []

    def get_counter(self) -> Any:
        return 3

    def get_recipients(self) -> list[str]:
        return ["ops@example.com"]

    def get_pending(self) -> QueueBackend:  # noqa: F821
        return 0

    def getTemplateEngine(self) -> str:  # pylint: disable=invalid-name
        return "jinja"

    @service("spool")
    def open_spool(self) -> str:
        return "spool"


class BarContainer(Container):
    """Container with a single accessor."""

    def get_bar(self) -> str:
        return "bar"


def test_service_ids_combine_factories_and_accessors() -> None:
    container = BarContainer()
    container.set("Foo", lambda c: "foo")

    assert container.get_service_ids() == ["bar", "foo"]


def test_service_ids_are_deduplicated() -> None:
    """A name with both a factory and an accessor is listed once."""

    container = BarContainer()
    container.set("bar", lambda c: "factory bar")

    assert container.get_service_ids() == ["bar"]


def test_service_ids_skip_plain_instances_and_reserved_names() -> None:
    container = MailContainer()
    container.set("ready_made", object())
    container.set("HTTPClient", lambda c: object())

    assert container.get_service_ids() == [
        "archive",
        "counter",
        "http_client",
        "mailer",
        "pending",
        "recipients",
        "spool",
        "template_engine",
        "undeclared",
    ]


def test_base_container_has_no_services() -> None:
    assert Container().get_service_ids() == []


def test_declared_return_type_does_not_instantiate() -> None:
    """An annotated accessor reports its declared type without running."""

    container = MailContainer()

    assert container.get_return_type("mailer") == f"{Mailer.__module__}.Mailer"
    assert container.get_return_type("recipients") == "list[str]"
    assert container.get_return_type("TemplateEngine") == "str"
    assert container.get_return_type("spool") == "str"
    assert not container.initialized("mailer")
    assert not container.initialized("recipients")


def test_unresolvable_annotation_is_reported_as_written() -> None:
    container = MailContainer()

    assert container.get_return_type("pending") == "QueueBackend"
    assert not container.initialized("pending")


def test_docstring_rtype_is_used_without_annotation() -> None:
    container = MailContainer()

    assert container.get_return_type("archive") == "archive.Archive"
    assert not container.initialized("archive")


def test_runtime_type_used_when_nothing_is_declared() -> None:
    """Without a usable declaration the service is resolved and inspected."""

    container = MailContainer()

    assert (
        container.get_return_type("undeclared")
        == f"{SmtpMailer.__module__}.SmtpMailer"
    )
    assert container.initialized("undeclared")
    assert container.get_return_type("counter") == "int"
    assert container.initialized("counter")


def test_factory_return_type_uses_runtime_value() -> None:
    container = Container()
    container.set("port", lambda c: 8080)
    container.set("settings", lambda c: {"debug": True})
    container.set("missing", lambda c: None)

    assert container.get_return_type("port") == "int"
    assert container.get_return_type("settings") == "dict"
    assert container.get_return_type("missing") == "NoneType"
    assert container.initialized("port")


def test_return_type_of_unknown_service_raises() -> None:
    with pytest.raises(NotFoundError):
        Container().get_return_type("unknown")
