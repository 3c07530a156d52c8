"""Low-level tag emission for the GSA XML protocol."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from xml.sax.saxutils import escape

from gsa_response.types import MarkupElement, OutputElement

LB = "\n"


class TextWriter(Protocol):
    def write(self, text: str, /) -> object:
        ...


def escape_text(value: str) -> str:
    """Escape XML character data."""
    return escape(value)


def escape_attr(value: str) -> str:
    """Escape a value for a double-quoted attribute."""
    return escape(value, {'"': "&quot;"})


def escaped_tag(writer: TextWriter, name: str, value: str | None) -> None:
    if not value:
        return
    writer.write(f"<{name}>{escape_text(value)}</{name}>{LB}")


def param_tag(
    writer: TextWriter,
    name: str,
    value: str | None,
    *,
    escape_original: bool = False,
) -> None:
    """Echo one request parameter.

    `original_value` carries the value unescaped unless `escape_original` is
    set; appliance clients expect it that way, even though a value with a
    quote or ampersand then breaks the document.
    """
    if not value:
        return
    original = escape_attr(value) if escape_original else value
    writer.write(
        f'<PARAM name="{name}" value="{escape_attr(value)}" original_value="{original}"/>{LB}'
    )


def close_tag(writer: TextWriter, name: str) -> None:
    writer.write(f"</{name}>{LB}")


def write_elements(writer: TextWriter, elements: Iterable[OutputElement]) -> None:
    for element in elements:
        if isinstance(element, MarkupElement):
            writer.write(element.markup)
        else:
            escaped_tag(writer, element.name, element.value)
