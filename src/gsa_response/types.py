"""Shared domain models."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from gsa_response.protocol.fields import SchemaField

SnippetIndex = Mapping[str, Sequence[str]]


@dataclass(slots=True)
class Hit:
    """One ranked document as a bag of possibly repeated field values."""

    fields: dict[str, list[str]]

    @property
    def document_id(self) -> str | None:
        values = self.fields.get(SchemaField.ID.value)
        return values[0] if values else None


@dataclass(slots=True)
class ResultPage:
    """A page of hits plus the paging context it was cut from."""

    offset: int
    rows: int
    num_found: int
    hits: list[Hit] = field(default_factory=list)


def expected_hit_count(offset: int, rows: int, num_found: int) -> int:
    """Number of hits a page starting at `offset` holds."""
    if offset >= num_found:
        return 0
    return min(rows, num_found - offset)


@dataclass(slots=True)
class RequestContext:
    """Request values echoed back in the response header."""

    query: str | None = None
    sort: str | None = None
    client: str | None = None
    site: str | None = None
    ip: str | None = None
    access: str | None = None
    entqr: str | None = None


@dataclass(slots=True, frozen=True)
class Element:
    """A text element, written escaped and skipped when empty."""

    name: str
    value: str | None


@dataclass(slots=True, frozen=True)
class MarkupElement:
    """Pre-rendered markup written verbatim."""

    markup: str


OutputElement = Element | MarkupElement


@dataclass(slots=True)
class HitDigest:
    """Everything derived from a hit's field bag before emission."""

    document_id: str | None = None
    url: str | None = None
    title: str | None = None
    description: str = ""
    size_bytes: int = 0
    last_modified: str | None = None
    load_date: str | None = None
    language: str | None = None
    texts: list[str] = field(default_factory=list)
    tags: list[Element] = field(default_factory=list)
