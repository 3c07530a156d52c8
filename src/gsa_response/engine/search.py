"""Search engine contract and a deterministic in-memory engine."""

from __future__ import annotations

import html
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from gsa_response.engine.highlighting import Highlighting
from gsa_response.protocol.fields import HEADING_FIELDS, SchemaField
from gsa_response.types import Hit, ResultPage

SEARCHABLE_FIELDS = (
    SchemaField.TITLE.value,
    SchemaField.DESCRIPTION.value,
    SchemaField.TEXT.value,
    *(heading.value for heading in HEADING_FIELDS),
)
HIGHLIGHT_FIELDS = (SchemaField.DESCRIPTION.value, SchemaField.TEXT.value)
MAX_FRAGMENT_CHARS = 240


@dataclass(slots=True)
class SearchRequest:
    query: str
    offset: int = 0
    rows: int = 10
    sort: str | None = None
    fields: frozenset[str] | None = None


@dataclass(slots=True)
class EngineResponse:
    page: ResultPage
    highlighting: Highlighting = field(default_factory=dict)


class SearchEngine(Protocol):
    """Minimal engine contract the GSA endpoint depends on."""

    def search(self, request: SearchRequest) -> EngineResponse:
        """Return one page of hits plus highlighting for it."""


@dataclass(slots=True)
class _Match:
    doc_id: str
    fields: dict[str, list[str]]
    score: int
    position: int


class InMemorySearchEngine:
    """Deterministic engine used for tests and local prototyping.

    A document matches when every query term occurs in one of its text
    fields; relevance is the number of term occurrences, ties keep insertion
    order.
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, list[str]]] = {}

    def add(self, fields: Mapping[str, str | Sequence[str]]) -> str:
        normalized = {name: _as_values(value) for name, value in fields.items()}
        ids = normalized.get(SchemaField.ID.value)
        if not ids:
            raise ValueError(f"Document is missing the {SchemaField.ID.value!r} field")
        self._documents[ids[0]] = normalized
        return ids[0]

    def add_many(self, documents: Iterable[Mapping[str, str | Sequence[str]]]) -> list[str]:
        return [self.add(document) for document in documents]

    def __len__(self) -> int:
        return len(self._documents)

    def search(self, request: SearchRequest) -> EngineResponse:
        terms = [term.lower() for term in request.query.split()]
        matches: list[_Match] = []
        # snapshot, documents may be added while a search runs
        for position, (doc_id, fields) in enumerate(list(self._documents.items())):
            score = _score(fields, terms)
            if score is not None:
                matches.append(_Match(doc_id, fields, score, position))

        if request.sort:
            sort_field, _, direction = request.sort.partition(" ")
            matches.sort(
                key=lambda match: (_numeric(match.fields, sort_field), match.position),
                reverse=direction == "desc",
            )
        else:
            matches.sort(key=lambda match: (-match.score, match.position))

        window = matches[request.offset : request.offset + request.rows]
        hits = [Hit(fields=_project(match.fields, request.fields)) for match in window]
        highlighting = {
            match.doc_id: fragments
            for match in window
            if (fragments := _highlight(match.fields, terms))
        }
        page = ResultPage(
            offset=request.offset,
            rows=request.rows,
            num_found=len(matches),
            hits=hits,
        )
        return EngineResponse(page=page, highlighting=highlighting)


def _as_values(value: str | Sequence[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _score(fields: dict[str, list[str]], terms: list[str]) -> int | None:
    text = " ".join(
        value.lower() for name in SEARCHABLE_FIELDS for value in fields.get(name, [])
    )
    counts = [text.count(term) for term in terms]
    if any(count == 0 for count in counts):
        return None
    return sum(counts)


def _numeric(fields: dict[str, list[str]], name: str) -> int:
    values = fields.get(name)
    if not values or not re.fullmatch(r"-?\d+", values[0]):
        return 0
    return int(values[0])


def _project(fields: dict[str, list[str]], wanted: frozenset[str] | None) -> dict[str, list[str]]:
    return {
        name: list(values)
        for name, values in fields.items()
        if wanted is None or name in wanted
    }


def _highlight(fields: dict[str, list[str]], terms: list[str]) -> dict[str, list[str]]:
    if not terms:
        return {}
    pattern = re.compile("|".join(re.escape(term) for term in terms), flags=re.IGNORECASE)
    highlighted: dict[str, list[str]] = {}
    for name in HIGHLIGHT_FIELDS:
        fragments = []
        for value in fields.get(name, []):
            text = value[:MAX_FRAGMENT_CHARS]
            if pattern.search(text):
                fragments.append(_mark(text, pattern))
        if fragments:
            highlighted[name] = fragments
    return highlighted


def _mark(text: str, pattern: re.Pattern[str]) -> str:
    """Wrap matches of `pattern` in `<b>`, escaping the raw text around them."""
    parts: list[str] = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(html.escape(text[last : match.start()]))
        parts.append(f"<b>{html.escape(match.group(0))}</b>")
        last = match.end()
    parts.append(html.escape(text[last:]))
    return "".join(parts)
