"""Conversion of per-field highlighting into a snippet index."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

Highlighting = Mapping[str, Mapping[str, Sequence[str]]]


def snippets_from_highlighting(highlighting: Highlighting | None) -> dict[str, list[str]]:
    """Flatten `{doc_id: {field: [fragment, ...]}}` into `{doc_id: [fragment, ...]}`.

    Field order, then fragment order, is kept, so the first candidate is the
    first fragment of the first highlighted field.
    """
    if not highlighting:
        return {}
    return {
        doc_id: [fragment for fragments in per_field.values() for fragment in fragments]
        for doc_id, per_field in highlighting.items()
    }
