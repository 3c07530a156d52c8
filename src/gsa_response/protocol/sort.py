"""GSA sort expressions, e.g. `date:D:S:d1`."""

from __future__ import annotations

from dataclasses import dataclass

from gsa_response.protocol.fields import SchemaField


@dataclass(slots=True, frozen=True)
class SortDescriptor:
    """Decomposed `action:direction:mode:format` sort expression.

    Anything that does not split into exactly four parts keeps only `raw`
    and sorts by relevance.
    """

    raw: str
    action: str | None = None  # date
    direction: str | None = None  # A or D
    mode: str | None = None  # S, R, L
    format: str | None = None  # d1

    @classmethod
    def parse(cls, raw: str) -> "SortDescriptor":
        parts = raw.split(":")
        if len(parts) != 4:
            return cls(raw=raw)
        action, direction, mode, fmt = parts
        return cls(raw=raw, action=action, direction=direction, mode=mode, format=fmt)

    def to_engine_syntax(self, date_field: str = SchemaField.LAST_MODIFIED.value) -> str | None:
        """Native engine sort clause, or None for relevance order."""
        if self.action != "date":
            return None
        return f"{date_field} {'desc' if self.direction == 'D' else 'asc'}"
