"""Error family raised while writing result pages."""

from __future__ import annotations


class GsaResponseError(Exception):
    """Base class for result writer errors."""


class MalformedFieldError(GsaResponseError, ValueError):
    """A numeric field (timestamp or size) does not hold an integer."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(f"Field {field!r} does not hold a usable integer: {value!r}")
        self.field = field
        self.value = value
