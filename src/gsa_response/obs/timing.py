"""Timing helpers for response headers."""

from __future__ import annotations

import time


class Timer:
    """Context timer; `elapsed_ms` reads live inside the block, frozen after it."""

    def __init__(self) -> None:
        self._start = 0.0
        self._stop: float | None = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._stop = None
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self._stop = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        end = self._stop if self._stop is not None else time.perf_counter()
        return (end - self._start) * 1000.0
