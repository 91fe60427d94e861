"""Elapsed-time measurement for log lines and response bodies."""

from __future__ import annotations

import time


class Stopwatch:
    """Milliseconds elapsed since construction."""

    def __init__(self) -> None:
        self._started = time.perf_counter()

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)
