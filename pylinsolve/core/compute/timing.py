"""
Wall-clock timing for solver backends.

Every backend wraps its phases (decompose, solve, refine, residuals) in
Timer sections; the resulting dict becomes Result.timing.
"""

import time
from collections import defaultdict
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Overall stopwatch plus named, accumulating sections.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('decompose'):
            lu.ensure_decomposition()
        with timer.section('solve'):
            x = lu.solve(b)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'decompose': ..., 'solve': ...}

    A section entered more than once reports the sum of its runs.
    """

    def __init__(self) -> None:
        self._sections: defaultdict[str, float] = defaultdict(float)
        self._started_at: float | None = None
        self._total: float | None = None

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._total is None

    def start(self) -> None:
        self._started_at = time.perf_counter()
        self._total = None

    def stop(self) -> None:
        if self._started_at is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = time.perf_counter() - self._started_at

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent inside the block to section `name`."""
        began = time.perf_counter()
        try:
            yield
        finally:
            self._sections[name] += time.perf_counter() - began

    def result(self) -> dict[str, float]:
        """
        Total and per-section seconds.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}
