"""Console progress bar and weighted multi-phase progress reporting."""

from __future__ import annotations

import enum
import sys
from typing import Callable, Optional, Sequence, TextIO


class ProgressStyle(enum.Enum):
    BAR = "bar"
    DOTS = "dots"


class ProgressBar:
    """Writes a bar of ``#`` characters, or a run of dots, as progress grows.

    Called with an int, the value is a step count; called with a float, it is
    scaled by ``maximum`` into steps. Values not larger than the last one
    emitted are ignored.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        style: ProgressStyle = ProgressStyle.BAR,
        maximum: float = 1.0,
        width: int = 50,
    ) -> None:
        self._stream = stream
        self._style = style
        self._maximum = maximum
        self._width = width if style is ProgressStyle.BAR else 100
        self._last_emitted: Optional[int] = None

    def __call__(self, p) -> None:
        if isinstance(p, float):
            p = int(p / self._maximum * self._width)
        if self._last_emitted is not None and p <= self._last_emitted:
            return
        p = min(p, self._width)
        stream = self._stream if self._stream is not None else sys.stderr
        if self._style is ProgressBar_BAR:
            stream.write("\r[" + "#" * p + " " * (self._width - p) + "]")
        else:
            stream.write("." * (p - (self._last_emitted or 0)))
        stream.flush()
        self._last_emitted = p


ProgressBar_BAR = ProgressStyle.BAR


class ApplicationProgress:
    """Combines per-phase progress into one overall fraction.

    Each phase carries an estimated weight; the callback receives the
    overall fraction in [0, 1]. Closing moves to the start of the last phase.
    """

    def __init__(self, estimates: Sequence[float], callback: Callable[[float], None]) -> None:
        self._estimates = list(estimates)
        self._callback = callback
        self._phase = 0
        self._total = sum(self._estimates)
        self._closed = False
        self(0.0)

    def __call__(self, p: float) -> None:
        done = sum(self._estimates[: self._phase])
        done += p * self._estimates[self._phase]
        self._callback(done / self._total)

    def finished(self) -> None:
        """Mark the current phase complete and report the next one's start."""
        self._phase += 1
        self(0.0)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._phase = len(self._estimates) - 2
        self.finished()

    def __enter__(self) -> "ApplicationProgress":
        return self

    def __exit__(self, *args) -> None:
        self.close()