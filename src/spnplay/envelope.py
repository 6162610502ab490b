"""
Envelope - an ordered list of (time, amplitude) breakpoints with linear
interpolation between them.

Copyright (c) 2026 spnplay contributors

MIT License
"""

from __future__ import annotations

from typing import NamedTuple, Sequence

import numpy as np
from numpy.typing import ArrayLike


class Breakpoint(NamedTuple):
    """Target amplitude reached at an absolute time in seconds."""

    time: float
    value: float


class Envelope:
    """
    Piecewise-linear gain automation.

    Breakpoints are kept in the order given and must be non-decreasing in
    time. Between breakpoints the amplitude is linearly interpolated; outside
    [start, end] the envelope is silent. When two breakpoints share a time,
    the later one wins from that time on.

    Args:
        points: Sequence of (time, value) pairs. At least one is required.

    Example:
        env = Envelope([(0.0, 0.0), (0.1, 1.0), (0.5, 0.0)])
        env.value_at(0.05)   # 0.5
    """

    def __init__(self, points: Sequence[tuple[float, float]]):
        if not points:
            raise ValueError("Envelope requires at least one breakpoint")
        self._points = tuple(Breakpoint(float(t), float(v)) for t, v in points)
        times = np.array([p.time for p in self._points], dtype=np.float64)
        if np.any(np.diff(times) < 0):
            raise ValueError(f"Envelope breakpoint times must be non-decreasing, got {times.tolist()}")
        self._times = times
        self._values = np.array([p.value for p in self._points], dtype=np.float64)

    @property
    def points(self) -> tuple[Breakpoint, ...]:
        return self._points

    @property
    def start(self) -> float:
        """Time of the first breakpoint."""
        return self._points[0].time

    @property
    def end(self) -> float:
        """Time of the last breakpoint."""
        return self._points[-1].time

    def value_at(self, t: ArrayLike) -> np.ndarray:
        """
        Amplitude at time(s) t, in seconds.

        Returns a float for scalar input, an array otherwise.
        """
        t = np.asarray(t, dtype=np.float64)
        times, values = self._times, self._values
        last = len(times) - 1
        # Segment start is the last breakpoint at or before t
        lo = np.clip(np.searchsorted(times, t, side="right") - 1, 0, last)
        hi = np.minimum(lo + 1, last)
        span = times[hi] - times[lo]
        frac = np.where(span > 0, (t - times[lo]) / np.where(span > 0, span, 1.0), 0.0)
        interpolated = values[lo] + frac * (values[hi] - values[lo])
        inside = (t >= times[0]) & (t <= times[-1])
        result = np.where(inside, interpolated, 0.0)
        if result.ndim == 0:
            return float(result)
        return result

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Envelope):
            return NotImplemented
        return self._points == other._points

    def __hash__(self) -> int:
        return hash(self._points)

    def __repr__(self) -> str:
        return f"Envelope(points={list(self._points)!r})"
