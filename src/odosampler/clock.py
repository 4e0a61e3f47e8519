"""Manually stepped simulation clock."""

from __future__ import annotations

from datetime import timedelta


class SimClock:
    """A :class:`~odosampler.interfaces.TimeSource` driven by explicit steps.

    The session starts at *start*; ``session_elapsed`` is measured from
    there. Each :meth:`advance` moves ``time`` forward and records the
    step as the current ``delta_time``.
    """

    def __init__(self, start: float = 0.0, *, delta_time: float = 0.0) -> None:
        self._start = start
        self._time = start
        self._delta_time = delta_time

    @property
    def time(self) -> float:
        return self._time

    @property
    def delta_time(self) -> float:
        return self._delta_time

    @property
    def session_elapsed(self) -> timedelta:
        return timedelta(seconds=self._time - self._start)

    def advance(self, dt: float) -> None:
        if dt < 0:
            raise ValueError(f"Clock cannot step backwards (dt={dt})")
        self._delta_time = dt
        self._time += dt

    def set_time(self, now: float, *, delta_time: float | None = None) -> None:
        """Jump to *now*.

        The tick delta is *delta_time* when given, otherwise the size of the
        jump. Recorded traces may carry a fixed step that differs from the
        spacing of their timestamps.
        """
        if now < self._time:
            raise ValueError(f"Clock cannot step backwards (now={now}, time={self._time})")
        self._delta_time = now - self._time if delta_time is None else delta_time
        self._time = now
