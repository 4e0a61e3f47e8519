"""Speed-over-limit episode detection.

The detector is a two-state machine. While idle it holds no episode;
the first tick whose speed is strictly above the limit in force opens
one, and every following violating tick folds its delta-time and speed
into it. The first tick that is not violating (speed at or below the
limit, or no limit available) closes the episode and files exactly one
:class:`~odosampler.models.events.ViolationEvent` with the event sink.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from odosampler.interfaces import EventSink
from odosampler.models.events import AnalysisStatus, ViolationEvent
from odosampler.models.geometry import Vector3
from odosampler.models.limits import LimitContext

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ViolationEpisode:
    """Aggregate of the episode in progress."""

    limit_context: LimitContext
    started_at: timedelta
    elapsed_duration: float
    min_speed: float
    max_speed: float

    def accumulate(self, speed: float, delta_time: float) -> None:
        self.elapsed_duration += delta_time
        self.min_speed = speed if speed < self.min_speed else self.min_speed
        self.max_speed = speed if speed > self.max_speed else self.max_speed


def is_violating(speed: float, limit: LimitContext | None) -> bool:
    """Strict comparison; a speed equal to the limit is not a violation."""
    return limit is not None and speed > limit.speed_limit


class ViolationDetector:
    """Track speed-violation episodes across ticks for one subject."""

    def __init__(self, sink: EventSink) -> None:
        self._sink = sink
        self._episode: ViolationEpisode | None = None
        self._count = 0

    @property
    def episode(self) -> ViolationEpisode | None:
        """The open episode, or ``None`` while idle."""
        return self._episode

    @property
    def violation_count(self) -> int:
        """Number of events filed so far."""
        return self._count

    def step(
        self,
        *,
        speed: float,
        limit: LimitContext | None,
        delta_time: float,
        session_elapsed: timedelta,
        subject_id: int,
        location: Vector3,
    ) -> ViolationEvent | None:
        """Advance the state machine by one tick.

        Returns the event filed on this tick, if the tick closed an
        episode.
        """
        episode = self._episode

        if is_violating(speed, limit):
            assert limit is not None
            if episode is None:
                self._episode = ViolationEpisode(
                    limit_context=limit,
                    started_at=session_elapsed,
                    elapsed_duration=delta_time,
                    min_speed=speed,
                    max_speed=speed,
                )
                _logger.debug(
                    "Speed violation started subject=%s zone=%s limit=%s speed=%s",
                    subject_id,
                    limit.zone,
                    limit.speed_limit,
                    speed,
                )
            else:
                episode.accumulate(speed, delta_time)
            return None

        if episode is None:
            return None

        self._episode = None
        if episode.elapsed_duration <= 0:
            _logger.debug("Dropping zero-length violation episode subject=%s", subject_id)
            return None

        event = ViolationEvent(
            subject_id=subject_id,
            started_at=episode.started_at,
            ended_at=max(session_elapsed, episode.started_at),
            location=location,
            zone=episode.limit_context.zone,
            speed_limit=episode.limit_context.speed_limit,
            max_speed=episode.max_speed,
            min_speed=episode.min_speed,
            duration=timedelta(seconds=episode.elapsed_duration),
        )
        self._count += 1
        _logger.debug(
            "Speed violation ended subject=%s zone=%s max=%s duration=%s",
            subject_id,
            event.zone,
            event.max_speed,
            event.duration,
        )
        self._sink.add_event(event, AnalysisStatus.FAILED)
        return event
