"""Offline replay of recorded tick traces.

A trace is a JSON Lines file with one :class:`TraceTick` per line, in
tick order. Replaying feeds the ticks through an :class:`OdometrySampler`
with a :class:`~odosampler.clock.SimClock`, so violation events and
publish decisions come out exactly as they would have live.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import Field, ValidationError, field_validator

from odosampler.analysis import AnalysisEventLog, LoggingEventSink
from odosampler.clock import SimClock
from odosampler.config import SamplerConfig
from odosampler.exceptions import OdoTraceError
from odosampler.interfaces import EventSink, Transport
from odosampler.models._base import OdoBaseModel
from odosampler.models.events import ViolationEvent
from odosampler.models.geometry import Vector3
from odosampler.models.limits import LimitContext
from odosampler.models.snapshot import Snapshot
from odosampler.models.status import SamplerStatus
from odosampler.sampler import OdometrySampler

_logger = logging.getLogger(__name__)


class TraceTick(OdoBaseModel):
    """One recorded simulation tick.

    ``delta_time`` defaults to the spacing from the previous tick (zero
    for the first one). ``speed_limit`` absent means no limit data was
    available at that tick.
    """

    time: float = Field(allow_inf_nan=False)
    delta_time: float | None = Field(default=None, ge=0.0)
    position: Vector3 = Vector3()
    velocity: Vector3 = Vector3()
    wheel_angle: float = 0.0
    speed_limit: float | None = Field(default=None, ge=0.0, allow_inf_nan=False)
    zone: str = "default"
    connected: bool = True

    @field_validator("zone")
    @classmethod
    def _normalize_zone(cls, value: str) -> str:
        zone = value.strip()
        if not zone:
            raise ValueError("zone must be non-empty")
        return zone


def load_trace(path: str | Path) -> list[TraceTick]:
    """Read a JSON Lines trace. Blank lines are skipped.

    Tick times must not decrease from one record to the next.
    """
    ticks: list[TraceTick] = []
    with Path(path).open(encoding="utf-8") as fh:
        for lineno, line in enumerate(fh, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                ticks.append(TraceTick.model_validate(json.loads(text)))
            except (json.JSONDecodeError, ValidationError) as exc:
                raise OdoTraceError(f"Invalid trace record on line {lineno}: {exc}", line=lineno) from exc
            if len(ticks) > 1 and ticks[-1].time < ticks[-2].time:
                raise OdoTraceError(
                    f"Trace time goes backwards on line {lineno}: {ticks[-1].time} < {ticks[-2].time}",
                    line=lineno,
                )
    return ticks


class _TraceVehicle:
    def __init__(self, subject_id: int) -> None:
        self.subject_id = subject_id
        self.velocity = Vector3()
        self.wheel_angle = 0.0
        self.position = Vector3()


class _TraceLimits:
    def __init__(self) -> None:
        self.limit: LimitContext | None = None

    def current_limit(self) -> LimitContext | None:
        return self.limit


class _RecordingTransport:
    """Gate on the trace's connection flag, record, then forward."""

    def __init__(self, inner: Transport | None) -> None:
        self._inner = inner
        self.connected = True
        self.published: list[Snapshot] = []

    @property
    def is_connected(self) -> bool:
        if not self.connected:
            return False
        return self._inner is None or self._inner.is_connected

    def publish(self, snapshot: Snapshot) -> None:
        self.published.append(snapshot)
        if self._inner is not None:
            self._inner.publish(snapshot)


@dataclass
class ReplayResult:
    status: SamplerStatus
    events: list[ViolationEvent] = field(default_factory=list)
    publishes: list[Snapshot] = field(default_factory=list)


def replay(
    ticks: Iterable[TraceTick],
    config: SamplerConfig | None = None,
    *,
    subject_id: int = 0,
    transport: Transport | None = None,
    log_events: bool = False,
) -> ReplayResult:
    """Run a sampler over *ticks* and collect what it emitted.

    With *log_events* each violation event is also written to the
    ``odosampler.analysis`` logger as it is filed.
    """
    config = config or SamplerConfig()
    vehicle = _TraceVehicle(subject_id)
    limits = _TraceLimits()
    sink = AnalysisEventLog()
    events: EventSink = LoggingEventSink(forward=sink) if log_events else sink
    recorder = _RecordingTransport(transport)

    clock: SimClock | None = None
    sampler: OdometrySampler | None = None
    count = 0

    for tick in ticks:
        if clock is None:
            clock = SimClock(tick.time)
        elif tick.time < clock.time:
            raise OdoTraceError(f"Trace time goes backwards at tick {count + 1}: {tick.time} < {clock.time}")
        clock.set_time(tick.time, delta_time=tick.delta_time)

        vehicle.position = tick.position
        vehicle.velocity = tick.velocity
        vehicle.wheel_angle = tick.wheel_angle
        limits.limit = (
            LimitContext(zone=tick.zone, speed_limit=tick.speed_limit) if tick.speed_limit is not None else None
        )
        recorder.connected = tick.connected

        if sampler is None:
            sampler = OdometrySampler(
                config,
                clock=clock,
                vehicle=vehicle,
                limits=limits,
                events=events,
                transport=recorder,
            )
        sampler.update()
        count += 1

    _logger.debug("Replayed %d ticks, %d events, %d publishes", count, len(sink), len(recorder.published))
    status = sampler.status() if sampler is not None else SamplerStatus()
    return ReplayResult(status=status, events=sink.events, publishes=list(recorder.published))
