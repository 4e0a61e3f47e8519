"""Tick-driven odometry sampler."""

from __future__ import annotations

import logging
from datetime import timedelta

from odosampler.config import SamplerConfig
from odosampler.distance import DistanceAccumulator
from odosampler.interfaces import EventSink, LimitProvider, TimeSource, Transport, VehicleStateProvider
from odosampler.models.geometry import Vector3
from odosampler.models.snapshot import Snapshot
from odosampler.models.status import SamplerStatus
from odosampler.publisher import RateLimitedPublisher
from odosampler.violation import ViolationDetector

_logger = logging.getLogger(__name__)


def build_snapshot(clock: TimeSource, vehicle: VehicleStateProvider) -> Snapshot:
    """Assemble the snapshot for the current tick."""
    return Snapshot(
        timestamp=clock.time,
        speed=Vector3(*vehicle.velocity).magnitude,
        steering_front=vehicle.wheel_angle,
        steering_back=0.0,
    )


class OdometrySampler:
    """Per-tick vehicle odometry sampler.

    Call :meth:`update` once per simulation tick. Each call integrates
    traveled distance, drives speed-violation detection against the
    limit currently in force, rebuilds the latest :class:`Snapshot` and
    publishes it when the publish schedule says it is due.

    Parameters
    ----------
    config : SamplerConfig
        Publish frequency and distance unit.
    clock : TimeSource
        Simulated time and per-tick delta-time.
    vehicle : VehicleStateProvider
        Velocity, steering angle, position and identity of the subject.
    limits : LimitProvider
        Speed limit in force at the subject's position.
    events : EventSink
        Receives one event per closed violation episode.
    transport : Transport or None
        Snapshot publish channel. ``None`` disables publishing.
    """

    def __init__(
        self,
        config: SamplerConfig,
        *,
        clock: TimeSource,
        vehicle: VehicleStateProvider,
        limits: LimitProvider,
        events: EventSink,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._clock = clock
        self._vehicle = vehicle
        self._limits = limits
        self._transport = transport

        self._distance = DistanceAccumulator(config.distance_unit)
        self._detector = ViolationDetector(events)
        self._publisher = RateLimitedPublisher(config.frequency)

        self._latest: Snapshot | None = None
        self._start_position: Vector3 | None = None
        self._started = False

    @property
    def config(self) -> SamplerConfig:
        return self._config

    @property
    def frequency(self) -> float:
        return self._publisher.frequency

    @frequency.setter
    def frequency(self, value: float) -> None:
        self._publisher.frequency = value
        _logger.debug("Publish frequency set to %s Hz", self._publisher.frequency)

    @property
    def distance(self) -> float:
        """Accumulated distance in ``config.distance_unit``."""
        return self._distance.total

    @property
    def latest_snapshot(self) -> Snapshot | None:
        return self._latest

    @property
    def start_position(self) -> Vector3 | None:
        return self._start_position

    @property
    def detector(self) -> ViolationDetector:
        return self._detector

    @property
    def publisher(self) -> RateLimitedPublisher:
        return self._publisher

    def attach_transport(self, transport: Transport | None) -> None:
        """Bind (or with ``None`` unbind) the snapshot publish channel."""
        self._transport = transport

    def start(self) -> None:
        """Record the start position and make the first tick due for publishing."""
        self._start_position = Vector3(*self._vehicle.position)
        self._publisher.reset()
        self._started = True
        _logger.debug("Sampler started at %s", self._start_position)

    def update(self) -> Snapshot:
        """Run one tick and return its snapshot."""
        if not self._started:
            self.start()

        position = Vector3(*self._vehicle.position)
        self._distance.update(position)

        speed = Vector3(*self._vehicle.velocity).magnitude
        self._detector.step(
            speed=speed,
            limit=self._limits.current_limit(),
            delta_time=self._clock.delta_time,
            session_elapsed=self._clock.session_elapsed,
            subject_id=self._vehicle.subject_id,
            location=position,
        )

        snapshot = build_snapshot(self._clock, self._vehicle)
        self._latest = snapshot

        self._publisher.tick(self._clock.time, snapshot, self._transport)
        return snapshot

    def status(self) -> SamplerStatus:
        """Read-only view of the current state; safe before the first tick."""
        episode = self._detector.episode
        return SamplerStatus(
            snapshot=self._latest,
            start_position=self._start_position,
            end_position=self._distance.previous,
            distance=self._distance.total,
            current_speed_limit=episode.limit_context.speed_limit if episode is not None else None,
            violation_duration=(
                timedelta(seconds=episode.elapsed_duration) if episode is not None else timedelta(0)
            ),
            violation_max_speed=episode.max_speed if episode is not None else 0.0,
            violation_count=self._detector.violation_count,
            publish_count=self._publisher.publish_count,
        )
