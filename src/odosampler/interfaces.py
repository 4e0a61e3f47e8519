"""Structural interfaces for the sampler's external collaborators.

Having protocols here makes it easy to pass test doubles while keeping
the host simulation, lane data and transport implementations outside
this package. Every collaborator is read once per tick; the sampler
never keeps a reference to the values it returns.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Protocol

from odosampler.models.events import AnalysisStatus, ViolationEvent
from odosampler.models.geometry import Vector3
from odosampler.models.limits import LimitContext
from odosampler.models.snapshot import Snapshot


class TimeSource(Protocol):
    """Simulated clock. ``time`` never decreases."""

    @property
    def time(self) -> float: ...

    @property
    def delta_time(self) -> float: ...

    @property
    def session_elapsed(self) -> timedelta: ...


class VehicleStateProvider(Protocol):
    @property
    def velocity(self) -> Vector3: ...

    @property
    def wheel_angle(self) -> float: ...

    @property
    def position(self) -> Vector3: ...

    @property
    def subject_id(self) -> int: ...


class LimitProvider(Protocol):
    def current_limit(self) -> LimitContext | None:
        """Limit in force at the vehicle's position, or ``None`` off-map."""
        ...


class Transport(Protocol):
    """Publish channel for snapshots. ``publish`` is fire-and-forget."""

    @property
    def is_connected(self) -> bool: ...

    def publish(self, snapshot: Snapshot) -> None: ...


class EventSink(Protocol):
    def add_event(self, event: ViolationEvent, status: AnalysisStatus) -> None: ...
