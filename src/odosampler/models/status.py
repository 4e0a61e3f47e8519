"""Read-only sampler introspection record."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from odosampler.models._base import OdoBaseModel
from odosampler.models.geometry import Vector3
from odosampler.models.snapshot import Snapshot


class SamplerStatus(OdoBaseModel):
    """Point-in-time view of sampler state for display purposes.

    ``snapshot`` is ``None`` until the first tick has run. The violation
    fields describe the episode in progress, if any, and read as zero
    otherwise.
    """

    snapshot: Snapshot | None = None
    start_position: Vector3 | None = None
    end_position: Vector3 | None = None
    distance: float = 0.0
    current_speed_limit: float | None = None
    violation_duration: timedelta = timedelta(0)
    violation_max_speed: float = 0.0
    violation_count: int = 0
    publish_count: int = 0

    def graph_values(self) -> dict[str, Any]:
        """Values for a debug graph overlay; empty before the first tick."""
        if self.snapshot is None:
            return {}
        return {
            "Speed": self.snapshot.speed,
            "Steering Front": self.snapshot.steering_front,
            "Steering Back": self.snapshot.steering_back,
            "Start Position": self.start_position,
            "Distance": self.distance,
            "CurrentSpeedLimit": self.current_speed_limit,
            "SpeedViolationDuration": str(self.violation_duration),
            "SpeedViolationMax": self.violation_max_speed,
        }
