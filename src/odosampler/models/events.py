"""Analysis events emitted by the violation detector."""

from __future__ import annotations

from datetime import timedelta
from enum import StrEnum
from typing import Any, Literal

from pydantic import Field, model_validator

from odosampler.models._base import OdoBaseModel
from odosampler.models.geometry import Vector3


class AnalysisStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"
    IN_PROGRESS = "in_progress"
    ERROR = "error"


class ViolationEvent(OdoBaseModel):
    """Summary of one closed speed-violation episode.

    Parameters
    ----------
    subject_id : int
        Identity of the vehicle that violated the limit.
    started_at : timedelta
        Session elapsed time when the episode started.
    ended_at : timedelta
        Session elapsed time when the episode closed.
    location : Vector3
        Vehicle position on the closing tick.
    zone : str
        Lane/zone whose limit was exceeded.
    speed_limit : float
        Limit of that zone.
    max_speed : float
        Highest speed observed during the episode.
    min_speed : float
        Lowest speed observed during the episode.
    duration : timedelta
        Sum of the delta-times of the violating ticks.
    """

    subject_id: int
    event_type: Literal["SpeedViolation"] = "SpeedViolation"
    started_at: timedelta
    ended_at: timedelta
    location: Vector3
    zone: str
    speed_limit: float
    max_speed: float
    min_speed: float
    duration: timedelta = Field(ge=timedelta(0))

    @model_validator(mode="after")
    def _check_interval(self) -> ViolationEvent:
        if self.ended_at < self.started_at:
            raise ValueError("ended_at must not precede started_at")
        if self.min_speed > self.max_speed:
            raise ValueError("min_speed must not exceed max_speed")
        return self

    def to_record(self, status: AnalysisStatus = AnalysisStatus.FAILED) -> dict[str, Any]:
        """Flatten into the key set of a simulator analysis record."""
        return {
            "Id": self.subject_id,
            "Type": self.event_type,
            "Time": str(self.ended_at),
            "Location": tuple(self.location),
            "SpeedLimit": self.speed_limit,
            "MaxSpeed": self.max_speed,
            "Duration": str(self.duration),
            "Status": status.value,
        }
