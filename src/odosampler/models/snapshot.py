"""Per-tick odometry snapshot."""

from __future__ import annotations

from pydantic import Field

from odosampler.models._base import OdoBaseModel


class Snapshot(OdoBaseModel):
    """Instantaneous odometry record built once per tick.

    Parameters
    ----------
    timestamp : float
        Simulated time in seconds.
    speed : float
        Velocity magnitude in m/s.
    steering_front : float
        Front wheel steering angle.
    steering_back : float
        Rear wheel steering angle. Always ``0.0``.
    """

    timestamp: float
    speed: float = Field(ge=0.0)
    steering_front: float = 0.0
    steering_back: float = 0.0
