"""Traveled-distance integration from successive position samples."""

from __future__ import annotations

from enum import StrEnum

from odosampler.models.geometry import Vector3


class DistanceUnit(StrEnum):
    METERS = "m"
    KILOMETERS = "km"
    MILES = "mi"

    @property
    def meters_per_unit(self) -> float:
        return _METERS_PER_UNIT[self]


_METERS_PER_UNIT: dict[DistanceUnit, float] = {
    DistanceUnit.METERS: 1.0,
    DistanceUnit.KILOMETERS: 1000.0,
    DistanceUnit.MILES: 1609.344,
}


class DistanceAccumulator:
    """Running total of the path length between consecutive positions.

    The first :meth:`update` only sets the baseline. The total never
    decreases and is never reset.
    """

    def __init__(self, unit: DistanceUnit = DistanceUnit.KILOMETERS) -> None:
        self._unit = unit
        self._total = 0.0
        self._previous: Vector3 | None = None

    @property
    def unit(self) -> DistanceUnit:
        return self._unit

    @property
    def total(self) -> float:
        return self._total

    @property
    def previous(self) -> Vector3 | None:
        return self._previous

    def update(self, position: Vector3) -> None:
        position = Vector3(*position)
        if self._previous is not None:
            self._total += self._previous.distance_to(position) / self._unit.meters_per_unit
        self._previous = position
