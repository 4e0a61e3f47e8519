"""World-space vector type."""

from __future__ import annotations

import math
from typing import NamedTuple


class Vector3(NamedTuple):
    """Position or velocity in world coordinates (metres, metres/second)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def distance_to(self, other: Vector3) -> float:
        """Euclidean distance between ``self`` and *other*."""
        return math.dist(self, other)
