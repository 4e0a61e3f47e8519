"""Speed limit context supplied by the lane/zone provider."""

from __future__ import annotations

from pydantic import Field, field_validator

from odosampler.models._base import OdoBaseModel


class LimitContext(OdoBaseModel):
    """The speed limit in force and the zone it belongs to."""

    zone: str = Field(..., description="Opaque lane/zone identifier")
    speed_limit: float = Field(..., description="Speed limit in m/s")

    @field_validator("zone")
    @classmethod
    def _normalize_zone(cls, value: str) -> str:
        zone = value.strip()
        if not zone:
            raise ValueError("zone must be non-empty")
        return zone
