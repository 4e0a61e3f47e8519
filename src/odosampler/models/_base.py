"""Base model for odosampler records.

Every record the sampler produces inherits from :class:`OdoBaseModel`,
which makes instances immutable and rejects unknown fields so a
misspelt key in a replayed trace or a test fixture fails loudly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class OdoBaseModel(BaseModel):
    """Frozen, strict-keyed base for sampler records."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
    )
