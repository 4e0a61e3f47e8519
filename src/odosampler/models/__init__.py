"""Record models produced and consumed by the sampler."""

from odosampler.models.events import AnalysisStatus, ViolationEvent
from odosampler.models.geometry import Vector3
from odosampler.models.limits import LimitContext
from odosampler.models.snapshot import Snapshot
from odosampler.models.status import SamplerStatus

__all__ = [
    "AnalysisStatus",
    "LimitContext",
    "SamplerStatus",
    "Snapshot",
    "Vector3",
    "ViolationEvent",
]
