"""odosampler - tick-driven vehicle odometry sampling and speed-violation detection."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("odosampler")
except PackageNotFoundError:
    __version__ = "0+local"
from odosampler.analysis import AnalysisEventLog, AnalysisRecord, LoggingEventSink
from odosampler.clock import SimClock
from odosampler.config import MqttSettings, SamplerConfig
from odosampler.distance import DistanceAccumulator, DistanceUnit
from odosampler.exceptions import OdoConfigError, OdoError, OdoTraceError, OdoTransportError
from odosampler.models import (
    AnalysisStatus,
    LimitContext,
    SamplerStatus,
    Snapshot,
    Vector3,
    ViolationEvent,
)
from odosampler.publisher import RateLimitedPublisher
from odosampler.sampler import OdometrySampler
from odosampler.violation import ViolationDetector, ViolationEpisode

__all__ = [
    "__version__",
    "AnalysisEventLog",
    "AnalysisRecord",
    "AnalysisStatus",
    "DistanceAccumulator",
    "DistanceUnit",
    "LimitContext",
    "LoggingEventSink",
    "MqttSettings",
    "OdoConfigError",
    "OdoError",
    "OdoTraceError",
    "OdoTransportError",
    "OdometrySampler",
    "RateLimitedPublisher",
    "SamplerConfig",
    "SamplerStatus",
    "SimClock",
    "Snapshot",
    "Vector3",
    "ViolationDetector",
    "ViolationEpisode",
    "ViolationEvent",
]
