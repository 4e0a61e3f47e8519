"""Event sinks for violation events."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from odosampler.interfaces import EventSink
from odosampler.models.events import AnalysisStatus, ViolationEvent

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnalysisRecord:
    event: ViolationEvent
    status: AnalysisStatus


class AnalysisEventLog:
    """In-memory sink keeping every event in arrival order."""

    def __init__(self) -> None:
        self._records: list[AnalysisRecord] = []

    def add_event(self, event: ViolationEvent, status: AnalysisStatus) -> None:
        self._records.append(AnalysisRecord(event=event, status=status))

    @property
    def records(self) -> list[AnalysisRecord]:
        return list(self._records)

    @property
    def events(self) -> list[ViolationEvent]:
        return [record.event for record in self._records]

    def as_records(self) -> list[dict[str, Any]]:
        """Flattened analysis-record mappings, status included."""
        return [record.event.to_record(record.status) for record in self._records]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class LoggingEventSink:
    """Log each event, then hand it on to *forward* when given.

    Failed events are logged at WARNING, everything else at INFO.
    """

    def __init__(
        self,
        forward: EventSink | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._forward = forward
        self._logger = logger or _logger

    def add_event(self, event: ViolationEvent, status: AnalysisStatus) -> None:
        level = logging.WARNING if status == AnalysisStatus.FAILED else logging.INFO
        self._logger.log(
            level,
            "%s subject=%s zone=%s limit=%s max=%s duration=%s at=%s",
            event.event_type,
            event.subject_id,
            event.zone,
            event.speed_limit,
            event.max_speed,
            event.duration,
            event.ended_at,
        )
        if self._forward is not None:
            self._forward.add_event(event, status)
