from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from odosampler.config import SamplerConfig
from odosampler.distance import DistanceUnit
from odosampler.exceptions import OdoTraceError
from odosampler.models.snapshot import Snapshot
from odosampler.replay import TraceTick, load_trace, replay


def _write(path: Path, rows: list[dict[str, object] | str]) -> Path:
    lines = [row if isinstance(row, str) else json.dumps(row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_load_trace(tmp_path: Path) -> None:
    trace = _write(
        tmp_path / "trace.jsonl",
        [
            {"time": 0.0, "position": [0, 0, 0], "velocity": [5, 0, 0], "speed_limit": 10.0, "zone": "a"},
            "",
            {"time": 0.1, "delta_time": 0.1, "position": [0.5, 0, 0], "velocity": [5, 0, 0]},
        ],
    )

    ticks = load_trace(trace)

    assert len(ticks) == 2
    assert ticks[0].speed_limit == 10.0
    assert ticks[0].zone == "a"
    assert ticks[1].speed_limit is None
    assert ticks[1].connected is True


def test_load_trace_reports_bad_line(tmp_path: Path) -> None:
    trace = _write(tmp_path / "bad.jsonl", [{"time": 0.0}, "{not json", {"time": 0.2}])
    with pytest.raises(OdoTraceError) as excinfo:
        load_trace(trace)
    assert excinfo.value.line == 2


def test_load_trace_rejects_unknown_fields(tmp_path: Path) -> None:
    trace = _write(tmp_path / "bad.jsonl", [{"time": 0.0, "gear": 3}])
    with pytest.raises(OdoTraceError):
        load_trace(trace)


def test_load_trace_rejects_time_going_backwards(tmp_path: Path) -> None:
    trace = _write(tmp_path / "back.jsonl", [{"time": 0.0}, {"time": 1.0}, {"time": 0.5}])
    with pytest.raises(OdoTraceError) as excinfo:
        load_trace(trace)
    assert excinfo.value.line == 3


def test_load_trace_accepts_repeated_time(tmp_path: Path) -> None:
    trace = _write(tmp_path / "same.jsonl", [{"time": 1.0}, {"time": 1.0}])
    assert [tick.time for tick in load_trace(trace)] == [1.0, 1.0]


def test_replay_rejects_time_going_backwards() -> None:
    with pytest.raises(OdoTraceError):
        replay([TraceTick(time=1.0), TraceTick(time=0.5)])


def test_blank_zone_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        TraceTick(time=0.0, speed_limit=10.0, zone=" ")

    trace = _write(tmp_path / "zone.jsonl", [{"time": 0.0, "speed_limit": 10.0, "zone": ""}])
    with pytest.raises(OdoTraceError) as excinfo:
        load_trace(trace)
    assert excinfo.value.line == 1


def test_zone_is_stripped() -> None:
    assert TraceTick(time=0.0, zone="  lane-2 ").zone == "lane-2"


@pytest.mark.parametrize("limit", [-1.0, float("nan"), float("inf")])
def test_invalid_speed_limit_rejected(tmp_path: Path, limit: float) -> None:
    with pytest.raises(ValidationError):
        TraceTick(time=0.0, speed_limit=limit)

    trace = _write(tmp_path / "limit.jsonl", [{"time": 0.0}, {"time": 0.1, "speed_limit": limit}])
    with pytest.raises(OdoTraceError) as excinfo:
        load_trace(trace)
    assert excinfo.value.line == 2


def test_non_finite_time_rejected() -> None:
    with pytest.raises(ValidationError):
        TraceTick(time=float("nan"))


def test_replay_speed_violation_trace() -> None:
    ticks = [
        TraceTick(time=i * 0.1, delta_time=0.1, velocity=(speed, 0.0, 0.0), speed_limit=10.0, zone="main")
        for i, speed in enumerate([8.0, 12.0, 15.0, 9.0])
    ]

    result = replay(ticks, SamplerConfig(frequency=10.0), subject_id=99)

    assert len(result.events) == 1
    event = result.events[0]
    assert event.subject_id == 99
    assert event.max_speed == 15.0
    assert event.duration.total_seconds() == pytest.approx(0.2)
    assert result.status.violation_count == 1
    assert result.status.snapshot is not None
    assert result.status.snapshot.speed == 9.0


def test_replay_distance_and_publishes() -> None:
    ticks = [
        TraceTick(time=t, position=(x, 0.0, 0.0))
        for t, x in [(0.0, 0.0), (0.03, 100.0), (0.06, 200.0), (0.09, 300.0), (0.12, 400.0)]
    ]

    result = replay(ticks, SamplerConfig(distance_unit=DistanceUnit.KILOMETERS))

    assert result.status.distance == pytest.approx(0.4)
    assert [s.timestamp for s in result.publishes] == [0.0, 0.12]


def test_replay_disconnected_trace_publishes_nothing() -> None:
    ticks = [TraceTick(time=i * 0.1, connected=False) for i in range(5)]
    result = replay(ticks)
    assert result.publishes == []
    assert result.status.snapshot is not None
    assert result.status.snapshot.timestamp == pytest.approx(0.4)


def test_replay_forwards_to_transport() -> None:
    class _Inner:
        def __init__(self) -> None:
            self.published: list[Snapshot] = []

        @property
        def is_connected(self) -> bool:
            return True

        def publish(self, snapshot: Snapshot) -> None:
            self.published.append(snapshot)

    inner = _Inner()
    result = replay([TraceTick(time=0.0), TraceTick(time=0.2)], transport=inner)
    assert len(inner.published) == 2
    assert len(result.publishes) == 2


def test_replay_empty_trace() -> None:
    result = replay([])
    assert result.events == []
    assert result.status.snapshot is None
