#!/usr/bin/env python3
"""Replay a recorded tick trace through the odometry sampler.

Usage
-----
    python scripts/replay_trace.py trace.jsonl
    python scripts/replay_trace.py --frequency 20 --unit m trace.jsonl
    python scripts/replay_trace.py --mqtt trace.jsonl   # also publish via ODO_MQTT_*

Each trace line is a JSON object with ``time``, ``position``,
``velocity`` and optionally ``delta_time``, ``wheel_angle``,
``speed_limit``, ``zone`` and ``connected``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from odosampler import SamplerConfig  # noqa: E402
from odosampler.exceptions import OdoError, OdoTransportError  # noqa: E402
from odosampler.replay import load_trace, replay  # noqa: E402
from odosampler.transport import MqttSnapshotTransport  # noqa: E402


def _summary(result: Any) -> dict[str, Any]:
    return {
        "events": [event.to_record() for event in result.events],
        "publishes": len(result.publishes),
        "status": result.status.model_dump(mode="json"),
    }


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay an odometry tick trace.")
    parser.add_argument("trace", help="JSON Lines trace file")
    parser.add_argument("--frequency", type=float, help="Publish frequency in Hz (default: ODO_FREQUENCY or 10)")
    parser.add_argument("--unit", choices=["m", "km", "mi"], help="Distance unit (default: km)")
    parser.add_argument("--subject", type=int, default=0, help="Subject id reported in events")
    parser.add_argument("--mqtt", action="store_true", help="Also publish snapshots to the ODO_MQTT_* broker")
    parser.add_argument(
        "--connect-timeout",
        type=float,
        default=5.0,
        help="Seconds to wait for the MQTT broker to accept the connection (default: 5)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.frequency is not None:
        overrides["frequency"] = args.frequency
    if args.unit is not None:
        overrides["distance_unit"] = args.unit

    transport: MqttSnapshotTransport | None = None
    try:
        config = SamplerConfig.from_env(**overrides)
        ticks = load_trace(args.trace)
        if args.mqtt:
            transport = MqttSnapshotTransport(config.mqtt)
            transport.start()
            if not transport.wait_connected(args.connect_timeout):
                raise OdoTransportError(
                    f"MQTT broker {config.mqtt.host}:{config.mqtt.port} did not accept the connection "
                    f"within {args.connect_timeout}s",
                    host=config.mqtt.host,
                    port=config.mqtt.port,
                )
        result = replay(ticks, config, subject_id=args.subject, transport=transport, log_events=True)
    except OdoError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if transport is not None:
            transport.stop()

    print(json.dumps(_summary(result), indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
