"""Snapshot transports."""

from odosampler.transport.mqtt import MqttSnapshotTransport

__all__ = ["MqttSnapshotTransport"]
