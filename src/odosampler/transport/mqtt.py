"""paho-mqtt backed snapshot transport."""

from __future__ import annotations

import logging
import threading
from typing import Any, cast

import paho.mqtt.client as mqtt

from odosampler.config import MqttSettings
from odosampler.exceptions import OdoTransportError
from odosampler.models.snapshot import Snapshot


def build_client(settings: MqttSettings, logger: logging.Logger) -> mqtt.Client:
    """Create an unconnected paho client configured from *settings*."""
    client = mqtt.Client(
        callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
        client_id=settings.client_id,
    )
    client.enable_logger(logger)
    if settings.username:
        client.username_pw_set(settings.username, settings.password)
    if settings.tls:
        client.tls_set()
    return client


class MqttSnapshotTransport:
    """Threaded paho-mqtt runtime publishing snapshots as JSON.

    Satisfies :class:`~odosampler.interfaces.Transport`. ``publish`` only
    queues the message on paho's network thread and never waits for an
    acknowledgement.
    """

    def __init__(
        self,
        settings: MqttSettings,
        *,
        client: mqtt.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._settings = settings
        self._logger = logger or logging.getLogger(__name__)
        self._client = client
        self._running = False
        self._connected = threading.Event()

    @property
    def is_running(self) -> bool:
        """Whether the network loop has been started."""
        return self._running

    @property
    def is_connected(self) -> bool:
        client = self._client
        if client is None or not self._running or not self._connected.is_set():
            return False
        return bool(client.is_connected())

    def start(self) -> None:
        """Connect to the broker and start the network loop.

        Returns once the connection has been initiated; the broker's
        acknowledgement arrives later on the network thread. Use
        :meth:`wait_connected` before relying on :attr:`is_connected`.
        """
        self.stop()
        settings = self._settings
        self._logger.debug(
            "MQTT transport start requested host=%s port=%s topic=%s",
            settings.host,
            settings.port,
            settings.topic,
        )

        client = self._client or build_client(settings, self._logger)

        def on_connect(
            _client: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._connected.set()
            self._logger.debug("MQTT connected reason=%s", reason_code)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            self._connected.clear()
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        self._connected.clear()
        client.on_connect = on_connect
        client.on_disconnect = on_disconnect

        try:
            client.connect(settings.host, settings.port, keepalive=settings.keepalive)
        except OSError as exc:
            raise OdoTransportError(
                f"Could not connect to MQTT broker {settings.host}:{settings.port}: {exc}",
                host=settings.host,
                port=settings.port,
            ) from exc
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def wait_connected(self, timeout: float) -> bool:
        """Block until the broker acknowledged the connection or *timeout* elapses."""
        if not self._running:
            return False
        return self._connected.wait(timeout)

    def stop(self) -> None:
        """Disconnect and stop the network loop if running."""
        client = self._client
        was_running = self._running
        self._running = False
        self._connected.clear()

        if client is None or not was_running:
            return
        try:
            self._logger.debug("MQTT disconnect requested")
            client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def publish(self, snapshot: Snapshot) -> None:
        client = self._client
        if client is None or not self._running:
            self._logger.debug("MQTT publish skipped, transport not started")
            return
        info = client.publish(
            self._settings.topic,
            snapshot.model_dump_json(),
            qos=self._settings.qos,
        )
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._logger.debug("MQTT publish failed rc=%s topic=%s", info.rc, self._settings.topic)
