"""Sampler configuration for odosampler."""

from __future__ import annotations

import dataclasses
import math
import os
from typing import Any

from odosampler.distance import DistanceUnit
from odosampler.exceptions import OdoConfigError

#: Default publish frequency in Hz.
DEFAULT_FREQUENCY: float = 10.0


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise OdoConfigError(f"{env_key} must be a number, got {value!r}") from exc


def validate_frequency(value: Any) -> float:
    """Return *value* as a float publish frequency or raise :class:`OdoConfigError`."""
    try:
        frequency = float(value)
    except (TypeError, ValueError) as exc:
        raise OdoConfigError(f"frequency must be a number, got {value!r}") from exc
    if not math.isfinite(frequency) or frequency <= 0:
        raise OdoConfigError(f"frequency must be a positive finite number, got {value!r}")
    return frequency


@dataclasses.dataclass(frozen=True)
class MqttSettings:
    """Broker settings for :class:`~odosampler.transport.mqtt.MqttSnapshotTransport`.

    Parameters
    ----------
    host : str
        Broker host name.
    port : int
        Broker port.
    topic : str
        Topic snapshots are published on.
    client_id : str
        MQTT client id. Empty lets paho generate one.
    keepalive : int
        MQTT keepalive in seconds.
    qos : int
        Publish QoS level (0, 1 or 2).
    tls : bool
        Enable TLS with the system CA bundle.
    username : str or None
        Optional broker user name.
    password : str or None
        Optional broker password.
    """

    host: str = "localhost"
    port: int = 1883
    topic: str = "odometry"
    client_id: str = ""
    keepalive: int = 60
    qos: int = 0
    tls: bool = False
    username: str | None = None
    password: str | None = dataclasses.field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.qos not in (0, 1, 2):
            raise OdoConfigError(f"qos must be 0, 1 or 2, got {self.qos!r}")
        if not self.topic:
            raise OdoConfigError("topic must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> MqttSettings:
        """Create broker settings from ``ODO_MQTT_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "ODO_MQTT_HOST": "host",
            "ODO_MQTT_TOPIC": "topic",
            "ODO_MQTT_CLIENT_ID": "client_id",
            "ODO_MQTT_USERNAME": "username",
            "ODO_MQTT_PASSWORD": "password",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                kwargs[field_name] = val

        _ENV_INT_MAP = {
            "ODO_MQTT_PORT": "port",
            "ODO_MQTT_KEEPALIVE": "keepalive",
            "ODO_MQTT_QOS": "qos",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                kwargs[field_name] = _env_number(env_key, val, int)

        if "tls" not in overrides:
            kwargs["tls"] = _env_bool(env.get("ODO_MQTT_TLS"), False)

        kwargs.update(overrides)
        return cls(**kwargs)


@dataclasses.dataclass(frozen=True)
class SamplerConfig:
    """Odometry sampler configuration.

    Parameters
    ----------
    frequency : float
        Snapshot publish frequency in Hz. Must be positive.
    distance_unit : DistanceUnit
        Unit the accumulated distance is reported in. Defaults to
        kilometres.
    mqtt : MqttSettings
        Broker settings used when publishing over MQTT.
    """

    frequency: float = DEFAULT_FREQUENCY
    distance_unit: DistanceUnit = DistanceUnit.KILOMETERS
    mqtt: MqttSettings = dataclasses.field(default_factory=MqttSettings)

    def __post_init__(self) -> None:
        object.__setattr__(self, "frequency", validate_frequency(self.frequency))
        if not isinstance(self.distance_unit, DistanceUnit):
            try:
                unit = DistanceUnit(str(self.distance_unit).strip().lower())
            except ValueError as exc:
                raise OdoConfigError(f"Unknown distance unit: {self.distance_unit!r}") from exc
            object.__setattr__(self, "distance_unit", unit)

    @property
    def period(self) -> float:
        """Publish period in seconds."""
        return 1.0 / self.frequency

    @classmethod
    def from_env(cls, **overrides: Any) -> SamplerConfig:
        """Create configuration from environment variables.

        Reads ``ODO_FREQUENCY``, ``ODO_DISTANCE_UNIT`` and the
        ``ODO_MQTT_*`` variables. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.
            ``mqtt`` may be a :class:`MqttSettings` or a dict of its fields.

        Returns
        -------
        SamplerConfig
            Populated configuration.
        """
        env = os.environ

        mqtt_overrides = overrides.pop("mqtt", None)
        if isinstance(mqtt_overrides, MqttSettings):
            mqtt = mqtt_overrides
        elif isinstance(mqtt_overrides, dict):
            mqtt = MqttSettings.from_env(**mqtt_overrides)
        else:
            mqtt = MqttSettings.from_env()

        config_kwargs: dict[str, Any] = {"mqtt": mqtt}

        freq_env = env.get("ODO_FREQUENCY")
        if freq_env is not None and "frequency" not in overrides:
            config_kwargs["frequency"] = _env_number("ODO_FREQUENCY", freq_env, float)

        unit_env = env.get("ODO_DISTANCE_UNIT")
        if unit_env is not None and "distance_unit" not in overrides:
            config_kwargs["distance_unit"] = unit_env

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
