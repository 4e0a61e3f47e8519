from __future__ import annotations

import pytest

from odosampler.config import MqttSettings, SamplerConfig
from odosampler.distance import DistanceUnit
from odosampler.exceptions import OdoConfigError

_ENV_KEYS = (
    "ODO_FREQUENCY",
    "ODO_DISTANCE_UNIT",
    "ODO_MQTT_HOST",
    "ODO_MQTT_PORT",
    "ODO_MQTT_TOPIC",
    "ODO_MQTT_CLIENT_ID",
    "ODO_MQTT_KEEPALIVE",
    "ODO_MQTT_QOS",
    "ODO_MQTT_TLS",
    "ODO_MQTT_USERNAME",
    "ODO_MQTT_PASSWORD",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = SamplerConfig()
    assert config.frequency == 10.0
    assert config.period == pytest.approx(0.1)
    assert config.distance_unit is DistanceUnit.KILOMETERS
    assert config.mqtt.host == "localhost"
    assert config.mqtt.port == 1883


def test_distance_unit_from_string() -> None:
    assert SamplerConfig(distance_unit="M").distance_unit is DistanceUnit.METERS  # type: ignore[arg-type]


def test_unknown_distance_unit_rejected() -> None:
    with pytest.raises(OdoConfigError):
        SamplerConfig(distance_unit="furlong")  # type: ignore[arg-type]


@pytest.mark.parametrize("frequency", [0, -10.0, float("nan")])
def test_non_positive_frequency_rejected(frequency: float) -> None:
    with pytest.raises(OdoConfigError):
        SamplerConfig(frequency=frequency)


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ODO_FREQUENCY", "25")
    monkeypatch.setenv("ODO_DISTANCE_UNIT", "mi")
    monkeypatch.setenv("ODO_MQTT_HOST", "broker.local")
    monkeypatch.setenv("ODO_MQTT_PORT", "8883")
    monkeypatch.setenv("ODO_MQTT_TLS", "yes")
    monkeypatch.setenv("ODO_MQTT_QOS", "1")

    config = SamplerConfig.from_env()

    assert config.frequency == 25.0
    assert config.distance_unit is DistanceUnit.MILES
    assert config.mqtt.host == "broker.local"
    assert config.mqtt.port == 8883
    assert config.mqtt.tls is True
    assert config.mqtt.qos == 1


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ODO_FREQUENCY", "25")
    monkeypatch.setenv("ODO_MQTT_TOPIC", "from-env")

    config = SamplerConfig.from_env(frequency=5.0, mqtt={"topic": "explicit"})

    assert config.frequency == 5.0
    assert config.mqtt.topic == "explicit"


def test_bad_numeric_env_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ODO_MQTT_PORT", "eighty")
    with pytest.raises(OdoConfigError):
        MqttSettings.from_env()


def test_mqtt_settings_validation() -> None:
    with pytest.raises(OdoConfigError):
        MqttSettings(qos=3)
    with pytest.raises(OdoConfigError):
        MqttSettings(topic="")


def test_password_hidden_from_repr() -> None:
    settings = MqttSettings(username="user", password="hunter2")
    assert "hunter2" not in repr(settings)
