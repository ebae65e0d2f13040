"""
Tests for configuration validation and the exception hierarchy.
"""

from __future__ import annotations

import pytest

from pulse_liveness import config
from pulse_liveness.exceptions import (
    BiometricUnavailableError,
    ConfigurationError,
    PulseLivenessError,
)


def test_default_configuration_is_valid():
    assert config.validate_configuration() is True


@pytest.mark.parametrize(
    "attribute,value,message",
    [
        ("LOG_LEVEL", "VERBOSE", "LOG_LEVEL"),
        ("LOG_FORMAT", "xml", "LOG_FORMAT"),
        ("SYNTHETIC_JITTER_WIDTH", 0.9, "PULSE_SYNTHETIC_JITTER"),
        ("BIOMETRIC_BACKEND", "retina", "PULSE_BIOMETRIC_BACKEND"),
        ("PROMPT_MESSAGE", "   ", "PULSE_PROMPT_MESSAGE"),
    ],
)
def test_invalid_values_are_reported(monkeypatch, attribute, value, message):
    monkeypatch.setattr(config, attribute, value)
    with pytest.raises(ValueError, match=message):
        config.validate_configuration()


def test_config_summary_shape():
    summary = config.get_config_summary()
    assert summary["logging"]["level"] == config.LOG_LEVEL
    assert summary["verification"]["synthetic_jitter"] == config.SYNTHETIC_JITTER_WIDTH


def test_error_rendering():
    error = ConfigurationError("bad value", config_key="LOG_LEVEL", config_value="LOUD")

    assert isinstance(error, PulseLivenessError)
    assert "[Error Code: CONFIG_001]" in str(error)
    assert error.to_dict()["context"] == {"config_key": "LOG_LEVEL", "config_value": "LOUD"}


def test_biometric_error_codes():
    error = BiometricUnavailableError("no sensor", backend="android")
    assert error.error_code == "BIOMETRIC_001"
    assert error.context == {"backend": "android"}
