"""
Pytest fixtures for PULSE LIVENESS tests: in-memory biometric backends,
a fixed clock and seeded random generators.
"""

from __future__ import annotations

from datetime import datetime, timezone

import numpy as np
import pytest

from pulse_liveness.biometrics import BiometricAuthenticator
from pulse_liveness.feature_extraction import FeatureExtractor
from pulse_liveness.utils import configure_logging
from pulse_liveness.verification import VerificationOrchestrator

FIXED_NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    """Keep stdout free for CLI output; only warnings and errors reach stderr."""
    configure_logging("WARNING")


class FakeBiometricBackend:
    """Scriptable backend that records every prompt it is asked to show."""

    def __init__(
        self,
        available=True,
        kind="fingerprint",
        prompt_result=True,
        availability_error=None,
        prompt_error=None,
    ):
        self.available = available
        self.kind = kind
        self.prompt_result = prompt_result
        self.availability_error = availability_error
        self.prompt_error = prompt_error
        self.prompts = []

    def is_sensor_available(self):
        if self.availability_error is not None:
            raise self.availability_error
        return self.available, self.kind

    def simple_prompt(self, prompt_message, cancel_text):
        self.prompts.append((prompt_message, cancel_text))
        if self.prompt_error is not None:
            raise self.prompt_error
        return self.prompt_result


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fake_backend():
    return FakeBiometricBackend()


@pytest.fixture
def authenticator(fake_backend):
    return BiometricAuthenticator(fake_backend, clock=lambda: FIXED_NOW)


@pytest.fixture
def seeded_extractor():
    return FeatureExtractor(rng=np.random.default_rng(1234))


@pytest.fixture
def make_orchestrator():
    """Build an orchestrator over a given backend with a seeded extractor."""

    def _make(backend, seed=1234, **kwargs):
        authenticator = BiometricAuthenticator(backend, clock=lambda: FIXED_NOW)
        extractor = FeatureExtractor(rng=np.random.default_rng(seed))
        return VerificationOrchestrator(authenticator, extractor=extractor, **kwargs)

    return _make


@pytest.fixture
def backend_factory():
    return FakeBiometricBackend
