"""
Tests for the fixed-weight perceptron: invariants, sigmoid bounds, transport
score rounding and the active / inactive reference profiles.
"""

from __future__ import annotations

import math

import numpy as np
import pytest

from pulse_liveness.constants import DEFAULT_BIAS, DEFAULT_WEIGHTS, FEATURE_NAMES
from pulse_liveness.exceptions import (
    ClassifierConfigurationError,
    FeatureVectorError,
    InvariantViolationError,
)
from pulse_liveness.perceptron import Perceptron, predict_liveness, sigmoid

ACTIVE_PROFILE = [0.85, 0.80, 0.90, 0.70, 0.75, 0.50, 0.50, 0.50, 0.90, 0.60]
INACTIVE_PROFILE = [0.10, 0.10, 0.05, 0.10, 0.10, 0.05, 0.05, 0.05, 0.05, 0.05]


def test_active_profile_scores_high():
    perceptron = Perceptron()
    confidence = perceptron.predict(ACTIVE_PROFILE)

    assert 0.7 < confidence < 1.0
    assert confidence == pytest.approx(0.85, abs=0.02)
    assert 7000 <= Perceptron.to_transport_score(confidence) <= 10000


def test_inactive_profile_scores_low():
    perceptron = Perceptron()
    confidence = perceptron.predict(INACTIVE_PROFILE)

    assert 0.0 < confidence < 0.4
    assert 0.04 < confidence < 0.15
    assert 0 <= Perceptron.to_transport_score(confidence) <= 4000


def test_midpoint_vector_is_strictly_inside_unit_interval():
    confidence = Perceptron().predict([0.5] * 10)
    assert 0.0 < confidence < 1.0


@pytest.mark.parametrize("length", [0, 2, 9, 11])
def test_predict_rejects_wrong_length(length):
    with pytest.raises(FeatureVectorError, match="Expected 10 features"):
        Perceptron().predict([0.5] * length)


def test_predict_rejects_out_of_range_values():
    with pytest.raises(FeatureVectorError):
        Perceptron().predict([0.5] * 9 + [1.5])


def test_predict_rejects_non_finite_values():
    with pytest.raises(FeatureVectorError):
        Perceptron().predict([0.5] * 9 + [float("nan")])


@pytest.mark.parametrize("length", [2, 9, 11])
def test_constructor_rejects_wrong_weight_count(length):
    with pytest.raises(ClassifierConfigurationError, match="Expected 10 weights"):
        Perceptron(weights=[0.5] * length)


def test_invariant_errors_share_a_base():
    with pytest.raises(InvariantViolationError):
        Perceptron(weights=[0.5, 0.5])


def test_constructor_rejects_non_finite_bias():
    with pytest.raises(ClassifierConfigurationError):
        Perceptron(bias=float("inf"))


@pytest.mark.parametrize("bias", ["high", [1.0], {}])
def test_constructor_rejects_non_numeric_bias(bias):
    with pytest.raises(ClassifierConfigurationError, match="Bias is not numeric"):
        Perceptron(bias=bias)


def test_constructor_reports_shape_of_matrix_weights():
    with pytest.raises(ClassifierConfigurationError, match=r"got shape \(2, 5\)"):
        Perceptron(weights=[[0.5] * 5, [0.5] * 5])


@pytest.mark.parametrize(
    "confidence,expected",
    [(0.0, 0), (1.0, 10000), (0.5, 5000), (0.8523, 8523), (0.25, 2500), (0.00004, 0), (0.99996, 10000)],
)
def test_transport_score_rounding(confidence, expected):
    assert Perceptron.to_transport_score(confidence) == expected


def test_transport_score_clamps_out_of_range_confidence():
    assert Perceptron.to_transport_score(-0.2) == 0
    assert Perceptron.to_transport_score(1.3) == 10000


def test_custom_weights_pin_output():
    perceptron = Perceptron(weights=[0.0] * 10, bias=0.0)
    assert perceptron.predict(ACTIVE_PROFILE) == 0.5


def test_decision_value_matches_weighted_sum():
    perceptron = Perceptron()
    expected = DEFAULT_BIAS + sum(w * x for w, x in zip(DEFAULT_WEIGHTS, ACTIVE_PROFILE))
    assert perceptron.decision_value(ACTIVE_PROFILE) == pytest.approx(expected)


def test_weights_are_immutable_copy():
    weights = list(DEFAULT_WEIGHTS)
    perceptron = Perceptron(weights=weights)
    weights[0] = 100.0

    assert perceptron.weights[0] == DEFAULT_WEIGHTS[0]
    with pytest.raises(ValueError):
        perceptron.weights[0] = 5.0


def test_predict_is_pure():
    perceptron = Perceptron()
    features = np.array(ACTIVE_PROFILE)
    assert perceptron.predict(features) == perceptron.predict(features)
    np.testing.assert_array_equal(features, ACTIVE_PROFILE)


def test_sigmoid_is_stable_for_large_inputs():
    assert sigmoid(1000.0) == 1.0
    assert sigmoid(-1000.0) == 0.0
    assert sigmoid(0.0) == 0.5
    assert sigmoid(2.0) == pytest.approx(1.0 / (1.0 + math.exp(-2.0)))


def test_describe_names_every_weight():
    description = Perceptron().describe()
    assert list(description["weights"]) == list(FEATURE_NAMES)
    assert description["bias"] == DEFAULT_BIAS


def test_predict_liveness_returns_transport_score():
    assert predict_liveness([0.5] * 10) == 5000
