"""
Fixed-weight perceptron for the PULSE LIVENESS system.

This module implements the liveness classifier: a single linear unit with a
logistic activation. Weights and bias are configuration, not learned
parameters. The defaults are tuned so that an active-user profile scores
around 0.85 and an inactive profile around 0.05.

The classifier is a pure function of its weights, its bias and its input,
and is safe to share between concurrent verifications.
"""

import math
import numpy as np
from typing import Dict, Any, Optional, Sequence
import structlog

from .constants import (
    DEFAULT_BIAS,
    DEFAULT_WEIGHTS,
    FEATURE_COUNT,
    FEATURE_NAMES,
    TRANSPORT_SCORE_SCALE,
)
from .exceptions import ClassifierConfigurationError
from .normalization import validate_feature_vector, VectorLike

# Initialize structured logger
logger = structlog.get_logger(__name__)


def sigmoid(z: float) -> float:
    """
    Logistic function 1 / (1 + e^-z), evaluated without overflow.

    Parameters
    ----------
    z : float
        Pre-activation value.

    Returns
    -------
    float
        Value in the open interval (0, 1) for finite moderate z.
    """
    if z >= 0:
        return float(1.0 / (1.0 + np.exp(-z)))

    exp_z = np.exp(z)
    return float(exp_z / (1.0 + exp_z))


class Perceptron:
    """
    Linear liveness classifier with a sigmoid output.

    Parameters
    ----------
    weights : Optional[Sequence[float]], default=None
        Exactly FEATURE_COUNT weights, paired positionally with the feature
        vector. Defaults to DEFAULT_WEIGHTS.
    bias : Optional[float], default=None
        Bias term. Defaults to DEFAULT_BIAS.

    Raises
    ------
    ClassifierConfigurationError
        If the weight vector does not have exactly FEATURE_COUNT finite
        values or the bias is not finite.

    Examples
    --------
    >>> perceptron = Perceptron()
    >>> confidence = perceptron.predict([0.5] * 10)
    >>> Perceptron.to_transport_score(confidence)
    5000
    """

    def __init__(
        self,
        weights: Optional[Sequence[float]] = None,
        bias: Optional[float] = None,
    ) -> None:
        weights = DEFAULT_WEIGHTS if weights is None else weights
        bias = DEFAULT_BIAS if bias is None else bias

        try:
            weight_array = np.array(weights, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ClassifierConfigurationError(
                f"Weights are not numeric: {e}", expected_count=FEATURE_COUNT
            )

        if weight_array.ndim != 1 or len(weight_array) != FEATURE_COUNT:
            found = weight_array.size if weight_array.ndim == 1 else f"shape {weight_array.shape}"
            raise ClassifierConfigurationError(
                f"Expected {FEATURE_COUNT} weights, got {found}",
                weight_count=int(weight_array.size),
                expected_count=FEATURE_COUNT,
            )

        if not np.isfinite(weight_array).all():
            raise ClassifierConfigurationError(
                "Weights must be finite",
                weight_count=FEATURE_COUNT,
                expected_count=FEATURE_COUNT,
            )

        try:
            bias = float(bias)
        except (TypeError, ValueError) as e:
            raise ClassifierConfigurationError(f"Bias is not numeric: {e}")

        if not math.isfinite(bias):
            raise ClassifierConfigurationError(f"Bias must be finite, got {bias}")

        weight_array.setflags(write=False)
        self._weights = weight_array
        self._bias = bias

        logger.debug(
            "Perceptron initialized",
            weight_sum=float(np.sum(weight_array)),
            bias=self._bias,
        )

    @property
    def weights(self) -> np.ndarray:
        """Read-only view of the weight vector."""
        return self._weights

    @property
    def bias(self) -> float:
        return self._bias

    def decision_value(self, features: VectorLike) -> float:
        """
        Pre-activation value z = bias + sum(weight[i] * feature[i]).

        Raises
        ------
        FeatureVectorError
            If the input is not a valid feature vector.
        """
        vector = validate_feature_vector(features)
        return float(self._bias + np.dot(self._weights, vector))

    def predict(self, features: VectorLike) -> float:
        """
        Classify a feature vector.

        Parameters
        ----------
        features : array-like
            Exactly FEATURE_COUNT values in [0, 1].

        Returns
        -------
        float
            Liveness confidence in (0, 1).

        Raises
        ------
        FeatureVectorError
            If the input is not a valid feature vector.
        """
        z = self.decision_value(features)
        confidence = sigmoid(z)

        logger.debug("Perceptron prediction", decision_value=z, confidence=confidence)

        return confidence

    @staticmethod
    def to_transport_score(confidence: float) -> int:
        """
        Scale a confidence to the integer transport score.

        Rounds half away from zero and clamps to [0, TRANSPORT_SCORE_SCALE].

        Examples
        --------
        >>> Perceptron.to_transport_score(0.8523)
        8523
        >>> Perceptron.to_transport_score(1.0)
        10000
        """
        scaled = float(confidence) * TRANSPORT_SCORE_SCALE
        if not math.isfinite(scaled):
            raise ValueError(f"Confidence must be finite, got {confidence}")

        rounded = int(math.floor(abs(scaled) + 0.5))
        rounded = rounded if scaled >= 0 else -rounded

        return max(0, min(TRANSPORT_SCORE_SCALE, rounded))

    def describe(self) -> Dict[str, Any]:
        """
        Describe the classifier configuration.

        Returns
        -------
        Dict[str, Any]
            Named weights and the bias.
        """
        return {
            "weights": {
                name: float(weight) for name, weight in zip(FEATURE_NAMES, self._weights)
            },
            "bias": self._bias,
        }


def predict_liveness(features: VectorLike) -> int:
    """
    Convenience function: classify with default weights and return the
    transport score.
    """
    perceptron = Perceptron()
    return Perceptron.to_transport_score(perceptron.predict(features))
