"""
Feature vector validation for the PULSE LIVENESS system.

Every component that produces or consumes a feature vector checks it here:
exactly FEATURE_COUNT finite values, each inside the closed unit interval.
A violation is a defect and raises FeatureVectorError; nothing is padded,
truncated or coerced.
"""

import numpy as np
from typing import Dict, Sequence, Union
import structlog

from .constants import FEATURE_COUNT
from .exceptions import FeatureVectorError

# Initialize structured logger
logger = structlog.get_logger(__name__)

VectorLike = Union[np.ndarray, Sequence[float]]


def clamp_unit(value: float) -> float:
    """Clamp a scalar into the closed interval [0, 1]."""
    return float(min(1.0, max(0.0, value)))


def validate_feature_vector(vector: VectorLike) -> np.ndarray:
    """
    Check a feature vector against the pipeline invariants.

    Parameters
    ----------
    vector : array-like
        Candidate feature vector.

    Returns
    -------
    np.ndarray
        The vector as a 1D float64 array.

    Raises
    ------
    FeatureVectorError
        If the vector is not 1D, does not have exactly FEATURE_COUNT elements,
        or holds a non-finite value or a value outside [0, 1].

    Examples
    --------
    >>> validate_feature_vector([0.5] * 10).shape
    (10,)
    """
    try:
        array = np.asarray(vector, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise FeatureVectorError(
            f"Feature vector is not numeric: {e}",
            expected_length=FEATURE_COUNT,
        )

    if array.ndim != 1:
        raise FeatureVectorError(
            f"Feature vector must be 1D, got {array.ndim}D",
            expected_length=FEATURE_COUNT,
        )

    if len(array) != FEATURE_COUNT:
        raise FeatureVectorError(
            f"Expected {FEATURE_COUNT} features, got {len(array)}",
            length=len(array),
            expected_length=FEATURE_COUNT,
        )

    if not np.isfinite(array).all():
        raise FeatureVectorError(
            "Feature vector contains non-finite values",
            length=len(array),
            expected_length=FEATURE_COUNT,
        )

    if (array < 0.0).any() or (array > 1.0).any():
        out_of_range = [int(i) for i in np.flatnonzero((array < 0.0) | (array > 1.0))]
        raise FeatureVectorError(
            f"Feature values must lie in [0, 1], indices {out_of_range} do not",
            length=len(array),
            expected_length=FEATURE_COUNT,
        )

    return array


def feature_vector_statistics(vector: np.ndarray) -> Dict[str, float]:
    """
    Summary statistics of a feature vector for structured logging.

    Parameters
    ----------
    vector : np.ndarray
        Feature vector to describe.

    Returns
    -------
    Dict[str, float]
        Mean, standard deviation, minimum and maximum.
    """
    if len(vector) == 0:
        return {"mean": 0.0, "std": 0.0, "min": 0.0, "max": 0.0}

    return {
        "mean": float(np.mean(vector)),
        "std": float(np.std(vector)),
        "min": float(np.min(vector)),
        "max": float(np.max(vector)),
    }
