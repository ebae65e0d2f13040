"""
Liveness feature extraction for the PULSE LIVENESS system.

This module turns the outcome of a biometric prompt into the fixed
10-element feature vector consumed by the perceptron. Two indices are
measured:

- index 2 (fingerprint signal): 0.9 after a successful prompt, 0.1 otherwise
- index 8 (recency signal): exp(-days / 7) since the previous verification,
  or 0.1 when the user has never verified

The other eight indices stand in for signals this system does not measure
yet. Each is a fixed baseline shifted by a uniform offset in
[-jitter, +jitter] and clamped to [0, 1], so repeated extractions from the
same inputs do not produce bit-identical scores. The offsets come from an
injectable numpy Generator; tests pass a seeded one.
"""

import math
import numpy as np
from datetime import datetime
from typing import Optional
import structlog

from .constants import (
    FEATURE_COUNT,
    FINGERPRINT_FAILURE_VALUE,
    FINGERPRINT_INDEX,
    FINGERPRINT_SUCCESS_VALUE,
    NEVER_VERIFIED_RECENCY,
    RECENCY_DECAY_DAYS,
    RECENCY_INDEX,
    SECONDS_PER_DAY,
    SYNTHETIC_BASELINES,
    SYNTHETIC_JITTER,
    MAX_SYNTHETIC_JITTER,
)
from .data_models import FeatureContext
from .exceptions import ConfigurationError
from .normalization import clamp_unit, feature_vector_statistics, validate_feature_vector
from .utils import ensure_utc, utc_now

# Initialize structured logger
logger = structlog.get_logger(__name__)


def recency_signal(last_verified_at: Optional[datetime], now: datetime) -> float:
    """
    Map the time since the last verification onto [0, 1].

    Parameters
    ----------
    last_verified_at : Optional[datetime]
        Previous successful verification, or None if there was none.
    now : datetime
        Reference time.

    Returns
    -------
    float
        exp(-days_elapsed / 7) clamped to [0, 1], or NEVER_VERIFIED_RECENCY
        when there is no previous verification. A timestamp in the future
        clamps to 1.0.

    Examples
    --------
    >>> from datetime import timedelta
    >>> now = utc_now()
    >>> recency_signal(now - timedelta(days=7), now)  # ~0.368
    """
    if last_verified_at is None:
        return NEVER_VERIFIED_RECENCY

    elapsed = ensure_utc(now) - ensure_utc(last_verified_at)
    # Future timestamps count as zero days elapsed.
    days_elapsed = max(0.0, elapsed.total_seconds() / SECONDS_PER_DAY)

    return clamp_unit(math.exp(-days_elapsed / RECENCY_DECAY_DAYS))


class FeatureExtractor:
    """
    Builds liveness feature vectors from a feature context.

    The extractor holds no per-call state; its only member besides the
    jitter width is the random generator used for synthetic offsets.

    Parameters
    ----------
    rng : Optional[np.random.Generator], default=None
        Source of the synthetic offsets. A fresh, OS-seeded generator is
        created when omitted.
    jitter : float, default=SYNTHETIC_JITTER
        Half-width of the uniform offset applied to synthetic features.

    Raises
    ------
    ConfigurationError
        If jitter is negative or larger than MAX_SYNTHETIC_JITTER.

    Examples
    --------
    >>> extractor = FeatureExtractor(rng=np.random.default_rng(7))
    >>> features = extractor.extract(FeatureContext(True, None))
    >>> features.shape
    (10,)
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        jitter: float = SYNTHETIC_JITTER,
    ) -> None:
        if not 0.0 <= jitter <= MAX_SYNTHETIC_JITTER:
            raise ConfigurationError(
                f"Synthetic jitter must be between 0.0 and {MAX_SYNTHETIC_JITTER}",
                config_key="synthetic_jitter",
                config_value=str(jitter),
            )

        self.rng = rng if rng is not None else np.random.default_rng()
        self.jitter = float(jitter)

    def _synthetic_value(self, baseline: float) -> float:
        offset = self.rng.uniform(-self.jitter, self.jitter) if self.jitter else 0.0
        return clamp_unit(baseline + offset)

    def extract(
        self, context: FeatureContext, now: Optional[datetime] = None
    ) -> np.ndarray:
        """
        Extract the feature vector for one verification attempt.

        Parameters
        ----------
        context : FeatureContext
            Prompt outcome and previous verification time.
        now : Optional[datetime], default=None
            Reference time for the recency signal. Defaults to the current
            UTC time.

        Returns
        -------
        np.ndarray
            Float64 vector of exactly FEATURE_COUNT values in [0, 1].

        Raises
        ------
        FeatureVectorError
            If the assembled vector breaks the length or range invariant.
        """
        now = ensure_utc(now) if now is not None else utc_now()

        features = np.zeros(FEATURE_COUNT, dtype=np.float64)
        for index, baseline in SYNTHETIC_BASELINES:
            features[index] = self._synthetic_value(baseline)

        features[FINGERPRINT_INDEX] = (
            FINGERPRINT_SUCCESS_VALUE
            if context.authentication_succeeded
            else FINGERPRINT_FAILURE_VALUE
        )
        features[RECENCY_INDEX] = recency_signal(context.last_verified_at, now)

        features = validate_feature_vector(features)

        logger.debug(
            "Liveness features extracted",
            authentication_succeeded=context.authentication_succeeded,
            never_verified=context.last_verified_at is None,
            fingerprint_signal=float(features[FINGERPRINT_INDEX]),
            recency_signal=float(features[RECENCY_INDEX]),
            feature_stats=feature_vector_statistics(features),
        )

        return features


def extract_features(
    context: FeatureContext,
    now: Optional[datetime] = None,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    Convenience function for one-off feature extraction.

    Parameters
    ----------
    context : FeatureContext
        Prompt outcome and previous verification time.
    now : Optional[datetime], default=None
        Reference time for the recency signal.
    rng : Optional[np.random.Generator], default=None
        Source of the synthetic offsets.

    Returns
    -------
    np.ndarray
        Liveness feature vector.
    """
    return FeatureExtractor(rng=rng).extract(context, now)
