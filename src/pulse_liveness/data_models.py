"""
Data models for the PULSE LIVENESS system.

This module defines the values passed between pipeline stages. All models are
frozen dataclasses: an authentication outcome, a feature context or a
verification result is created once and never mutated afterwards. Feature
vectors held by a result are stored as read-only numpy arrays so a caller
forwarding a result cannot alter the features behind it.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional
from datetime import datetime
import numpy as np

from .constants import FEATURE_NAMES, TAG_EMERGENCY_CHECKIN, TRANSPORT_SCORE_SCALE
from .normalization import validate_feature_vector
from .utils import ensure_utc, generate_verification_id, utc_now


def _frozen_array(values: Any) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


@dataclass(frozen=True)
class BiometricAvailability:
    """
    Whether the device can present a biometric prompt.

    Parameters
    ----------
    available : bool
        True if a biometric sensor is present and enrolled.
    kind : Optional[str], default=None
        Platform name of the sensor (e.g. "fingerprint", "face").
    """

    available: bool
    kind: Optional[str] = None


@dataclass(frozen=True)
class AuthenticationOutcome:
    """
    Result of a single biometric prompt.

    Only the pass/fail flag and the time of the attempt are kept; no raw
    biometric data is ever carried.

    Parameters
    ----------
    succeeded : bool
        True if the user passed the prompt.
    occurred_at : datetime
        When the prompt resolved (normalized to UTC).
    failure_reason : Optional[str], default=None
        Human-readable reason when the prompt failed or was cancelled.
    """

    succeeded: bool
    occurred_at: datetime
    failure_reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime")
        object.__setattr__(self, "occurred_at", ensure_utc(self.occurred_at))


@dataclass(frozen=True)
class FeatureContext:
    """
    Measured inputs for one feature extraction.

    Parameters
    ----------
    authentication_succeeded : bool
        Outcome of the biometric prompt.
    last_verified_at : Optional[datetime], default=None
        Time of the previous successful verification, or None if the user
        has never verified.
    """

    authentication_succeeded: bool
    last_verified_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.last_verified_at is not None and not isinstance(
            self.last_verified_at, datetime
        ):
            raise ValueError("last_verified_at must be a datetime or None")
        object.__setattr__(self, "last_verified_at", ensure_utc(self.last_verified_at))


@dataclass(frozen=True)
class VerificationResult:
    """
    Outcome of one orchestrated verification.

    A successful result carries the full 10-element feature vector, the raw
    classifier confidence and the integer transport score. A failed result
    carries a zero score, zero confidence, an empty feature vector and a
    failure reason.

    Parameters
    ----------
    succeeded : bool
        True if the whole pipeline completed.
    transport_score : int
        Confidence scaled to an integer in [0, 10000].
    raw_confidence : float
        Classifier output in [0, 1].
    features : np.ndarray
        Feature vector used for the prediction (read-only).
    invocation_tag : str
        Context of the verification, read by the backend to pick a policy.
    failure_reason : Optional[str], default=None
        Reason for a failed verification.
    verification_id : str
        Identifier for telemetry correlation.
    completed_at : datetime
        When the result was assembled.

    Examples
    --------
    >>> result = VerificationResult.failure("biometric_failed", "cancelled")
    >>> result.succeeded, result.transport_score, len(result.features)
    (False, 0, 0)
    """

    succeeded: bool
    transport_score: int
    raw_confidence: float
    features: np.ndarray = field(compare=False)
    invocation_tag: str
    failure_reason: Optional[str] = None
    verification_id: str = field(default_factory=generate_verification_id, compare=False)
    completed_at: datetime = field(default_factory=utc_now, compare=False)

    def __post_init__(self) -> None:
        """
        Validate the result and freeze its feature vector.

        Raises
        ------
        ValueError
            If score, confidence or tag are invalid.
        FeatureVectorError
            If a successful result does not carry a valid feature vector.
        """
        if not self.invocation_tag or not isinstance(self.invocation_tag, str):
            raise ValueError("invocation_tag must be a non-empty string")

        if isinstance(self.transport_score, bool) or not isinstance(
            self.transport_score, (int, np.integer)
        ):
            raise ValueError("transport_score must be an integer")

        if not 0 <= self.transport_score <= TRANSPORT_SCORE_SCALE:
            raise ValueError(
                f"transport_score must be between 0 and {TRANSPORT_SCORE_SCALE}"
            )

        if not 0.0 <= self.raw_confidence <= 1.0:
            raise ValueError("raw_confidence must be between 0.0 and 1.0")

        if self.succeeded:
            features = validate_feature_vector(self.features)
        else:
            features = np.asarray(self.features, dtype=np.float64)
            if features.size != 0:
                raise ValueError("a failed result must not carry features")

        object.__setattr__(self, "transport_score", int(self.transport_score))
        object.__setattr__(self, "raw_confidence", float(self.raw_confidence))
        object.__setattr__(self, "features", _frozen_array(features))
        object.__setattr__(self, "completed_at", ensure_utc(self.completed_at))

    @classmethod
    def failure(cls, invocation_tag: str, failure_reason: str) -> "VerificationResult":
        """Build the zeroed failure variant of a result."""
        return cls(
            succeeded=False,
            transport_score=0,
            raw_confidence=0.0,
            features=np.empty(0, dtype=np.float64),
            invocation_tag=invocation_tag,
            failure_reason=failure_reason,
        )

    @property
    def is_emergency(self) -> bool:
        """True if this result was produced by the emergency check-in path."""
        return self.invocation_tag == TAG_EMERGENCY_CHECKIN

    def with_invocation_tag(self, invocation_tag: str) -> "VerificationResult":
        """
        Return a copy of this result carrying a different invocation tag.

        Every other field, including the verification id, is preserved.
        """
        return replace(self, invocation_tag=invocation_tag)

    def named_features(self) -> Dict[str, float]:
        """
        Map feature names to their values.

        Returns
        -------
        Dict[str, float]
            Empty for failed results.
        """
        if len(self.features) == 0:
            return {}
        return {name: float(value) for name, value in zip(FEATURE_NAMES, self.features)}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to a dictionary for serialization.

        Returns
        -------
        Dict[str, Any]
            JSON-compatible representation of the result.
        """
        return {
            "verification_id": self.verification_id,
            "succeeded": self.succeeded,
            "transport_score": self.transport_score,
            "raw_confidence": self.raw_confidence,
            "features": self.features.tolist(),
            "named_features": self.named_features(),
            "invocation_tag": self.invocation_tag,
            "failure_reason": self.failure_reason,
            "completed_at": self.completed_at.isoformat(),
        }
