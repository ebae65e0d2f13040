"""
Constants and model parameters for the PULSE LIVENESS system.

This module centralizes every fixed parameter of the verification pipeline:
the feature layout, the synthetic feature baselines, the recency decay, the
perceptron weights and the invocation tags understood by the backend. The
perceptron is not trained; its weights are configuration and live here.
"""

from typing import Final, Tuple

# =============================================================================
# Feature Layout
# =============================================================================

# Length of every feature vector and weight vector
FEATURE_COUNT: Final[int] = 10

# Feature names in index order; index positions are part of the contract
FEATURE_NAMES: Final[Tuple[str, ...]] = (
    "face_match_score",
    "face_liveness_score",
    "fingerprint_frequency",
    "fingerprint_consistency",
    "time_of_day_normality",
    "typing_pattern_match",
    "app_usage_match",
    "movement_pattern_match",
    "days_since_last_verify",
    "session_behavior",
)

# Indices backed by measured signals
FINGERPRINT_INDEX: Final[int] = 2
RECENCY_INDEX: Final[int] = 8

# =============================================================================
# Measured Feature Parameters
# =============================================================================

# Fingerprint signal for a successful / failed authentication
FINGERPRINT_SUCCESS_VALUE: Final[float] = 0.9
FINGERPRINT_FAILURE_VALUE: Final[float] = 0.1

# Recency decays exponentially as exp(-days / RECENCY_DECAY_DAYS)
RECENCY_DECAY_DAYS: Final[float] = 7.0

# Recency when there is no previous verification at all
NEVER_VERIFIED_RECENCY: Final[float] = 0.1

SECONDS_PER_DAY: Final[float] = 86400.0

# =============================================================================
# Synthetic Feature Parameters
# =============================================================================

# Baselines for signals that are not measured yet, keyed by feature index.
# Values describe a typical active user.
SYNTHETIC_BASELINES: Final[Tuple[Tuple[int, float], ...]] = (
    (0, 0.85),  # face_match_score
    (1, 0.80),  # face_liveness_score
    (3, 0.70),  # fingerprint_consistency
    (4, 0.75),  # time_of_day_normality
    (5, 0.50),  # typing_pattern_match
    (6, 0.50),  # app_usage_match
    (7, 0.50),  # movement_pattern_match
    (9, 0.60),  # session_behavior
)

# Half-width of the uniform offset applied to each synthetic baseline
SYNTHETIC_JITTER: Final[float] = 0.05

# Upper bound accepted for a configured jitter
MAX_SYNTHETIC_JITTER: Final[float] = 0.5

# =============================================================================
# Perceptron Parameters
# =============================================================================

# Proportional importance: face > fingerprint > time of day > patterns.
# Active profile lands near 0.85, inactive profile near 0.05.
DEFAULT_WEIGHTS: Final[Tuple[float, ...]] = (
    1.75,  # face_match_score
    1.40,  # face_liveness_score
    0.70,  # fingerprint_frequency
    0.70,  # fingerprint_consistency
    0.56,  # time_of_day_normality
    0.49,  # typing_pattern_match
    0.35,  # app_usage_match
    0.35,  # movement_pattern_match
    0.35,  # days_since_last_verify
    0.35,  # session_behavior
)

DEFAULT_BIAS: Final[float] = -3.5

# Confidence in [0, 1] is scaled to an integer in [0, TRANSPORT_SCORE_SCALE]
TRANSPORT_SCORE_SCALE: Final[int] = 10000

# =============================================================================
# Invocation Tags
# =============================================================================

TAG_MOBILE_BIOMETRIC: Final[str] = "mobile_biometric"
TAG_EMERGENCY_CHECKIN: Final[str] = "emergency_checkin"
TAG_BIOMETRIC_UNAVAILABLE: Final[str] = "biometric_unavailable"
TAG_BIOMETRIC_FAILED: Final[str] = "biometric_failed"
TAG_VERIFICATION_ERROR: Final[str] = "verification_error"

SUCCESS_TAGS: Final[Tuple[str, ...]] = (TAG_MOBILE_BIOMETRIC, TAG_EMERGENCY_CHECKIN)
FAILURE_TAGS: Final[Tuple[str, ...]] = (
    TAG_BIOMETRIC_UNAVAILABLE,
    TAG_BIOMETRIC_FAILED,
    TAG_VERIFICATION_ERROR,
)

# =============================================================================
# Prompt and Failure Messages
# =============================================================================

DEFAULT_PROMPT_MESSAGE: Final[str] = "Pulse Protocol - Verify you are alive"
DEFAULT_CANCEL_TEXT: Final[str] = "Cancel"

UNAVAILABLE_REASON: Final[str] = (
    "Biometric authentication is not available on this device"
)
AUTHENTICATION_FAILED_REASON: Final[str] = (
    "Biometric authentication was cancelled or failed"
)
DEFAULT_BACKEND_ERROR: Final[str] = "Biometric authentication failed"
