"""
Verification orchestrator for the PULSE LIVENESS system.

This module sequences the proof-of-life pipeline:

1. Check that a biometric prompt can be shown
2. Present the prompt
3. Extract liveness features (measured + synthetic)
4. Run the perceptron and scale its confidence to a transport score
5. Assemble a result ready for backend submission

Every runtime failure becomes a VerificationResult with succeeded=False and
a tag naming the failing stage. Only invariant violations, which indicate a
defect, propagate to the caller.

The emergency check-in path runs the same pipeline and only relabels a
successful result. The client always reports its honestly computed score;
resetting the vault to the maximum score is the backend's decision.
"""

from datetime import datetime
from typing import Callable, Optional
import numpy as np
import structlog

from .biometrics import BiometricAuthenticator
from .config import PROMPT_MESSAGE, RANDOM_SEED, SYNTHETIC_JITTER_WIDTH
from .constants import (
    AUTHENTICATION_FAILED_REASON,
    TAG_BIOMETRIC_FAILED,
    TAG_BIOMETRIC_UNAVAILABLE,
    TAG_EMERGENCY_CHECKIN,
    TAG_MOBILE_BIOMETRIC,
    TAG_VERIFICATION_ERROR,
    UNAVAILABLE_REASON,
)
from .data_models import FeatureContext, VerificationResult
from .exceptions import InvariantViolationError
from .feature_extraction import FeatureExtractor
from .perceptron import Perceptron
from .utils import timer

# Initialize structured logger
logger = structlog.get_logger(__name__)


def default_extractor() -> FeatureExtractor:
    """Feature extractor built from PULSE_SYNTHETIC_JITTER and PULSE_RANDOM_SEED."""
    return FeatureExtractor(
        rng=np.random.default_rng(RANDOM_SEED), jitter=SYNTHETIC_JITTER_WIDTH
    )


class VerificationOrchestrator:
    """
    Runs the verification pipeline end to end.

    The orchestrator holds only its collaborators; each invocation is
    independent. Concurrent invocations are not deduplicated, so callers
    that must prevent a double prompt should disable their trigger while a
    verification is running.

    Parameters
    ----------
    authenticator : BiometricAuthenticator
        Adapter over the platform biometric prompt.
    extractor : Optional[FeatureExtractor], default=None
        Feature extractor. Defaults to default_extractor().
    classifier : Optional[Perceptron], default=None
        Liveness classifier. Defaults to the built-in weights.
    prompt_message : Optional[str], default=None
        Text of the biometric prompt. Defaults to the configured message.
    clock : Optional[Callable[[], datetime]], default=None
        Reference time for feature extraction. Defaults to the current time.

    Examples
    --------
    >>> orchestrator = VerificationOrchestrator(authenticator)
    >>> result = orchestrator.run_verification(last_verified_at=None)
    >>> result.invocation_tag
    'mobile_biometric'
    """

    def __init__(
        self,
        authenticator: BiometricAuthenticator,
        extractor: Optional[FeatureExtractor] = None,
        classifier: Optional[Perceptron] = None,
        prompt_message: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.authenticator = authenticator
        self.extractor = extractor or default_extractor()
        self.classifier = classifier or Perceptron()
        self.prompt_message = prompt_message or PROMPT_MESSAGE
        self.clock = clock

    def _fail(self, invocation_tag: str, reason: str, **log_fields) -> VerificationResult:
        logger.info(
            "Verification failed",
            invocation_tag=invocation_tag,
            failure_reason=reason,
            **log_fields,
        )
        return VerificationResult.failure(invocation_tag, reason)

    @timer
    def run_verification(
        self, last_verified_at: Optional[datetime] = None
    ) -> VerificationResult:
        """
        Run a normal proof-of-life verification.

        Parameters
        ----------
        last_verified_at : Optional[datetime], default=None
            Time of the previous successful verification, or None if the
            user has never verified.

        Returns
        -------
        VerificationResult
            Tagged "mobile_biometric" on success; "biometric_unavailable",
            "biometric_failed" or "verification_error" on failure.

        Raises
        ------
        InvariantViolationError
            If a feature or weight vector breaks its invariants.
        """
        logger.info(
            "Starting verification",
            last_verified_at=(
                str(last_verified_at) if last_verified_at is not None else None
            ),
        )

        # Step 1: Check biometric availability
        try:
            availability = self.authenticator.check_availability()
        except Exception as e:
            return self._fail(
                TAG_BIOMETRIC_UNAVAILABLE,
                f"{UNAVAILABLE_REASON}: {e}",
                error_type=type(e).__name__,
            )

        if not availability.available:
            return self._fail(TAG_BIOMETRIC_UNAVAILABLE, UNAVAILABLE_REASON)

        # Step 2: Request biometric authentication
        try:
            outcome = self.authenticator.authenticate(self.prompt_message)
        except Exception as e:
            return self._fail(
                TAG_BIOMETRIC_FAILED,
                str(e).strip() or AUTHENTICATION_FAILED_REASON,
                error_type=type(e).__name__,
            )

        if not outcome.succeeded:
            return self._fail(
                TAG_BIOMETRIC_FAILED,
                outcome.failure_reason or AUTHENTICATION_FAILED_REASON,
                sensor_kind=availability.kind,
            )

        try:
            # Step 3: Extract features
            context = FeatureContext(
                authentication_succeeded=True, last_verified_at=last_verified_at
            )
            now = self.clock() if self.clock else outcome.occurred_at
            features = self.extractor.extract(context, now)

            # Step 4: Run perceptron
            confidence = self.classifier.predict(features)
            transport_score = Perceptron.to_transport_score(confidence)

            # Step 5: Assemble result
            result = VerificationResult(
                succeeded=True,
                transport_score=transport_score,
                raw_confidence=confidence,
                features=features,
                invocation_tag=TAG_MOBILE_BIOMETRIC,
            )
        except InvariantViolationError:
            logger.error("Verification pipeline invariant violated", exc_info=True)
            raise
        except Exception as e:
            return self._fail(
                TAG_VERIFICATION_ERROR,
                f"Unexpected error during verification: {e}",
                error_type=type(e).__name__,
            )

        logger.info(
            "Verification completed",
            verification_id=result.verification_id,
            transport_score=result.transport_score,
            raw_confidence=result.raw_confidence,
            sensor_kind=availability.kind,
        )

        return result

    def run_emergency_verification(
        self, last_verified_at: Optional[datetime] = None
    ) -> VerificationResult:
        """
        Run an emergency check-in verification.

        Identical to run_verification; a successful result is relabelled
        "emergency_checkin" and a failed one keeps its failure tag. The
        score is not altered here.

        Parameters
        ----------
        last_verified_at : Optional[datetime], default=None
            Time of the previous successful verification.

        Returns
        -------
        VerificationResult
            The verification result, relabelled on success.
        """
        result = self.run_verification(last_verified_at)
        if not result.succeeded:
            return result

        logger.info(
            "Emergency check-in verified",
            verification_id=result.verification_id,
            transport_score=result.transport_score,
        )
        return result.with_invocation_tag(TAG_EMERGENCY_CHECKIN)


def run_verification(
    authenticator: BiometricAuthenticator,
    last_verified_at: Optional[datetime] = None,
) -> VerificationResult:
    """Convenience function: run a normal verification with default components."""
    return VerificationOrchestrator(authenticator).run_verification(last_verified_at)


def run_emergency_verification(
    authenticator: BiometricAuthenticator,
    last_verified_at: Optional[datetime] = None,
) -> VerificationResult:
    """Convenience function: run an emergency verification with default components."""
    return VerificationOrchestrator(authenticator).run_emergency_verification(
        last_verified_at
    )
