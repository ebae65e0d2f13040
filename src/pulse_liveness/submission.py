"""
Backend submission payloads for the PULSE LIVENESS system.

The pipeline does not talk to the backend itself. This module assembles the
payload a submission collaborator sends ({score, source}) and passes the
collaborator's response back as a receipt without interpreting it.

Emergency check-ins are forwarded as evidence only: the backend decides
whether to reset the vault, this module never does.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol
import structlog

from .constants import TAG_EMERGENCY_CHECKIN, TRANSPORT_SCORE_SCALE
from .data_models import VerificationResult
from .exceptions import SubmissionError
from .perceptron import Perceptron

# Initialize structured logger
logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SubmissionPayload:
    """
    Score report for the backend.

    Parameters
    ----------
    transport_score : int
        Score in [0, 10000].
    source : str
        Invocation tag of the verification.
    features : Optional[Dict[str, float]], default=None
        Named feature values behind the score, if they should be reported.
    """

    transport_score: int
    source: str
    features: Optional[Dict[str, float]] = None

    def __post_init__(self) -> None:
        if not 0 <= self.transport_score <= TRANSPORT_SCORE_SCALE:
            raise SubmissionError(
                f"transport_score must be between 0 and {TRANSPORT_SCORE_SCALE}",
                source=self.source,
            )
        if not self.source:
            raise SubmissionError("source must be a non-empty string")

    def to_variables(self) -> Dict[str, Any]:
        """
        Render the variables of the backend's submitVerification mutation.

        Returns
        -------
        Dict[str, Any]
            {"input": {"perceptronOutput": score, "source": tag}}
        """
        return {
            "input": {
                "perceptronOutput": self.transport_score,
                "source": self.source,
            }
        }

    def feature_breakdown(self) -> Dict[str, int]:
        """Feature values scaled to integers in [0, 10000], keyed by name."""
        if not self.features:
            return {}
        return {
            name: Perceptron.to_transport_score(value)
            for name, value in self.features.items()
        }


@dataclass(frozen=True)
class SubmissionReceipt:
    """Collaborator response passed through to the caller."""

    transaction_reference: Optional[str]
    response: Mapping[str, Any]


class SubmissionClient(Protocol):
    """Backend collaborator that records a verification score."""

    def submit(self, payload: SubmissionPayload) -> Mapping[str, Any]:
        ...


class EmergencyCheckinClient(Protocol):
    """Backend collaborator that handles an authenticated emergency check-in."""

    def emergency_checkin(self) -> Mapping[str, Any]:
        ...


def build_submission_payload(
    result: VerificationResult, include_features: bool = False
) -> SubmissionPayload:
    """
    Build the backend payload for a successful verification.

    Parameters
    ----------
    result : VerificationResult
        Result of the verification pipeline.
    include_features : bool, default=False
        Whether to attach the named feature values.

    Returns
    -------
    SubmissionPayload
        Score and source ready for submission.

    Raises
    ------
    SubmissionError
        If the verification did not succeed.
    """
    if not result.succeeded:
        raise SubmissionError(
            "Cannot submit a failed verification",
            source=result.invocation_tag,
            context={"failure_reason": result.failure_reason},
        )

    return SubmissionPayload(
        transport_score=result.transport_score,
        source=result.invocation_tag,
        features=result.named_features() if include_features else None,
    )


def _receipt_from_response(response: Optional[Mapping[str, Any]]) -> SubmissionReceipt:
    if response is None:
        response = {}

    if not isinstance(response, Mapping):
        raise SubmissionError(
            f"Collaborator response must be a mapping, got {type(response).__name__}"
        )

    reference = response.get("transactionReference", response.get("txHash"))
    return SubmissionReceipt(
        transaction_reference=str(reference) if reference is not None else None,
        response=dict(response),
    )


def submit_verification(
    result: VerificationResult, client: SubmissionClient
) -> SubmissionReceipt:
    """
    Hand a successful verification to the submission collaborator.

    Parameters
    ----------
    result : VerificationResult
        Result of the verification pipeline.
    client : SubmissionClient
        Backend collaborator.

    Returns
    -------
    SubmissionReceipt
        The transaction reference, if the collaborator returned one.

    Raises
    ------
    SubmissionError
        If the result failed or the response is not a mapping.
    """
    payload = build_submission_payload(result)

    logger.info(
        "Submitting verification",
        verification_id=result.verification_id,
        transport_score=payload.transport_score,
        source=payload.source,
    )

    receipt = _receipt_from_response(client.submit(payload))

    logger.info(
        "Verification submitted",
        verification_id=result.verification_id,
        transaction_reference=receipt.transaction_reference,
    )
    return receipt


def request_emergency_checkin(
    result: VerificationResult, client: EmergencyCheckinClient
) -> SubmissionReceipt:
    """
    Forward an emergency check-in to the backend.

    The locally computed result serves as telemetry only. The request
    carries no body; the backend applies its own reset policy.

    Raises
    ------
    SubmissionError
        If the result is not a successful emergency verification.
    """
    if not result.succeeded or result.invocation_tag != TAG_EMERGENCY_CHECKIN:
        raise SubmissionError(
            "Emergency check-in requires a successful emergency verification",
            source=result.invocation_tag,
        )

    logger.info(
        "Requesting emergency check-in",
        verification_id=result.verification_id,
        local_transport_score=result.transport_score,
    )

    receipt = _receipt_from_response(client.emergency_checkin())

    logger.info(
        "Emergency check-in acknowledged",
        verification_id=result.verification_id,
        transaction_reference=receipt.transaction_reference,
    )
    return receipt
