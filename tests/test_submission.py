"""
Tests for backend payload assembly and collaborator pass-through.
"""

from __future__ import annotations

import pytest

from pulse_liveness.constants import TAG_BIOMETRIC_FAILED, TAG_EMERGENCY_CHECKIN, TAG_MOBILE_BIOMETRIC
from pulse_liveness.data_models import VerificationResult
from pulse_liveness.exceptions import SubmissionError
from pulse_liveness.submission import (
    SubmissionPayload,
    build_submission_payload,
    request_emergency_checkin,
    submit_verification,
)

FEATURES = [0.85, 0.80, 0.90, 0.70, 0.75, 0.50, 0.50, 0.50, 0.90, 0.60]


class RecordingClient:
    def __init__(self, response):
        self.response = response
        self.payloads = []
        self.checkins = 0

    def submit(self, payload):
        self.payloads.append(payload)
        return self.response

    def emergency_checkin(self):
        self.checkins += 1
        return self.response


def success(tag=TAG_MOBILE_BIOMETRIC):
    return VerificationResult(
        succeeded=True,
        transport_score=8541,
        raw_confidence=0.8541,
        features=FEATURES,
        invocation_tag=tag,
    )


def test_payload_from_successful_result():
    payload = build_submission_payload(success())

    assert payload.transport_score == 8541
    assert payload.source == TAG_MOBILE_BIOMETRIC
    assert payload.features is None
    assert payload.to_variables() == {
        "input": {"perceptronOutput": 8541, "source": TAG_MOBILE_BIOMETRIC}
    }


def test_payload_feature_breakdown():
    payload = build_submission_payload(success(), include_features=True)
    breakdown = payload.feature_breakdown()

    assert breakdown["face_match_score"] == 8500
    assert breakdown["days_since_last_verify"] == 9000
    assert len(breakdown) == 10


def test_failed_result_cannot_be_submitted():
    failed = VerificationResult.failure(TAG_BIOMETRIC_FAILED, "cancelled")
    with pytest.raises(SubmissionError):
        build_submission_payload(failed)


def test_payload_validates_score():
    with pytest.raises(SubmissionError):
        SubmissionPayload(transport_score=10001, source=TAG_MOBILE_BIOMETRIC)


@pytest.mark.parametrize(
    "response,expected",
    [
        ({"transactionReference": "abc123"}, "abc123"),
        ({"score": 8541, "txHash": "deadbeef", "timestamp": "2026-01-15T12:00:00Z"}, "deadbeef"),
        ({"score": 8541, "txHash": None}, None),
        (None, None),
    ],
)
def test_submit_passes_reference_through(response, expected):
    client = RecordingClient(response)
    receipt = submit_verification(success(), client)

    assert receipt.transaction_reference == expected
    assert client.payloads[0].transport_score == 8541


def test_submit_rejects_non_mapping_response():
    with pytest.raises(SubmissionError):
        submit_verification(success(), RecordingClient(["not", "a", "mapping"]))


def test_emergency_checkin_forwards_tagged_result():
    client = RecordingClient({"score": 10000, "txHash": "ff00", "vaultStatus": "ACTIVE"})
    receipt = request_emergency_checkin(success(TAG_EMERGENCY_CHECKIN), client)

    assert client.checkins == 1
    assert receipt.transaction_reference == "ff00"
    assert receipt.response["vaultStatus"] == "ACTIVE"


def test_emergency_checkin_requires_emergency_tag():
    client = RecordingClient({})
    with pytest.raises(SubmissionError):
        request_emergency_checkin(success(TAG_MOBILE_BIOMETRIC), client)
    assert client.checkins == 0
