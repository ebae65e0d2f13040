"""
Tests for the pulse-liveness command-line interface.
"""

from __future__ import annotations

import json

import pytest

from pulse_liveness.cli import PulseLivenessCLI
from pulse_liveness.constants import (
    TAG_BIOMETRIC_FAILED,
    TAG_BIOMETRIC_UNAVAILABLE,
    TAG_EMERGENCY_CHECKIN,
    TAG_MOBILE_BIOMETRIC,
)


def run_json(cli, args, capsys):
    exit_code = cli.run_from_args(args)
    return exit_code, json.loads(capsys.readouterr().out)


def test_verify_json(backend_factory, capsys):
    cli = PulseLivenessCLI(backend=backend_factory())
    exit_code, data = run_json(
        cli, ["verify", "--last-verified", "2026-01-15T11:59:59Z", "--json"], capsys
    )

    assert exit_code == 0
    assert data["succeeded"] is True
    assert data["invocation_tag"] == TAG_MOBILE_BIOMETRIC
    assert 0 <= data["transport_score"] <= 10000
    assert len(data["features"]) == 10


def test_emergency_json(backend_factory, capsys):
    cli = PulseLivenessCLI(backend=backend_factory())
    exit_code, data = run_json(cli, ["emergency", "--json"], capsys)

    assert exit_code == 0
    assert data["invocation_tag"] == TAG_EMERGENCY_CHECKIN


def test_verify_failure_exit_code(backend_factory, capsys):
    cli = PulseLivenessCLI(backend=backend_factory(prompt_result=False))
    exit_code, data = run_json(cli, ["verify", "--json"], capsys)

    assert exit_code == 1
    assert data["invocation_tag"] == TAG_BIOMETRIC_FAILED
    assert data["features"] == []


def test_verify_text_output(backend_factory, capsys):
    cli = PulseLivenessCLI(backend=backend_factory(available=False))
    exit_code = cli.run_from_args(["verify"])
    out = capsys.readouterr().out

    assert exit_code == 1
    assert "FAILED" in out
    assert TAG_BIOMETRIC_UNAVAILABLE in out


def test_invalid_timestamp_is_reported(backend_factory, capsys):
    cli = PulseLivenessCLI(backend=backend_factory())
    exit_code = cli.run_from_args(["verify", "--last-verified", "yesterday"])

    assert exit_code == 1
    assert "Invalid --last-verified" in capsys.readouterr().err


def test_score_command(capsys):
    cli = PulseLivenessCLI()
    exit_code, data = run_json(cli, ["score", "--features", ",".join(["0.5"] * 10), "--json"], capsys)

    assert exit_code == 0
    assert data["transport_score"] == 5000


def test_score_command_rejects_wrong_length(capsys):
    exit_code = PulseLivenessCLI().run_from_args(["score", "--features", "0.5,0.5"])

    assert exit_code == 1
    assert "Expected 10 features" in capsys.readouterr().err


def test_score_command_rejects_non_numeric(capsys):
    exit_code = PulseLivenessCLI().run_from_args(["score", "--features", "a,b"])
    assert exit_code == 1


def test_config_command(capsys):
    exit_code, data = run_json(PulseLivenessCLI(), ["config"], capsys)

    assert exit_code == 0
    assert "verification" in data


def test_missing_command_exits():
    with pytest.raises(SystemExit):
        PulseLivenessCLI().run_from_args([])
