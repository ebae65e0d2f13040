import sys
import json
import argparse
from typing import Optional, List
import structlog

from .biometrics import (
    BiometricAuthenticator,
    ConsoleBiometricBackend,
    UnavailableBiometricBackend,
)
from .config import (
    BIOMETRIC_BACKEND,
    LOG_FORMAT,
    LOG_LEVEL,
    get_config_summary,
)
from .constants import FEATURE_COUNT
from .data_models import VerificationResult
from .exceptions import ConfigurationError, PulseLivenessError
from .perceptron import Perceptron
from .utils import configure_logging, parse_timestamp
from .verification import VerificationOrchestrator

# Initialize structured logger
logger = structlog.get_logger(__name__)


class PulseLivenessCLI:
    """Main command-line interface for the PULSE LIVENESS system."""

    def __init__(self, backend=None) -> None:
        self.backend = backend
        self.parser = self._create_argument_parser()

    def _create_argument_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            prog="pulse-liveness",
            description="PULSE LIVENESS - Proof-of-Life Verification Pipeline",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)
        self._add_verify_commands(subparsers)
        self._add_score_command(subparsers)
        subparsers.add_parser("config", help="Print the active configuration.")

        return parser

    def _add_verify_commands(self, subparsers) -> None:
        """Add the 'verify' and 'emergency' commands and their arguments."""
        for name, help_text in (
            ("verify", "Run a proof-of-life verification."),
            ("emergency", "Run an emergency check-in verification."),
        ):
            verify_parser = subparsers.add_parser(name, help=help_text)
            verify_parser.add_argument(
                "--last-verified",
                default=None,
                help="ISO 8601 time of the last successful verification. "
                "Omit if the user has never verified.",
            )
            verify_parser.add_argument(
                "--json", action="store_true", help="Print the result as JSON."
            )

    def _add_score_command(self, subparsers) -> None:
        """Add the 'score' command and its arguments."""
        score_parser = subparsers.add_parser(
            "score", help="Classify a feature vector with the default perceptron."
        )
        score_parser.add_argument(
            "--features",
            required=True,
            help=f"Comma-separated list of {FEATURE_COUNT} values in [0, 1].",
        )
        score_parser.add_argument(
            "--json", action="store_true", help="Print the score as JSON."
        )

    def _build_authenticator(self) -> BiometricAuthenticator:
        if self.backend is not None:
            return BiometricAuthenticator(self.backend)
        if BIOMETRIC_BACKEND == "unavailable":
            return BiometricAuthenticator(UnavailableBiometricBackend())
        return BiometricAuthenticator(ConsoleBiometricBackend())

    def _execute_verify_command(self, args: argparse.Namespace) -> int:
        """Run the verification pipeline and print the outcome."""
        last_verified_at = None
        if args.last_verified:
            try:
                last_verified_at = parse_timestamp(args.last_verified)
            except ValueError:
                raise ConfigurationError(
                    "Invalid --last-verified timestamp",
                    config_key="last_verified",
                    config_value=args.last_verified,
                )

        orchestrator = VerificationOrchestrator(self._build_authenticator())

        if args.command == "emergency":
            result = orchestrator.run_emergency_verification(last_verified_at)
        else:
            result = orchestrator.run_verification(last_verified_at)

        self._display_result(result, as_json=args.json)
        return 0 if result.succeeded else 1

    def _execute_score_command(self, args: argparse.Namespace) -> int:
        """Classify a user-supplied feature vector."""
        try:
            features = [float(value) for value in args.features.split(",")]
        except ValueError:
            raise ConfigurationError(
                "Features must be comma-separated numbers",
                config_key="features",
                config_value=args.features,
            )

        perceptron = Perceptron()
        confidence = perceptron.predict(features)
        transport_score = Perceptron.to_transport_score(confidence)

        if args.json:
            print(
                json.dumps(
                    {"raw_confidence": confidence, "transport_score": transport_score}
                )
            )
        else:
            print(f"Confidence:      {confidence:.4f}")
            print(f"Transport score: {transport_score}")
        return 0

    def _display_result(self, result: VerificationResult, as_json: bool) -> None:
        """Display a verification result."""
        if as_json:
            print(json.dumps(result.to_dict(), indent=2))
            return

        print("\n" + "=" * 60)
        print("PULSE LIVENESS - VERIFICATION RESULT")
        print("=" * 60)
        print(f"Verification ID: {result.verification_id}")
        print(f"Status:          {'VERIFIED' if result.succeeded else 'FAILED'}")
        print(f"Source:          {result.invocation_tag}")
        if result.succeeded:
            print(f"Confidence:      {result.raw_confidence:.4f}")
            print(f"Transport score: {result.transport_score} / 10000")
        else:
            print(f"Reason:          {result.failure_reason}")
        print("=" * 60)

    def run_from_args(self, args_list: Optional[List[str]] = None) -> int:
        """Run the CLI with provided arguments."""
        args = self.parser.parse_args(args_list)

        try:
            if args.command in ("verify", "emergency"):
                return self._execute_verify_command(args)
            if args.command == "score":
                return self._execute_score_command(args)
            if args.command == "config":
                print(json.dumps(get_config_summary(), indent=2))
                return 0

            self.parser.print_help()
            return 1

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.", file=sys.stderr)
            return 130
        except PulseLivenessError as e:
            logger.error(f"A known application error occurred: {e}", **e.to_dict())
            print(f"\n[ERROR] {e}", file=sys.stderr)
            return 1


def main() -> int:
    """Main entry point for the CLI."""
    configure_logging(LOG_LEVEL, LOG_FORMAT)
    cli = PulseLivenessCLI()
    return cli.run_from_args()


if __name__ == "__main__":
    sys.exit(main())
