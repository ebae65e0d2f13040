"""
Biometric authentication adapter for the PULSE LIVENESS system.

This module wraps a platform biometric capability behind a small contract:
report whether a sensor is available, and present a prompt that resolves to
a pass/fail outcome with a timestamp. Platform errors never escape the
adapter; they are reported as a failed outcome with a readable reason.
No raw biometric data is read, stored or logged.

Retries are not performed here. A failed attempt returns immediately and it
is up to the caller whether to prompt again.
"""

import sys
from datetime import datetime
from typing import Callable, Optional, Protocol, TextIO, Tuple
import structlog

from .constants import DEFAULT_BACKEND_ERROR, DEFAULT_CANCEL_TEXT
from .data_models import AuthenticationOutcome, BiometricAvailability
from .exceptions import (
    AuthenticationRejectedError,
    BiometricUnavailableError,
    PulseLivenessError,
)
from .utils import utc_now

# Initialize structured logger
logger = structlog.get_logger(__name__)


class BiometricBackend(Protocol):
    """Platform biometric capability (fingerprint reader, face unlock, ...)."""

    def is_sensor_available(self) -> Tuple[bool, Optional[str]]:
        """Return (available, sensor kind)."""
        ...

    def simple_prompt(self, prompt_message: str, cancel_text: str) -> bool:
        """
        Present the prompt and block until the user responds.

        Returns True on success, False on a non-matching attempt. May raise
        on cancellation, timeout or platform failure.
        """
        ...


class BiometricAuthenticator:
    """
    Adapter between the verification pipeline and a platform backend.

    Parameters
    ----------
    backend : BiometricBackend
        Platform capability to wrap.
    clock : Callable[[], datetime], optional
        Source of the outcome timestamps. Defaults to the UTC wall clock.
    cancel_text : str, default=DEFAULT_CANCEL_TEXT
        Label of the prompt's cancel button.

    Examples
    --------
    >>> authenticator = BiometricAuthenticator(ConsoleBiometricBackend())
    >>> if authenticator.check_availability().available:
    ...     outcome = authenticator.authenticate("Verify your identity")
    """

    def __init__(
        self,
        backend: BiometricBackend,
        clock: Optional[Callable[[], datetime]] = None,
        cancel_text: str = DEFAULT_CANCEL_TEXT,
    ) -> None:
        self.backend = backend
        self.clock = clock or utc_now
        self.cancel_text = cancel_text

    def check_availability(self) -> BiometricAvailability:
        """
        Report whether a biometric prompt can be presented.

        Never raises; any backend failure is reported as unavailable.

        Returns
        -------
        BiometricAvailability
            Availability flag and sensor kind.
        """
        try:
            available, kind = self.backend.is_sensor_available()
        except Exception as e:
            logger.warning(
                "Biometric availability check failed",
                backend=type(self.backend).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            return BiometricAvailability(available=False, kind=None)

        availability = BiometricAvailability(available=bool(available), kind=kind)
        logger.debug(
            "Biometric availability checked",
            available=availability.available,
            kind=availability.kind,
        )
        return availability

    def authenticate(self, prompt_message: str) -> AuthenticationOutcome:
        """
        Present a biometric prompt and wait for the user.

        Parameters
        ----------
        prompt_message : str
            Message shown in the platform prompt.

        Returns
        -------
        AuthenticationOutcome
            Pass/fail flag, timestamp and, on failure, a readable reason.
            Platform errors are never propagated.
        """
        logger.info("Presenting biometric prompt", backend=type(self.backend).__name__)

        try:
            success = self.backend.simple_prompt(prompt_message, self.cancel_text)
        except Exception as e:
            message = e.message if isinstance(e, PulseLivenessError) else str(e)
            reason = message.strip() or DEFAULT_BACKEND_ERROR
            logger.info(
                "Biometric prompt did not succeed",
                error=reason,
                error_type=type(e).__name__,
            )
            return AuthenticationOutcome(
                succeeded=False, occurred_at=self.clock(), failure_reason=reason
            )

        outcome = AuthenticationOutcome(succeeded=bool(success), occurred_at=self.clock())
        logger.info(
            "Biometric prompt resolved",
            succeeded=outcome.succeeded,
            occurred_at=outcome.occurred_at.isoformat(),
        )
        return outcome


class ConsoleBiometricBackend:
    """
    Terminal stand-in for a platform prompt.

    The operator confirms presence by answering the prompt. End of input or
    an interrupt counts as cancellation. Intended for demos and operator
    tooling where no sensor is attached.

    Parameters
    ----------
    input_stream : TextIO, default=sys.stdin
        Where answers are read from.
    output_stream : TextIO, default=sys.stderr
        Where the prompt is written.
    kind : str, default="console"
        Sensor kind reported by the availability check.
    """

    ACCEPTED_ANSWERS = ("y", "yes")

    def __init__(
        self,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
        kind: str = "console",
    ) -> None:
        self.input_stream = input_stream or sys.stdin
        self.output_stream = output_stream or sys.stderr
        self.kind = kind

    def is_sensor_available(self) -> Tuple[bool, Optional[str]]:
        return (not self.input_stream.closed, self.kind)

    def simple_prompt(self, prompt_message: str, cancel_text: str) -> bool:
        self.output_stream.write(
            f"{prompt_message}\nConfirm presence [y/n] (empty line to {cancel_text.lower()}): "
        )
        self.output_stream.flush()

        try:
            answer = self.input_stream.readline()
        except KeyboardInterrupt:
            raise AuthenticationRejectedError(
                "Biometric authentication was cancelled", backend="console"
            )

        if not answer:
            raise AuthenticationRejectedError(
                "Biometric authentication was cancelled", backend="console"
            )

        answer = answer.strip().lower()
        if not answer:
            raise AuthenticationRejectedError(
                "User cancelled biometric authentication", backend="console"
            )

        return answer in self.ACCEPTED_ANSWERS


class UnavailableBiometricBackend:
    """Backend for environments without any biometric capability."""

    def is_sensor_available(self) -> Tuple[bool, Optional[str]]:
        return (False, None)

    def simple_prompt(self, prompt_message: str, cancel_text: str) -> bool:
        raise BiometricUnavailableError(
            "No biometric sensor is available", backend="unavailable"
        )
