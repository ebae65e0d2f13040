"""
Custom exception classes for the PULSE LIVENESS system.

Two families live here. Invariant violations (wrong-length vectors, bad
weights) are programming or configuration defects and propagate out of
every component. Biometric errors describe expected runtime outcomes; the
authentication adapter turns them into data and they never cross the
orchestrator boundary.
"""

from typing import Optional, Dict, Any


class PulseLivenessError(Exception):
    """
    Base exception class for all PULSE LIVENESS related errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    context : dict, optional
        Additional context information about the error.
    error_code : str, optional
        Unique error code for programmatic handling.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message = message
        self.context = context or {}
        self.error_code = error_code
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return a formatted string representation of the error."""
        parts = [self.message]

        if self.error_code:
            parts.append(f"[Error Code: {self.error_code}]")

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"[Context: {context_str}]")

        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the exception to a dictionary for structured logging.

        Returns
        -------
        dict
            Dictionary representation of the exception.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
        }


class InvariantViolationError(PulseLivenessError):
    """
    Exception raised when a structural invariant of the pipeline is broken.

    These indicate a defect rather than a runtime condition and are never
    converted into a failed verification result.
    """


class FeatureVectorError(InvariantViolationError):
    """Exception raised when a feature vector has the wrong shape or values."""

    def __init__(
        self,
        message: str,
        length: Optional[int] = None,
        expected_length: Optional[int] = None,
        **kwargs,
    ) -> None:
        context = kwargs.get("context", {})
        if length is not None:
            context["length"] = length
        if expected_length is not None:
            context["expected_length"] = expected_length

        super().__init__(message, context, "INVARIANT_001")


class ClassifierConfigurationError(InvariantViolationError):
    """Exception raised when perceptron weights or bias are malformed."""

    def __init__(
        self,
        message: str,
        weight_count: Optional[int] = None,
        expected_count: Optional[int] = None,
        **kwargs,
    ) -> None:
        context = kwargs.get("context", {})
        if weight_count is not None:
            context["weight_count"] = weight_count
        if expected_count is not None:
            context["expected_count"] = expected_count

        super().__init__(message, context, "INVARIANT_002")


class BiometricError(PulseLivenessError):
    """
    Exception raised by a platform biometric backend.

    The authentication adapter catches these and reports them as a failed
    outcome; callers of the adapter never see them.
    """

    def __init__(self, message: str, backend: Optional[str] = None, **kwargs) -> None:
        context = kwargs.get("context", {})
        if backend:
            context["backend"] = backend

        super().__init__(message, context, kwargs.get("error_code"))


class BiometricUnavailableError(BiometricError):
    """Exception raised when the device has no usable biometric capability."""

    def __init__(self, message: str, backend: Optional[str] = None) -> None:
        super().__init__(message, backend=backend, error_code="BIOMETRIC_001")


class AuthenticationRejectedError(BiometricError):
    """Exception raised when the user declines or fails the biometric prompt."""

    def __init__(self, message: str, backend: Optional[str] = None) -> None:
        super().__init__(message, backend=backend, error_code="BIOMETRIC_002")


class SubmissionError(PulseLivenessError):
    """Exception raised when a result cannot be turned into a backend request."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs) -> None:
        context = kwargs.get("context", {})
        if source:
            context["source"] = source

        super().__init__(message, context, kwargs.get("error_code", "SUBMIT_001"))


class ConfigurationError(PulseLivenessError):
    """
    Exception raised for configuration-related errors.

    This includes invalid configuration values or malformed command-line
    input that cannot be mapped onto the pipeline.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key
        if config_value:
            context["config_value"] = config_value

        super().__init__(message, context, kwargs.get("error_code", "CONFIG_001"))
