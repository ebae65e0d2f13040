"""
Configuration management for the PULSE LIVENESS system.

This module handles configuration loading from environment variables and
.env files. Values are exposed as typed module-level constants so every
component reads the same settings.
"""

import os
from typing import Optional
from dotenv import load_dotenv

from .constants import DEFAULT_PROMPT_MESSAGE, MAX_SYNTHETIC_JITTER, SYNTHETIC_JITTER

# Load environment variables from .env file if it exists
load_dotenv()

# =============================================================================
# Logging Configuration
# =============================================================================
# Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Renderer for log output ("console" or "json")
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "console").strip().lower()

# =============================================================================
# Verification Configuration
# =============================================================================
# Message shown in the platform biometric prompt
PROMPT_MESSAGE: str = os.getenv("PULSE_PROMPT_MESSAGE", DEFAULT_PROMPT_MESSAGE)

# Half-width of the uniform jitter applied to synthetic features
SYNTHETIC_JITTER_WIDTH: float = float(
    os.getenv("PULSE_SYNTHETIC_JITTER", str(SYNTHETIC_JITTER))
)

# Seed for the jitter generator (leave unset in production)
RANDOM_SEED: Optional[int] = None
if seed_str := os.getenv("PULSE_RANDOM_SEED"):
    RANDOM_SEED = int(seed_str)

# Biometric backend used by the command-line interface
BIOMETRIC_BACKEND: str = os.getenv("PULSE_BIOMETRIC_BACKEND", "console").strip().lower()

# =============================================================================
# Development and Debugging Configuration
# =============================================================================
# Enable debug mode (skips validation on import)
DEBUG_MODE: bool = os.getenv("PULSE_DEBUG_MODE", "false").lower() == "true"

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["console", "json"]
VALID_BIOMETRIC_BACKENDS = ["console", "unavailable"]


# =============================================================================
# Configuration Validation
# =============================================================================
def validate_configuration() -> bool:
    """
    Validate the current configuration settings.

    Returns
    -------
    bool
        True if configuration is valid.

    Raises
    ------
    ValueError
        If any configuration parameter is invalid.
    """
    errors = []

    if LOG_LEVEL not in VALID_LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}")

    if LOG_FORMAT not in VALID_LOG_FORMATS:
        errors.append(f"LOG_FORMAT must be one of {VALID_LOG_FORMATS}")

    if not 0.0 <= SYNTHETIC_JITTER_WIDTH <= MAX_SYNTHETIC_JITTER:
        errors.append(
            f"PULSE_SYNTHETIC_JITTER must be between 0.0 and {MAX_SYNTHETIC_JITTER}"
        )

    if BIOMETRIC_BACKEND not in VALID_BIOMETRIC_BACKENDS:
        errors.append(
            f"PULSE_BIOMETRIC_BACKEND must be one of {VALID_BIOMETRIC_BACKENDS}"
        )

    if not PROMPT_MESSAGE.strip():
        errors.append("PULSE_PROMPT_MESSAGE cannot be empty")

    if errors:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"- {error}" for error in errors)
        )

    return True


def get_config_summary() -> dict:
    """
    Get a summary of the current configuration.

    Returns
    -------
    dict
        Dictionary containing key configuration parameters.
    """
    return {
        "logging": {
            "level": LOG_LEVEL,
            "format": LOG_FORMAT,
        },
        "verification": {
            "prompt_message": PROMPT_MESSAGE,
            "synthetic_jitter": SYNTHETIC_JITTER_WIDTH,
            "random_seed": RANDOM_SEED,
            "biometric_backend": BIOMETRIC_BACKEND,
        },
        "debug_mode": DEBUG_MODE,
    }


# Validate configuration on import
if not DEBUG_MODE:
    validate_configuration()
