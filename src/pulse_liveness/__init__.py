"""
PULSE LIVENESS - Proof-of-Life Verification Pipeline

A client-side verification pipeline that turns a platform biometric prompt
into a liveness score for a custody vault: authentication, feature
extraction, a fixed-weight perceptron and an orchestrator that produces
a backend-ready result.

The produced score is consumed by a remote custody system, which owns the
vault state machine and any emergency reset policy.
"""

__version__ = "1.0.0"
