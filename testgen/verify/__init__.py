"""Verification of generated suites against external test runners."""

from .runner import NO_RUNNER_MESSAGE, CompletedRun, Verifier

__all__ = ["CompletedRun", "NO_RUNNER_MESSAGE", "Verifier"]
